# grover_sim/plot_results.py
import csv, os
from collections import defaultdict
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["qubits"]     = int(row["qubits"])
            row["iterations"] = int(row["iterations"])
            row["threads"]    = int(row["threads"])
            row["wall_ms"]    = float(row["wall_ms"])
            rows.append(row)
    return rows

def plot_runtime_vs_qubits(rows, tag, outdir):
    by_backend = defaultdict(list)
    for r in rows:
        by_backend[r["backend"]].append((r["qubits"], r["wall_ms"]))
    if not by_backend: return
    fig = plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Qubits (n)")
    plt.ylabel("Runtime to k* (ms)")
    plt.title(f"Runtime vs Qubits [{tag}]")
    plt.grid(True)
    plt.legend()
    path = os.path.join(outdir, f"runtime_vs_qubits_{tag}.png")
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path

def plot_runtime_vs_iterations(rows, tag, outdir):
    by_backend = defaultdict(list)
    for r in rows:
        by_backend[r["backend"]].append((r["iterations"], r["wall_ms"]))
    if not by_backend: return
    fig = plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Iterations")
    plt.ylabel("Runtime (ms)")
    plt.title(f"Runtime vs Iterations [{tag}]")
    plt.legend()
    plt.grid(True)
    path = os.path.join(outdir, f"runtime_vs_iterations_{tag}.png")
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path

def plot_amplification(trace, path, optimal=None, title=None):
    """Marked-state probability per iteration; `trace` is a list of (iteration, p_marked)."""
    xs = [k for k, _ in trace]
    ys = [p for _, p in trace]
    fig = plt.figure()
    plt.plot(xs, ys, marker="o")
    if optimal is not None:
        plt.axvline(optimal, ls="--", lw=0.8, color="gray", label=f"k* = {optimal}")
        plt.legend()
    plt.xlabel("Iteration")
    plt.ylabel("P(marked)")
    plt.ylim(0.0, 1.05)
    plt.title(title or "Amplitude amplification")
    plt.grid(True)
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path

def main():
    # find all CSVs recursively under data/
    csvs = []
    for root, _, files in os.walk(DATA_DIR):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(root, f))

    if not csvs:
        print("No CSV files found under data/")
        return

    for path in csvs:
        tag = os.path.splitext(os.path.basename(path))[0]
        backend = os.path.basename(os.path.dirname(path))
        try:
            rows = load_rows(path)
        except (OSError, KeyError, ValueError) as e:
            print(f"Skipping {path}: {e}")
            continue

        print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")
        outdir = os.path.dirname(path)
        if tag.startswith("qubits"):
            plot_runtime_vs_qubits(rows, backend, outdir)
        elif tag.startswith("iterations"):
            plot_runtime_vs_iterations(rows, backend, outdir)

    print("\nSaved all plots under data/<backend>/*.png")

if __name__ == "__main__":
    main()
