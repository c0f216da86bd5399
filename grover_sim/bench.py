# grover_sim/bench.py
import argparse, csv, os, socket, subprocess, time, platform
from datetime import datetime
import numpy as np
from .engine import AmplitudeEngine, EngineConfig

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

def backend_dir(backend):
    path = os.path.join(DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

def make_engine(n, backend, threads=None, seed=0):
    rng = np.random.default_rng(seed)
    marked = int(rng.integers(0, 1 << n))
    cfg = EngineConfig(backend=backend, num_threads=threads, check_norm=False)
    return AmplitudeEngine(n, marked, config=cfg)

def warmup(eng):
    # one dummy run to JIT-compile & warm caches
    eng.run_to_optimal()

# ---------------------------------------------------------------------

def meta_row():
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "dtype": "complex128",
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "python": platform.python_version(),
        "machine": platform.machine(),
    }

HEADER = ["qubits","iterations","backend","threads","repeats","wall_ms","hostname","commit","dtype","timestamp"]

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

# ---------------------------------------------------------------------

def time_advance(eng, iterations, repeats=1):
    """Median wall time (ms) of reset + `iterations` advances."""
    samples = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        eng.reset()
        for _ in range(iterations):
            eng.advance()
        samples.append((time.perf_counter() - t0) * 1e3)
    return float(np.median(samples))

def numba_max_threads():
    try:
        from .apply_numba import get_threads
        return get_threads()
    except ImportError:
        return os.cpu_count() or 1

def _row(n, iterations, backend, repeats, wall):
    m = meta_row()
    return {
        "qubits": n, "iterations": iterations, "backend": backend,
        "threads": 0 if backend != "numba" else numba_max_threads(),
        "repeats": repeats, "wall_ms": f"{wall:.3f}",
        "hostname": m["hostname"], "commit": m["commit"], "dtype": m["dtype"], "timestamp": m["timestamp"]
    }

# ---------------------------------------------------------------------
# individual experiments

def bench_qubits(ns, backend, repeats, out_path):
    """Each n runs its own k* iterations."""
    print(f"[run] Qubits scaling → {out_path}")
    new_csv(out_path)
    did_warmup = False
    for n in ns:
        eng = make_engine(n, backend, seed=42)
        if not did_warmup:
            warmup(eng)
            did_warmup = True
        k = eng.optimal_iterations
        wall = time_advance(eng, k, repeats)
        write_row(out_path, _row(n, k, backend, repeats, wall))
        print(f"  n={n}  k*={k}  wall={wall:.3f} ms")
    print("✓ done.\n")

def bench_iterations(n, iterations, backend, repeats, out_path):
    print(f"[run] Iteration scaling → {out_path}")
    new_csv(out_path)
    eng = make_engine(n, backend, seed=7)
    warmup(eng)
    for k in iterations:
        wall = time_advance(eng, k, repeats)
        write_row(out_path, _row(n, k, backend, repeats, wall))
        print(f"  iterations={k}  wall={wall:.3f} ms")
    print("✓ done.\n")

# ---------------------------------------------------------------------
def main(argv=None):
    p = argparse.ArgumentParser(description="grover_sim benchmarks → data/<backend>/*.csv (auto)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=str, default="1,2,3,4,5,6,7,8")
    p_qubits.add_argument("--repeats", type=int, default=20)
    p_qubits.add_argument("--backend", type=str, default="serial", choices=["serial","numba","dense"])

    p_iter = sub.add_parser("iterations")
    p_iter.add_argument("--n", type=int, default=8)
    p_iter.add_argument("--iterations", type=str, default="1,5,10,25,50,100")
    p_iter.add_argument("--repeats", type=int, default=20)
    p_iter.add_argument("--backend", type=str, default="serial", choices=["serial","numba","dense"])

    args = p.parse_args(argv)

    base = backend_dir(args.backend)

    if args.cmd == "qubits":
        ns = [int(x) for x in args.ns.split(",")]
        bench_qubits(ns, args.backend, args.repeats, os.path.join(base, "qubits.csv"))

    elif args.cmd == "iterations":
        ks = [int(x) for x in args.iterations.split(",")]
        bench_iterations(args.n, ks, args.backend, args.repeats, os.path.join(base, "iterations.csv"))

if __name__ == "__main__":
    main()
