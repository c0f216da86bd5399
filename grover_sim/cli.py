# grover_sim/cli.py
import argparse
import csv
import logging

import numpy as np

from . import __version__
from .engine import AmplitudeEngine, EngineConfig
from .errors import GroverSimError

BAR_WIDTH = 40

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grover-sim",
        description="Grover amplitude-amplification simulator (1-8 qubits)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--qubits", "-n", type=int, default=3, help="Qubit count, clamped to 1..8")
    common.add_argument("--marked", "-m", type=int, default=0, help="Marked index, clamped to 0..N-1")
    common.add_argument("--iterations", "-k", type=int, default=None, help="Iterations (default k*)")
    common.add_argument("--backend", type=str, default="serial", choices=["serial", "numba", "dense"])
    common.add_argument("--threads", type=int, default=None, help="Numba thread count")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("run", parents=[common], help="Run Grover iterations and print the distribution")
    tr = sub.add_parser("trace", parents=[common], help="Marked probability per iteration")
    tr.add_argument("--csv", type=str, default=None, help="Write the trace to this CSV file")
    tr.add_argument("--plot", type=str, default=None, help="Save a PNG plot of the trace")
    return parser

def make_engine(args) -> AmplitudeEngine:
    cfg = EngineConfig(backend=args.backend, num_threads=args.threads)
    return AmplitudeEngine(args.qubits, args.marked, config=cfg)

def print_distribution(eng: AmplitudeEngine, probs: np.ndarray):
    best = eng.get_max_probability_index()
    for i, p in enumerate(probs):
        bar = "#" * int(round(p * BAR_WIDTH))
        flag = " <- marked" if i == eng.marked else ""
        print(f"{eng.get_ket_label(i)}  {p:8.5f}  {bar}{flag}")
    print(f"iterations={eng.iteration}  k*={eng.optimal_iterations}  "
          f"argmax={eng.get_state_label(best)}  P(marked)={eng.get_marked_probability():.5f}")

def cmd_run(args):
    eng = make_engine(args)
    k = eng.optimal_iterations if args.iterations is None else max(0, args.iterations)
    probs = eng.get_probabilities()
    for _ in range(k):
        probs = eng.advance()
    print_distribution(eng, probs)
    return 0

def cmd_trace(args):
    eng = make_engine(args)
    k = 2 * eng.optimal_iterations if args.iterations is None else max(0, args.iterations)
    trace = [(0, eng.get_marked_probability())]
    eng.add_listener(lambda it, probs: trace.append((it, float(probs[eng.marked]))))
    for _ in range(k):
        eng.advance()

    for it, p in trace:
        print(f"{it:4d}  {p:.6f}")
    if args.csv:
        with open(args.csv, "w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["iteration", "p_marked"])
            w.writerows(trace)
        print(f"wrote {args.csv}")
    if args.plot:
        from .plot_results import plot_amplification
        title = f"n={eng.n_qubits}, marked={eng.get_ket_label(eng.marked)}"
        plot_amplification(trace, args.plot, optimal=eng.optimal_iterations, title=title)
        print(f"wrote {args.plot}")
    return 0

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "run":
            return cmd_run(args)
        return cmd_trace(args)
    except GroverSimError as e:
        parser.error(str(e))

if __name__ == "__main__":
    raise SystemExit(main())
