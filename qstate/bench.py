# qstate/bench.py
import argparse, csv, os, platform, socket, time
from datetime import datetime
import numpy as np
from .circuit import Circuit
from .config import BACKENDS
from .sampler import measure_qubits
from .variational import VariationalCircuit

DATA_DIR = os.path.join(os.getcwd(), "data")

HEADER = ["experiment","qubits","depth","backend","threads","gates","shots","wall_ms",
          "hostname","python","timestamp"]

def backend_dir(backend):
    path = os.path.join(DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, **fields):
    row = {
        "hostname": socket.gethostname(),
        "python": platform.python_version(),
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "threads": 0, "shots": 0, "gates": 0,
    }
    row.update(fields)
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

# ---------------------------------------------------------------------

def random_circuit(n, depth, seed=0):
    """Alternating rotation / entangling layers drawn from the full gate set."""
    rng = np.random.default_rng(seed)
    c = Circuit.empty(n)
    for layer in range(depth):
        if layer % 2 == 0:
            for k in range(n):
                g = rng.integers(0, 4)
                theta = float(rng.uniform(-np.pi, np.pi))
                if g == 0:
                    c.h(k)
                elif g == 1:
                    c.rx(k, theta)
                elif g == 2:
                    c.ry(k, theta)
                else:
                    c.rz(k, theta)
        elif n > 1:
            for k in range(0, n-1, 2):
                if rng.integers(0, 2) == 0:
                    c.cnot(k, k+1)
                else:
                    c.cz(k+1, k)
    return c

def time_run(circ, backend, threads=None):
    t0 = time.perf_counter()
    _ = circ.run(backend=backend, num_threads=threads, check_norm=False)
    return (time.perf_counter() - t0) * 1e3  # ms

def warmup(backend):
    # compile numba kernels once so the first timed row is not JIT time
    if backend == "numba":
        random_circuit(2, 2).run(backend=backend, check_norm=False)

def numba_max_threads():
    try:
        from .apply_numba import max_threads
        return max_threads()
    except ImportError:
        return os.cpu_count() or 1

def _threads_for(backend):
    return numba_max_threads() if backend == "numba" else 0

# ---------------------------------------------------------------------
# individual experiments

def bench_qubits(ns, depth, backend, out_path):
    print(f"[run] Qubits scaling -> {out_path}")
    new_csv(out_path)
    warmup(backend)
    for n in ns:
        circ = random_circuit(n, depth, seed=42)
        wall = time_run(circ, backend)
        write_row(out_path, experiment="qubits", qubits=n, depth=depth, backend=backend,
                  threads=_threads_for(backend), gates=len(circ.ops), wall_ms=f"{wall:.3f}")
        print(f"  n={n}  wall={wall:.2f} ms")
    print("done.\n")

def bench_depth(n, depths, backend, pattern, out_path):
    print(f"[run] Variational depth scaling -> {out_path}")
    new_csv(out_path)
    warmup(backend)
    for d in depths:
        vqc = VariationalCircuit(n, depth=d, pattern=pattern, seed=7)
        t0 = time.perf_counter()
        vqc.state(backend=backend)
        wall = (time.perf_counter() - t0) * 1e3
        write_row(out_path, experiment="depth", qubits=n, depth=d, backend=backend,
                  threads=_threads_for(backend), gates=vqc.n_gates(), wall_ms=f"{wall:.3f}")
        print(f"  depth={d}  wall={wall:.2f} ms")
    print("done.\n")

def bench_threads(n, depth, threads_list, out_path):
    print(f"[run] Thread scaling -> {out_path}")
    new_csv(out_path)
    warmup("numba")
    circ = random_circuit(n, depth, seed=123)
    pool = numba_max_threads()
    t1 = time_run(circ, "numba", threads=1)
    print(f"  pool={pool}  T1={t1:.1f} ms")
    for t in threads_list:
        tt = min(int(t), pool)
        if tt != t:
            print(f"  requested t={t} > pool={pool}; using t={tt}")
        wall = time_run(circ, "numba", threads=tt)
        speedup = t1 / wall if wall > 0 else float("nan")
        write_row(out_path, experiment="threads", qubits=n, depth=depth, backend="numba",
                  threads=tt, gates=len(circ.ops), wall_ms=f"{wall:.3f}")
        print(f"  t={tt}  wall={wall:.2f} ms  speedup={speedup:.2f}x")
    print("done.\n")

def bench_shots(n, shots_list, backend, out_path):
    print(f"[run] Shot sampling -> {out_path}")
    new_csv(out_path)
    st = random_circuit(n, 10, seed=5).run(backend=backend)
    qubits = list(range(n))
    rng = np.random.default_rng(0)
    for shots in shots_list:
        t0 = time.perf_counter()
        measure_qubits(st, qubits, shots, rng=rng)
        wall = (time.perf_counter() - t0) * 1e3
        write_row(out_path, experiment="shots", qubits=n, depth=10, backend=backend,
                  shots=shots, wall_ms=f"{wall:.3f}")
        print(f"  shots={shots}  wall={wall:.2f} ms")
    print("done.\n")

# ---------------------------------------------------------------------

def _ints(s):
    return [int(x) for x in s.split(",")]

def build_parser():
    p = argparse.ArgumentParser(description="qstate benchmarks -> data/<backend>/*.csv")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=str, default="4,8,12,16")
    p_qubits.add_argument("--depth", type=int, default=100)
    p_qubits.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)

    p_depth = sub.add_parser("depth")
    p_depth.add_argument("--n", type=int, default=12)
    p_depth.add_argument("--depths", type=str, default="1,2,4,8,16")
    p_depth.add_argument("--pattern", type=str, default="linear",
                         choices=["linear", "circular", "all-to-all"])
    p_depth.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)

    p_threads = sub.add_parser("threads")
    p_threads.add_argument("--n", type=int, default=16)
    p_threads.add_argument("--depth", type=int, default=200)
    p_threads.add_argument("--threads", type=str, default="1,2,4,8,16")
    # threads always use numba backend
    p_threads.add_argument("--backend", type=str, default="numba", choices=["numba"])

    p_shots = sub.add_parser("shots")
    p_shots.add_argument("--n", type=int, default=12)
    p_shots.add_argument("--shots", type=str, default="100,1000,10000,100000")
    p_shots.add_argument("--backend", type=str, default="numpy", choices=BACKENDS)
    return p

def main(argv=None):
    args = build_parser().parse_args(argv)
    base = backend_dir(args.backend)

    if args.cmd == "qubits":
        bench_qubits(_ints(args.ns), args.depth, args.backend, os.path.join(base, "qubits.csv"))
    elif args.cmd == "depth":
        bench_depth(args.n, _ints(args.depths), args.backend, args.pattern, os.path.join(base, "depth.csv"))
    elif args.cmd == "threads":
        bench_threads(args.n, args.depth, _ints(args.threads), os.path.join(base, "threads.csv"))
    elif args.cmd == "shots":
        bench_shots(args.n, _ints(args.shots), args.backend, os.path.join(base, "shots.csv"))

if __name__ == "__main__":
    main()
