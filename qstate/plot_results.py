# qstate/plot_results.py
import csv, os
from collections import defaultdict
from statistics import median

DATA_DIR = os.path.join(os.getcwd(), "data")

# experiment -> (x column, x label, log y)
AXES = {
    "qubits":  ("qubits",  "Qubits (n)",     True),
    "depth":   ("depth",   "Variational depth", False),
    "threads": ("threads", "Threads",        False),
    "shots":   ("shots",   "Shots",          True),
}

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        for row in csv.DictReader(f):
            for key in ("qubits", "depth", "threads", "shots", "gates"):
                row[key] = int(row[key])
            row["wall_ms"] = float(row["wall_ms"])
            rows.append(row)
    return rows

def find_csvs(root):
    csvs = []
    for dirpath, _, files in os.walk(root):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(dirpath, f))
    return sorted(csvs)

def series(rows, xcol):
    """backend -> sorted [(x, median wall_ms)]"""
    buckets = defaultdict(list)
    for r in rows:
        buckets[(r["backend"], r[xcol])].append(r["wall_ms"])
    out = defaultdict(list)
    for (be, x), vals in buckets.items():
        out[be].append((x, float(median(vals))))
    return {be: sorted(p) for be, p in out.items()}

def plot_experiment(rows, experiment, outdir):
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    xcol, xlabel, logy = AXES[experiment]
    by_backend = series(rows, xcol)
    if not by_backend:
        return None
    fig = plt.figure()
    for be, pts in by_backend.items():
        xs, ys = zip(*pts)
        if experiment == "threads":
            t1 = dict(pts).get(1)
            if not t1:
                continue
            ys = [t1 / y for y in ys]
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel(xlabel)
    plt.ylabel("Speedup (T1/Tt)" if experiment == "threads" else "Runtime (ms)")
    if logy and experiment != "threads":
        plt.yscale("log")
    plt.title(f"{experiment} scaling")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    plt.tight_layout()
    path = os.path.join(outdir, f"{experiment}.png")
    fig.savefig(path, dpi=200)
    plt.close(fig)
    return path

def main(root=None):
    root = root or DATA_DIR
    csvs = find_csvs(root)
    if not csvs:
        print(f"No CSV files found under {root}")
        return []

    by_experiment = defaultdict(list)
    for path in csvs:
        try:
            rows = load_rows(path)
        except (KeyError, ValueError) as e:
            print(f"Skipping {path}: {e}")
            continue
        for r in rows:
            by_experiment[r["experiment"]].append(r)

    written = []
    for experiment, rows in sorted(by_experiment.items()):
        if experiment not in AXES:
            continue
        print(f"Plotting {experiment} ({len(rows)} rows)...")
        path = plot_experiment(rows, experiment, root)
        if path:
            written.append(path)
    print(f"\nSaved {len(written)} plot(s) under {root}")
    return written

if __name__ == "__main__":
    main()
