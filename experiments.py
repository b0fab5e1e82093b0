"""
Huffman compression analysis on synthetic data

Runs the compressor over generated datasets, with repeated runs, and records
compression ratio, code length vs. entropy and timings.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 256 --exp1_generators uniform256,zipf128
  python experiments.py --outdir results --no_exp1 --exp2_alphabets 2,23,44,65,86,107,128

Notes:
  Experiment 2 follows the classic ratio study: alphabets of 2..128 distinct
  characters, file sizes 1000..10000 bytes, uniform and gaussian
  (nonuniform) character distributions.
"""

from __future__ import annotations

import argparse
import csv
import math
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple, Optional, Callable

import matplotlib.pyplot as plt

import codec
from freqtable import FrequencyTable
from huffman import HuffmanTree


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def entropy_bits(table: Dict[int, int]) -> float:
    """Shannon entropy (bits/symbol) of the table, EOF included."""
    total = sum(table.values())
    return -sum((w / total) * math.log2(w / total) for w in table.values())


# Synthetic dataset generators

def alphabet_chars(alphabet: int) -> List[int]:
    # 'a', 'b', ... wrapping inside 7-bit ASCII
    return [(ord('a') + i) % 128 for i in range(alphabet)]

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_uniform_chars(size: int, alphabet: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    source = alphabet_chars(alphabet)
    return bytes(rng.choice(source) for _ in range(size))

def gen_nonuniform_chars(size: int, alphabet: int, seed: int = 0) -> bytes:
    # |N(0, alphabet/6)| folded into the alphabet: low indices dominate
    rng = random.Random(seed)
    source = alphabet_chars(alphabet)
    sigma = alphabet / 6
    out = bytearray()
    for _ in range(size):
        index = int(abs(rng.gauss(0.0, sigma))) % alphabet
        out.append(source[index])
    return bytes(out)

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    other_symbols = [i for i in range(256) if i != dominant]
    out = bytearray()
    for _ in range(size):
        if rng.random() < dom_frac:
            out.append(dominant)
        else:
            out.append(rng.choice(other_symbols))
    return bytes(out)

def _sample_cdf(rng: random.Random, cdf: List[float]) -> int:
    r = rng.random()
    lo, hi = 0, len(cdf) - 1
    while lo < hi:
        mid = (lo + hi) // 2
        if r <= cdf[mid]:
            hi = mid
        else:
            lo = mid + 1
    return lo

def _cdf(weights: List[float]) -> List[float]:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)
    return cdf

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    cdf = _cdf([1.0 / ((i + 1) ** s) for i in range(alphabet)])
    return bytes(_sample_cdf(rng, cdf) for _ in range(size))

def gen_english_like(size: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)

    cdf = _cdf(weights)
    return bytes(ord(chars[_sample_cdf(rng, cdf)]) for _ in range(size))

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "uniform128": lambda size, seed: gen_uniform(size, alphabet=128, seed=seed),
    "nonuniform128": lambda size, seed: gen_nonuniform_chars(size, alphabet=128, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

ALPHABET_DISTRIBUTIONS: Dict[str, Callable[[int, int, int], bytes]] = {
    "uniform": gen_uniform_chars,
    "nonuniform": gen_nonuniform_chars,
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    """
    Helper: if a dataset name is not recognized, we fall back to uniform256
    so the run does not fail completely
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform256", gen_uniform(size_bytes, alphabet=256, seed=seed)
    return name, fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    alphabet: int  # requested alphabet size, 0 when not applicable
    unique_symbols: int  # distinct symbols in the header, EOF included

    build_tree_ms: float
    compress_ms: float
    decompress_ms: float
    total_ms: float

    compressed_bytes: int
    header_bytes: int
    pad_bits: int
    compression_ratio: float

    avg_code_length: float
    entropy_bits: float
    correctness_ok: int  # 1 or 0


def run_one(data: bytes) -> MetricRow:
    ft = FrequencyTable.count(data)

    t0 = now_ns()
    tree = HuffmanTree(ft)
    t1 = now_ns()
    build_tree_ms = ns_to_ms(t1 - t0)

    t2 = now_ns()
    packed = codec.compress_bytes(data)
    t3 = now_ns()
    compress_ms = ns_to_ms(t3 - t2)

    t4 = now_ns()
    decoded = codec.decompress_bytes(packed)
    t5 = now_ns()
    decompress_ms = ns_to_ms(t5 - t4)

    header_bytes = len(ft.serialize())
    payload_bits = tree.weighted_path_length()

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        alphabet=0,
        unique_symbols=len(ft),
        build_tree_ms=build_tree_ms,
        compress_ms=compress_ms,
        decompress_ms=decompress_ms,
        total_ms=compress_ms + decompress_ms,
        compressed_bytes=len(packed),
        header_bytes=header_bytes,
        pad_bits=(8 - payload_bits % 8) % 8,
        compression_ratio=len(packed) / max(1, len(data)),
        avg_code_length=tree.average_code_length(),
        entropy_bits=entropy_bits(ft),
        correctness_ok=1 if decoded == data else 0,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


SUMMARY_METRICS = (
    "compression_ratio", "avg_code_length", "entropy_bits",
    "build_tree_ms", "compress_ms", "decompress_ms", "total_ms",
)

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "n_runs": len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            row["correctness_ok_rate"] = sum(x.correctness_ok for x in items) / len(items)
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bytes / Original Bytes")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="avg code length")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "compress_ms") for d in datasets], marker="o", label="compress")
    plt.plot(x, [mean_for(d, "decompress_ms") for d in datasets], marker="o", label="decompress")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Experiment 1: Runtime by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_time.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_alphabet_ratio"]
    if not exp_rows:
        return

    for dist in ALPHABET_DISTRIBUTIONS:
        dist_rows = [r for r in exp_rows if r.dataset_name.startswith(dist + "_")]
        if not dist_rows:
            continue
        alphabets = sorted(set(r.alphabet for r in dist_rows))
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_ratio(alphabet: int, size: int) -> float:
            vals = [r.compression_ratio for r in dist_rows if r.alphabet == alphabet and r.file_size_bytes == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for a in alphabets:
            plt.plot(sizes, [mean_ratio(a, s) for s in sizes], marker="o", label=f"{a} chars")
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Compressed Bytes / Original Bytes")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.legend(fontsize="small")
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (alphabet/size ratio)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=512, help="Experiment 1 fixed file size in KB")
    ap.add_argument("--exp1_generators", type=str,
                    default="uniform256,nonuniform128,zipf128,repetitive90,english_like",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_alphabets", type=str, default=",".join(str(a) for a in range(2, 129, 21)),
                    help="Comma-separated alphabet sizes for experiment 2")
    ap.add_argument("--exp2_min_size", type=int, default=1000, help="Experiment 2 smallest file size in bytes")
    ap.add_argument("--exp2_max_size", type=int, default=10000, help="Experiment 2 largest file size in bytes")
    ap.add_argument("--exp2_step", type=int, default=1000, help="Experiment 2 size step in bytes")

    args = ap.parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            print(f"exp1: {gen_name} ({fixed_size} bytes)")
            for run_id in range(1, args.runs + 1):
                dataset_name, data = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                row = run_one(data)
                row.exp_name = "exp1_distribution"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    # Experiment 2: ratio vs size for growing alphabets
    if not args.no_exp2:
        alphabets = [max(1, int(a)) for a in parse_csv_list(args.exp2_alphabets)]
        sizes = list(range(args.exp2_min_size, args.exp2_max_size + 1, max(1, args.exp2_step)))

        for dist, gen in ALPHABET_DISTRIBUTIONS.items():
            for alphabet in alphabets:
                print(f"exp2: {dist}, {alphabet} different characters")
                for size_b in sizes:
                    for run_id in range(1, args.runs + 1):
                        data = gen(size_b, alphabet, args.seed + 10_000 + size_b + run_id)
                        row = run_one(data)
                        row.exp_name = "exp2_alphabet_ratio"
                        row.dataset_name = f"{dist}_{alphabet}"
                        row.alphabet = alphabet
                        row.run_id = run_id
                        rows.append(row)

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    plot_experiment_1(rows, outdir)
    plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
