"""
Cross-check the duplicate counters on a dataset file
- histogram vs sort-based vs brute force (later_match and pairwise)
- prints one comparison row; exit status 1 when any check fails

Usage:
  python -m src.scripts.compare_counters --input data/values.txt --max-histogram-size 1000000
  python -m src.scripts.compare_counters --random 5000 --high 32767 --seed 7
"""

import argparse
import json
import sys
from typing import List, Optional

from src.modules.counting.histogram import DEFAULT_MAX_HISTOGRAM_SIZE
from src.modules.testing.compare import compare_counters, load_dataset, write_compare_results
from src.modules.testing.fake_dataset_generator import fake_dataset_param, RAND_MAX


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser()
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="file with integers (JSON array or whitespace separated)")
    source.add_argument("--random", type=int, help="generate this many random integers instead")
    ap.add_argument("--low", type=int, default=0)
    ap.add_argument("--high", type=int, default=RAND_MAX)
    ap.add_argument("--seed", type=int, default=2026)
    ap.add_argument("--max-histogram-size", type=int, default=DEFAULT_MAX_HISTOGRAM_SIZE)
    ap.add_argument("--skip-brute-force", action="store_true", help="skip the O(n^2) counters")
    ap.add_argument("--run-dir", default=None, help="also write results/compare.jsonl under this directory")
    args = ap.parse_args(argv)

    if args.max_histogram_size < 1:
        print(f"[Compare] --max-histogram-size must be >= 1, got {args.max_histogram_size}", file=sys.stderr)
        return 2

    try:
        if args.input:
            values = load_dataset(args.input)
            label = args.input
        else:
            values = fake_dataset_param(args.random, low=args.low, high=args.high, seed=args.seed)
            label = f"random-{args.random}-seed{args.seed}"
    except (OSError, ValueError) as e:
        print(f"[Compare] cannot load dataset: {e}", file=sys.stderr)
        return 2

    row = compare_counters(
        values,
        max_histogram_size=args.max_histogram_size,
        include_brute_force=not args.skip_brute_force,
        label=label,
    )
    print(json.dumps(row, ensure_ascii=False, indent=2))
    if args.run_dir:
        print(f"Compare report written: {write_compare_results(args.run_dir, [row])}")

    checks = {k: v for k, v in row["status"].items() if k.endswith("_ok")}
    return 0 if all(checks.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
