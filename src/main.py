"""
Main entry point
- Load config, build a fake dataset, count duplicates through DuplicatePipeline, print and export
- Then run the counter cross-check and write results/compare.jsonl
"""
import os
import time
import yaml
from typing import Any, Dict

from src.pipeline.pipeline import DuplicatePipeline
from src.modules.testing.fake_dataset_generator import dataset_from_config
from src.modules.testing.compare import compare_counters, write_compare_results


def load_config(path: str = "configs/config.yaml") -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def main():
    cfg = load_config()
    pipe = DuplicatePipeline(cfg)
    values = dataset_from_config(cfg)

    run_id = f"run-{time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime())}"
    report = pipe.process(values, run_id=run_id)
    pipe.export([report], run_id=run_id)

    n = max(1, report.size)
    print(f"Duplicates ({report.method}): {report.duplicates} / {report.size} ({100.0 * report.duplicates / n:.2g}%)")
    if report.brute_force_duplicates is not None:
        print(
            f"Brute force ({report.brute_force_mode}): {report.brute_force_duplicates} / {report.size} "
            f"({100.0 * report.brute_force_duplicates / n:.2g}%) agreement={report.agreement}"
        )

    out_dir = str((cfg.get("output", {}) or {}).get("run_dir", "out"))
    bf_max = int((cfg.get("brute_force", {}) or {}).get("max_elements", 5_000))
    row = compare_counters(
        values,
        max_histogram_size=pipe.histogram.max_size,
        include_brute_force=len(values) <= bf_max,
        label=run_id,
    )
    compare_path = write_compare_results(out_dir, [row])
    print(f"Compare report written: {compare_path}")


if __name__ == "__main__":
    main()
