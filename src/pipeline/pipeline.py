"""
Duplicate counting pipeline (range scan, histogram, fallback, cross-check)

Purpose
- Count the elements of an integer dataset that repeat an earlier value.
- Flow per run: scan range → histogram count → (on allocation refusal) fallback counter
  → optional brute-force cross-check → report.
- Export reports via reporting sinks (JSONL/CSV/Stdout).

Notes
- An empty dataset short-circuits to 0 duplicates before any histogram is sized.
- The brute-force cross-check is O(n^2); it is skipped above brute_force.max_elements.

Config keys (recommended)
- histogram: { max_size: 67108864 }
- fallback: "sort" | "brute_force" | "none"
- brute_force: { enabled: true, mode: "later_match", max_elements: 5000, show_progress: false }
- reporting.sinks: see modules/reporting/sink.py docstring
"""

from collections import Counter
from typing import Dict, Any, List, Optional, Sequence
import time

from .types import DuplicateReport, HistogramAllocationError
from src.modules.range.scanner import scan_range
from src.modules.counting.histogram import HistogramDuplicateCounter, DEFAULT_MAX_HISTOGRAM_SIZE
from src.modules.counting.brute_force import (
    BruteForceDuplicateCounter, MODE_LATER_MATCH, MODE_PAIRWISE, pairwise_excess,
)
from src.modules.counting.sorted_scan import count_duplicates_sorted
from src.modules.reporting.sink import build_sinks_from_config, ReportSink, StdoutProgress

FALLBACKS = ("sort", "brute_force", "none")


class DuplicatePipeline:
    def __init__(self, config: Dict[str, Any]):
        self.cfg = config or {}

        # Histogram counter
        hist_cfg = self.cfg.get("histogram", {}) or {}
        self.histogram = HistogramDuplicateCounter(
            max_size=int(hist_cfg.get("max_size", DEFAULT_MAX_HISTOGRAM_SIZE)),
        )

        # Fallback when the histogram allocation is refused
        self.fallback = str(self.cfg.get("fallback", "sort")).lower()
        if self.fallback not in FALLBACKS:
            raise ValueError(f"unknown fallback: {self.fallback!r} (expected one of {FALLBACKS})")

        # Brute-force cross-check
        bf = self.cfg.get("brute_force", {}) or {}
        self.brute_force_enabled = bool(bf.get("enabled", True))
        self.brute_force = BruteForceDuplicateCounter(mode=str(bf.get("mode", MODE_LATER_MATCH)))
        self.brute_force_max_elements = int(bf.get("max_elements", 5_000))
        self.show_progress = bool(bf.get("show_progress", False))

        # Reporting sinks
        self.reporting_sinks: List[ReportSink] = build_sinks_from_config(self.cfg)

    # -------------------------- Counting -------------------------- #
    def process(self, values: Sequence[int], run_id: str, cancel: Optional[Any] = None) -> DuplicateReport:
        """
        Count duplicates in `values` and optionally cross-check with the brute-force counter.
        Raises HistogramAllocationError only when fallback is "none".
        """
        t0 = time.perf_counter()
        n = len(values)
        rng = scan_range(values)
        if rng is None:
            return DuplicateReport(
                run_id=run_id, size=0, value_range=None, duplicates=0, method="empty",
                elapsed_sec=time.perf_counter() - t0,
            )

        method = "histogram"
        try:
            duplicates = self.histogram.count(values, rng)
        except HistogramAllocationError as e:
            if self.fallback == "none":
                raise
            print(f"[Pipeline] histogram refused ({e}); falling back to {self.fallback}")
            if self.fallback == "sort":
                method = "sorted"
                duplicates = count_duplicates_sorted(values)
            else:
                method = "brute_force"
                duplicates = BruteForceDuplicateCounter(MODE_LATER_MATCH).count(values, cancel=cancel)

        report = DuplicateReport(
            run_id=run_id, size=n, value_range=rng, duplicates=duplicates, method=method,
        )

        if self.brute_force_enabled and method != "brute_force":
            if n <= self.brute_force_max_elements:
                progress = StdoutProgress() if self.show_progress else None
                bf_count = self.brute_force.count(values, on_progress=progress, cancel=cancel)
                report.brute_force_duplicates = bf_count
                report.brute_force_mode = self.brute_force.mode
                expected = duplicates
                if self.brute_force.mode == MODE_PAIRWISE:
                    # pairwise overshoots by the part explained by multiplicities above 2
                    expected += pairwise_excess(Counter(values).values())
                report.agreement = bf_count == expected
            else:
                print(f"[Pipeline] brute-force cross-check skipped: {n} > max_elements={self.brute_force_max_elements}")

        report.elapsed_sec = time.perf_counter() - t0
        return report

    # -------------------------- Export -------------------------- #
    def export(self, reports: List[DuplicateReport], run_id: str) -> List[DuplicateReport]:
        for sink in self.reporting_sinks:
            try:
                sink.write_reports(reports, run_id)
            except Exception as e:
                print(f"[Pipeline] write_reports failed: {e}")
        return reports
