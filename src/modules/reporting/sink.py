"""
Stage 4: reporting sinks and progress sinks

Report sinks
- ReportSink: write_reports(reports, run_id) interface
- JSONLSink: one JSON object per line
- CSVSink: flat rows with a fixed header
- StdoutSink: console output for development

Progress sinks (callables taking a percent, passed to the brute-force counter)
- StdoutProgress: rewrites a "NNN%" counter in place on the console
- ProgressRecorder: keeps ProgressEvent objects for later inspection
"""

from __future__ import annotations
from typing import List, Dict, Any, Optional, TextIO
import json
import csv
import os
import sys
import threading
import time

from src.pipeline.types import DuplicateReport, ProgressEvent


REPORT_FIELDS = [
    "run_id", "size", "range_min", "range_max", "duplicates", "duplicate_ratio",
    "method", "brute_force_duplicates", "brute_force_mode", "agreement", "elapsed_sec",
]


def _to_jsonable(report: DuplicateReport) -> Dict[str, Any]:
    rng = report.value_range
    return {
        "run_id": report.run_id,
        "size": report.size,
        "range_min": rng.min if rng is not None else None,
        "range_max": rng.max if rng is not None else None,
        "duplicates": report.duplicates,
        "duplicate_ratio": report.duplicate_ratio,
        "method": report.method,
        "brute_force_duplicates": report.brute_force_duplicates,
        "brute_force_mode": report.brute_force_mode,
        "agreement": report.agreement,
        "elapsed_sec": report.elapsed_sec,
    }


def _ensure_parent(path: str) -> None:
    d = os.path.dirname(os.path.abspath(path))
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


class ReportSink:
    def write_reports(self, reports: List[DuplicateReport], run_id: str) -> None:
        raise NotImplementedError


class JSONLSink(ReportSink):
    def __init__(self, path: str, ensure_dir: bool = True):
        self.path = path
        if ensure_dir:
            _ensure_parent(path)
        self._lock = threading.Lock()

    def write_reports(self, reports: List[DuplicateReport], run_id: str) -> None:
        ts = time.time()
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                for r in reports:
                    row = _to_jsonable(r)
                    row["run_id"] = run_id
                    row["write_ts"] = ts
                    f.write(json.dumps(row, ensure_ascii=False) + "\n")


class CSVSink(ReportSink):
    def __init__(self, path: str, ensure_dir: bool = True):
        self.path = path
        if ensure_dir:
            _ensure_parent(path)
        self._lock = threading.Lock()
        # header only for a new file
        if not os.path.exists(path):
            with open(path, "w", newline="", encoding="utf-8") as f:
                csv.DictWriter(f, fieldnames=REPORT_FIELDS).writeheader()

    def write_reports(self, reports: List[DuplicateReport], run_id: str) -> None:
        with self._lock:
            with open(self.path, "a", newline="", encoding="utf-8") as f:
                w = csv.DictWriter(f, fieldnames=REPORT_FIELDS)
                for r in reports:
                    row = _to_jsonable(r)
                    row["run_id"] = run_id
                    w.writerow({k: ("" if row.get(k) is None else row[k]) for k in REPORT_FIELDS})


class StdoutSink(ReportSink):
    def write_reports(self, reports: List[DuplicateReport], run_id: str) -> None:
        print(f"[Reporting] run={run_id} count={len(reports)}")
        for r in reports:
            print("  -", json.dumps(_to_jsonable(r), ensure_ascii=False))


class StdoutProgress:
    """Console percent counter: prints "  0%" then backspaces over it on each update."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self._started = False

    def __call__(self, percent: int) -> None:
        if self._started:
            self.stream.write("\b\b\b\b")
        self.stream.write(f"{int(percent):3d}%")
        self._started = True
        if percent >= 100:
            # erase the final 100%
            self.stream.write("\b\b\b\b")
            self._started = False
        self.stream.flush()


class ProgressRecorder:
    def __init__(self):
        self.events: List[ProgressEvent] = []

    def __call__(self, percent: int) -> None:
        self.events.append(ProgressEvent(percent_complete=int(percent)))

    @property
    def percents(self) -> List[int]:
        return [e.percent_complete for e in self.events]


def build_sinks_from_config(cfg: Dict[str, Any]) -> List[ReportSink]:
    """
    Build the sink list from config.
    Example:
    reporting:
      sinks:
        - type: "jsonl"
          path: "out/results/reports.jsonl"
        - type: "csv"
          path: "out/results/reports.csv"
        - type: "stdout"
    """
    out: List[ReportSink] = []
    reporting = cfg.get("reporting", {}) or {}
    sinks = reporting.get("sinks", []) or []
    for s in sinks:
        t = (s.get("type") or "").lower()
        if t == "jsonl":
            out.append(JSONLSink(path=s["path"]))
        elif t == "csv":
            out.append(CSVSink(path=s["path"]))
        elif t == "stdout":
            out.append(StdoutSink())
        else:
            print(f"[Reporting] Unknown sink type: {t}")
    return out
