"""
Tests for reporting sinks and progress sinks.
"""

import csv
import io
import json

from src.modules.reporting.sink import (
    JSONLSink,
    CSVSink,
    StdoutSink,
    StdoutProgress,
    ProgressRecorder,
    REPORT_FIELDS,
    build_sinks_from_config,
)
from src.pipeline.types import DuplicateReport, ValueRange, ProgressEvent


def _report(run_id="run-1", duplicates=3):
    return DuplicateReport(
        run_id=run_id,
        size=6,
        value_range=ValueRange(min=1, max=3),
        duplicates=duplicates,
        method="histogram",
        brute_force_duplicates=3,
        brute_force_mode="later_match",
        agreement=True,
        elapsed_sec=0.01,
    )


def test_jsonl_appends(tmp_path):
    path = tmp_path / "nested" / "reports.jsonl"
    sink = JSONLSink(str(path))
    sink.write_reports([_report()], "run-1")
    sink.write_reports([_report(duplicates=5)], "run-2")

    rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [r["run_id"] for r in rows] == ["run-1", "run-2"]
    assert rows[1]["duplicates"] == 5
    assert "write_ts" in rows[0]


def test_csv_header_written_once(tmp_path):
    path = tmp_path / "reports.csv"
    CSVSink(str(path)).write_reports([_report()], "run-1")
    CSVSink(str(path)).write_reports([_report()], "run-2")

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert list(rows[0].keys()) == REPORT_FIELDS
    assert rows[0]["duplicates"] == "3"


def test_csv_empty_range(tmp_path):
    path = tmp_path / "reports.csv"
    empty = DuplicateReport(run_id="e", size=0, value_range=None, duplicates=0, method="empty")
    CSVSink(str(path)).write_reports([empty], "e")
    with open(path, newline="", encoding="utf-8") as f:
        row = next(csv.DictReader(f))
    assert row["range_min"] == ""
    assert row["duplicate_ratio"] == "0.0"


def test_stdout_sink(capsys):
    StdoutSink().write_reports([_report()], "run-1")
    out = capsys.readouterr().out
    assert "[Reporting] run=run-1 count=1" in out
    assert '"duplicates": 3' in out


def test_stdout_progress_rewrites_counter():
    buf = io.StringIO()
    progress = StdoutProgress(stream=buf)
    progress(0)
    progress(50)
    progress(100)
    assert buf.getvalue() == "  0%\b\b\b\b 50%\b\b\b\b100%\b\b\b\b"


def test_progress_recorder():
    rec = ProgressRecorder()
    rec(0)
    rec(40)
    assert rec.events == [ProgressEvent(0), ProgressEvent(40)]
    assert rec.percents == [0, 40]


def test_build_sinks_from_config(tmp_path, capsys):
    cfg = {
        "reporting": {
            "sinks": [
                {"type": "jsonl", "path": str(tmp_path / "r.jsonl")},
                {"type": "CSV", "path": str(tmp_path / "r.csv")},
                {"type": "stdout"},
                {"type": "webhook"},
            ]
        }
    }
    sinks = build_sinks_from_config(cfg)
    assert [type(s) for s in sinks] == [JSONLSink, CSVSink, StdoutSink]
    assert "Unknown sink type: webhook" in capsys.readouterr().out


def test_build_sinks_without_reporting_section():
    assert build_sinks_from_config({}) == []
