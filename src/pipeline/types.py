"""
Stage 0: data types
- ValueRange: inclusive [min, max] span of the values present in a dataset
- ProgressEvent: percent-complete notification from the brute-force counter
- DuplicateReport: per-run result written to reporting sinks
- Errors: allocation ceiling, range overflow, cooperative cancellation
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ValueRange:
    min: int
    max: int

    @property
    def size(self) -> int:
        # number of histogram slots needed to cover the range
        return self.max - self.min + 1


@dataclass(frozen=True)
class ProgressEvent:
    percent_complete: int  # 0..100


@dataclass
class DuplicateReport:
    run_id: str
    size: int
    value_range: Optional[ValueRange]
    duplicates: int
    method: str                          # "histogram" / "sorted" / "brute_force" / "empty"
    brute_force_duplicates: Optional[int] = None
    brute_force_mode: Optional[str] = None
    agreement: Optional[bool] = None     # None when no cross-check ran
    elapsed_sec: float = 0.0

    @property
    def duplicate_ratio(self) -> float:
        if self.size <= 0:
            return 0.0
        return self.duplicates / float(self.size)


class EmptyDatasetError(ValueError):
    """Raised where a non-empty dataset is required (e.g. sizing a histogram)."""


class HistogramAllocationError(MemoryError):
    """The value range needs more histogram slots than the configured ceiling."""

    def __init__(self, size: int, max_size: int):
        self.size = int(size)
        self.max_size = int(max_size)
        super().__init__(f"histogram of {self.size} slots exceeds ceiling of {self.max_size}")


class RangeOverflowError(HistogramAllocationError):
    """Raised by the range scanner when max - min + 1 is over the ceiling."""


class CountingCancelled(Exception):
    def __init__(self, processed: int, total: int):
        self.processed = int(processed)
        self.total = int(total)
        super().__init__(f"counting cancelled after {self.processed}/{self.total} elements")
