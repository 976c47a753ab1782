"""
Stage 2: histogram duplicate counter (O(n) time, O(max - min) space)
- the counting table is sized to the value range: slot = value - min
- an element is a duplicate when its slot count goes above 1 after incrementing
- the table is a local list allocated per call; nothing survives the call
- ranges wider than max_size raise HistogramAllocationError before allocating
"""

import operator
from typing import List, Optional, Sequence

from src.pipeline.types import ValueRange, HistogramAllocationError, EmptyDatasetError
from src.modules.range.scanner import scan_range

# 64M slots; a near-full 32-bit span would otherwise try to allocate billions of counters
DEFAULT_MAX_HISTOGRAM_SIZE = 1 << 26


class HistogramDuplicateCounter:

    def __init__(self, max_size: int = DEFAULT_MAX_HISTOGRAM_SIZE):
        if int(max_size) < 1:
            raise ValueError("max_size must be >= 1")
        self.max_size = int(max_size)

    def _allocate(self, value_range: ValueRange) -> List[int]:
        size = value_range.size
        if size < 1:
            raise ValueError(f"invalid range: min={value_range.min} > max={value_range.max}")
        if size > self.max_size:
            raise HistogramAllocationError(size, self.max_size)
        return [0] * size

    def build_histogram(self, values: Sequence[int], value_range: Optional[ValueRange] = None) -> List[int]:
        """
        Occurrence tally indexed by value - min. sum(histogram) == len(values).
        """
        if value_range is None:
            value_range = scan_range(values)
            if value_range is None:
                raise EmptyDatasetError("cannot size a histogram for an empty dataset")
        histogram = self._allocate(value_range)
        for v in values:
            histogram[self._slot(v, value_range)] += 1
        return histogram

    def count(self, values: Sequence[int], value_range: Optional[ValueRange] = None) -> int:
        """
        Count elements that are not the first occurrence of their value.

        :param values: dataset, read only
        :param value_range: range from scan_range; scanned here when omitted
        :return: duplicate count (0 for an empty dataset, no allocation made)
        """
        if len(values) == 0:
            return 0
        if value_range is None:
            value_range = scan_range(values)

        histogram = self._allocate(value_range)
        duplicates = 0
        for v in values:
            idx = self._slot(v, value_range)
            histogram[idx] += 1
            if histogram[idx] > 1:
                duplicates += 1
        return duplicates

    @staticmethod
    def _slot(value: int, value_range: ValueRange) -> int:
        # floats would be truncated into a shared slot
        value = operator.index(value)
        idx = value - value_range.min
        # negative indices would silently wrap in a Python list
        if idx < 0 or value > value_range.max:
            raise ValueError(f"value {value} outside range [{value_range.min}, {value_range.max}]")
        return idx


def count_duplicates_histogram(
    values: Sequence[int],
    value_range: Optional[ValueRange] = None,
    max_size: int = DEFAULT_MAX_HISTOGRAM_SIZE,
) -> int:
    return HistogramDuplicateCounter(max_size=max_size).count(values, value_range)
