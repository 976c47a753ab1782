"""
Stage 1: range scan (min/max in one pass)
- scan_range(values): one linear pass; None for an empty dataset
- min and max are compared independently for every element, so an element is
  always checked against both extremes
- optional max_histogram_size: raise RangeOverflowError when the span would not fit
"""

import operator
from typing import Optional, Sequence

from src.pipeline.types import ValueRange, RangeOverflowError


def scan_range(values: Sequence[int], max_histogram_size: Optional[int] = None) -> Optional[ValueRange]:
    n = len(values)
    if n == 0:
        return None

    lo = hi = operator.index(values[0])
    for i in range(1, n):
        v = operator.index(values[i])
        if v < lo:
            lo = v
        if v > hi:
            hi = v

    rng = ValueRange(min=lo, max=hi)
    if max_histogram_size is not None and rng.size > int(max_histogram_size):
        raise RangeOverflowError(rng.size, int(max_histogram_size))
    return rng
