"""
Sort-based duplicate counter (fallback when the value range is too wide for a histogram)
- O(n log n) time, O(n) space, independent of max - min
- sorts a copy; the caller's sequence is never reordered
"""

from typing import Sequence


def count_duplicates_sorted(values: Sequence[int]) -> int:
    if len(values) < 2:
        return 0
    ordered = sorted(values)
    duplicates = 0
    for i in range(1, len(ordered)):
        if ordered[i] == ordered[i - 1]:
            duplicates += 1
    return duplicates
