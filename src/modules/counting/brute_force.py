"""
Stage 3: brute-force duplicate counter (O(n^2) baseline)
- used to cross-check the histogram counter and to show the complexity gap
- two counting rules:
  - later_match: index i is credited once if any j > i holds the same value
    (the scan from i stops at the first match). Same result as the histogram
    counter for every dataset: a value seen m times has m - 1 occurrences with
    a later match.
  - pairwise: every equal pair (i, j), i < j, is counted. Exceeds the histogram
    count by sum((m - 1) * (m - 2) / 2) over value multiplicities m.
- progress: on_progress(percent) at 1% boundaries, strictly increasing, final 100
- cancel: any object with is_set() (threading.Event), checked every outer iteration
"""

from typing import Any, Callable, Optional, Sequence

from src.pipeline.types import CountingCancelled

MODE_LATER_MATCH = "later_match"
MODE_PAIRWISE = "pairwise"
MODES = (MODE_LATER_MATCH, MODE_PAIRWISE)

ProgressCallback = Callable[[int], None]


def _emit_progress(on_progress: ProgressCallback, percent: int) -> None:
    # progress is advisory: a failing sink must not stop the count
    try:
        on_progress(percent)
    except CountingCancelled:
        raise
    except Exception as e:
        print(f"[Progress] on_progress({percent}) failed: {e}")


class BruteForceDuplicateCounter:
    def __init__(self, mode: str = MODE_LATER_MATCH):
        mode = (mode or MODE_LATER_MATCH).lower()
        if mode not in MODES:
            raise ValueError(f"unknown brute-force mode: {mode!r} (expected one of {MODES})")
        self.mode = mode

    def count(
        self,
        values: Sequence[int],
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[Any] = None,
    ) -> int:
        n = len(values)
        if n == 0:
            return 0

        stop_at_first = self.mode == MODE_LATER_MATCH
        step = max(1, n // 100)
        last_percent = -1
        duplicates = 0

        for i in range(n):
            if cancel is not None and cancel.is_set():
                raise CountingCancelled(processed=i, total=n)

            value = values[i]
            for j in range(i + 1, n):
                if value == values[j]:
                    duplicates += 1
                    if stop_at_first:
                        break

            if on_progress is not None and i % step == 0:
                percent = (i * 100) // n
                if percent > last_percent:
                    last_percent = percent
                    _emit_progress(on_progress, percent)

        if on_progress is not None and last_percent < 100:
            _emit_progress(on_progress, 100)
        return duplicates


def count_duplicates_brute_force(
    values: Sequence[int],
    on_progress: Optional[ProgressCallback] = None,
    mode: str = MODE_LATER_MATCH,
    cancel: Optional[Any] = None,
) -> int:
    return BruteForceDuplicateCounter(mode=mode).count(values, on_progress=on_progress, cancel=cancel)


def pairwise_excess(multiplicities: Sequence[int]) -> int:
    """
    How far the pairwise count exceeds the histogram count, given the
    occurrence count of each distinct value.
    """
    return sum((m - 1) * (m - 2) // 2 for m in multiplicities if m > 2)
