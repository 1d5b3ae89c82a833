"""Cooperative deadline for iterative searches.

時間制限の管理。探索は各反復の先頭で is_time_over() を確認し、
制限時間を過ぎていればそこで打ち切る（探索結果の意味は変わらない）。
"""

from __future__ import annotations

import time
from collections.abc import Callable


class TimeKeeper:
    """Measures elapsed time against a threshold in milliseconds."""

    def __init__(
        self,
        time_threshold_ms: float,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if time_threshold_ms < 0:
            raise ValueError("time_threshold_ms must be non-negative")
        self._clock = clock
        self._start = clock()
        self.time_threshold_ms = time_threshold_ms

    @property
    def elapsed_ms(self) -> float:
        return (self._clock() - self._start) * 1000.0

    def is_time_over(self) -> bool:
        """制限時間を過ぎていれば True。"""
        return self.elapsed_ms >= self.time_threshold_ms


def should_stop(time_keeper: TimeKeeper | None) -> bool:
    """time_keeper が指定されていて、かつ時間切れなら True。"""
    return time_keeper is not None and time_keeper.is_time_over()
