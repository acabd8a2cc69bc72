"""Wall-clock timing helper for LLM calls and session steps."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator


class Stopwatch:
    def __init__(self) -> None:
        self._start = time.perf_counter()
        self._end: float | None = None

    def stop(self) -> None:
        if self._end is None:
            self._end = time.perf_counter()

    @property
    def seconds(self) -> float:
        end = self._end if self._end is not None else time.perf_counter()
        return end - self._start

    @property
    def ms(self) -> int:
        return int(self.seconds * 1000)


@contextmanager
def span() -> Iterator[Stopwatch]:
    watch = Stopwatch()
    try:
        yield watch
    finally:
        watch.stop()


__all__ = ["Stopwatch", "span"]
