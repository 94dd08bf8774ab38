"""Time source used by supervision loops."""

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic time and sleeping, replaceable in tests."""

    def monotonic(self) -> float: ...

    def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Clock backed by the ``time`` module."""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
