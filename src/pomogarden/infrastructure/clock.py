"""Clock source — monotonic ``now()`` plus the matching ``sleep()``.

The timer and scheduler only ever see a :class:`Clock`, so tests can
substitute a manual clock whose ``sleep`` simply advances time.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic time source measured in seconds."""

    def now(self) -> float: ...

    def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Process clock backed by :func:`time.monotonic`."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
