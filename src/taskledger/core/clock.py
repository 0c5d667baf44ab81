# src/taskledger/core/clock.py

from __future__ import annotations

import time
from dataclasses import dataclass


class SystemClock:
    """Wall clock, truncated to whole unix seconds."""

    def now(self) -> int:
        return int(time.time())


@dataclass(slots=True)
class FixedClock:
    """Clock that only moves when told to (demos, replays, tests)."""

    ts: int = 0

    def now(self) -> int:
        return self.ts

    def advance(self, seconds: int) -> None:
        self.ts += int(seconds)
