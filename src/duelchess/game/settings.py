"""Game configuration."""

from __future__ import annotations

from dataclasses import dataclass

from duelchess.game.interfaces import TimeControl


@dataclass
class GameSettings:
    """All caller-configurable settings for a game."""

    # Clock
    initial_clock_ms: int = 600_000
    increment_ms: int = 0

    # Qt clock driver polling period
    tick_interval_ms: int = 100

    def time_control(self) -> TimeControl:
        return TimeControl(self.initial_clock_ms, self.increment_ms)
