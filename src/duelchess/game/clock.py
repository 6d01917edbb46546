"""Chess clock with Fischer increment support, in milliseconds."""

from __future__ import annotations

import time

from duelchess.core.enums import Color
from duelchess.game.interfaces import IClock, TimeControl


def _now_ms() -> float:
    return time.monotonic() * 1000.0


class Clock(IClock):
    """Dual chess clock tracking remaining time for both players.

    Uses monotonic time. The clock only measures; deciding what a fallen
    flag means is the controller's job.
    """

    __slots__ = (
        "_time_control",
        "_remaining",
        "_active_color",
        "_last_tick",
        "_running",
    )

    def __init__(self, time_control: TimeControl) -> None:
        self._time_control = time_control
        self._remaining: dict[Color, float] = {
            Color.LIGHT: float(time_control.initial_ms),
            Color.DARK: float(time_control.initial_ms),
        }
        self._active_color: Color | None = None
        self._last_tick: float = 0.0
        self._running: bool = False

    # ── IClock implementation ────────────────────────────────────────────

    def start(self, color: Color) -> None:
        self._active_color = color
        self._last_tick = _now_ms()
        self._running = True

    def stop(self) -> None:
        if self._running:
            self._consume_elapsed()
            self._running = False

    def remaining(self, color: Color) -> int:
        left = self._remaining[color]
        if self._running and self._active_color == color:
            left -= _now_ms() - self._last_tick
        return max(0, int(left))

    def is_flag_fallen(self, color: Color) -> bool:
        return self.remaining(color) <= 0

    def add_increment(self, color: Color) -> None:
        self._remaining[color] += self._time_control.increment_ms

    def set_remaining(self, color: Color, ms: int) -> None:
        self._remaining[color] = float(ms)
        if self._running and self._active_color == color:
            self._last_tick = _now_ms()

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def active_color(self) -> Color | None:
        return self._active_color

    def reset(self) -> None:
        """Stop and refill both sides from the time control."""
        self._running = False
        self._active_color = None
        for color in Color:
            self._remaining[color] = float(self._time_control.initial_ms)

    # ── Internal ─────────────────────────────────────────────────────────

    def _consume_elapsed(self) -> None:
        if self._active_color is None:
            return
        now = _now_ms()
        elapsed = now - self._last_tick
        self._remaining[self._active_color] = max(
            0.0, self._remaining[self._active_color] - elapsed
        )
        self._last_tick = now
