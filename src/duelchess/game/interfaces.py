"""Abstract interfaces for the game layer.

Follows Dependency Inversion: the high-level GameController depends on
these ABCs, not on a concrete clock implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Any

from duelchess.core.enums import Color

if TYPE_CHECKING:
    from duelchess.core.move import Move, MoveRecord
    from duelchess.core.types import Square


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a game."""

    NOT_STARTED = auto()  # no move played yet; clocks may still be edited
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Immutable time-control definition.

    Args:
        initial_ms: Starting time per player in milliseconds.
        increment_ms: Per-move increment (Fischer) in milliseconds.
    """

    __slots__ = ("initial_ms", "increment_ms")

    def __init__(self, initial_ms: int, increment_ms: int = 0) -> None:
        if initial_ms < 0 or increment_ms < 0:
            raise ValueError("Time control values must be non-negative")
        self.initial_ms = initial_ms
        self.increment_ms = increment_ms

    # Common presets
    @classmethod
    def bullet_1m(cls) -> TimeControl:
        return cls(60_000)

    @classmethod
    def blitz_3m2s(cls) -> TimeControl:
        return cls(180_000, 2_000)

    @classmethod
    def blitz_5m(cls) -> TimeControl:
        return cls(300_000)

    @classmethod
    def rapid_10m(cls) -> TimeControl:
        return cls(600_000)

    @classmethod
    def rapid_15m10s(cls) -> TimeControl:
        return cls(900_000, 10_000)

    @classmethod
    def classical_30m(cls) -> TimeControl:
        return cls(1_800_000)

    def __repr__(self) -> str:
        mins = self.initial_ms / 60_000
        if self.increment_ms:
            return f"TimeControl({mins:.0f}m+{self.increment_ms / 1000:.0f}s)"
        return f"TimeControl({mins:.0f}m)"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a chess clock."""

    @abstractmethod
    def start(self, color: Color) -> None:
        """Start the clock for *color*."""

    @abstractmethod
    def stop(self) -> None:
        """Pause the running clock."""

    @abstractmethod
    def remaining(self, color: Color) -> int:
        """Milliseconds remaining for *color*."""

    @abstractmethod
    def is_flag_fallen(self, color: Color) -> bool:
        """Has *color* run out of time?"""

    @abstractmethod
    def add_increment(self, color: Color) -> None:
        """Add Fischer increment after a move."""

    @abstractmethod
    def set_remaining(self, color: Color, ms: int) -> None:
        """Overwrite the remaining time for *color*."""


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def legal_moves(self, sq: Square) -> list[Move]:
        """Legal moves for the piece on *sq* (empty for foreign squares)."""

    @abstractmethod
    def submit_move(self, from_sq: Square, to_sq: Square) -> MoveRecord | None:
        """Play ``from_sq → to_sq``. Returns the record, or None if ignored."""

    @abstractmethod
    def reset(self) -> None:
        """Discard the game and start over from the initial position."""

    @abstractmethod
    def edit_clock(self, color: Color, ms: int) -> bool:
        """Change a clock before the first move. Returns True on success."""

    @abstractmethod
    def time_expired(self, color: Color) -> None:
        """*color*'s flag fell."""

    @abstractmethod
    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible peer-sync payload for the current game."""

    @abstractmethod
    def load_snapshot(self, data: Mapping[str, Any] | str) -> None:
        """Replace local state with a peer payload (last writer wins)."""
