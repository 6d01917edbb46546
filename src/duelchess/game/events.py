"""Observer callbacks emitted by the game controller."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from duelchess.core.enums import Color, GameResult
from duelchess.core.move import MoveRecord

MoveAppliedCallback = Callable[[MoveRecord, Color, bool], None]  # record, to move, check
TurnChangedCallback = Callable[[Color], None]
GameEndedCallback = Callable[[GameResult, "Color | None"], None]  # result, winner
GameResetCallback = Callable[[], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event, called in order.

    The engine does not assume any delivery mechanism; UI and network
    collaborators append their own handlers.
    """

    on_move_applied: list[MoveAppliedCallback] = field(default_factory=list)
    on_turn_changed: list[TurnChangedCallback] = field(default_factory=list)
    on_game_ended: list[GameEndedCallback] = field(default_factory=list)
    on_game_reset: list[GameResetCallback] = field(default_factory=list)

    def emit_move_applied(self, record: MoveRecord, to_move: Color, is_check: bool) -> None:
        for cb in self.on_move_applied:
            cb(record, to_move, is_check)

    def emit_turn_changed(self, color: Color) -> None:
        for cb in self.on_turn_changed:
            cb(color)

    def emit_game_ended(self, result: GameResult, winner: Color | None) -> None:
        for cb in self.on_game_ended:
            cb(result, winner)

    def emit_game_reset(self) -> None:
        for cb in self.on_game_reset:
            cb()
