"""GameController — the caller-facing orchestrator of one game.

Coordinates: Position, MoveExecutor, Clock, peer sync.
Emits events via simple callbacks so UI, network and tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from duelchess.core.enums import Color
from duelchess.core.errors import InvalidStateError
from duelchess.core.executor import MoveExecutor
from duelchess.core.move import Move, MoveRecord
from duelchess.core.move_generator import MoveGenerator
from duelchess.core.position import Position
from duelchess.core.types import Square, is_valid_square
from duelchess.game.clock import Clock
from duelchess.game.events import GameEvents
from duelchess.game.interfaces import GamePhase, IGameController
from duelchess.game.settings import GameSettings
from duelchess.game.sync import deserialize, restore, serialize

_LOGGER = logging.getLogger(__name__)


class GameController(IGameController):
    """Orchestrates a full game: resolves clicks to legal moves, runs the
    clock, switches turns, notifies listeners, syncs with a peer.

    Thread-safety: every method must be called from a single thread (the
    main/UI thread). All calls are synchronous.
    """

    __slots__ = ("_settings", "_position", "_executor", "_clock", "_phase", "events")

    def __init__(self, settings: GameSettings | None = None) -> None:
        self._settings = settings or GameSettings()
        self._position = Position()
        self._executor = MoveExecutor(self._position)
        self._clock = Clock(self._settings.time_control())
        self._phase = GamePhase.NOT_STARTED
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        """Current position. Replaced (not mutated) by :meth:`load_snapshot`."""
        return self._position

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self._position.game_over

    # ── IGameController impl ─────────────────────────────────────────────

    def legal_moves(self, sq: Square) -> list[Move]:
        if self.is_game_over or not is_valid_square(sq):
            return []
        return MoveGenerator(self._position).legal_moves(sq)

    def submit_move(self, from_sq: Square, to_sq: Square) -> MoveRecord | None:
        if self.is_game_over:
            return None
        move = next((m for m in self.legal_moves(from_sq) if m.to_sq == to_sq), None)
        if move is None:
            _LOGGER.debug("ignored move request %s -> %s", from_sq, to_sq)
            return None

        # Clock: freeze mover's time, check flag, then apply increment.
        mover = self._position.side_to_move
        if self._clock.is_running:
            self._clock.stop()
            if self._clock.is_flag_fallen(mover):
                self.time_expired(mover)
                return None
            self._clock.add_increment(mover)

        record = self._executor.apply(move)
        self._phase = GamePhase.AWAITING_MOVE

        to_move = self._position.side_to_move
        self.events.emit_move_applied(record, to_move, record.opponent_in_check)
        self.events.emit_turn_changed(to_move)

        if self.is_game_over:
            self._end_game()
        else:
            self._clock.start(to_move)
        return record

    def reset(self) -> None:
        self._clock.reset()
        self._position.reset()
        self._phase = GamePhase.NOT_STARTED
        _LOGGER.info("game reset")
        self.events.emit_game_reset()

    def edit_clock(self, color: Color, ms: int) -> bool:
        if self._phase != GamePhase.NOT_STARTED or ms < 0:
            return False
        self._clock.set_remaining(color, ms)
        return True

    def time_expired(self, color: Color) -> None:
        if self.is_game_over:
            return
        self._executor.flag_fall(color)
        self._end_game()

    def poll_clock(self) -> bool:
        """Raise a flag fall if the running side is out of time.

        Returns True when this call ended the game.
        """
        active = self._clock.active_color
        if (
            self.is_game_over
            or not self._clock.is_running
            or active is None
            or not self._clock.is_flag_fallen(active)
        ):
            return False
        self.time_expired(active)
        return True

    # ── Peer sync ────────────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        return serialize(self._position, self._clock)

    def load_snapshot(self, data: Mapping[str, Any] | str) -> None:
        """Replace local state with a peer payload.

        The payload is validated and replayed into a fresh position before
        anything local is touched.

        Raises:
            InvalidStateError: if the payload is rejected; local state is kept.
        """
        try:
            payload = deserialize(data)
            position = restore(payload)
        except InvalidStateError:
            _LOGGER.warning("rejected peer snapshot", exc_info=True)
            raise

        self._clock.stop()
        self._position = position
        self._executor = MoveExecutor(position)
        self._clock.set_remaining(Color.LIGHT, int(payload.light_clock_ms))
        self._clock.set_remaining(Color.DARK, int(payload.dark_clock_ms))
        _LOGGER.info("loaded peer snapshot at ply %d", position.ply_count)

        if position.game_over:
            self._phase = GamePhase.GAME_OVER
            self.events.emit_turn_changed(position.side_to_move)
            self.events.emit_game_ended(position.result, position.winner)
            return

        if position.ply_count:
            self._phase = GamePhase.AWAITING_MOVE
            self._clock.start(position.side_to_move)
        else:
            self._phase = GamePhase.NOT_STARTED
        self.events.emit_turn_changed(position.side_to_move)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _end_game(self) -> None:
        self._clock.stop()
        self._phase = GamePhase.GAME_OVER
        self.events.emit_game_ended(self._position.result, self._position.winner)
