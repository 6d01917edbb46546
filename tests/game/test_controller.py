"""Tests for GameController — the orchestrator."""

import time

import pytest

from duelchess.core.enums import Color, GameResult
from duelchess.core.errors import InvalidStateError
from duelchess.core.move import MoveRecord
from duelchess.core.types import E2, E4, E5, E7, parse_square
from duelchess.game.controller import GameController
from duelchess.game.interfaces import GamePhase
from duelchess.game.settings import GameSettings

FOOLS_MATE = (("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4"))


def _submit(ctrl: GameController, *moves: tuple[str, str]) -> list[MoveRecord | None]:
    return [ctrl.submit_move(parse_square(a), parse_square(b)) for a, b in moves]


class TestInitialState:
    def test_phase_not_started(self) -> None:
        ctrl = GameController()
        assert ctrl.phase == GamePhase.NOT_STARTED
        assert ctrl.side_to_move == Color.LIGHT
        assert not ctrl.is_game_over

    def test_clock_uses_settings(self) -> None:
        ctrl = GameController(GameSettings(initial_clock_ms=90_000))
        assert ctrl.clock.remaining(Color.LIGHT) == 90_000
        assert not ctrl.clock.is_running

    def test_legal_moves(self) -> None:
        ctrl = GameController()
        assert len(ctrl.legal_moves(E2)) == 2
        assert ctrl.legal_moves(E7) == []

    @pytest.mark.parametrize("sq", [-1, 64, 100])
    def test_legal_moves_out_of_range(self, sq: int) -> None:
        assert GameController().legal_moves(sq) == []


class TestSubmitMove:
    def test_legal_move_accepted(self) -> None:
        ctrl = GameController()
        record = ctrl.submit_move(E2, E4)
        assert record is not None
        assert record.to_sq == E4
        assert ctrl.side_to_move == Color.DARK
        assert ctrl.phase == GamePhase.AWAITING_MOVE

    def test_illegal_move_ignored(self) -> None:
        ctrl = GameController()
        fired: list[object] = []
        ctrl.events.on_move_applied.append(lambda *args: fired.append(args))
        assert ctrl.submit_move(E2, E5) is None
        assert ctrl.submit_move(E7, E5) is None
        assert fired == []
        assert ctrl.position.ply_count == 0

    def test_clock_starts_after_first_move(self) -> None:
        ctrl = GameController()
        ctrl.submit_move(E2, E4)
        assert ctrl.clock.is_running
        assert ctrl.clock.active_color == Color.DARK

    def test_events_in_order(self) -> None:
        ctrl = GameController()
        log: list[tuple[str, object]] = []
        ctrl.events.on_move_applied.append(
            lambda rec, to_move, check: log.append(("move", (str(to_move), check)))
        )
        ctrl.events.on_turn_changed.append(lambda color: log.append(("turn", color)))
        ctrl.submit_move(E2, E4)
        assert log == [("move", ("dark", False)), ("turn", Color.DARK)]

    def test_increment_applied_to_mover(self) -> None:
        ctrl = GameController(GameSettings(initial_clock_ms=60_000, increment_ms=2_000))
        _submit(ctrl, ("e2", "e4"), ("e7", "e5"))
        assert ctrl.clock.remaining(Color.DARK) > 61_000


class TestGameEnd:
    def test_checkmate_ends_game(self) -> None:
        ctrl = GameController()
        ended: list[tuple[GameResult, Color | None]] = []
        ctrl.events.on_game_ended.append(lambda r, w: ended.append((r, w)))
        _submit(ctrl, *FOOLS_MATE)
        assert ended == [(GameResult.CHECKMATE, Color.DARK)]
        assert ctrl.phase == GamePhase.GAME_OVER
        assert not ctrl.clock.is_running

    def test_no_moves_after_game_over(self) -> None:
        ctrl = GameController()
        _submit(ctrl, *FOOLS_MATE)
        assert ctrl.submit_move(parse_square("a2"), parse_square("a3")) is None
        assert ctrl.legal_moves(parse_square("a2")) == []

    def test_time_expired(self) -> None:
        ctrl = GameController()
        ended: list[tuple[GameResult, Color | None]] = []
        ctrl.events.on_game_ended.append(lambda r, w: ended.append((r, w)))
        ctrl.time_expired(Color.LIGHT)
        ctrl.time_expired(Color.DARK)
        assert ended == [(GameResult.TIMEOUT, Color.DARK)]

    def test_flag_checked_on_submit(self) -> None:
        ctrl = GameController(GameSettings(initial_clock_ms=20))
        ctrl.submit_move(E2, E4)
        time.sleep(0.05)
        assert ctrl.submit_move(E7, E5) is None
        assert ctrl.position.result == GameResult.TIMEOUT
        assert ctrl.position.winner == Color.LIGHT

    def test_poll_clock(self) -> None:
        ctrl = GameController(GameSettings(initial_clock_ms=20))
        assert not ctrl.poll_clock()
        ctrl.submit_move(E2, E4)
        time.sleep(0.05)
        assert ctrl.poll_clock()
        assert ctrl.position.winner == Color.LIGHT
        assert not ctrl.poll_clock()


class TestClockEditing:
    def test_edit_before_first_move(self) -> None:
        ctrl = GameController()
        assert ctrl.edit_clock(Color.DARK, 30_000)
        assert ctrl.clock.remaining(Color.DARK) == 30_000

    def test_edit_rejected_after_first_move(self) -> None:
        ctrl = GameController()
        ctrl.submit_move(E2, E4)
        assert not ctrl.edit_clock(Color.DARK, 30_000)

    def test_negative_rejected(self) -> None:
        assert not GameController().edit_clock(Color.LIGHT, -5)


class TestReset:
    def test_reset_restores_start(self) -> None:
        ctrl = GameController()
        resets: list[bool] = []
        ctrl.events.on_game_reset.append(lambda: resets.append(True))
        _submit(ctrl, *FOOLS_MATE)
        ctrl.reset()
        assert resets == [True]
        assert ctrl.phase == GamePhase.NOT_STARTED
        assert ctrl.position.ply_count == 0
        assert not ctrl.is_game_over
        assert not ctrl.clock.is_running
        assert ctrl.submit_move(E2, E4) is not None


class TestSnapshot:
    def test_round_trip_between_controllers(self) -> None:
        local = GameController()
        _submit(local, ("e2", "e4"), ("e7", "e5"), ("g1", "f3"))
        remote = GameController()
        turns: list[Color] = []
        remote.events.on_turn_changed.append(turns.append)

        remote.load_snapshot(local.snapshot())

        assert remote.position.signature_history == local.position.signature_history
        assert remote.side_to_move == Color.DARK
        assert remote.phase == GamePhase.AWAITING_MOVE
        assert remote.clock.is_running
        assert turns == [Color.DARK]
        assert remote.submit_move(parse_square("b8"), parse_square("c6")) is not None

    def test_finished_game_emits_end(self) -> None:
        local = GameController()
        _submit(local, *FOOLS_MATE)
        remote = GameController()
        ended: list[tuple[GameResult, Color | None]] = []
        remote.events.on_game_ended.append(lambda r, w: ended.append((r, w)))
        remote.load_snapshot(local.snapshot())
        assert ended == [(GameResult.CHECKMATE, Color.DARK)]
        assert remote.phase == GamePhase.GAME_OVER

    def test_clock_values_transferred(self) -> None:
        local = GameController()
        local.edit_clock(Color.LIGHT, 12_345)
        remote = GameController()
        remote.load_snapshot(local.snapshot())
        assert remote.clock.remaining(Color.LIGHT) == 12_345
        assert remote.phase == GamePhase.NOT_STARTED

    def test_invalid_snapshot_keeps_local_state(self) -> None:
        ctrl = GameController()
        ctrl.submit_move(E2, E4)
        before = ctrl.position
        with pytest.raises(InvalidStateError):
            ctrl.load_snapshot({"moveHistory": []})
        assert ctrl.position is before
        assert ctrl.position.ply_count == 1
        assert ctrl.clock.is_running
