"""Tests for peer-sync payloads: validation, serialization and replay."""

import json
from typing import Any

import pytest

from duelchess.core.enums import Color, GameResult, PieceType
from duelchess.core.errors import InvalidStateError
from duelchess.core.executor import MoveExecutor
from duelchess.core.move_generator import MoveGenerator
from duelchess.core.position import Position
from duelchess.core.types import parse_square
from duelchess.game.clock import Clock
from duelchess.game.interfaces import TimeControl
from duelchess.game.sync import deserialize, replay, restore, serialize

# Covers a capture, en passant and castling.
OPENING = (
    "e2e4", "a7a6", "e4e5", "d7d5", "e5d6", "c7d6",
    "g1f3", "b8c6", "f1c4", "c8g4", "e1g1",
)  # fmt: skip


def _play(pos: Position, *moves: str) -> None:
    executor = MoveExecutor(pos)
    for text in moves:
        from_sq, to_sq = parse_square(text[:2]), parse_square(text[2:4])
        move = next(
            m for m in MoveGenerator(pos).legal_moves(from_sq) if m.to_sq == to_sq
        )
        executor.apply(move)


def _payload(*moves: str) -> dict[str, Any]:
    pos = Position()
    _play(pos, *moves)
    return serialize(pos, Clock(TimeControl(60_000)))


class TestSerialize:
    def test_shape(self) -> None:
        data = _payload("e2e4")
        assert set(data) == {
            "moveHistory",
            "activeColor",
            "lightClockMs",
            "darkClockMs",
            "gameOver",
            "result",
        }
        assert data["activeColor"] == "dark"
        assert data["lightClockMs"] == 60_000
        assert data["gameOver"] is False
        assert data["result"] is None

    def test_record_shape(self) -> None:
        record = _payload("e2e4")["moveHistory"][0]
        assert record["from"] == {"rank": 1, "file": 4}
        assert record["to"] == {"rank": 3, "file": 4}
        assert record["color"] == "light"
        assert record["piece"] == "pawn"
        assert record["moveNumber"] == 1
        assert record["promotedTo"] is None

    def test_is_json_serializable(self) -> None:
        json.dumps(_payload(*OPENING))

    def test_finished_game(self) -> None:
        data = _payload("f2f3", "e7e5", "g2g4", "d8h4")
        assert data["gameOver"] is True
        assert data["result"] == "checkmate"


class TestReplay:
    def test_rebuilds_identical_state(self) -> None:
        original = Position()
        _play(original, *OPENING)
        rebuilt = replay(deserialize(_payload(*OPENING)).records())
        assert rebuilt.signature_history == original.signature_history
        assert rebuilt.board == original.board
        assert rebuilt.castling == original.castling
        assert rebuilt.captures == original.captures
        assert rebuilt.move_history == original.move_history

    def test_from_json_text(self) -> None:
        text = json.dumps(_payload(*OPENING))
        position = restore(deserialize(text))
        assert position.ply_count == len(OPENING)
        assert position.captures[Color.DARK] == [PieceType.PAWN]

    def test_flags_are_recomputed(self) -> None:
        data = _payload("e2e4")
        data["moveHistory"][0]["isCapture"] = True
        data["moveHistory"][0]["opponentInCheck"] = True
        record = restore(deserialize(data)).move_history[0]
        assert not record.is_capture
        assert not record.opponent_in_check

    def test_checkmate_replayed(self) -> None:
        position = restore(deserialize(_payload("f2f3", "e7e5", "g2g4", "d8h4")))
        assert position.result == GameResult.CHECKMATE
        assert position.winner == Color.DARK

    def test_timeout_taken_from_payload(self) -> None:
        data = _payload("e2e4")
        data.update(gameOver=True, result="timeout")
        position = restore(deserialize(data))
        assert position.result == GameResult.TIMEOUT
        assert position.winner == Color.LIGHT


class TestValidation:
    @pytest.mark.parametrize(
        "missing", ["moveHistory", "activeColor", "lightClockMs", "darkClockMs"]
    )
    def test_required_fields(self, missing: str) -> None:
        data = _payload("e2e4")
        del data[missing]
        with pytest.raises(InvalidStateError):
            deserialize(data)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("activeColor", "white"),
            ("lightClockMs", "100"),
            ("darkClockMs", -1),
            ("moveHistory", "e2e4"),
            ("result", "resigned"),
        ],
    )
    def test_mistyped_fields(self, field: str, value: object) -> None:
        data = _payload("e2e4")
        data[field] = value
        with pytest.raises(InvalidStateError):
            deserialize(data)

    def test_square_out_of_range(self) -> None:
        data = _payload("e2e4")
        data["moveHistory"][0]["to"] = {"rank": 8, "file": 4}
        with pytest.raises(InvalidStateError):
            deserialize(data)

    def test_malformed_json(self) -> None:
        with pytest.raises(InvalidStateError):
            deserialize("{not json")

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            deserialize({})


class TestReplayFailures:
    def test_illegal_record(self) -> None:
        data = _payload("e2e4")
        data["moveHistory"][0]["to"] = {"rank": 4, "file": 4}
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))

    def test_piece_mismatch(self) -> None:
        data = _payload("e2e4")
        data["moveHistory"][0]["piece"] = "knight"
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))

    def test_active_color_mismatch(self) -> None:
        data = _payload("e2e4")
        data["activeColor"] = "light"
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))

    def test_unreached_result(self) -> None:
        data = _payload("e2e4")
        data.update(gameOver=True, result="checkmate")
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))

    def test_wrong_verdict_for_finished_game(self) -> None:
        data = _payload("f2f3", "e7e5", "g2g4", "d8h4")
        data.update(gameOver=True, result="stalemate")
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))

    def test_finished_game_claimed_in_progress(self) -> None:
        data = _payload("f2f3", "e7e5", "g2g4", "d8h4")
        data.update(gameOver=False, result=None)
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))

    def test_game_over_without_result(self) -> None:
        data = _payload("e2e4")
        data.update(gameOver=True, result=None)
        with pytest.raises(InvalidStateError):
            restore(deserialize(data))
