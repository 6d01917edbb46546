"""Peer-sync payload: serialization, validation and deterministic replay.

Only the move log, side to move, clocks and the verdict travel between
peers. Everything else (board, rights, captures, signature history) is
rebuilt by replaying the log from the initial position, so a peer that
replays N records ends in exactly the state of a peer that played them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from duelchess.core.enums import Color, GameResult, PieceType
from duelchess.core.errors import IllegalMoveError, InvalidStateError
from duelchess.core.executor import MoveExecutor
from duelchess.core.move import MoveRecord
from duelchess.core.move_generator import MoveGenerator
from duelchess.core.position import Position
from duelchess.core.types import Square, file_of, make_square, rank_of
from duelchess.game.interfaces import IClock

_LOGGER = logging.getLogger(__name__)

ColorToken = Literal["light", "dark"]
PieceToken = Literal["pawn", "knight", "bishop", "rook", "queen", "king"]


class SquareSchema(BaseModel):
    """A board square as rank/file indexes, both 0–7."""

    rank: int = Field(..., ge=0, le=7)
    file: int = Field(..., ge=0, le=7)

    @classmethod
    def from_square(cls, sq: Square) -> SquareSchema:
        return cls(rank=rank_of(sq), file=file_of(sq))

    def to_square(self) -> Square:
        return make_square(self.file, self.rank)


class MoveRecordSchema(BaseModel):
    """Wire form of a :class:`MoveRecord`."""

    model_config = ConfigDict(populate_by_name=True)

    from_: SquareSchema = Field(..., alias="from")
    to: SquareSchema
    color: ColorToken
    piece: PieceToken = Field(..., description="Mover kind before promotion.")
    move_number: int = Field(..., alias="moveNumber", ge=1)
    is_capture: bool = Field(False, alias="isCapture")
    is_castle: bool = Field(False, alias="isCastle")
    is_en_passant: bool = Field(False, alias="isEnPassant")
    promoted_to: PieceToken | None = Field(None, alias="promotedTo")
    opponent_in_check: bool = Field(False, alias="opponentInCheck")
    disambiguation: list[SquareSchema] = Field(default_factory=list)
    captured: PieceToken | None = None

    @classmethod
    def from_record(cls, record: MoveRecord) -> MoveRecordSchema:
        return cls(
            from_=SquareSchema.from_square(record.from_sq),
            to=SquareSchema.from_square(record.to_sq),
            color=str(record.color),
            piece=str(record.piece_type),
            move_number=record.move_number,
            is_capture=record.is_capture,
            is_castle=record.is_castle,
            is_en_passant=record.is_en_passant,
            promoted_to=(
                str(record.promoted_to) if record.promoted_to is not None else None
            ),
            opponent_in_check=record.opponent_in_check,
            disambiguation=[SquareSchema.from_square(sq) for sq in record.disambiguation],
            captured=str(record.captured) if record.captured is not None else None,
        )

    def to_record(self) -> MoveRecord:
        return MoveRecord(
            from_sq=self.from_.to_square(),
            to_sq=self.to.to_square(),
            color=Color.from_token(self.color),
            piece_type=PieceType[self.piece.upper()],
            move_number=self.move_number,
            is_capture=self.is_capture,
            is_castle=self.is_castle,
            is_en_passant=self.is_en_passant,
            promoted_to=(
                PieceType[self.promoted_to.upper()] if self.promoted_to else None
            ),
            opponent_in_check=self.opponent_in_check,
            disambiguation=tuple(sq.to_square() for sq in self.disambiguation),
            captured=PieceType[self.captured.upper()] if self.captured else None,
        )


class SyncPayload(BaseModel):
    """Minimal state exchanged between peers.

    ``moveHistory``, ``activeColor`` and both clocks are required.
    """

    model_config = ConfigDict(populate_by_name=True)

    move_history: list[MoveRecordSchema] = Field(..., alias="moveHistory")
    active_color: ColorToken = Field(..., alias="activeColor")
    light_clock_ms: float = Field(..., alias="lightClockMs", ge=0, strict=True)
    dark_clock_ms: float = Field(..., alias="darkClockMs", ge=0, strict=True)
    game_over: bool = Field(False, alias="gameOver")
    result: str | None = None

    @field_validator("result")
    @classmethod
    def _known_result(cls, value: str | None) -> str | None:
        if value is not None:
            GameResult.from_token(value)
        return value

    def records(self) -> list[MoveRecord]:
        return [m.to_record() for m in self.move_history]


# ── Public helpers ───────────────────────────────────────────────────────────


def serialize(position: Position, clock: IClock) -> dict[str, Any]:
    """Build the JSON-compatible payload for *position* and *clock*."""
    payload = SyncPayload(
        move_history=[MoveRecordSchema.from_record(r) for r in position.move_history],
        active_color=str(position.side_to_move),
        light_clock_ms=clock.remaining(Color.LIGHT),
        dark_clock_ms=clock.remaining(Color.DARK),
        game_over=position.game_over,
        result=str(position.result) if position.game_over else None,
    )
    return payload.model_dump(by_alias=True, mode="json")


def deserialize(data: Mapping[str, Any] | str) -> SyncPayload:
    """Validate a peer payload (mapping or JSON text).

    Raises:
        InvalidStateError: if required fields are missing or mistyped.
    """
    try:
        if isinstance(data, str):
            return SyncPayload.model_validate_json(data)
        return SyncPayload.model_validate(data)
    except ValidationError as exc:
        raise InvalidStateError(f"Invalid sync payload: {exc}") from exc


def replay(records: Iterable[MoveRecord]) -> Position:
    """Rebuild a position by re-applying *records* from the initial array.

    Captures, castling rights, results and the signature history are all
    recomputed by the executor, never copied from the records.

    Raises:
        InvalidStateError: if a record does not match a legal move.
    """
    position = Position()
    executor = MoveExecutor(position)
    for ply, record in enumerate(records, start=1):
        piece = position.board[record.from_sq]
        if (
            piece is None
            or piece.color != record.color
            or piece.piece_type != record.piece_type
        ):
            raise InvalidStateError(f"Record {ply} does not match the board: {record}")
        candidates = [
            m
            for m in MoveGenerator(position).legal_moves(record.from_sq)
            if m.to_sq == record.to_sq
        ]
        if not candidates:
            raise InvalidStateError(f"Record {ply} is not a legal move: {record}")
        try:
            executor.apply(candidates[0])
        except IllegalMoveError as exc:
            raise InvalidStateError(f"Record {ply} cannot be replayed: {exc}") from exc
    _LOGGER.debug("replayed %d plies", position.ply_count)
    return position


def restore(payload: SyncPayload) -> Position:
    """Replay *payload* and apply its verdict.

    A timeout cannot be reproduced from the log, so it is taken from the
    payload and charged to the side to move. Every other verdict must be
    exactly the one the replay reaches.

    Raises:
        InvalidStateError: on replay failure, a side-to-move mismatch, or a
            claimed outcome that contradicts the replayed one.
    """
    position = replay(payload.records())
    if str(position.side_to_move) != payload.active_color:
        raise InvalidStateError(
            f"activeColor {payload.active_color!r} does not match the replayed "
            f"position ({position.side_to_move})"
        )
    if (
        payload.game_over
        and payload.result == str(GameResult.TIMEOUT)
        and not position.game_over
    ):
        MoveExecutor(position).flag_fall(position.side_to_move)

    reached = str(position.result) if position.game_over else None
    if payload.game_over != position.game_over or payload.result != reached:
        raise InvalidStateError(
            f"Payload claims gameOver={payload.game_over}, result={payload.result!r} "
            f"but the move history replays to {reached or 'in progress'}"
        )
    return position
