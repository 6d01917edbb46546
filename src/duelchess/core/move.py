"""Move value objects: candidate moves and immutable history records."""

from __future__ import annotations

from dataclasses import dataclass

from duelchess.core.enums import Color, MoveFlag, PieceType
from duelchess.core.piece import PIECE_LETTERS
from duelchess.core.types import Square, file_of, rank_of, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """A candidate move produced by the move generator."""

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += PIECE_LETTERS[self.promotion].lower()
        return base

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """One applied move, immutable once appended to the history.

    ``piece_type`` is the mover's kind *before* promotion, ``disambiguation``
    lists the other same-kind same-color pieces that could also have reached
    ``to_sq``. A record never describes a move into self-check.
    """

    from_sq: Square
    to_sq: Square
    color: Color
    piece_type: PieceType
    move_number: int
    is_capture: bool = False
    is_castle: bool = False
    is_en_passant: bool = False
    promoted_to: PieceType | None = None
    opponent_in_check: bool = False
    disambiguation: tuple[Square, ...] = ()
    captured: PieceType | None = None

    @property
    def is_double_step(self) -> bool:
        return (
            self.piece_type == PieceType.PAWN
            and abs(rank_of(self.to_sq) - rank_of(self.from_sq)) == 2
        )

    @property
    def is_kingside_castle(self) -> bool:
        return self.is_castle and file_of(self.to_sq) == 6

    def __str__(self) -> str:
        return f"{self.move_number}. {self.color} {square_name(self.from_sq)}{square_name(self.to_sq)}"
