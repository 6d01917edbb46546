"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from duelchess.core.enums import Color, PieceType

# Letter ↔ (Color, PieceType); uppercase is light, lowercase is dark.
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.LIGHT, PieceType.PAWN),
    "N": (Color.LIGHT, PieceType.KNIGHT),
    "B": (Color.LIGHT, PieceType.BISHOP),
    "R": (Color.LIGHT, PieceType.ROOK),
    "Q": (Color.LIGHT, PieceType.QUEEN),
    "K": (Color.LIGHT, PieceType.KING),
    "p": (Color.DARK, PieceType.PAWN),
    "n": (Color.DARK, PieceType.KNIGHT),
    "b": (Color.DARK, PieceType.BISHOP),
    "r": (Color.DARK, PieceType.ROOK),
    "q": (Color.DARK, PieceType.QUEEN),
    "k": (Color.DARK, PieceType.KING),
}

_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}

PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece.

    ``moved`` records whether the piece has ever left its square. Moving a
    piece puts a new value on the board instead of mutating the old one, so
    a trial move can always be undone by restoring references.
    """

    color: Color
    piece_type: PieceType
    moved: bool = False

    def __str__(self) -> str:
        """Letter (uppercase = light, lowercase = dark)."""
        return _CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str, moved: bool = False) -> Piece:
        """Create piece from a letter, e.g. 'N' → light knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype, moved)

    def as_moved(self) -> Piece:
        return self if self.moved else replace(self, moved=True)

    def promoted(self, piece_type: PieceType) -> Piece:
        return Piece(self.color, piece_type, True)
