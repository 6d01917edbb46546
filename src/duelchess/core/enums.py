"""Core enumerations and flags for the rules engine."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color. Light moves first and starts on ranks 1–2."""

    LIGHT = 0
    DARK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_token(cls, token: str) -> Color:
        """Parse ``"light"`` / ``"dark"``."""
        try:
            return cls[token.upper()]
        except KeyError:
            raise ValueError(f"Invalid color: {token!r}") from None


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.lower()


class MoveFlag(IntEnum):
    """Special move classification."""

    NORMAL = 0
    DOUBLE_PAWN = 1
    EN_PASSANT = 2
    CASTLE_KINGSIDE = 3
    CASTLE_QUEENSIDE = 4
    PROMOTION = 5


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    LIGHT_KINGSIDE = auto()
    LIGHT_QUEENSIDE = auto()
    DARK_KINGSIDE = auto()
    DARK_QUEENSIDE = auto()

    LIGHT_BOTH = LIGHT_KINGSIDE | LIGHT_QUEENSIDE
    DARK_BOTH = DARK_KINGSIDE | DARK_QUEENSIDE
    ALL = LIGHT_BOTH | DARK_BOTH

    @classmethod
    def kingside(cls, color: Color) -> CastlingRights:
        return cls.LIGHT_KINGSIDE if color == Color.LIGHT else cls.DARK_KINGSIDE

    @classmethod
    def queenside(cls, color: Color) -> CastlingRights:
        return cls.LIGHT_QUEENSIDE if color == Color.LIGHT else cls.DARK_QUEENSIDE

    @classmethod
    def both(cls, color: Color) -> CastlingRights:
        return cls.LIGHT_BOTH if color == Color.LIGHT else cls.DARK_BOTH


class GameResult(IntEnum):
    """Outcome of a game. Draws and wins are told apart by ``Position.winner``."""

    IN_PROGRESS = 0
    CHECKMATE = 1
    STALEMATE = 2
    REPETITION = 3
    INSUFFICIENT_MATERIAL = 4
    TIMEOUT = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_token(cls, token: str) -> GameResult:
        """Parse a token such as ``"insufficient-material"``."""
        try:
            return cls[token.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Invalid game result: {token!r}") from None
