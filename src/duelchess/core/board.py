"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from duelchess.core.enums import Color, PieceType
from duelchess.core.piece import Piece
from duelchess.core.types import Square, make_square, parse_square

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _bits(mask: int) -> list[Square]:
    """Set bits of *mask* as squares, lowest first."""
    squares: list[Square] = []
    while mask:
        low = mask & -mask
        squares.append(low.bit_length() - 1)
        mask ^= low
    return squares


class Board:
    """Mutable 64-square board with an occupancy mask per (color, kind).

    Every write toggles the mover's bit in its kind mask and in its color's
    occupancy mask, so attack probes never scan the 64 slots.

    Precondition for every rules query: exactly one king per color.
    """

    __slots__ = ("_squares", "_masks", "_occupancy")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        self._masks: dict[tuple[Color, PieceType], int] = {
            (color, pt): 0 for color in Color for pt in PieceType
        }
        self._occupancy: dict[Color, int] = {color: 0 for color in Color}

    def _toggle(self, sq: Square, piece: Piece) -> None:
        bit = 1 << sq
        self._masks[piece.color, piece.piece_type] ^= bit
        self._occupancy[piece.color] ^= bit

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old = self._squares[sq]
        if old is piece:
            return
        if old is not None:
            self._toggle(sq, old)
        self._squares[sq] = piece
        if piece is not None:
            self._toggle(sq, piece)

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied square, a1 first."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return _bits(self._masks[color, piece_type])

    def pieces_mask(self, color: Color, piece_type: PieceType) -> int:
        return self._masks[color, piece_type]

    def all_pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return _bits(self._occupancy[color])

    def count(self, color: Color) -> int:
        return self._occupancy[color].bit_count()

    def king_square(self, color: Color) -> Square:
        """Square of *color*'s king (the lowest one if a test board has two)."""
        kings = self._masks[color, PieceType.KING]
        if not kings:
            raise ValueError(f"No {color} king on board")
        return (kings & -kings).bit_length() - 1

    # -- Copying ------------------------------------------------------------

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b._squares = self._squares.copy()
        b._masks = self._masks.copy()
        b._occupancy = self._occupancy.copy()
        return b

    # -- Factories ----------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting array."""
        b = cls()
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.LIGHT, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.DARK, PieceType.PAWN)
        for f, pt in enumerate(BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.LIGHT, pt)
            b[make_square(f, 7)] = Piece(Color.DARK, pt)
        return b

    @classmethod
    def from_mapping(cls, placement: Mapping[str, str | Piece]) -> Board:
        """Build a board from ``{"e1": "K", "e8": "k", ...}``.

        Letters create unmoved pieces; pass :class:`Piece` values to control
        the ``moved`` flag.
        """
        b = cls()
        for name, value in placement.items():
            b[parse_square(name)] = (
                value if isinstance(value, Piece) else Piece.from_char(value)
            )
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
