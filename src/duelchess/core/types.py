"""Integer squares and the coordinate helpers around them.

A square is ``rank * 8 + file``: a1 = 0, h1 = 7, a2 = 8, ..., h8 = 63.
Rank 0 is light's home rank, rank 7 is dark's. Payloads carry squares as
``{rank, file}`` pairs instead.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int  # 0–63

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def make_square(file: int, rank: int) -> Square:
    """Square at *file*, *rank* (both 0–7).

    Raises:
        ValueError: if either coordinate is off the board.
    """
    if file not in range(8) or rank not in range(8):
        raise ValueError(f"Square out of range: file={file}, rank={rank}")
    return rank * 8 + file


def is_valid_square(sq: int) -> bool:
    return sq in range(64)


def square_name(sq: Square) -> str:
    """``0`` -> ``"a1"``, ``63`` -> ``"h8"``."""
    rank, file = divmod(sq, 8)
    return FILE_NAMES[file] + RANK_NAMES[rank]


def parse_square(name: str) -> Square:
    """``"e4"`` -> ``28``.

    Raises:
        ValueError: for anything but a file letter followed by a rank digit.
    """
    if len(name) != 2 or name[0] not in FILE_NAMES or name[1] not in RANK_NAMES:
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(FILE_NAMES.index(name[0]), RANK_NAMES.index(name[1]))


def is_light_square(sq: Square) -> bool:
    """a1 is a dark square; colors alternate along ranks and files."""
    rank, file = divmod(sq, 8)
    return (rank + file) % 2 == 1


# ── Named squares ────────────────────────────────────────────────────────────

(A1, B1, C1, D1, E1, F1, G1, H1,
 A2, B2, C2, D2, E2, F2, G2, H2,
 A3, B3, C3, D3, E3, F3, G3, H3,
 A4, B4, C4, D4, E4, F4, G4, H4,
 A5, B5, C5, D5, E5, F5, G5, H5,
 A6, B6, C6, D6, E6, F6, G6, H6,
 A7, B7, C7, D7, E7, F7, G7, H7,
 A8, B8, C8, D8, E8, F8, G8, H8) = range(64)  # fmt: skip
