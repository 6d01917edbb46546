"""Standard algebraic notation built from move records."""

from __future__ import annotations

from collections.abc import Sequence

from duelchess.core.enums import GameResult
from duelchess.core.move import MoveRecord
from duelchess.core.piece import PIECE_LETTERS
from duelchess.core.types import file_of, rank_of, square_name

_FILES = "abcdefgh"


def disambiguation_suffix(record: MoveRecord) -> str:
    """Minimal origin hint telling the mover apart from its look-alikes."""
    others = record.disambiguation
    if not others:
        return ""
    origin = square_name(record.from_sq)
    if all(file_of(sq) != file_of(record.from_sq) for sq in others):
        return origin[0]
    if all(rank_of(sq) != rank_of(record.from_sq) for sq in others):
        return origin[1]
    return origin


def record_to_san(record: MoveRecord, *, checkmate: bool = False) -> str:
    """SAN for *record*; ``checkmate`` swaps the ``+`` suffix for ``#``."""
    if record.is_castle:
        san = "O-O" if record.is_kingside_castle else "O-O-O"
    else:
        letter = PIECE_LETTERS[record.piece_type]
        if letter:
            san = letter + disambiguation_suffix(record)
        elif record.is_capture:
            san = _FILES[file_of(record.from_sq)]
        else:
            san = ""
        if record.is_capture:
            san += "x"
        san += square_name(record.to_sq)
        if record.promoted_to is not None:
            san += "=" + PIECE_LETTERS[record.promoted_to]

    if checkmate:
        san += "#"
    elif record.opponent_in_check:
        san += "+"
    return san


def history_to_san(
    records: Sequence[MoveRecord], result: GameResult = GameResult.IN_PROGRESS
) -> list[str]:
    """SAN for a whole history; the final move is mated when *result* says so."""
    last = len(records) - 1
    return [
        record_to_san(r, checkmate=(i == last and result == GameResult.CHECKMATE))
        for i, r in enumerate(records)
    ]


def movetext(
    records: Sequence[MoveRecord], result: GameResult = GameResult.IN_PROGRESS
) -> str:
    """Numbered move pairs, e.g. ``"1. f3 e5 2. g4 Qh4#"``."""
    sans = history_to_san(records, result)
    parts: list[str] = []
    for i in range(0, len(sans), 2):
        parts.append(f"{i // 2 + 1}. " + " ".join(sans[i : i + 2]))
    return " ".join(parts)
