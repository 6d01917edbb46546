"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from duelchess.core import MoveExecutor, MoveGenerator, Position, parse_square

    pos = Position()
    gen = MoveGenerator(pos)
    move = gen.legal_moves(parse_square("e2"))[-1]
    record = MoveExecutor(pos).apply(move)
"""

from duelchess.core.board import Board
from duelchess.core.enums import CastlingRights, Color, GameResult, MoveFlag, PieceType
from duelchess.core.errors import ChessError, IllegalMoveError, InvalidStateError
from duelchess.core.executor import MoveExecutor
from duelchess.core.move import Move, MoveRecord
from duelchess.core.move_generator import MoveGenerator
from duelchess.core.notation import (
    disambiguation_suffix,
    history_to_san,
    movetext,
    record_to_san,
)
from duelchess.core.piece import Piece
from duelchess.core.position import Position
from duelchess.core.rules import Rules
from duelchess.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Errors
    "ChessError",
    "IllegalMoveError",
    "InvalidStateError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveExecutor",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "Position",
    "Rules",
    # Notation
    "disambiguation_suffix",
    "history_to_san",
    "movetext",
    "record_to_san",
]
