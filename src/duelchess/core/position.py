"""Position: the single mutable source of truth for one game."""

from __future__ import annotations

from duelchess.core import zobrist
from duelchess.core.board import Board
from duelchess.core.enums import CastlingRights, Color, GameResult, PieceType
from duelchess.core.move import MoveRecord
from duelchess.core.types import Square, file_of, make_square, rank_of

# Display order for captured pieces: most valuable first, pawns last.
CAPTURE_ORDER: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
)


class Position:
    """Board + side to move + castling + history buffers + result.

    Created once per game and reinitialised in place by :meth:`reset`.
    Callers read it; only :class:`~duelchess.core.executor.MoveExecutor`
    writes to it. Move generation performs short-lived trial moves on
    :attr:`board` but always restores it before returning.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "last_move",
        "move_history",
        "signature_history",
        "captures",
        "result",
        "winner",
    )

    def __init__(self) -> None:
        self._load(Board.initial(), Color.LIGHT)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Standard starting array, light to move, every history cleared."""
        self._load(Board.initial(), Color.LIGHT)

    def reset(self) -> None:
        self.initialize()

    @classmethod
    def from_board(cls, board: Board, side_to_move: Color = Color.LIGHT) -> Position:
        """Start a game from an arbitrary placement.

        Castling rights are granted for each unmoved king and unmoved rook
        still on their home squares. The board must hold one king per color.
        """
        pos = cls.__new__(cls)
        pos._load(board, side_to_move)
        return pos

    def copy(self) -> Position:
        """Independent copy; records and pieces are immutable and shared."""
        pos = Position.__new__(Position)
        pos.board = self.board.copy()
        pos.side_to_move = self.side_to_move
        pos.castling = self.castling
        pos.last_move = self.last_move
        pos.move_history = list(self.move_history)
        pos.signature_history = list(self.signature_history)
        pos.captures = {color: list(caps) for color, caps in self.captures.items()}
        pos.result = self.result
        pos.winner = self.winner
        return pos

    def _load(self, board: Board, side_to_move: Color) -> None:
        self.board = board
        self.side_to_move = side_to_move
        self.castling = _derive_castling(board)
        self.last_move: MoveRecord | None = None
        self.move_history: list[MoveRecord] = []
        self.captures: dict[Color, list[PieceType]] = {Color.LIGHT: [], Color.DARK: []}
        self.result = GameResult.IN_PROGRESS
        self.winner: Color | None = None
        self.signature_history: list[int] = [self.signature()]

    # ── Derived accessors ────────────────────────────────────────────────

    @property
    def ply_count(self) -> int:
        return len(self.move_history)

    @property
    def game_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    @property
    def en_passant_target(self) -> Square | None:
        """Square skipped by the last move if it was a pawn double step."""
        last = self.last_move
        if last is None or not last.is_double_step:
            return None
        return make_square(
            file_of(last.to_sq), (rank_of(last.from_sq) + rank_of(last.to_sq)) // 2
        )

    def castling_rights(self, color: Color) -> tuple[bool, bool]:
        """``(kingside, queenside)`` for *color*."""
        return (
            bool(self.castling & CastlingRights.kingside(color)),
            bool(self.castling & CastlingRights.queenside(color)),
        )

    def signature(self) -> int:
        """Repetition key: pieces (with moved flag for kings and rooks),
        en-passant target and side to move."""
        key = 0
        if self.side_to_move == Color.DARK:
            key ^= zobrist.side_to_move_key()
        ep = self.en_passant_target
        if ep is not None:
            key ^= zobrist.en_passant_key(ep)
        for sq, piece in self.board.occupied():
            key ^= zobrist.piece_key(piece, sq)
        return key

    def occurrences(self, signature: int | None = None) -> int:
        """How many recorded plies produced *signature* (default: current)."""
        if signature is None:
            signature = self.signature()
        return self.signature_history.count(signature)

    def __repr__(self) -> str:
        return f"{self.board!r}\n{self.side_to_move} to move, ply {self.ply_count}"


def _derive_castling(board: Board) -> CastlingRights:
    rights = CastlingRights.NONE
    for color, rank in ((Color.LIGHT, 0), (Color.DARK, 7)):
        king = board[make_square(4, rank)]
        if king is None or king.piece_type != PieceType.KING or king.color != color:
            continue
        if king.moved:
            continue
        for file, right in (
            (7, CastlingRights.kingside(color)),
            (0, CastlingRights.queenside(color)),
        ):
            rook = board[make_square(file, rank)]
            if (
                rook is not None
                and rook.piece_type == PieceType.ROOK
                and rook.color == color
                and not rook.moved
            ):
                rights |= right
    return rights
