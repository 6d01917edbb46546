"""Per-square legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from duelchess.core.enums import CastlingRights, Color, MoveFlag, PieceType
from duelchess.core.move import Move
from duelchess.core.piece import Piece
from duelchess.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from duelchess.core.position import Position


Step = tuple[int, int]  # (file delta, rank delta)

_KNIGHT_JUMPS: tuple[Step, ...] = (
    (1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2),
)  # fmt: skip
_DIAGONALS: tuple[Step, ...] = ((1, 1), (1, -1), (-1, -1), (-1, 1))
_ORTHOGONALS: tuple[Step, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

# Per color: forward rank step, double-step start rank, last rank.
_PAWN_STEP: tuple[int, int] = (1, -1)
_PAWN_START_RANK: tuple[int, int] = (1, 6)
_PAWN_LAST_RANK: tuple[int, int] = (7, 0)
_HOME_RANK: tuple[int, int] = (0, 7)


# -- Precomputed lookup tables ---------------------------------------------


def _walk(sq: Square, step: Step, limit: int = 7) -> tuple[Square, ...]:
    """Squares reached from *sq* by repeating *step* up to *limit* times."""
    df, dr = step
    file, rank = file_of(sq) + df, rank_of(sq) + dr
    path: list[Square] = []
    while len(path) < limit and 0 <= file < 8 and 0 <= rank < 8:
        path.append(make_square(file, rank))
        file += df
        rank += dr
    return tuple(path)


def _leaps(steps: tuple[Step, ...]) -> tuple[tuple[Square, ...], ...]:
    """[sq] -> every square one *step* away."""
    return tuple(
        tuple(to_sq for step in steps for to_sq in _walk(sq, step, limit=1))
        for sq in range(64)
    )


def _rays(steps: tuple[Step, ...]) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """[sq] -> one ray per direction, nearest square first."""
    return tuple(tuple(_walk(sq, step) for step in steps) for sq in range(64))


def _as_mask(squares: tuple[Square, ...]) -> int:
    mask = 0
    for sq in squares:
        mask |= 1 << sq
    return mask


_LEAPS: dict[PieceType, tuple[tuple[Square, ...], ...]] = {
    PieceType.KNIGHT: _leaps(_KNIGHT_JUMPS),
    PieceType.KING: _leaps(_DIAGONALS + _ORTHOGONALS),
}
_LEAP_MASKS: dict[PieceType, tuple[int, ...]] = {
    pt: tuple(_as_mask(targets) for targets in table) for pt, table in _LEAPS.items()
}

# [by_color][sq] -> squares a pawn of by_color must stand on to hit sq,
# i.e. one rank behind sq from that pawn's point of view.
_PAWN_ATTACKERS: tuple[tuple[int, ...], ...] = tuple(
    tuple(_as_mask(targets) for targets in _leaps(((-1, -step), (1, -step))))
    for step in _PAWN_STEP
)

_SLIDER_RAYS: dict[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]] = {
    PieceType.BISHOP: _rays(_DIAGONALS),
    PieceType.ROOK: _rays(_ORTHOGONALS),
    PieceType.QUEEN: _rays(_DIAGONALS + _ORTHOGONALS),
}


class MoveGenerator:
    """Generates legal moves square by square for a :class:`Position`.

    The self-check filter plays each candidate on the live board and undoes
    it before the next one, so the position is unchanged whenever a public
    method returns.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, sq: Square) -> list[Move]:
        """Legal moves for the piece on *sq*.

        Empty when *sq* is empty or holds a piece of the side not to move.
        """
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        return self.legal_moves_for(sq)

    def legal_moves_for(self, sq: Square) -> list[Move]:
        """Legal moves for the piece on *sq*, whichever side it belongs to."""
        piece = self._board[sq]
        if piece is None:
            return []
        return [
            move
            for move in self.pseudo_legal_moves(sq)
            if not self._leaves_king_attacked(move, piece.color)
        ]

    def all_legal_moves(self, color: Color | None = None) -> list[Move]:
        """Every legal move for *color* (default: side to move)."""
        if color is None:
            color = self._pos.side_to_move
        moves: list[Move] = []
        for sq in self._board.all_pieces(color):
            moves.extend(self.legal_moves_for(sq))
        return moves

    def has_any_legal_move(self, color: Color) -> bool:
        for sq in self._board.all_pieces(color):
            if self.legal_moves_for(sq):
                return True
        return False

    def pseudo_legal_moves(self, sq: Square, include_castling: bool = True) -> list[Move]:
        """Moves obeying geometry and occupancy; may leave own king in check."""
        piece = self._board[sq]
        if piece is None:
            return []

        moves: list[Move] = []
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif ptype in _LEAPS:
            self._gen_steps(sq, piece.color, _LEAPS[ptype][sq], moves)
            if ptype == PieceType.KING and include_castling:
                self._gen_castling(sq, piece, moves)
        else:
            self._gen_sliding(sq, piece.color, _SLIDER_RAYS[ptype][sq], moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Pawns attack diagonally whether or not *sq* is occupied; castling
        never counts as an attack.
        """
        board = self._board
        if board.pieces_mask(by_color, PieceType.PAWN) & _PAWN_ATTACKERS[by_color][sq]:
            return True
        for leaper, masks in _LEAP_MASKS.items():
            if board.pieces_mask(by_color, leaper) & masks[sq]:
                return True
        queens = board.pieces_mask(by_color, PieceType.QUEEN)
        for slider in (PieceType.BISHOP, PieceType.ROOK):
            if (queens or board.pieces_mask(by_color, slider)) and self._ray_hits(
                _SLIDER_RAYS[slider][sq], by_color, slider
            ):
                return True
        return False

    def _ray_hits(
        self,
        rays: tuple[tuple[Square, ...], ...],
        by_color: Color,
        slider: PieceType,
    ) -> bool:
        """Whether the first piece on any ray is *by_color*'s *slider* or queen."""
        board = self._board
        for ray in rays:
            blocker = next((p for p in map(board.__getitem__, ray) if p is not None), None)
            if (
                blocker is not None
                and blocker.color == by_color
                and blocker.piece_type in (slider, PieceType.QUEEN)
            ):
                return True
        return False

    # -- Self-check filter --------------------------------------------------

    def _leaves_king_attacked(self, move: Move, color: Color) -> bool:
        """Play *move* on the board, probe for check, then restore.

        Every square the trial touches (origin, destination, en-passant
        victim, castling rook) is put back in ``finally``. Pieces are
        immutable, so restoring the references also restores ``moved``.
        """
        board = self._board
        piece = board[move.from_sq]
        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = board[capture_sq]

        rook_from = rook_to = None
        rook: Piece | None = None
        if move.is_castle:
            rook_from, rook_to = castle_rook_squares(move)
            rook = board[rook_from]

        try:
            board[move.from_sq] = None
            board[capture_sq] = None
            board[move.to_sq] = piece
            if rook_from is not None and rook_to is not None:
                board[rook_from] = None
                board[rook_to] = rook
            return self.is_in_check(color)
        finally:
            if rook_from is not None and rook_to is not None:
                board[rook_to] = None
                board[rook_from] = rook
            board[move.to_sq] = None
            board[capture_sq] = captured
            board[move.from_sq] = piece

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        idx = int(color)
        step = _PAWN_STEP[idx]
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        next_rank = rank_idx + step
        if not 0 <= next_rank < 8:
            return
        promotes = next_rank == _PAWN_LAST_RANK[idx]

        def add(to_sq: Square, flag: MoveFlag = MoveFlag.NORMAL) -> None:
            if promotes:
                moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, PieceType.QUEEN))
            else:
                moves.append(Move(sq, to_sq, flag))

        one_step = make_square(file_idx, next_rank)
        if board.is_empty(one_step):
            add(one_step)
            if rank_idx == _PAWN_START_RANK[idx]:
                two_step = make_square(file_idx, rank_idx + 2 * step)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            cap_file = file_idx + df
            if not 0 <= cap_file < 8:
                continue
            cap_sq = make_square(cap_file, next_rank)
            target = board[cap_sq]
            if target is not None and target.color != color:
                add(cap_sq)

        last = self._pos.last_move
        if (
            last is not None
            and last.is_double_step
            and last.color != color
            and rank_of(last.to_sq) == rank_idx
            and abs(file_of(last.to_sq) - file_idx) == 1
        ):
            moves.append(
                Move(sq, make_square(file_of(last.to_sq), next_rank), MoveFlag.EN_PASSANT)
            )

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, king: Piece, moves: list[Move]) -> None:
        color = king.color
        rank = _HOME_RANK[int(color)]
        if king.moved or king_sq != make_square(4, rank):
            return
        if not self._pos.castling & CastlingRights.both(color):
            return
        if self.is_in_check(color):
            return

        board = self._board
        opponent = color.opposite
        sides = (
            (CastlingRights.kingside(color), 7, (5, 6), (5, 6), MoveFlag.CASTLE_KINGSIDE),
            (
                CastlingRights.queenside(color),
                0,
                (1, 2, 3),
                (3, 2),
                MoveFlag.CASTLE_QUEENSIDE,
            ),
        )
        for right, rook_file, between, king_path, flag in sides:
            if not self._pos.castling & right:
                continue
            rook = board[make_square(rook_file, rank)]
            if (
                rook is None
                or rook.piece_type != PieceType.ROOK
                or rook.color != color
                or rook.moved
            ):
                continue
            if any(not board.is_empty(make_square(f, rank)) for f in between):
                continue
            if any(
                self.is_square_attacked(make_square(f, rank), opponent)
                for f in king_path
            ):
                continue
            moves.append(Move(king_sq, make_square(king_path[-1], rank), flag))


def castle_rook_squares(move: Move) -> tuple[Square, Square]:
    """``(rook_from, rook_to)`` for a castling *move*."""
    rank = rank_of(move.from_sq)
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, rank), make_square(5, rank)
    return make_square(0, rank), make_square(3, rank)
