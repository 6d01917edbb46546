"""MoveExecutor: the only writer of a :class:`Position`."""

from __future__ import annotations

import bisect
import logging

from duelchess.core.enums import CastlingRights, Color, GameResult, MoveFlag, PieceType
from duelchess.core.errors import IllegalMoveError
from duelchess.core.move import Move, MoveRecord
from duelchess.core.move_generator import MoveGenerator, castle_rook_squares
from duelchess.core.position import CAPTURE_ORDER, Position
from duelchess.core.rules import Rules
from duelchess.core.types import Square, file_of, make_square, rank_of

_LOGGER = logging.getLogger(__name__)

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.LIGHT_QUEENSIDE,
    make_square(7, 0): CastlingRights.LIGHT_KINGSIDE,
    make_square(0, 7): CastlingRights.DARK_QUEENSIDE,
    make_square(7, 7): CastlingRights.DARK_KINGSIDE,
}
_CORNER_COLOR: dict[Square, Color] = {
    make_square(0, 0): Color.LIGHT,
    make_square(7, 0): Color.LIGHT,
    make_square(0, 7): Color.DARK,
    make_square(7, 7): Color.DARK,
}


class MoveExecutor:
    """Applies legal moves to a position and decides terminal verdicts."""

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    @property
    def position(self) -> Position:
        return self._pos

    def apply(self, move: Move) -> MoveRecord:
        """Apply *move* and return the record appended to the history.

        Raises:
            IllegalMoveError: if the game is over, the origin holds no piece
                of the side to move, or *move* is not among the legal moves
                for its origin. Nothing is mutated in that case.
        """
        pos = self._pos
        board = pos.board
        if pos.game_over:
            raise IllegalMoveError(f"Game is over ({pos.result}); cannot play {move}")

        gen = MoveGenerator(pos)
        legal = gen.legal_moves(move.from_sq)
        if move not in legal:
            raise IllegalMoveError(f"Illegal move: {move}")

        # 1. Snapshot the mover before promotion replaces it.
        piece = board[move.from_sq]
        assert piece is not None
        mover = piece.color

        # 2. Other same-kind pieces that could also reach the destination.
        disambiguation = self._disambiguation(gen, move, piece.piece_type)

        # 3. Relocate.
        captured_sq: Square | None = None
        if move.flag == MoveFlag.EN_PASSANT:
            captured_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        elif board[move.to_sq] is not None:
            captured_sq = move.to_sq
        captured = board[captured_sq] if captured_sq is not None else None

        if captured_sq is not None:
            board[captured_sq] = None
        board[move.from_sq] = None
        placed = piece.as_moved()
        if move.flag == MoveFlag.PROMOTION:
            placed = piece.promoted(move.promotion or PieceType.QUEEN)
        board[move.to_sq] = placed

        if move.is_castle:
            rook_from, rook_to = castle_rook_squares(move)
            rook = board[rook_from]
            assert rook is not None
            board[rook_from] = None
            board[rook_to] = rook.as_moved()

        # 4. Castling rights.
        rights = pos.castling
        if piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(mover)
        elif piece.piece_type == PieceType.ROOK and move.from_sq in _ROOK_CORNERS:
            if _CORNER_COLOR[move.from_sq] == mover:
                rights &= ~_ROOK_CORNERS[move.from_sq]
        if (
            captured is not None
            and captured.piece_type == PieceType.ROOK
            and captured_sq in _ROOK_CORNERS
            and _CORNER_COLOR[captured_sq] == captured.color
        ):
            rights &= ~_ROOK_CORNERS[captured_sq]
        pos.castling = rights

        # 5. Captured material, kept in display order.
        if captured is not None:
            bucket = pos.captures[mover]
            bisect.insort(bucket, captured.piece_type, key=CAPTURE_ORDER.index)

        # 6. Record.
        record = MoveRecord(
            from_sq=move.from_sq,
            to_sq=move.to_sq,
            color=mover,
            piece_type=piece.piece_type,
            move_number=pos.ply_count + 1,
            is_capture=captured is not None,
            is_castle=move.is_castle,
            is_en_passant=move.flag == MoveFlag.EN_PASSANT,
            promoted_to=placed.piece_type if move.flag == MoveFlag.PROMOTION else None,
            opponent_in_check=gen.is_in_check(mover.opposite),
            disambiguation=disambiguation,
            captured=captured.piece_type if captured is not None else None,
        )
        pos.move_history.append(record)
        pos.last_move = record

        # 7. Hand the turn over.
        pos.side_to_move = mover.opposite

        # 8. Verdict, before the new signature is recorded.
        self._evaluate_terminal(mover)

        # 9. Signature history.
        pos.signature_history.append(pos.signature())

        _LOGGER.debug("ply %d: %s plays %s", record.move_number, mover, move)
        return record

    def flag_fall(self, color: Color) -> GameResult:
        """Time ran out for *color*.

        The opponent wins on time unless the material on the board cannot
        mate at all, which makes it a draw. No-op once the game is over.
        """
        pos = self._pos
        if pos.game_over:
            return pos.result
        if Rules.is_insufficient_material(pos):
            self._finish(GameResult.INSUFFICIENT_MATERIAL, None)
        else:
            self._finish(GameResult.TIMEOUT, color.opposite)
        return pos.result

    # ── Internal ─────────────────────────────────────────────────────────

    def _disambiguation(
        self, gen: MoveGenerator, move: Move, piece_type: PieceType
    ) -> tuple[Square, ...]:
        if piece_type in (PieceType.PAWN, PieceType.KING):
            return ()
        color = self._pos.side_to_move
        others: list[Square] = []
        for sq in self._pos.board.pieces(color, piece_type):
            if sq == move.from_sq:
                continue
            if any(m.to_sq == move.to_sq for m in gen.legal_moves_for(sq)):
                others.append(sq)
        return tuple(others)

    def _evaluate_terminal(self, mover: Color) -> None:
        pos = self._pos
        defender = pos.side_to_move
        if Rules.is_checkmate(pos, defender):
            self._finish(GameResult.CHECKMATE, mover)
        elif Rules.is_threefold_repetition(pos):
            self._finish(GameResult.REPETITION, None)
        elif Rules.is_stalemate(pos, defender):
            self._finish(GameResult.STALEMATE, None)
        elif Rules.is_insufficient_material(pos):
            self._finish(GameResult.INSUFFICIENT_MATERIAL, None)

    def _finish(self, result: GameResult, winner: Color | None) -> None:
        self._pos.result = result
        self._pos.winner = winner
        _LOGGER.info(
            "game over: %s (winner: %s)", result, "none" if winner is None else winner
        )
