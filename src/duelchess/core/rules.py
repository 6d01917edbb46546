"""High-level chess rules: check, checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from duelchess.core.enums import Color, PieceType
from duelchess.core.move_generator import MoveGenerator
from duelchess.core.types import Square, is_light_square

if TYPE_CHECKING:
    from duelchess.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Draw policy: threefold repetition, stalemate and insufficient material
    all end the game immediately; there is no claim step and no move-count
    rule.
    """

    @staticmethod
    def is_square_attacked(position: Position, sq: Square, by_color: Color) -> bool:
        return MoveGenerator(position).is_square_attacked(sq, by_color)

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        if color is None:
            color = position.side_to_move
        return MoveGenerator(position).is_in_check(color)

    @staticmethod
    def has_any_legal_move(position: Position, color: Color | None = None) -> bool:
        if color is None:
            color = position.side_to_move
        return MoveGenerator(position).has_any_legal_move(color)

    @staticmethod
    def is_checkmate(position: Position, color: Color | None = None) -> bool:
        if color is None:
            color = position.side_to_move
        gen = MoveGenerator(position)
        return gen.is_in_check(color) and not gen.has_any_legal_move(color)

    @staticmethod
    def is_stalemate(position: Position, color: Color | None = None) -> bool:
        if color is None:
            color = position.side_to_move
        gen = MoveGenerator(position)
        return not gen.is_in_check(color) and not gen.has_any_legal_move(color)

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        """Whether the current position has occurred three times.

        Safe to ask on either side of the signature append: while the
        executor is still deciding the verdict, the current signature is not
        in the history yet and is counted here.
        """
        count = position.occurrences()
        if len(position.signature_history) == position.ply_count:
            count += 1
        return count >= 3

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """Neither side can force mate, regardless of who is to move.

        Insufficient: K v K, K v K+N, K v K+B, K+B v K+B with bishops on the
        same square color, knights-only on both sides, K+N v K+B.
        K+B+N v K and K+B+B (opposite colors) v K keep mating potential.
        """
        board = position.board
        light: list[tuple[PieceType, Square]] = []
        dark: list[tuple[PieceType, Square]] = []
        for sq, piece in board.occupied():
            if piece.piece_type == PieceType.KING:
                continue
            (light if piece.color == Color.LIGHT else dark).append(
                (piece.piece_type, sq)
            )

        light_types = sorted(pt for pt, _ in light)
        dark_types = sorted(pt for pt, _ in dark)
        minors = ([PieceType.KNIGHT], [PieceType.BISHOP])

        # K v K
        if not light and not dark:
            return True

        # K v K+minor
        if not light and dark_types in minors:
            return True
        if not dark and light_types in minors:
            return True

        # K+B v K+B, bishops on the same square color
        if light_types == [PieceType.BISHOP] and dark_types == [PieceType.BISHOP]:
            return is_light_square(light[0][1]) == is_light_square(dark[0][1])

        # Knights only, both sides
        if (
            light
            and dark
            and all(pt == PieceType.KNIGHT for pt in light_types)
            and all(pt == PieceType.KNIGHT for pt in dark_types)
        ):
            return True

        # K+N v K+B
        if sorted((light_types, dark_types)) == [
            [PieceType.KNIGHT],
            [PieceType.BISHOP],
        ]:
            return True

        return False
