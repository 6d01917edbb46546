"""Exception taxonomy for the rules engine and its sync boundary."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by duelchess."""


class IllegalMoveError(ChessError, ValueError):
    """A move was submitted that is not in the current legal set.

    This is a caller bug: moves must be sourced from
    :meth:`MoveGenerator.legal_moves` for the same position.
    """


class InvalidStateError(ChessError, ValueError):
    """A peer payload is malformed or does not replay to a legal game.

    Recoverable: the payload is rejected and local state is kept.
    """
