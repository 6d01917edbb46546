"""duelchess — a two-player chess rules engine with a replayable move log."""

__version__ = "0.1.0"
