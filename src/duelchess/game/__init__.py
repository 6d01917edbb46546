"""Game layer: orchestration, clock, callbacks and peer sync.

Quick start::

    from duelchess.core import parse_square
    from duelchess.game import GameController

    ctrl = GameController()
    ctrl.events.on_game_ended.append(print)
    ctrl.submit_move(parse_square("e2"), parse_square("e4"))
    payload = ctrl.snapshot()
"""

from duelchess.game.clock import Clock
from duelchess.game.controller import GameController
from duelchess.game.events import GameEvents
from duelchess.game.interfaces import GamePhase, IClock, IGameController, TimeControl
from duelchess.game.settings import GameSettings
from duelchess.game.sync import (
    MoveRecordSchema,
    SyncPayload,
    deserialize,
    replay,
    restore,
    serialize,
)

__all__ = [
    # Interfaces
    "GamePhase",
    "IClock",
    "IGameController",
    "TimeControl",
    # Concrete
    "Clock",
    "GameController",
    "GameEvents",
    "GameSettings",
    # Sync
    "MoveRecordSchema",
    "SyncPayload",
    "deserialize",
    "replay",
    "restore",
    "serialize",
]
