"""Qt bridge: re-emit controller events as signals and drive the clock."""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer, pyqtSignal, pyqtSlot

from duelchess.core.enums import Color, GameResult
from duelchess.core.move import MoveRecord
from duelchess.game.controller import GameController


class GameSignals(QObject):
    """Forwards :class:`GameEvents` callbacks to Qt signals."""

    move_applied = pyqtSignal(object, object, bool)
    turn_changed = pyqtSignal(object)
    game_ended = pyqtSignal(object, object)
    game_reset = pyqtSignal()

    def __init__(self, controller: GameController, parent: QObject | None = None) -> None:
        super().__init__(parent)
        events = controller.events
        events.on_move_applied.append(self._forward_move)
        events.on_turn_changed.append(self._forward_turn)
        events.on_game_ended.append(self._forward_end)
        events.on_game_reset.append(self.game_reset.emit)

    def _forward_move(self, record: MoveRecord, to_move: Color, is_check: bool) -> None:
        self.move_applied.emit(record, to_move, is_check)

    def _forward_turn(self, color: Color) -> None:
        self.turn_changed.emit(color)

    def _forward_end(self, result: GameResult, winner: Color | None) -> None:
        self.game_ended.emit(result, winner)


class ClockDriver(QObject):
    """Polls the controller's clock from a ``QTimer``.

    Emits ``tick(color, remaining_ms)`` for the running side and ends the
    game through the controller once that side's flag falls.
    """

    tick = pyqtSignal(object, int)

    __slots__ = ("_controller", "_timer")

    def __init__(self, controller: GameController, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._timer = QTimer(self)
        self._timer.setInterval(controller.settings.tick_interval_ms)
        self._timer.timeout.connect(self.poll)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    @pyqtSlot()
    def poll(self) -> None:
        """Emit the running side's time; stop the timer once the game ends."""
        controller = self._controller
        clock = controller.clock
        color = clock.active_color
        if clock.is_running and color is not None:
            self.tick.emit(color, clock.remaining(color))
            controller.poll_clock()
        if controller.is_game_over:
            self._timer.stop()
