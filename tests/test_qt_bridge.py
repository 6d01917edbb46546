"""Tests for the Qt signal adapter and clock driver."""

from __future__ import annotations

import time

from PyQt6.QtTest import QSignalSpy

from duelchess.core.enums import Color, GameResult
from duelchess.core.types import E2, E4, parse_square
from duelchess.game.controller import GameController
from duelchess.game.settings import GameSettings
from duelchess.qt_bridge import ClockDriver, GameSignals


class TestGameSignals:
    def test_move_and_turn_forwarded(self) -> None:
        ctrl = GameController()
        signals = GameSignals(ctrl)
        moves = QSignalSpy(signals.move_applied)
        turns = QSignalSpy(signals.turn_changed)

        record = ctrl.submit_move(E2, E4)

        assert len(moves) == 1
        assert moves[0][0] == record
        assert moves[0][1] == Color.DARK
        assert not moves[0][2]
        assert len(turns) == 1
        assert turns[0][0] == Color.DARK

    def test_game_end_forwarded(self) -> None:
        ctrl = GameController()
        signals = GameSignals(ctrl)
        ended = QSignalSpy(signals.game_ended)

        ctrl.time_expired(Color.DARK)

        assert len(ended) == 1
        assert ended[0][0] == GameResult.TIMEOUT
        assert ended[0][1] == Color.LIGHT

    def test_reset_forwarded(self) -> None:
        ctrl = GameController()
        signals = GameSignals(ctrl)
        resets = QSignalSpy(signals.game_reset)
        ctrl.reset()
        assert len(resets) == 1


class TestClockDriver:
    def test_idle_poll_emits_nothing(self, qapp: object) -> None:
        ctrl = GameController()
        driver = ClockDriver(ctrl)
        ticks = QSignalSpy(driver.tick)
        driver.poll()
        assert len(ticks) == 0

    def test_tick_reports_running_side(self, qapp: object) -> None:
        ctrl = GameController()
        driver = ClockDriver(ctrl)
        ticks = QSignalSpy(driver.tick)
        ctrl.submit_move(E2, E4)
        driver.poll()
        assert len(ticks) == 1
        assert ticks[0][0] == Color.DARK
        assert 0 < ticks[0][1] <= 600_000

    def test_flag_fall_ends_game(self, qapp: object) -> None:
        ctrl = GameController(GameSettings(initial_clock_ms=20, tick_interval_ms=5))
        driver = ClockDriver(ctrl)
        signals = GameSignals(ctrl)
        ended = QSignalSpy(signals.game_ended)
        driver.start()
        ctrl.submit_move(E2, E4)
        time.sleep(0.05)
        driver.poll()
        assert ctrl.position.result == GameResult.TIMEOUT
        assert ctrl.position.winner == Color.LIGHT
        assert len(ended) == 1
        assert not driver.is_active

    def test_interval_from_settings(self, qapp: object) -> None:
        ctrl = GameController(GameSettings(tick_interval_ms=250))
        driver = ClockDriver(ctrl)
        driver.start()
        assert driver.is_active
        driver.stop()
        assert not driver.is_active
        assert ctrl.submit_move(parse_square("g1"), parse_square("f3")) is not None
