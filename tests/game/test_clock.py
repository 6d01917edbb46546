"""Tests for Clock."""

import time

import pytest

from duelchess.core.enums import Color
from duelchess.game.clock import Clock
from duelchess.game.interfaces import TimeControl


class TestClockBasics:
    def test_initial_remaining(self) -> None:
        clock = Clock(TimeControl(300_000))
        assert clock.remaining(Color.LIGHT) == 300_000
        assert clock.remaining(Color.DARK) == 300_000

    def test_not_running_initially(self) -> None:
        clock = Clock(TimeControl(300_000))
        assert not clock.is_running
        assert clock.active_color is None

    def test_start_sets_running(self) -> None:
        clock = Clock(TimeControl(300_000))
        clock.start(Color.LIGHT)
        assert clock.is_running
        assert clock.active_color == Color.LIGHT

    def test_stop_pauses(self) -> None:
        clock = Clock(TimeControl(300_000))
        clock.start(Color.LIGHT)
        clock.stop()
        frozen = clock.remaining(Color.LIGHT)
        time.sleep(0.02)
        assert not clock.is_running
        assert clock.remaining(Color.LIGHT) == frozen

    def test_time_decreases(self) -> None:
        clock = Clock(TimeControl(300_000))
        clock.start(Color.LIGHT)
        time.sleep(0.05)
        assert clock.remaining(Color.LIGHT) < 300_000
        assert clock.remaining(Color.DARK) == 300_000


class TestClockEditing:
    def test_set_remaining(self) -> None:
        clock = Clock(TimeControl(300_000))
        clock.set_remaining(Color.DARK, 42_000)
        assert clock.remaining(Color.DARK) == 42_000
        assert clock.remaining(Color.LIGHT) == 300_000

    def test_reset_refills(self) -> None:
        clock = Clock(TimeControl(300_000))
        clock.set_remaining(Color.LIGHT, 1)
        clock.start(Color.LIGHT)
        clock.reset()
        assert not clock.is_running
        assert clock.remaining(Color.LIGHT) == 300_000

    def test_negative_time_control_rejected(self) -> None:
        with pytest.raises(ValueError):
            TimeControl(-1)


class TestClockIncrement:
    def test_fischer_increment(self) -> None:
        clock = Clock(TimeControl(300_000, 5_000))
        clock.start(Color.LIGHT)
        clock.stop()
        clock.add_increment(Color.LIGHT)
        assert clock.remaining(Color.LIGHT) > 304_000

    def test_increment_adds_up(self) -> None:
        clock = Clock(TimeControl(10_000, 2_000))
        clock.add_increment(Color.LIGHT)
        clock.add_increment(Color.LIGHT)
        assert clock.remaining(Color.LIGHT) == 14_000


class TestClockFlagFall:
    def test_flag_not_fallen_initially(self) -> None:
        clock = Clock(TimeControl(300_000))
        assert not clock.is_flag_fallen(Color.LIGHT)

    def test_flag_falls_at_zero(self) -> None:
        clock = Clock(TimeControl(10))
        clock.start(Color.LIGHT)
        time.sleep(0.03)
        assert clock.is_flag_fallen(Color.LIGHT)
        assert not clock.is_flag_fallen(Color.DARK)
        assert clock.remaining(Color.LIGHT) == 0


class TestPresets:
    def test_values(self) -> None:
        assert TimeControl.blitz_3m2s().initial_ms == 180_000
        assert TimeControl.blitz_3m2s().increment_ms == 2_000
        assert TimeControl.rapid_10m().initial_ms == 600_000

    def test_repr(self) -> None:
        assert repr(TimeControl.rapid_15m10s()) == "TimeControl(15m+10s)"
        assert repr(TimeControl.blitz_5m()) == "TimeControl(5m)"
