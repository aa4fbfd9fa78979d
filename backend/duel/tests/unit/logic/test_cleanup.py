import pytest

from duel.logic import room as room_logic
from duel.logic.cleanup import cleanup_status, should_delete
from duel.logic.clock import TurnClock
from duel.logic.settings import TimingSettings
from duel.tests.helpers.builders import T0, at, make_room, playing_room

TIMING = TimingSettings()


def _finished_room(finished_at):
    room = playing_room(("1234", "5671"))
    return room_logic.guess(room, "alice", "5671", TurnClock(), finished_at).room


class TestShouldDelete:
    @pytest.mark.parametrize(("age", "expected"), [(299, False), (300, False), (301, True)])
    def test_waiting_threshold(self, age, expected):
        assert should_delete(make_room(now=T0), at(age), TIMING) is expected

    @pytest.mark.parametrize(("age", "expected"), [(599, False), (600, False), (601, True)])
    def test_playing_threshold(self, age, expected):
        assert should_delete(playing_room(now=T0), at(age), TIMING) is expected

    @pytest.mark.parametrize(("age", "expected"), [(29, False), (30, False), (31, True)])
    def test_finished_threshold_measured_from_finish(self, age, expected):
        room = _finished_room(at(1000))
        assert should_delete(room, at(1000 + age), TIMING) is expected

    def test_finished_room_ignores_playing_threshold(self):
        room = _finished_room(at(5))
        assert should_delete(room, at(40), TIMING)

    def test_custom_timing(self):
        timing = TimingSettings(waiting_ttl_seconds=10)
        assert should_delete(make_room(now=T0), at(11), timing)


class TestCleanupStatus:
    def test_no_warning_while_fresh(self):
        status = cleanup_status(make_room(now=T0), at(60), TIMING)
        assert status.warning is False
        assert status.seconds_remaining == 240

    def test_warning_inside_window(self):
        status = cleanup_status(make_room(now=T0), at(280.5), TIMING)
        assert status.warning is True
        assert status.seconds_remaining == 19

    def test_no_warning_once_overdue(self):
        status = cleanup_status(make_room(now=T0), at(400), TIMING)
        assert status.warning is False
        assert status.seconds_remaining == 0

    def test_finished_room_warns_after_fifteen_seconds(self):
        room = _finished_room(T0)
        assert cleanup_status(room, at(14), TIMING).warning is False
        assert cleanup_status(room, at(16), TIMING).warning is True
