from duel.logic import room as room_logic
from duel.logic.clock import TurnClock
from duel.logic.settings import TimingSettings
from duel.logic.views import room_view
from duel.tests.helpers.builders import T0, at, make_room, playing_room

TIMING = TimingSettings()


class TestRoomView:
    def test_password_never_serialized(self):
        view = room_view(make_room(password="s3cret"), "alice", T0, TIMING)
        assert "password" not in view
        assert view["hasPassword"] is True

    def test_camel_case_fields(self):
        view = room_view(make_room(), "alice", T0, TIMING)
        assert view["digitCount"] == 4
        assert view["isPublic"] is True
        assert view["createdBy"] == "alice"
        assert view["status"] == "waiting"

    def test_viewer_sees_only_own_secret(self):
        view = room_view(playing_room(("1234", "5678")), "bob", T0, TIMING)
        assert [p["secretNumber"] for p in view["players"]] == [None, "5678"]

    def test_anonymous_viewer_sees_no_secrets(self):
        view = room_view(playing_room(), None, T0, TIMING)
        assert all(p["secretNumber"] is None for p in view["players"])

    def test_secrets_revealed_after_finish(self):
        room = room_logic.guess(playing_room(("1234", "5671")), "alice", "5671", TurnClock(), at(1)).room
        view = room_view(room, None, at(2), TIMING)
        assert [p["secretNumber"] for p in view["players"]] == ["1234", "5671"]
        assert view["winner"] == "alice"

    def test_turn_countdown_rounds_up(self):
        view = room_view(playing_room(now=T0), "alice", at(10.2), TIMING)
        assert view["turnSecondsRemaining"] == 20

    def test_no_countdown_while_waiting(self):
        assert room_view(make_room(), "alice", T0, TIMING)["turnSecondsRemaining"] is None

    def test_cleanup_status_included(self):
        view = room_view(make_room(now=T0), "alice", at(290), TIMING)
        assert view["cleanup"] == {"warning": True, "secondsRemaining": 10}

    def test_source_room_not_mutated(self):
        room = playing_room()
        room_view(room, None, T0, TIMING)
        assert room.players[0].secret_number == "1234"
