# Area: Game Tests
"""Tests for inbound messages, player actions and lobby bank management."""

import json
from unittest.mock import Mock

from quiz_round._game.messages import build_action
from quiz_round._game.state import Phase


def send(game, connection_id, action, *args):
    return game.router.dispatch("onMessage", build_action(action, *args), connection_id)


class TestOnConnect:
    """Tests for onConnect."""

    def test_new_connection_gets_full_state(self, game):
        conn = Mock()
        conn.id = "c1"
        game.router.dispatch("onConnect", conn)
        conn.send.assert_called_once()
        message = json.loads(conn.send.call_args[0][0])
        assert message["type"] == "update"
        assert message["data"]["phase"] == "lobby"
        assert message["data"]["roomId"] == "room-1"
        assert len(message["data"]["questions"]) == 3

    def test_connect_does_not_mutate_state(self, game, store, scheduler):
        handler = Mock()
        store.on_change(handler)
        conn = Mock()
        game.router.dispatch("onConnect", conn)
        scheduler.flush()
        handler.assert_not_called()


class TestOnMessage:
    """Tests for parsing and dispatching wire messages."""

    def test_join_over_the_wire(self, game):
        send(game, "c1", "joinAsPlayer", "p1", "ANA")
        assert game.state["players"]["p1"]["name"] == "ANA"
        assert game.state["connections"]["c1"] == "p1"

    def test_malformed_message_is_dropped(self, game, store):
        """Test that malformed input leaves state untouched and raises nothing."""
        before = store.snapshot()
        for raw in ["garbage", '{"type": "action"}', b"\xff\xfe", {"type": "update"}]:
            assert game.router.dispatch("onMessage", raw, "c1") is None
        assert store.snapshot() == before

    def test_unknown_action_is_noop(self, game, store):
        before = store.snapshot()
        send(game, "c1", "launchRocket", 1, 2)
        assert store.snapshot() == before

    def test_transport_actions_not_accepted_from_wire(self, game, join):
        join("p1")
        send(game, "conn-p2", "onClose", "conn-p1")
        assert "p1" in game.state["players"]
        assert game.state["connections"]["conn-p1"] == "p1"

    def test_bad_arguments_dropped(self, game):
        send(game, "c1", "joinAsPlayer", "p1", "ANA", "fox", "extra")
        send(game, "c1", "startGame", "now")
        assert game.state["players"] == {}
        assert game.phase is Phase.LOBBY

    def test_non_string_name_ignored(self, game):
        send(game, "c1", "joinAsPlayer", "p1", 42)
        assert game.state["players"] == {}

    def test_start_game_over_the_wire(self, game):
        send(game, "admin", "startGame")
        assert game.phase is Phase.PRE_QUESTIONING

    def test_select_option_uses_sender(self, game, join, run_until):
        join("p1")
        send(game, "admin", "startGame")
        run_until(game, Phase.SHOWING_OPTIONS)
        send(game, "conn-p1", "selectOption", "Paris")
        assert game.state["rounds"][0]["chosenOptions"] == {"p1": "Paris"}

    def test_select_option_cannot_vote_for_another_player(self, game, join, run_until):
        """Test that a player id in the message never overrides the sender's player."""
        join("a")
        join("b")
        send(game, "admin", "startGame")
        run_until(game, Phase.SHOWING_OPTIONS)
        send(game, "conn-a", "selectOption", "Paris")
        send(game, "conn-b", "selectOption", "Lyon", "a")
        assert game.state["rounds"][0]["chosenOptions"] == {"a": "Paris", "b": "Lyon"}

    def test_select_option_from_unbound_connection_ignored(self, game, join, run_until):
        join("a")
        send(game, "admin", "startGame")
        run_until(game, Phase.SHOWING_OPTIONS)
        send(game, "stranger", "selectOption", "Lyon", "a")
        assert game.state["rounds"][0]["chosenOptions"] == {}

    def test_action_of_other_phase_ignored(self, game, join):
        join("p1")
        send(game, "conn-p1", "selectOption", "Paris")
        send(game, "admin", "nextRound")
        assert game.phase is Phase.TRANSITIONING_NEXT_ROUND


class TestPlayers:
    """Tests for joinAsPlayer, changeProfile and onClose."""

    def test_join_uses_connection_id_when_no_player_id(self, game):
        game.router.dispatch("joinAsPlayer", None, "ANA", connection_id="c7")
        assert game.state["players"]["c7"]["name"] == "ANA"

    def test_join_truncates_name(self, game):
        send(game, "c1", "joinAsPlayer", "p1", "N" * 50)
        assert game.state["players"]["p1"]["name"] == "N" * 20

    def test_join_allowed_mid_game(self, game, run_until):
        send(game, "admin", "startGame")
        run_until(game, Phase.SHOWING_OPTIONS)
        send(game, "c1", "joinAsPlayer", "late", "LATE")
        assert "late" in game.state["players"]

    def test_rejoin_keeps_points(self, game, join):
        join("p1", "ANA")
        game.state["players"]["p1"]["points"] = 20
        send(game, "tab-2", "joinAsPlayer", "p1", "ANNA")
        player = game.state["players"]["p1"]
        assert player["name"] == "ANNA"
        assert player["points"] == 20

    def test_change_profile(self, game, join):
        join("p1", "ANA")
        send(game, "conn-p1", "changeProfile", None, "BEA", "owl")
        player = game.state["players"]["p1"]
        assert player["name"] == "BEA"
        assert player["avatar"] == "owl"

    def test_change_profile_creates_unknown_player(self, game):
        send(game, "c9", "changeProfile", None, "NEW")
        assert game.state["players"]["c9"]["name"] == "NEW"

    def test_change_profile_without_changes(self, game, join):
        join("p1", "ANA")
        before = game.state["players"]["p1"].snapshot()
        send(game, "conn-p1", "changeProfile")
        assert game.state["players"]["p1"] == before

    def test_change_profile_cannot_rename_another_player(self, game, join):
        join("a", "ANA")
        join("b", "BEA")
        send(game, "conn-b", "changeProfile", "a", "EVE")
        assert game.state["players"]["a"]["name"] == "ANA"
        assert game.state["players"]["b"]["name"] == "EVE"

    def test_rejoin_under_new_id_drops_old_player(self, game):
        """Test that switching player id on one connection leaves no orphan."""
        send(game, "c1", "joinAsPlayer", "x", "XAVI")
        send(game, "c1", "joinAsPlayer", "y", "YARA")
        assert set(game.state["players"]) == {"y"}
        assert game.state["connections"] == {"c1": "y"}
        game.router.dispatch("onClose", "c1")
        assert game.state["players"] == {}

    def test_rejoin_under_new_id_keeps_player_with_other_connection(self, game):
        send(game, "c1", "joinAsPlayer", "x", "XAVI")
        send(game, "c2", "joinAsPlayer", "x", "XAVI")
        send(game, "c1", "joinAsPlayer", "y", "YARA")
        assert set(game.state["players"]) == {"x", "y"}
        assert game.state["connections"] == {"c1": "y", "c2": "x"}

    def test_close_last_connection_removes_player(self, game, join):
        join("p1")
        game.router.dispatch("onClose", "conn-p1")
        assert "p1" not in game.state["players"]
        assert "conn-p1" not in game.state["connections"]

    def test_player_with_two_connections(self, game, join):
        """Test that a player survives until its last connection closes."""
        join("p1")
        send(game, "tab-2", "joinAsPlayer", "p1", "P1")
        game.router.dispatch("onClose", "conn-p1")
        assert "p1" in game.state["players"]
        game.router.dispatch("onClose", "tab-2")
        assert "p1" not in game.state["players"]

    def test_close_unknown_connection(self, game, join):
        join("p1")
        game.router.dispatch("onClose", "stranger")
        assert "p1" in game.state["players"]


class TestQuestionBank:
    """Tests for the lobby-only question bank actions."""

    def test_add_questions_returns_accepted_count(self, game, questions):
        game.clear_questions()
        bad = {"id": "bad", "text": "Broken", "options": ["a"], "answer": "b"}
        assert game.add_questions([questions[0], bad, "nope", questions[1]]) == 2
        assert [q["id"] for q in game.state["questions"]] == ["q1", "q2"]

    def test_add_questions_replaces_same_id(self, game, questions):
        updated = dict(questions[0], text="Capital of France")
        assert game.add_questions([updated]) == 1
        bank = game.state["questions"]
        assert len(bank) == 3
        assert bank[0]["text"] == "Capital of France"

    def test_add_questions_requires_list(self, game):
        assert game.add_questions({"id": "q9"}) == 0
        assert len(game.state["questions"]) == 3

    def test_add_questions_over_the_wire(self, game):
        question = {"id": "q4", "text": "Two plus two", "options": ["3", "4"], "answer": "4"}
        send(game, "admin", "addQuestions", [question])
        assert game.state["questions"][-1]["id"] == "q4"

    def test_bank_actions_only_in_lobby(self, game):
        """Test that bank edits after startGame are ignored."""
        question = {"id": "q4", "text": "Two plus two", "options": ["3", "4"], "answer": "4"}
        send(game, "admin", "startGame")
        send(game, "admin", "addQuestions", [question])
        send(game, "admin", "removeQuestion", "q1")
        send(game, "admin", "clearQuestions")
        send(game, "admin", "updateSettings", {"language": "British"})
        assert [q["id"] for q in game.state["questions"]] == ["q1", "q2", "q3"]
        assert game.state["settings"]["language"] == "American"

    def test_remove_question(self, game):
        send(game, "admin", "removeQuestion", "q2")
        assert [q["id"] for q in game.state["questions"]] == ["q1", "q3"]
        send(game, "admin", "removeQuestion", "q2")
        assert len(game.state["questions"]) == 2

    def test_clear_questions(self, game):
        send(game, "admin", "clearQuestions")
        assert game.state["questions"] == []

    def test_restart_uses_current_bank(self, game):
        send(game, "admin", "startGame")
        send(game, "admin", "resetGame")
        send(game, "admin", "removeQuestion", "q1")
        send(game, "admin", "startGame")
        assert [r["questionId"] for r in game.state["rounds"]] == ["q2", "q3"]


class TestSettings:
    """Tests for updateSettings."""

    def test_defaults(self, game):
        assert game.state["settings"] == {
            "language": "American",
            "voiceId": "Daniel",
            "ttsProvider": "unrealspeech",
        }

    def test_update_known_keys_only(self, game):
        send(game, "admin", "updateSettings", {"language": "British", "bogus": "x", "voiceId": 5})
        settings = game.state["settings"]
        assert settings["language"] == "British"
        assert settings["voiceId"] == "Daniel"
        assert "bogus" not in settings

    def test_update_requires_object(self, game):
        send(game, "admin", "updateSettings", "British")
        assert game.state["settings"]["language"] == "American"
