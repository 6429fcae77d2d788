# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Tests for the match engine command interface."""

import threading

import pytest

from conftest import BLUE_NAMES, YELLOW_NAMES, fill_rosters, fixed_clock
from kickabout.engine.errors import (
    DuplicateNameError,
    EmptyLogError,
    InactiveMatchError,
    InvalidAssistantError,
    InvalidNameError,
    MatchError,
    NotFoundError,
    NotReadyError,
    RosterFullError,
    RosterLockedError,
    UnknownScorerError,
    UnknownTeamError,
)
from kickabout.engine.match_engine import MatchEngine, Scoreboard
from kickabout.models.player import DirectoryPlayer


def _state(engine: MatchEngine) -> dict:
    """Capture comparable state.

    Parameters
    ----------
    engine : MatchEngine
        Engine to capture.

    Returns
    -------
    dict
        Snapshot as plain data.
    """
    return engine.snapshot().as_dict()


def _assert_score_matches_log(engine: MatchEngine) -> None:
    """Check the derived scores against the action log.

    Parameters
    ----------
    engine : MatchEngine
        Engine to check.
    """
    for team in ("yellow", "blue"):
        assert engine.score(team) == sum(1 for a in engine.actions if a.team == team)


class TestRosterSetup:
    """Adding and removing players before kick-off."""

    def test_add_player_assigns_match_ids(self, engine: MatchEngine) -> None:
        """Ids are unique across both teams and prefixed with the team."""
        a = engine.add_player("yellow", "Adam S.")
        b = engine.add_player("blue", "Adam S.")
        assert a.player_id.startswith("yellow_")
        assert b.player_id.startswith("blue_")
        assert a.player_id != b.player_id

    def test_duplicate_name_on_same_roster(self, engine: MatchEngine) -> None:
        """The second identical add fails with DuplicateName."""
        engine.add_player("yellow", "Adam S.")
        with pytest.raises(DuplicateNameError) as exc_info:
            engine.add_player("yellow", "Adam S.")
        assert exc_info.value.code == "DuplicateName"
        assert len(engine.roster("yellow")) == 1

    def test_name_is_trimmed(self, engine: MatchEngine) -> None:
        """Surrounding whitespace does not create a distinct name."""
        engine.add_player("yellow", "Adam S.")
        with pytest.raises(DuplicateNameError):
            engine.add_player("yellow", "  Adam S. ")

    def test_blank_name_rejected(self, engine: MatchEngine) -> None:
        """Empty names are refused."""
        with pytest.raises(InvalidNameError):
            engine.add_player("blue", "  ")

    def test_unknown_team(self, engine: MatchEngine) -> None:
        """Only the configured teams exist."""
        with pytest.raises(UnknownTeamError) as exc_info:
            engine.add_player("red", "Adam S.")
        assert exc_info.value.code == "UnknownTeam"

    def test_roster_full(self, engine: MatchEngine) -> None:
        """The ninth player is rejected."""
        for i in range(8):
            engine.add_player("blue", f"P{i}")
        with pytest.raises(RosterFullError):
            engine.add_player("blue", "P8")
        assert len(engine.roster("blue")) == 8

    def test_remove_player(self, engine: MatchEngine) -> None:
        """Removal by id during setup."""
        player = engine.add_player("yellow", "Adam S.")
        engine.remove_player("yellow", player.player_id)
        assert engine.roster("yellow") == []
        with pytest.raises(NotFoundError):
            engine.remove_player("yellow", player.player_id)

    def test_remove_locked_once_active(self, live_engine: MatchEngine) -> None:
        """Membership is frozen while the match is active."""
        pid = live_engine.roster("yellow")[0].player_id
        with pytest.raises(RosterLockedError):
            live_engine.remove_player("yellow", pid)
        assert len(live_engine.roster("yellow")) == 5

    def test_add_allowed_while_active(self, live_engine: MatchEngine) -> None:
        """Late arrivals can still join."""
        live_engine.add_player("blue", "Spóźniony")
        assert len(live_engine.roster("blue")) == 6

    def test_available_for_selection(self, engine: MatchEngine) -> None:
        """Picked names disappear from the picker, order is kept."""
        entries = [DirectoryPlayer(1, "A"), DirectoryPlayer(2, "B"), DirectoryPlayer(3, "C")]
        engine.add_player("blue", "B", directory_id=2)
        assert [e.name for e in engine.available_for_selection(entries)] == ["A", "C"]
        assert engine.roster("blue")[0].directory_id == 2


class TestRosterGating:
    """Kick-off requires 5 to 8 players per side."""

    @pytest.mark.parametrize(
        "yellow,blue,ok",
        [(4, 5, False), (5, 4, False), (5, 5, True), (8, 8, True), (5, 8, True), (0, 0, False)],
    )
    def test_start_match_limits(self, engine: MatchEngine, yellow: int, blue: int, ok: bool) -> None:
        """Only sizes in the allowed band can start."""
        fill_rosters(engine, [f"Y{i}" for i in range(yellow)], [f"B{i}" for i in range(blue)])
        assert engine.can_start() is ok
        if ok:
            engine.start_match()
            assert engine.phase == "active"
        else:
            with pytest.raises(NotReadyError):
                engine.start_match()
            assert engine.phase == "setup"

    def test_nine_players_never_allowed(self, engine: MatchEngine) -> None:
        """The add guard keeps a roster from ever reaching nine."""
        fill_rosters(engine, [f"Y{i}" for i in range(8)], [f"B{i}" for i in range(5)])
        with pytest.raises(RosterFullError):
            engine.add_player("yellow", "Y8")
        engine.start_match()

    def test_start_twice(self, live_engine: MatchEngine) -> None:
        """Starting an active match is refused."""
        with pytest.raises(NotReadyError):
            live_engine.start_match()


class TestScoring:
    """Goals, own goals and their effect on tallies."""

    def test_goal_requires_active_phase(self, engine: MatchEngine) -> None:
        """Scoring in setup raises InactiveMatch."""
        fill_rosters(engine)
        with pytest.raises(InactiveMatchError):
            engine.record_goal("yellow", "Marcin P.")
        with pytest.raises(InactiveMatchError):
            engine.record_own_goal("blue")
        assert engine.actions == []

    def test_stat_attribution(self, engine: MatchEngine) -> None:
        """Scorer and assistant are credited, nobody else changes."""
        fill_rosters(engine, ["Y1", "Y2", "Y3", "Y4", "Y5"], ["Marcin P.", "Adam T.", "B3", "B4", "B5"])
        engine.start_match()
        before = {p.name: (p.goals, p.assists) for p in engine.snapshot().all_players()}

        action = engine.record_goal("blue", "Marcin P.", "Adam T.")

        after = {p.name: (p.goals, p.assists) for p in engine.snapshot().all_players()}
        assert after["Marcin P."] == (1, 0)
        assert after["Adam T."] == (0, 1)
        for name in before:
            if name not in ("Marcin P.", "Adam T."):
                assert after[name] == before[name]
        assert engine.actions == [action]
        assert (action.scorer, action.assistant, action.action_type) == ("Marcin P.", "Adam T.", "goal")
        assert action.timestamp == "18:30"
        assert engine.score("blue") == 1

    def test_unknown_scorer(self, live_engine: MatchEngine) -> None:
        """Scorer must be on the credited team's roster."""
        with pytest.raises(UnknownScorerError):
            live_engine.record_goal("yellow", BLUE_NAMES[0])
        assert live_engine.actions == []

    def test_invalid_assistant(self, live_engine: MatchEngine) -> None:
        """Assistant must be a different player from the same roster."""
        with pytest.raises(InvalidAssistantError):
            live_engine.record_goal("yellow", YELLOW_NAMES[0], YELLOW_NAMES[0])
        with pytest.raises(InvalidAssistantError):
            live_engine.record_goal("yellow", YELLOW_NAMES[0], BLUE_NAMES[0])
        assert live_engine.actions == []
        assert all(p.goals == 0 for p in live_engine.roster("yellow"))

    def test_own_goal_credits_acting_team(self, live_engine: MatchEngine) -> None:
        """Own goals raise the acting team's score and touch no player."""
        action = live_engine.record_own_goal("blue")
        assert action.action_type == "own_goal"
        assert action.scorer == "SAMOBÓJ"
        assert action.assistant is None
        assert live_engine.score("blue") == 1
        assert live_engine.score("yellow") == 0
        assert all(p.goals == 0 and p.assists == 0 for p in live_engine.snapshot().all_players())

    def test_action_ids_are_monotonic(self, live_engine: MatchEngine) -> None:
        """Each action receives a larger id, even after undo."""
        first = live_engine.record_own_goal("yellow")
        live_engine.undo_last()
        second = live_engine.record_own_goal("yellow")
        assert second.action_id > first.action_id

    def test_scoreboard_from_actions(self, live_engine: MatchEngine) -> None:
        """The scoreboard counts log entries per team."""
        live_engine.record_goal("yellow", YELLOW_NAMES[0])
        live_engine.record_own_goal("yellow")
        live_engine.record_goal("blue", BLUE_NAMES[1])
        board = Scoreboard.from_actions(["yellow", "blue"], live_engine.actions)
        assert board.scores == {"yellow": 2, "blue": 1}
        _assert_score_matches_log(live_engine)


class TestPause:
    """Gameplay lock inside the active phase."""

    def test_pause_blocks_scoring(self, live_engine: MatchEngine) -> None:
        """Recording while paused raises InactiveMatch; undo still works."""
        live_engine.record_goal("yellow", YELLOW_NAMES[0])
        live_engine.pause()
        assert live_engine.is_paused
        with pytest.raises(InactiveMatchError):
            live_engine.record_goal("yellow", YELLOW_NAMES[1])
        with pytest.raises(InactiveMatchError):
            live_engine.record_own_goal("yellow")
        live_engine.undo_last()
        live_engine.resume()
        live_engine.record_own_goal("blue")
        assert live_engine.score("blue") == 1

    def test_pause_requires_active(self, engine: MatchEngine) -> None:
        """Pausing during setup is refused."""
        with pytest.raises(InactiveMatchError):
            engine.pause()
        with pytest.raises(InactiveMatchError):
            engine.resume()


class TestUndo:
    """Undo is the exact inverse of recording."""

    def test_undo_empty_log(self, engine: MatchEngine) -> None:
        """Nothing to undo raises EmptyLog."""
        with pytest.raises(EmptyLogError) as exc_info:
            engine.undo_last()
        assert exc_info.value.code == "EmptyLog"

    def test_undo_sequence_restores_state(self, live_engine: MatchEngine) -> None:
        """N operations followed by N undos restore the starting state."""
        live_engine.record_goal("yellow", YELLOW_NAMES[0])
        start = _state(live_engine)

        live_engine.record_goal("yellow", YELLOW_NAMES[1], YELLOW_NAMES[2])
        live_engine.record_own_goal("blue")
        live_engine.record_goal("blue", BLUE_NAMES[0], BLUE_NAMES[1])
        live_engine.record_goal("yellow", YELLOW_NAMES[0], YELLOW_NAMES[1])
        live_engine.record_own_goal("yellow")
        for _ in range(5):
            live_engine.undo_last()
            _assert_score_matches_log(live_engine)

        assert _state(live_engine) == start

    def test_undo_returns_removed_action(self, live_engine: MatchEngine) -> None:
        """The popped action is handed back to the caller."""
        action = live_engine.record_goal("blue", BLUE_NAMES[2], BLUE_NAMES[3])
        assert live_engine.undo_last() == action
        assert live_engine.actions == []


class TestReset:
    """Resetting keeps rosters and clears everything else."""

    def test_reset_is_idempotent(self, live_engine: MatchEngine) -> None:
        """Two resets leave the same state as one."""
        live_engine.record_goal("yellow", YELLOW_NAMES[0], YELLOW_NAMES[1])
        live_engine.record_own_goal("blue")
        live_engine.pause()

        live_engine.reset_match()
        once = _state(live_engine)
        live_engine.reset_match()

        assert _state(live_engine) == once
        assert once["phase"] == "setup"
        assert once["paused"] is False
        assert once["scores"] == {"yellow": 0, "blue": 0}
        assert once["actions"] == []
        assert [p["name"] for p in once["rosters"]["yellow"]] == YELLOW_NAMES
        assert all(p["goals"] == 0 and p["assists"] == 0 for team in once["rosters"].values() for p in team)

    def test_can_restart_after_reset(self, live_engine: MatchEngine) -> None:
        """The same rosters can kick off again."""
        live_engine.reset_match()
        live_engine.start_match()
        assert live_engine.phase == "active"


class TestEndToEnd:
    """A short match from kick-off to export."""

    def test_scenario(self, live_engine: MatchEngine) -> None:
        """Goal, own goal, undo, equaliser, export."""
        live_engine.record_goal("yellow", YELLOW_NAMES[0], YELLOW_NAMES[1])
        live_engine.record_own_goal("blue")
        undone = live_engine.undo_last()
        assert undone.action_type == "own_goal"
        assert (live_engine.score("yellow"), live_engine.score("blue")) == (1, 0)

        live_engine.record_goal("blue", BLUE_NAMES[0])
        assert (live_engine.score("yellow"), live_engine.score("blue")) == (1, 1)

        summary = live_engine.build_export_summary("01.01.2025")
        lines = summary.splitlines()
        assisted = [line for line in lines if ", Asysta: " in line]
        assert assisted == [f"18:30 - Gol: {YELLOW_NAMES[0]} (Żółci), Asysta: {YELLOW_NAMES[1]}"]
        assert not [line for line in lines if "Samobój" in line]
        assert "Wynik Końcowy: Żółci 1 - 1 Niebiescy" in lines

    def test_errors_share_a_base(self) -> None:
        """Every engine rejection is a MatchError and a ValueError."""
        engine = MatchEngine(clock=fixed_clock())
        with pytest.raises(MatchError):
            engine.undo_last()
        with pytest.raises(ValueError):
            engine.start_match()


class TestConcurrency:
    """Commands from several threads are serialised."""

    def test_parallel_goals_keep_log_consistent(self, live_engine: MatchEngine) -> None:
        """Concurrent recording loses no action and keeps ids unique."""

        def score(team: str, name: str) -> None:
            for _ in range(50):
                live_engine.record_goal(team, name)

        threads = [
            threading.Thread(target=score, args=("yellow", YELLOW_NAMES[0])),
            threading.Thread(target=score, args=("blue", BLUE_NAMES[0])),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        actions = live_engine.actions
        assert len(actions) == 100
        assert len({a.action_id for a in actions}) == 100
        assert live_engine.roster("yellow")[0].goals == 50
        _assert_score_matches_log(live_engine)
