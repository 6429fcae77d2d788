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
"""In-memory match state and the command interface that mutates it.

``MatchEngine`` is the only writer of match state. Rosters and per-player
tallies live in :class:`MatchState`; the score is never stored on its own but
derived from the action log, so the scoreboard always agrees with the log.
Every public command either applies completely or raises a
:class:`~kickabout.engine.errors.MatchError` without touching state.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Literal, Optional, Tuple

from kickabout.engine.config import SCORER_CONFIG, ScorerConfig
from kickabout.engine.errors import (
    DuplicateNameError,
    EmptyLogError,
    InactiveMatchError,
    InvalidAssistantError,
    InvalidNameError,
    NotFoundError,
    NotReadyError,
    RosterFullError,
    RosterLockedError,
    UnknownScorerError,
    UnknownTeamError,
)
from kickabout.engine.events import GameAction
from kickabout.engine.summary import export_filename, render_summary
from kickabout.models.player import DirectoryPlayer, Player
from kickabout.models.team import Roster
from kickabout.utils.debug import MatchDebugger

MatchPhase = Literal["setup", "active"]


@dataclass(frozen=True)
class Scoreboard:
    """Score per team derived from the action log.

    Parameters
    ----------
    scores : Dict[str, int]
        Goals credited to each team identifier.
    """

    scores: Dict[str, int]

    @classmethod
    def from_actions(cls, teams: Iterable[str], actions: Iterable[GameAction]) -> "Scoreboard":
        """Count actions per team.

        Parameters
        ----------
        teams : Iterable[str]
            Team identifiers that always appear in the result.
        actions : Iterable[GameAction]
            Action log to tally.

        Returns
        -------
        Scoreboard
            Scoreboard whose entries equal the number of actions per team.
        """
        scores = {team: 0 for team in teams}
        for action in actions:
            scores[action.team] = scores.get(action.team, 0) + 1
        return cls(scores)

    def score_for(self, team: str) -> int:
        """Return one team's score.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        int
            Goals credited to ``team``.
        """
        return self.scores.get(team, 0)


@dataclass(frozen=True)
class PlayerLine:
    """Read-only copy of a player's tallies for renderers.

    Parameters
    ----------
    player_id : str
        Match identifier of the player.
    name : str
        Display name.
    team : str
        Team the player is registered to.
    goals : int
        Goals scored.
    assists : int
        Assists provided.
    """

    player_id: str
    name: str
    team: str
    goals: int
    assists: int


@dataclass(frozen=True)
class MatchSnapshot:
    """Immutable view of the whole match handed to presentation layers.

    Parameters
    ----------
    phase : {"setup", "active"}
        Coarse lifecycle state.
    paused : bool
        Whether scoring is locked while the match is active.
    scoreboard : Scoreboard
        Derived score per team.
    rosters : Dict[str, Tuple[PlayerLine, ...]]
        Players per team in insertion order.
    actions : Tuple[GameAction, ...]
        Chronological action log.
    """

    phase: MatchPhase
    paused: bool
    scoreboard: Scoreboard
    rosters: Dict[str, Tuple[PlayerLine, ...]]
    actions: Tuple[GameAction, ...]

    def all_players(self) -> List[PlayerLine]:
        """Flatten the rosters in team order.

        Returns
        -------
        List[PlayerLine]
            Every registered player, first team first.
        """
        return [line for lines in self.rosters.values() for line in lines]

    def as_dict(self) -> dict:
        """Serialise the snapshot into JSON-friendly primitives.

        Returns
        -------
        dict
            Mapping with ``phase``, ``paused``, ``scores``, ``rosters`` and ``actions`` keys.
        """
        return {
            "phase": self.phase,
            "paused": self.paused,
            "scores": dict(self.scoreboard.scores),
            "rosters": {
                team: [
                    {"id": p.player_id, "name": p.name, "goals": p.goals, "assists": p.assists} for p in lines
                ]
                for team, lines in self.rosters.items()
            },
            "actions": [action.as_dict() for action in self.actions],
        }


@dataclass
class MatchState:
    """Mutable match state owned by :class:`MatchEngine`.

    Parameters
    ----------
    rosters : Dict[str, Roster]
        Roster per team identifier.
    actions : List[GameAction]
        Append-only action log, most recent last.
    phase : {"setup", "active"}, default="setup"
        Coarse lifecycle state.
    paused : bool, default=False
        Gameplay lock inside the active phase.
    """

    rosters: Dict[str, Roster]
    actions: List[GameAction] = field(default_factory=list)
    phase: MatchPhase = "setup"
    paused: bool = False

    @property
    def scoreboard(self) -> Scoreboard:
        """Score derived from the current action log."""
        return Scoreboard.from_actions(self.rosters.keys(), self.actions)


class MatchEngine:
    """Command interface for one match: rosters, scoring, undo, reset and export.

    Parameters
    ----------
    config : ScorerConfig, default=SCORER_CONFIG
        Roster limits, labels and export wording.
    debugger : MatchDebugger | None, optional
        Telemetry sink; nothing is logged when omitted.
    clock : Callable[[], datetime], optional
        Source of the wall-clock time stamped on actions.
    """

    def __init__(
        self,
        config: ScorerConfig = SCORER_CONFIG,
        debugger: Optional[MatchDebugger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self.debugger = debugger
        self.clock = clock
        self.state = MatchState(
            rosters={team: Roster(team=team, max_players=config.roster.max_players) for team in config.roster.teams}
        )
        self._lock = threading.RLock()
        self._player_ids = itertools.count(1)
        self._action_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def phase(self) -> MatchPhase:
        """Current lifecycle phase."""
        return self.state.phase

    @property
    def is_paused(self) -> bool:
        """Whether scoring is locked while the match is active."""
        return self.state.paused

    @property
    def actions(self) -> List[GameAction]:
        """Copy of the action log, oldest first."""
        with self._lock:
            return list(self.state.actions)

    def score(self, team: str) -> int:
        """Return one team's current score.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        int
            Number of logged actions credited to ``team``.
        """
        with self._lock:
            return self.state.scoreboard.score_for(self._roster(team).team)

    def roster(self, team: str) -> List[Player]:
        """Return the players registered to a team.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        List[Player]
            Players in insertion order (live objects; treat as read-only).
        """
        with self._lock:
            return list(self._roster(team).players)

    def snapshot(self) -> MatchSnapshot:
        """Capture an immutable view of the match for rendering.

        Returns
        -------
        MatchSnapshot
            Copy of scores, rosters with tallies, the action log and phase.
        """
        with self._lock:
            rosters = {
                team: tuple(PlayerLine(p.player_id, p.name, team, p.goals, p.assists) for p in roster)
                for team, roster in self.state.rosters.items()
            }
            return MatchSnapshot(
                phase=self.state.phase,
                paused=self.state.paused,
                scoreboard=self.state.scoreboard,
                rosters=rosters,
                actions=tuple(self.state.actions),
            )

    def available_for_selection(self, entries: Iterable[DirectoryPlayer]) -> List[DirectoryPlayer]:
        """Filter directory entries down to players not yet on either roster.

        Parameters
        ----------
        entries : Iterable[DirectoryPlayer]
            Ordered directory listing.

        Returns
        -------
        List[DirectoryPlayer]
            Entries whose names are free, in the directory's order.
        """
        with self._lock:
            taken = {p.name for roster in self.state.rosters.values() for p in roster}
        return [entry for entry in entries if entry.name not in taken]

    # ------------------------------------------------------------------
    # Setup commands
    # ------------------------------------------------------------------
    def add_player(self, team: str, name: str, directory_id: Optional[int] = None) -> Player:
        """Register a player at the end of a team's roster.

        Parameters
        ----------
        team : str
            Team identifier.
        name : str
            Display name; surrounding whitespace is ignored.
        directory_id : int | None, optional
            Directory identifier of the picked entry, kept for reference.

        Returns
        -------
        Player
            The newly registered player with zeroed tallies.

        Raises
        ------
        InvalidNameError
            ``name`` is blank.
        RosterFullError
            The roster already holds the maximum number of players.
        DuplicateNameError
            The roster already holds a player with this name.
        """
        with self._lock:
            roster = self._roster(team)
            clean_name = (name or "").strip()
            if not clean_name:
                raise InvalidNameError(name)
            if roster.is_full:
                raise RosterFullError(team, roster.max_players)
            if roster.has_name(clean_name):
                raise DuplicateNameError(team, clean_name)

            player = Player(
                player_id=f"{team}_{next(self._player_ids)}",
                name=clean_name,
                directory_id=directory_id,
            )
            roster.append(player)
            if self.debugger:
                self.debugger.log_roster_change(team, clean_name, "added")
            return player

    def remove_player(self, team: str, player_id: str) -> None:
        """Drop a player from a roster during setup.

        Parameters
        ----------
        team : str
            Team identifier.
        player_id : str
            Match identifier returned by :meth:`add_player`.

        Raises
        ------
        RosterLockedError
            The match is active; membership is frozen so undo can always find its players.
        NotFoundError
            No such player on the roster.
        """
        with self._lock:
            roster = self._roster(team)
            if self.state.phase != "setup":
                raise RosterLockedError(team)
            removed = roster.remove(player_id)
            if removed is None:
                raise NotFoundError(team, player_id)
            if self.debugger:
                self.debugger.log_roster_change(team, removed.name, "removed")

    def can_start(self) -> bool:
        """Check whether both rosters have a playable size.

        Returns
        -------
        bool
            ``True`` when every roster holds between the configured minimum and maximum.
        """
        limits = self.config.roster
        with self._lock:
            return all(limits.min_players <= len(r) <= limits.max_players for r in self.state.rosters.values())

    def start_match(self) -> None:
        """Move from setup to the active phase.

        Raises
        ------
        NotReadyError
            The match is already active or a roster size is out of range.
        """
        with self._lock:
            if self.state.phase != "setup":
                raise NotReadyError("The match has already started")
            if not self.can_start():
                limits = self.config.roster
                sizes = ", ".join(f"{team}={len(r)}" for team, r in self.state.rosters.items())
                raise NotReadyError(
                    f"Each team needs {limits.min_players}-{limits.max_players} players ({sizes})"
                )
            self.state.phase = "active"
            self.state.paused = False
            if self.debugger:
                self.debugger.log_match_event("start", "Match started")

    def pause(self) -> None:
        """Lock scoring while the match stays active.

        Raises
        ------
        InactiveMatchError
            The match has not started.
        """
        with self._lock:
            if self.state.phase != "active":
                raise InactiveMatchError("The match has not started")
            self.state.paused = True
            if self.debugger:
                self.debugger.log_match_event("pause", "Scoring locked")

    def resume(self) -> None:
        """Unlock scoring after :meth:`pause`.

        Raises
        ------
        InactiveMatchError
            The match has not started.
        """
        with self._lock:
            if self.state.phase != "active":
                raise InactiveMatchError("The match has not started")
            self.state.paused = False
            if self.debugger:
                self.debugger.log_match_event("resume", "Scoring unlocked")

    # ------------------------------------------------------------------
    # Scoring commands
    # ------------------------------------------------------------------
    def record_goal(self, team: str, scorer_name: str, assistant_name: Optional[str] = None) -> GameAction:
        """Credit a goal to a player, optionally with an assist.

        Parameters
        ----------
        team : str
            Team credited with the goal.
        scorer_name : str
            Display name of the scorer on ``team``'s roster.
        assistant_name : str | None, optional
            Display name of a different player on the same roster.

        Returns
        -------
        GameAction
            The appended ``goal`` action.

        Raises
        ------
        InactiveMatchError
            The match is in setup or paused.
        UnknownScorerError
            The scorer is not on the roster.
        InvalidAssistantError
            The assistant is the scorer or is not on the same roster.
        """
        with self._lock:
            roster = self._roster(team)
            self._require_scoring_open()
            scorer = roster.find_by_name(scorer_name)
            if scorer is None:
                raise UnknownScorerError(team, scorer_name)
            assistant: Optional[Player] = None
            if assistant_name is not None:
                if assistant_name == scorer_name:
                    raise InvalidAssistantError(team, assistant_name, "a player cannot assist their own goal")
                assistant = roster.find_by_name(assistant_name)
                if assistant is None:
                    raise InvalidAssistantError(team, assistant_name, "assistant must be on the same roster")

            action = self._new_action("goal", team, scorer.name, assistant.name if assistant else None)
            self.state.actions.append(action)
            scorer.credit_goal()
            if assistant is not None:
                assistant.credit_assist()
            if self.debugger:
                self.debugger.log_action(action)
            return action

    def record_own_goal(self, team: str) -> GameAction:
        """Record an own goal for ``team``.

        The acting team's own score is incremented, matching the behaviour the
        scorekeeping group has always used; no player tallies change.

        Parameters
        ----------
        team : str
            Team whose own goal it was.

        Returns
        -------
        GameAction
            The appended ``own_goal`` action.

        Raises
        ------
        InactiveMatchError
            The match is in setup or paused.
        """
        with self._lock:
            self._roster(team)
            self._require_scoring_open()
            action = self._new_action("own_goal", team, self.config.labels.own_goal_scorer, None)
            self.state.actions.append(action)
            if self.debugger:
                self.debugger.log_action(action)
            return action

    def undo_last(self) -> GameAction:
        """Revert the most recent action.

        Returns
        -------
        GameAction
            The removed action.

        Raises
        ------
        EmptyLogError
            The action log is empty.
        """
        with self._lock:
            if not self.state.actions:
                raise EmptyLogError()
            action = self.state.actions.pop()
            if action.is_goal:
                roster = self.state.rosters[action.team]
                scorer = roster.find_by_name(action.scorer)
                if scorer is not None:
                    scorer.revert_goal()
                if action.assistant:
                    assistant = roster.find_by_name(action.assistant)
                    if assistant is not None:
                        assistant.revert_assist()
            if self.debugger:
                self.debugger.log_action(action, undone=True)
            return action

    def reset_match(self) -> None:
        """Return to setup with zeroed scores and tallies, keeping the rosters."""
        with self._lock:
            self.state.actions.clear()
            self.state.phase = "setup"
            self.state.paused = False
            for roster in self.state.rosters.values():
                roster.reset_stats()
            if self.debugger:
                self.debugger.log_match_event("reset", "Scores, tallies and action log cleared")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def build_export_summary(self, date_label: str) -> str:
        """Render the human-readable match report.

        Parameters
        ----------
        date_label : str
            Date printed in the header, for example ``"01.01.2025"``.

        Returns
        -------
        str
            Report text; encode it with :func:`kickabout.engine.summary.encode_summary`
            to obtain the byte-order-marked file content.
        """
        return render_summary(self.snapshot(), date_label, self.config)

    def export_filename(self, date_label: str) -> str:
        """Suggest a filename for the exported report.

        Parameters
        ----------
        date_label : str
            Date label used in the report header.

        Returns
        -------
        str
            Filename following the ``dziennik_meczu_<date>.txt`` pattern.
        """
        return export_filename(date_label, self.config)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _roster(self, team: str) -> Roster:
        """Resolve a team identifier to its roster.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        Roster
            The team's roster.

        Raises
        ------
        UnknownTeamError
            ``team`` is not one of the configured sides.
        """
        try:
            return self.state.rosters[team]
        except KeyError as exc:
            raise UnknownTeamError(team) from exc

    def _require_scoring_open(self) -> None:
        """Raise unless the match is active and not paused."""
        if self.state.phase != "active":
            raise InactiveMatchError("The match has not started")
        if self.state.paused:
            raise InactiveMatchError("The match is paused")

    def _new_action(self, action_type: str, team: str, scorer: str, assistant: Optional[str]) -> GameAction:
        """Build the next log entry stamped with the current time.

        Parameters
        ----------
        action_type : str
            ``"goal"`` or ``"own_goal"``.
        team : str
            Team credited with the action.
        scorer : str
            Scorer name or own-goal sentinel.
        assistant : str | None
            Assistant name for assisted goals.

        Returns
        -------
        GameAction
            Entry with the next identifier.
        """
        return GameAction(
            action_id=next(self._action_ids),
            timestamp=self.clock().strftime(self.config.labels.time_format),
            action_type=action_type,  # type: ignore[arg-type]
            team=team,
            scorer=scorer,
            assistant=assistant,
        )
