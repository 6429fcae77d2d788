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
"""Typed, recoverable errors raised by the match engine.

Every error carries a stable ``code`` so that presentation layers can map it to
a user-facing message without parsing the exception text. None of them leave
the engine in a partially updated state.
"""

from __future__ import annotations


class MatchError(ValueError):
    """Base class for rejected match commands.

    Parameters
    ----------
    message : str
        Human-readable description of the rejection.
    """

    code = "MatchError"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UnknownTeamError(MatchError):
    """Raised when a command names a team other than the configured sides.

    Parameters
    ----------
    team : str
        The unrecognised team identifier.
    """

    code = "UnknownTeam"

    def __init__(self, team: str) -> None:
        self.team = team
        super().__init__(f"Unknown team '{team}'")


class InvalidNameError(MatchError):
    """Raised when a player name is empty after trimming.

    Parameters
    ----------
    name : str
        The rejected raw name.
    """

    code = "InvalidName"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Player name must not be empty")


class DuplicateNameError(MatchError):
    """Raised when a roster already holds a player with the same name.

    Parameters
    ----------
    team : str
        Roster that rejected the player.
    name : str
        The duplicated display name.
    """

    code = "DuplicateName"

    def __init__(self, team: str, name: str) -> None:
        self.team = team
        self.name = name
        super().__init__(f"Player '{name}' is already on the {team} roster")


class RosterFullError(MatchError):
    """Raised when adding to a roster that reached its size limit.

    Parameters
    ----------
    team : str
        Roster that is full.
    limit : int
        Maximum roster size.
    """

    code = "RosterFull"

    def __init__(self, team: str, limit: int) -> None:
        self.team = team
        self.limit = limit
        super().__init__(f"The {team} roster already has {limit} players")


class NotFoundError(MatchError):
    """Raised when a player identifier is not on the given roster.

    Parameters
    ----------
    team : str
        Roster that was searched.
    player_id : str
        Identifier that could not be found.
    """

    code = "NotFound"

    def __init__(self, team: str, player_id: str) -> None:
        self.team = team
        self.player_id = player_id
        super().__init__(f"No player '{player_id}' on the {team} roster")


class RosterLockedError(MatchError):
    """Raised when roster membership changes are attempted during a match.

    Parameters
    ----------
    team : str
        Roster the caller tried to modify.
    """

    code = "RosterLocked"

    def __init__(self, team: str) -> None:
        self.team = team
        super().__init__(f"The {team} roster cannot change while the match is active")


class NotReadyError(MatchError):
    """Raised when a match cannot be started.

    Parameters
    ----------
    reason : str
        Why the start was refused.
    """

    code = "NotReady"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class InactiveMatchError(MatchError):
    """Raised when scoring is attempted outside an active, unpaused match.

    Parameters
    ----------
    reason : str
        Why scoring is currently refused.
    """

    code = "InactiveMatch"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class UnknownScorerError(MatchError):
    """Raised when the scorer is not on the credited team's roster.

    Parameters
    ----------
    team : str
        Team credited with the goal.
    name : str
        The unknown scorer name.
    """

    code = "UnknownScorer"

    def __init__(self, team: str, name: str) -> None:
        self.team = team
        self.name = name
        super().__init__(f"'{name}' is not on the {team} roster")


class InvalidAssistantError(MatchError):
    """Raised when an assist cannot be credited to the named player.

    Parameters
    ----------
    team : str
        Team credited with the goal.
    name : str
        The rejected assistant name.
    reason : str
        Why the assistant was rejected.
    """

    code = "InvalidAssistant"

    def __init__(self, team: str, name: str, reason: str) -> None:
        self.team = team
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid assistant '{name}' for {team}: {reason}")


class EmptyLogError(MatchError):
    """Raised when undo is requested with no recorded actions."""

    code = "EmptyLog"

    def __init__(self) -> None:
        super().__init__("There is no action to undo")
