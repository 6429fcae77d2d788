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
"""Domain model for a player registered to a match roster."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Player:
    """Roster entry with the cumulative statistics of the current match.

    Parameters
    ----------
    player_id : str
        Identifier unique within the current match, for example ``"yellow_3"``.
    name : str
        Display name; unique within a single roster.
    goals : int, default=0
        Goals scored in the current match.
    assists : int, default=0
        Assists provided in the current match.
    directory_id : int | None, optional
        Identifier of the player directory entry the player was picked from.
    """

    player_id: str
    name: str
    goals: int = 0
    assists: int = 0
    directory_id: Optional[int] = None

    def __post_init__(self) -> None:
        """Reject blank names and negative counters."""
        if not self.name or not self.name.strip():
            raise ValueError("Player name must not be empty")
        if self.goals < 0 or self.assists < 0:
            raise ValueError("Player statistics must be non-negative")

    @property
    def has_contributions(self) -> bool:
        """Whether the player scored or assisted at least once."""
        return self.goals > 0 or self.assists > 0

    def credit_goal(self) -> None:
        """Add one goal to the player's tally."""
        self.goals += 1

    def credit_assist(self) -> None:
        """Add one assist to the player's tally."""
        self.assists += 1

    def revert_goal(self) -> None:
        """Remove one goal, never dropping below zero."""
        self.goals = max(0, self.goals - 1)

    def revert_assist(self) -> None:
        """Remove one assist, never dropping below zero."""
        self.assists = max(0, self.assists - 1)

    def reset_stats(self) -> None:
        """Clear the goal and assist tallies."""
        self.goals = 0
        self.assists = 0


@dataclass(frozen=True)
class DirectoryPlayer:
    """Entry of the player directory offered in the roster picker.

    Parameters
    ----------
    id : int
        Directory identifier.
    name : str
        Display name.
    created_at : str, default=""
        ISO-8601 creation timestamp reported by the directory.
    """

    id: int
    name: str
    created_at: str = ""

    def as_dict(self) -> dict:
        """Serialise the entry using the directory's field names.

        Returns
        -------
        dict
            Mapping with ``id``, ``name`` and ``created_at`` keys.
        """
        return {"id": self.id, "name": self.name, "created_at": self.created_at}
