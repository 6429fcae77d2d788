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
"""Action log entries recorded by the match engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

ActionType = Literal["goal", "own_goal"]


@dataclass(frozen=True)
class GameAction:
    """Immutable record of one scoring event in the action log.

    Parameters
    ----------
    action_id : int
        Monotonically increasing identifier reflecting creation order.
    timestamp : str
        Local wall-clock time of recording, formatted as ``HH:MM``.
    action_type : {"goal", "own_goal"}
        Category of the event.
    team : str
        Team whose score the action increments.
    scorer : str
        Scoring player's display name, or the own-goal sentinel.
    assistant : Optional[str], optional
        Assisting player's display name for assisted goals.
    """

    action_id: int
    timestamp: str
    action_type: ActionType
    team: str
    scorer: str
    assistant: Optional[str] = None

    @property
    def is_goal(self) -> bool:
        """Whether the action is a regular goal credited to a player."""
        return self.action_type == "goal"

    def as_dict(self) -> dict:
        """Serialise the action into a JSON-friendly mapping.

        Returns
        -------
        dict
            Field values keyed by the names used in exported state.
        """
        return {
            "id": self.action_id,
            "timestamp": self.timestamp,
            "type": self.action_type,
            "team": self.team,
            "scorer": self.scorer,
            "assistant": self.assistant,
        }
