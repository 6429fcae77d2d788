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
"""Roster model holding one team's players in selection order."""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from kickabout.models.player import Player


@dataclass
class Roster:
    """Ordered squad registered to one side of the match.

    Parameters
    ----------
    team : str
        Team identifier, ``"yellow"`` or ``"blue"``.
    max_players : int, default=8
        Maximum number of players the roster accepts.
    players : List[Player]
        Players in the order they were added.
    """

    team: str
    max_players: int = 8
    players: List[Player] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the initial roster against size and name constraints."""
        if len(self.players) > self.max_players:
            raise ValueError(f"Roster cannot hold more than {self.max_players} players")
        names = [p.name for p in self.players]
        if len(set(names)) != len(names):
            raise ValueError("Roster contains duplicate player names")

    def __len__(self) -> int:
        """Return the number of registered players.

        Returns
        -------
        int
            Count of players on the roster.
        """
        return len(self.players)

    def __iter__(self) -> Iterator[Player]:
        """Iterate over players in insertion order.

        Returns
        -------
        Iterator[Player]
            Iterator yielding the roster's players.
        """
        return iter(self.players)

    @property
    def is_full(self) -> bool:
        """Whether the roster reached ``max_players``."""
        return len(self.players) >= self.max_players

    def find_by_name(self, name: str) -> Optional[Player]:
        """Look up a player by display name.

        Parameters
        ----------
        name : str
            Exact display name to search for.

        Returns
        -------
        Optional[Player]
            Matching player, or ``None`` when the name is not on the roster.
        """
        return next((p for p in self.players if p.name == name), None)

    def find_by_id(self, player_id: str) -> Optional[Player]:
        """Look up a player by match identifier.

        Parameters
        ----------
        player_id : str
            Identifier assigned when the player was added.

        Returns
        -------
        Optional[Player]
            Matching player, or ``None`` when absent.
        """
        return next((p for p in self.players if p.player_id == player_id), None)

    def has_name(self, name: str) -> bool:
        """Check whether a display name is already taken on this roster.

        Parameters
        ----------
        name : str
            Display name to test.

        Returns
        -------
        bool
            ``True`` when a player with ``name`` is registered.
        """
        return self.find_by_name(name) is not None

    def append(self, player: Player) -> None:
        """Add a player at the end of the roster.

        Parameters
        ----------
        player : Player
            Player to register; must not duplicate an existing name.
        """
        if self.is_full:
            raise ValueError(f"Roster cannot hold more than {self.max_players} players")
        if self.has_name(player.name):
            raise ValueError(f"Player '{player.name}' is already on the {self.team} roster")
        self.players.append(player)

    def remove(self, player_id: str) -> Optional[Player]:
        """Remove a player by identifier.

        Parameters
        ----------
        player_id : str
            Identifier of the player to drop.

        Returns
        -------
        Optional[Player]
            The removed player, or ``None`` when no player matched.
        """
        player = self.find_by_id(player_id)
        if player is not None:
            self.players.remove(player)
        return player

    def reset_stats(self) -> None:
        """Zero every player's goals and assists while keeping membership."""
        for player in self.players:
            player.reset_stats()
