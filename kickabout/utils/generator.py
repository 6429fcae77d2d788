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
"""Built-in player directory and helpers that fill rosters for quick matches."""
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional, Sequence

from kickabout.models.player import DirectoryPlayer

if TYPE_CHECKING:
    from kickabout.engine.match_engine import MatchEngine

# Alphabetical, matching the seeded ``players`` table.
DEFAULT_PLAYER_NAMES = (
    "Adam S.",
    "Adam T.",
    "Andrzej T.",
    "Bartek D.",
    "Franek W.",
    "Grzegorz G.",
    "Grzegorz O.",
    "Jakub K.",
    "Jędrek K.",
    "Kamil E.",
    "Konrad L.",
    "Kornel O.",
    "Krystian G.",
    "Łukasz B.",
    "Łukasz J.",
    "Maciej M.",
    "Marcin P.",
    "Marek Z.",
    "Mateusz W.",
    "Michał G.",
    "Michał T.",
    "Mikołaj T.",
    "Oskar B.",
    "Paweł L.",
    "Paweł W.",
    "Piotrek P.",
    "Przemek W.",
    "Radek K.",
    "Radek P.",
    "Robert G.",
    "Szymon B.",
    "Tomasz Ł.",
    "Tomek Ł.",
    "Tomek W.",
)


def default_directory() -> List[DirectoryPlayer]:
    """Return the built-in directory used when no other source is available.

    Returns
    -------
    List[DirectoryPlayer]
        The 34 regulars in alphabetical order with identifiers starting at 1.
    """
    created_at = datetime.now(timezone.utc).isoformat()
    return [DirectoryPlayer(id=i, name=name, created_at=created_at) for i, name in enumerate(DEFAULT_PLAYER_NAMES, 1)]


def generate_rosters(
    engine: "MatchEngine",
    entries: Optional[Sequence[DirectoryPlayer]] = None,
    per_team: int = 5,
    rng: Optional[random.Random] = None,
) -> None:
    """Draw players at random and alternate them between the two teams.

    Parameters
    ----------
    engine : MatchEngine
        Engine in setup whose rosters receive the players.
    entries : Sequence[DirectoryPlayer] | None, optional
        Pool to draw from; the built-in directory when omitted. Players already
        on a roster are skipped.
    per_team : int, default=5
        Number of players to add to each team.
    rng : random.Random | None, optional
        Random source, for reproducible draws.

    Raises
    ------
    ValueError
        Fewer free players than the draw needs.
    """
    rng = rng or random.Random()
    teams = engine.config.roster.teams
    pool = engine.available_for_selection(entries if entries is not None else default_directory())
    needed = per_team * len(teams)
    if len(pool) < needed:
        raise ValueError(f"Need {needed} free players, only {len(pool)} available")

    picks = rng.sample(pool, needed)
    for index, entry in enumerate(picks):
        engine.add_player(teams[index % len(teams)], entry.name, directory_id=entry.id)
