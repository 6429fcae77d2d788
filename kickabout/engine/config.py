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
"""Central configuration for scorekeeping rules, labels and collaborator defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(slots=True)
class RosterConfig:
    """Squad size limits enforced during setup and at kick-off.

    Parameters
    ----------
    min_players : int, default=5
        Smallest roster allowed to start a match.
    max_players : int, default=8
        Largest roster a team may register.
    teams : Tuple[str, str], default=("yellow", "blue")
        Team identifiers in display order.
    """

    min_players: int = 5
    max_players: int = 8
    teams: Tuple[str, str] = ("yellow", "blue")


@dataclass(slots=True)
class LabelConfig:
    """Human-readable strings used in logs and exported summaries.

    Parameters
    ----------
    team_labels : Dict[str, str]
        Display label per team identifier.
    own_goal_scorer : str, default="SAMOBÓJ"
        Sentinel recorded as the scorer of an own goal.
    time_format : str, default="%H:%M"
        ``strftime`` pattern applied to action timestamps.
    """

    team_labels: Dict[str, str] = field(default_factory=lambda: {"yellow": "Żółci", "blue": "Niebiescy"})
    own_goal_scorer: str = "SAMOBÓJ"
    time_format: str = "%H:%M"


@dataclass(slots=True)
class ExportConfig:
    """Wording and file naming of the exported match summary.

    Parameters
    ----------
    title : str
        Header line prefix followed by the date label.
    final_score : str
        Prefix of the final score line.
    events_heading : str
        Heading above the chronological action list.
    stats_heading : str
        Heading above the player statistics section.
    goal_word : str
        Label for a regular goal entry.
    assist_word : str
        Label introducing the assisting player.
    own_goal_word : str
        Label for an own goal entry.
    goal_forms : Tuple[str, str]
        Singular and plural form of "goal" in the statistics section.
    assist_forms : Tuple[str, str]
        Singular and plural form of "assist" in the statistics section.
    date_format : str, default="%d.%m.%Y"
        ``strftime`` pattern used for the default date label.
    filename_pattern : str
        Template for the suggested export filename; ``{date}`` is substituted.
    encoding : str, default="utf-8-sig"
        Text encoding that prepends the byte-order marker.
    """

    title: str = "Dziennik Meczu Piłkarskiego"
    final_score: str = "Wynik Końcowy"
    events_heading: str = "Wydarzenia Meczu"
    stats_heading: str = "Statystyki Graczy"
    goal_word: str = "Gol"
    assist_word: str = "Asysta"
    own_goal_word: str = "Samobój"
    goal_forms: Tuple[str, str] = ("gol", "gole")
    assist_forms: Tuple[str, str] = ("asysta", "asysty")
    date_format: str = "%d.%m.%Y"
    filename_pattern: str = "dziennik_meczu_{date}.txt"
    encoding: str = "utf-8-sig"


@dataclass(slots=True)
class AudioConfig:
    """Playback defaults and the retry policy for loading sound files.

    Parameters
    ----------
    default_volume : float, default=0.7
        Volume used until the user stores a preference.
    max_retries : int, default=2
        Additional load attempts after the first failure.
    retry_delay : float, default=2.0
        Seconds to wait between load attempts.
    supported_extensions : Tuple[str, ...]
        File extensions the mixer is asked to decode, in preference order.
    enabled_key : str
        Settings key holding the sound on/off flag.
    volume_key : str
        Settings key holding the volume.
    player_sounds_key : str
        Settings key holding per-player sound assignments.
    team_sounds_key : str
        Settings key holding per-team default sounds.
    custom_sounds_key : str
        Settings key holding metadata of uploaded sounds.
    """

    default_volume: float = 0.7
    max_retries: int = 2
    retry_delay: float = 2.0
    supported_extensions: Tuple[str, ...] = (".mp3", ".ogg", ".wav", ".m4a")
    enabled_key: str = "football-sounds-enabled"
    volume_key: str = "football-sounds-volume"
    player_sounds_key: str = "football-player-sounds"
    team_sounds_key: str = "football-team-sounds"
    custom_sounds_key: str = "football-custom-sounds"


@dataclass(slots=True)
class DirectoryConfig:
    """Location and fallbacks of the remote player directory.

    Parameters
    ----------
    url_env : str
        Environment variable holding the directory base URL.
    key_env : str
        Environment variable holding the directory API key.
    players_path : str
        REST path of the players table relative to the base URL.
    timeout : float, default=10.0
        Seconds before a directory request is abandoned.
    cache_file : str
        Default offline cache location for the last successful fetch.
    """

    url_env: str = "KICKABOUT_DIRECTORY_URL"
    key_env: str = "KICKABOUT_DIRECTORY_KEY"
    players_path: str = "/rest/v1/players"
    timeout: float = 10.0
    cache_file: str = "data/players_cache.json"


@dataclass(slots=True)
class ScorerConfig:
    """Top-level container for all scorekeeping configuration blocks.

    Parameters
    ----------
    roster : RosterConfig, default=RosterConfig()
        Roster size limits and team identifiers.
    labels : LabelConfig, default=LabelConfig()
        Display labels and timestamp format.
    export : ExportConfig, default=ExportConfig()
        Summary wording and export naming.
    audio : AudioConfig, default=AudioConfig()
        Sound defaults and settings keys.
    directory : DirectoryConfig, default=DirectoryConfig()
        Player directory endpoint settings.
    """

    roster: RosterConfig = field(default_factory=RosterConfig)
    labels: LabelConfig = field(default_factory=LabelConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    directory: DirectoryConfig = field(default_factory=DirectoryConfig)


SCORER_CONFIG = ScorerConfig()
"""Shared read-only access to the default configuration."""
