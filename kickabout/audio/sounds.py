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
"""Goal sound catalogue and the typed player/team sound assignments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from kickabout.utils.settings import CustomSound, SoundSettings

NO_SOUND = "none"


@dataclass(frozen=True)
class SoundCue:
    """Playable sound and the candidate files it can be loaded from.

    Parameters
    ----------
    sound_id : str
        Catalogue identifier such as ``"horn"``.
    name : str
        Label shown in sound settings.
    files : Tuple[str, ...]
        File names relative to the sounds directory, tried in order.
    """

    sound_id: str
    name: str
    files: Tuple[str, ...] = ()


AVAILABLE_SOUNDS: Tuple[SoundCue, ...] = (
    SoundCue(NO_SOUND, "Brak dźwięku"),
    SoundCue("commentary", "Komentarz", ("goal-commentary.mp3", "goal-commentary.ogg")),
    SoundCue("yellow-horn", "Klakson Żółtych", ("goal-yellow-horn.mp3", "goal-yellow-horn.ogg")),
    SoundCue("default", "Domyślny", ("goal-default.mp3", "goal-default.ogg")),
    SoundCue("whistle", "Gwizdek", ("goal-whistle.mp3", "goal-whistle.ogg")),
    SoundCue("cheer", "Okrzyki", ("goal-cheer.mp3", "goal-cheer.ogg")),
    SoundCue("horn", "Klakson", ("goal-horn.mp3", "goal-horn.ogg")),
    SoundCue("bell", "Dzwon", ("goal-bell.mp3", "goal-bell.ogg")),
)

DEFAULT_PLAYER_SOUNDS: Dict[str, str] = {
    "Łukasz J.": "commentary",
    "Maciej M.": "horn",
    "Tomek W.": "whistle",
    "Grzegorz O.": "bell",
    "Krystian G.": "commentary",
    "Adam S.": "commentary",
    "Michał G.": "cheer",
}

DEFAULT_TEAM_SOUNDS: Dict[str, str] = {
    "yellow": "yellow-horn",
    "blue": "commentary",
}


class SoundCatalogue:
    """Lookup of every sound that can be assigned or played.

    Parameters
    ----------
    cues : Iterable[SoundCue], default=AVAILABLE_SOUNDS
        Cues to index; later entries replace earlier ones with the same id.
    """

    def __init__(self, cues: Iterable[SoundCue] = AVAILABLE_SOUNDS) -> None:
        self._cues: Dict[str, SoundCue] = {}
        for cue in cues:
            self._cues[cue.sound_id] = cue

    def __contains__(self, sound_id: object) -> bool:
        """Return whether ``sound_id`` is catalogued.

        Parameters
        ----------
        sound_id : object
            Identifier to test.

        Returns
        -------
        bool
            ``True`` for known identifiers.
        """
        return sound_id in self._cues

    def __iter__(self) -> Iterator[SoundCue]:
        """Iterate over cues in insertion order.

        Returns
        -------
        Iterator[SoundCue]
            Iterator over catalogued cues.
        """
        return iter(self._cues.values())

    def get(self, sound_id: str) -> Optional[SoundCue]:
        """Look up a cue.

        Parameters
        ----------
        sound_id : str
            Catalogue identifier.

        Returns
        -------
        Optional[SoundCue]
            The cue, or ``None`` when unknown.
        """
        return self._cues.get(sound_id)

    def playable(self) -> List[SoundCue]:
        """Cues that have at least one candidate file.

        Returns
        -------
        List[SoundCue]
            Every cue except the silent one.
        """
        return [cue for cue in self._cues.values() if cue.files]

    def with_custom(self, custom_sounds: Iterable[CustomSound]) -> "SoundCatalogue":
        """Extend the catalogue with uploaded sounds.

        Parameters
        ----------
        custom_sounds : Iterable[CustomSound]
            Uploaded sound metadata.

        Returns
        -------
        SoundCatalogue
            New catalogue containing the existing and uploaded cues.
        """
        extra = [SoundCue(s.sound_id, s.name, (s.filename,)) for s in custom_sounds]
        return SoundCatalogue([*self._cues.values(), *extra])


def _validate_assignments(assignments: Mapping[str, str], catalogue: SoundCatalogue, kind: str) -> None:
    """Raise when an assignment refers to an uncatalogued sound.

    Parameters
    ----------
    assignments : Mapping[str, str]
        Sound identifier per key.
    catalogue : SoundCatalogue
        Known sounds.
    kind : str
        Description of the keys, used in the error message.
    """
    unknown = sorted(f"{key}={sound}" for key, sound in assignments.items() if sound not in catalogue)
    if unknown:
        raise ValueError(f"Unknown sound for {kind}: {', '.join(unknown)}")


@dataclass(frozen=True)
class PlayerSoundMap:
    """Sound identifier per player name.

    Parameters
    ----------
    assignments : Dict[str, str]
        Validated mapping of player name to sound identifier.
    """

    assignments: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, assignments: Mapping[str, str], catalogue: SoundCatalogue) -> "PlayerSoundMap":
        """Validate and freeze player assignments.

        Parameters
        ----------
        assignments : Mapping[str, str]
            Player name to sound identifier.
        catalogue : SoundCatalogue
            Sounds the identifiers must exist in.

        Returns
        -------
        PlayerSoundMap
            Validated map.
        """
        _validate_assignments(assignments, catalogue, "players")
        return cls(dict(assignments))

    def sound_for(self, player_name: str) -> Optional[str]:
        """Return the player's personal sound.

        Parameters
        ----------
        player_name : str
            Display name of the scorer.

        Returns
        -------
        Optional[str]
            Sound identifier, or ``None`` when the player has no assignment.
        """
        return self.assignments.get(player_name)


@dataclass(frozen=True)
class TeamSoundMap:
    """Default sound identifier per team.

    Parameters
    ----------
    assignments : Dict[str, str]
        Validated mapping of team identifier to sound identifier.
    """

    assignments: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, assignments: Mapping[str, str], catalogue: SoundCatalogue) -> "TeamSoundMap":
        """Validate and freeze team assignments.

        Parameters
        ----------
        assignments : Mapping[str, str]
            Team identifier to sound identifier.
        catalogue : SoundCatalogue
            Sounds the identifiers must exist in.

        Returns
        -------
        TeamSoundMap
            Validated map.
        """
        _validate_assignments(assignments, catalogue, "teams")
        return cls(dict(assignments))

    def sound_for(self, team: str) -> str:
        """Return the team's default sound.

        Parameters
        ----------
        team : str
            Team identifier.

        Returns
        -------
        str
            Sound identifier, or ``"none"`` for unassigned teams.
        """
        return self.assignments.get(team, NO_SOUND)


@dataclass(frozen=True)
class SoundAssignments:
    """Resolved sound selection rules for goal cues.

    Parameters
    ----------
    catalogue : SoundCatalogue
        Every known sound, including uploads.
    players : PlayerSoundMap
        Personal sounds, checked first.
    teams : TeamSoundMap
        Team defaults, used when the scorer has no personal sound.
    """

    catalogue: SoundCatalogue
    players: PlayerSoundMap
    teams: TeamSoundMap

    @classmethod
    def from_settings(cls, settings: SoundSettings) -> "SoundAssignments":
        """Merge built-in assignments with user overrides and uploads.

        Parameters
        ----------
        settings : SoundSettings
            Stored preferences.

        Returns
        -------
        SoundAssignments
            Validated assignments.
        """
        catalogue = SoundCatalogue().with_custom(settings.custom_sounds)
        players = PlayerSoundMap.build({**DEFAULT_PLAYER_SOUNDS, **settings.player_sounds}, catalogue)
        teams = TeamSoundMap.build({**DEFAULT_TEAM_SOUNDS, **settings.team_sounds}, catalogue)
        return cls(catalogue, players, teams)

    def goal_sound(self, player_name: Optional[str], team: str) -> str:
        """Pick the sound for a goal.

        Parameters
        ----------
        player_name : str | None
            Scorer's display name; ``None`` for own goals.
        team : str
            Team credited with the goal.

        Returns
        -------
        str
            The scorer's personal sound if assigned, otherwise the team default.
        """
        if player_name:
            personal = self.players.sound_for(player_name)
            if personal:
                return personal
        return self.teams.sound_for(team)
