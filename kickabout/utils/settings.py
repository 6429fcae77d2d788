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
"""Persistent string key/value store and the typed sound preferences kept in it."""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional

from kickabout.engine.config import SCORER_CONFIG, AudioConfig

logger = logging.getLogger(__name__)


class SettingsStore:
    """String-keyed settings persisted as a JSON object on disk.

    Parameters
    ----------
    path : Path | None, optional
        File backing the store; the store stays in memory when omitted.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._values: Dict[str, str] = {}
        self._lock = Lock()
        self._load()

    def _load(self) -> None:
        """Read the backing file, starting empty when it is missing or corrupt."""
        if self.path is None or not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return
        if isinstance(data, dict):
            self._values = {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        """Write all values to the backing file."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(self._values, fh, ensure_ascii=False, indent=2, sort_keys=True)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Read a value.

        Parameters
        ----------
        key : str
            Setting name.
        default : str | None, optional
            Value returned when the key is unset.

        Returns
        -------
        Optional[str]
            Stored value or ``default``.
        """
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Store a value and persist the store.

        Parameters
        ----------
        key : str
            Setting name.
        value : str
            Value to store.
        """
        with self._lock:
            self._values[key] = value
            self._flush()

    def delete(self, key: str) -> None:
        """Remove a key if present.

        Parameters
        ----------
        key : str
            Setting name.
        """
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._flush()

    def get_json(self, key: str, default: object = None) -> object:
        """Read a value holding a JSON document.

        Parameters
        ----------
        key : str
            Setting name.
        default : object, optional
            Value returned when the key is unset or not valid JSON.

        Returns
        -------
        object
            Decoded document or ``default``.
        """
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Setting %s does not hold valid JSON", key)
            return default

    def set_json(self, key: str, value: object) -> None:
        """Store a JSON-serialisable value.

        Parameters
        ----------
        key : str
            Setting name.
        value : object
            Document to encode.
        """
        self.set(key, json.dumps(value, ensure_ascii=False))


@dataclass
class CustomSound:
    """Metadata of an uploaded sound file.

    Parameters
    ----------
    sound_id : str
        Catalogue identifier, ``"custom:<filename>"``.
    name : str
        Original filename shown to users.
    filename : str
        Cleaned filename inside the sounds directory.
    size : int
        File size in bytes.
    """

    sound_id: str
    name: str
    filename: str
    size: int

    def as_dict(self) -> dict:
        """Serialise the metadata for the settings store.

        Returns
        -------
        dict
            Mapping keyed by field name.
        """
        return {"sound_id": self.sound_id, "name": self.name, "filename": self.filename, "size": self.size}


@dataclass
class SoundSettings:
    """User sound preferences read from and written to a :class:`SettingsStore`.

    Parameters
    ----------
    enabled : bool, default=True
        Whether goal cues play at all.
    volume : float, default=0.7
        Playback volume in ``[0, 1]``.
    player_sounds : Dict[str, str]
        Sound identifier per player name overriding the built-in assignments.
    team_sounds : Dict[str, str]
        Sound identifier per team overriding the built-in defaults.
    custom_sounds : List[CustomSound]
        Uploaded sounds available in the catalogue.
    """

    enabled: bool = True
    volume: float = SCORER_CONFIG.audio.default_volume
    player_sounds: Dict[str, str] = field(default_factory=dict)
    team_sounds: Dict[str, str] = field(default_factory=dict)
    custom_sounds: List[CustomSound] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the volume range."""
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError("volume must be between 0 and 1")

    @classmethod
    def from_store(cls, store: SettingsStore, config: AudioConfig = SCORER_CONFIG.audio) -> "SoundSettings":
        """Read preferences, substituting defaults for missing or invalid values.

        Parameters
        ----------
        store : SettingsStore
            Store to read.
        config : AudioConfig, optional
            Key names and defaults.

        Returns
        -------
        SoundSettings
            Parsed preferences.
        """
        enabled_raw = store.get(config.enabled_key)
        enabled = enabled_raw == "true" if enabled_raw is not None else True

        volume = config.default_volume
        volume_raw = store.get(config.volume_key)
        if volume_raw is not None:
            try:
                volume = min(1.0, max(0.0, float(volume_raw)))
            except ValueError:
                logger.warning("Invalid stored volume %r, using default", volume_raw)

        player_sounds = store.get_json(config.player_sounds_key, {})
        team_sounds = store.get_json(config.team_sounds_key, {})
        custom_raw = store.get_json(config.custom_sounds_key, [])
        custom_sounds = [
            CustomSound(
                sound_id=str(item["sound_id"]),
                name=str(item.get("name", item["filename"])),
                filename=str(item["filename"]),
                size=int(item.get("size", 0)),
            )
            for item in (custom_raw if isinstance(custom_raw, list) else [])
            if isinstance(item, dict) and "sound_id" in item and "filename" in item
        ]
        return cls(
            enabled=enabled,
            volume=volume,
            player_sounds=dict(player_sounds) if isinstance(player_sounds, dict) else {},
            team_sounds=dict(team_sounds) if isinstance(team_sounds, dict) else {},
            custom_sounds=custom_sounds,
        )

    def save(self, store: SettingsStore, config: AudioConfig = SCORER_CONFIG.audio) -> None:
        """Write all preferences to a store.

        Parameters
        ----------
        store : SettingsStore
            Destination store.
        config : AudioConfig, optional
            Key names.
        """
        store.set(config.enabled_key, "true" if self.enabled else "false")
        store.set(config.volume_key, str(self.volume))
        store.set_json(config.player_sounds_key, self.player_sounds)
        store.set_json(config.team_sounds_key, self.team_sounds)
        store.set_json(config.custom_sounds_key, [s.as_dict() for s in self.custom_sounds])
