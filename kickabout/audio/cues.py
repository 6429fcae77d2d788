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
"""Goal cue playback through the pygame mixer.

Each playable sound moves through ``pending -> loading -> loaded | failed``.
Loading is retried a bounded number of times; a sound that still fails stays
``failed`` until :meth:`SoundManager.force_reload`. Playback is
fire-and-forget: problems are logged and never propagate to the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional, Tuple

try:
    import pygame
except Exception:
    pygame = None

from kickabout.audio.sounds import NO_SOUND, SoundAssignments, SoundCue
from kickabout.engine.config import SCORER_CONFIG, AudioConfig
from kickabout.utils.settings import CustomSound, SettingsStore, SoundSettings

logger = logging.getLogger(__name__)

LoadStatus = Literal["pending", "loading", "loaded", "failed"]


@dataclass
class SoundResource:
    """Load state of one catalogued sound.

    Parameters
    ----------
    sound_id : str
        Catalogue identifier.
    status : {"pending", "loading", "loaded", "failed"}, default="pending"
        Current load state.
    attempts : int, default=0
        Number of load attempts made so far.
    error : str | None, optional
        Last load error, cleared on success.
    path : Path | None, optional
        File the sound was loaded from.
    sound : Any, optional
        Mixer sound object once loaded.
    """

    sound_id: str
    status: LoadStatus = "pending"
    attempts: int = 0
    error: Optional[str] = None
    path: Optional[Path] = None
    sound: Any = None

    def reset(self) -> None:
        """Forget any previous load outcome."""
        self.status = "pending"
        self.attempts = 0
        self.error = None
        self.path = None
        self.sound = None


class SoundManager:
    """Plays goal cues according to the stored sound preferences.

    Parameters
    ----------
    settings : SoundSettings
        Enabled flag, volume, assignment overrides and uploaded sounds.
    sounds_dir : Path
        Directory holding the sound files.
    store : SettingsStore | None, optional
        Store that receives preference changes; changes stay in memory when omitted.
    mixer : Any, optional
        Object exposing the ``pygame.mixer`` interface (``init``, ``get_init``,
        ``Sound``); ``pygame.mixer`` when omitted and pygame is installed.
    config : AudioConfig, optional
        Retry policy, supported extensions and settings keys.
    sleep : Callable[[float], None], optional
        Function used to wait between load attempts.
    """

    def __init__(
        self,
        settings: SoundSettings,
        sounds_dir: Path,
        store: Optional[SettingsStore] = None,
        mixer: Any = None,
        config: AudioConfig = SCORER_CONFIG.audio,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.sounds_dir = Path(sounds_dir)
        self.store = store
        self.mixer = mixer if mixer is not None else (pygame.mixer if pygame is not None else None)
        self.config = config
        self.sleep = sleep
        self.assignments = SoundAssignments.from_settings(settings)
        self.resources: Dict[str, SoundResource] = {
            cue.sound_id: SoundResource(cue.sound_id) for cue in self.assignments.catalogue.playable()
        }
        self._mixer_ready = False

    @property
    def enabled(self) -> bool:
        """Whether goal cues are played."""
        return self.settings.enabled

    @property
    def volume(self) -> float:
        """Current playback volume in ``[0, 1]``."""
        return self.settings.volume

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _ensure_mixer(self) -> bool:
        """Initialise the mixer on first use.

        Returns
        -------
        bool
            ``True`` when a working mixer is available.
        """
        if self.mixer is None:
            return False
        if self._mixer_ready:
            return True
        try:
            if not self.mixer.get_init():
                self.mixer.init()
        except (RuntimeError, OSError) as exc:
            logger.warning("Audio mixer unavailable: %s", exc)
            return False
        self._mixer_ready = True
        return True

    def _find_file(self, cue: SoundCue) -> Path:
        """Pick the first existing candidate file in a supported format.

        Parameters
        ----------
        cue : SoundCue
            Cue whose candidate files are checked in order.

        Returns
        -------
        Path
            Path of the first usable file.

        Raises
        ------
        FileNotFoundError
            No candidate exists in a supported format.
        """
        for name in cue.files:
            path = self.sounds_dir / name
            if path.suffix.lower() not in self.config.supported_extensions:
                logger.debug("Skipping unsupported format %s", path)
                continue
            if path.exists():
                return path
        raise FileNotFoundError(f"No playable audio file found for {cue.sound_id}")

    def load(self, sound_id: str) -> SoundResource:
        """Load one sound, retrying failed attempts.

        Parameters
        ----------
        sound_id : str
            Catalogue identifier of a playable sound.

        Returns
        -------
        SoundResource
            The resource in its final ``loaded`` or ``failed`` state.
        """
        resource = self.resources[sound_id]
        cue = self.assignments.catalogue.get(sound_id)
        if cue is None or not self._ensure_mixer():
            resource.status = "failed"
            resource.error = "audio mixer unavailable" if cue is not None else "unknown sound"
            return resource

        try:
            path = self._find_file(cue)
        except FileNotFoundError as exc:
            resource.status = "failed"
            resource.error = str(exc)
            logger.warning("%s", exc)
            return resource

        for attempt in range(self.config.max_retries + 1):
            resource.status = "loading"
            resource.attempts += 1
            logger.debug("Loading sound %s (attempt %d)", sound_id, attempt + 1)
            try:
                sound = self.mixer.Sound(str(path))
            except (RuntimeError, OSError) as exc:
                resource.status = "failed"
                resource.error = str(exc)
                logger.warning("Failed to load sound %s: %s", sound_id, exc)
                if attempt < self.config.max_retries:
                    self.sleep(self.config.retry_delay)
                continue

            sound.set_volume(self.volume)
            resource.sound = sound
            resource.path = path
            resource.error = None
            resource.status = "loaded"
            logger.info("Sound loaded: %s from %s", sound_id, path)
            return resource
        return resource

    def preload(self) -> None:
        """Load every playable sound that has not been attempted yet."""
        for sound_id, resource in self.resources.items():
            if resource.status == "pending":
                self.load(sound_id)

    def force_reload(self) -> None:
        """Discard all load outcomes and load every sound again."""
        for resource in self.resources.values():
            resource.reset()
        self.preload()

    def loading_progress(self) -> Tuple[int, int]:
        """Report how many sounds are ready.

        Returns
        -------
        Tuple[int, int]
            Loaded sounds and total playable sounds.
        """
        loaded = sum(1 for r in self.resources.values() if r.status == "loaded")
        return loaded, len(self.resources)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    def sound_for(self, player_name: Optional[str], team: str) -> str:
        """Return the sound a goal by ``player_name`` would trigger.

        Parameters
        ----------
        player_name : str | None
            Scorer's display name; ``None`` for own goals.
        team : str
            Team credited with the goal.

        Returns
        -------
        str
            Catalogue identifier.
        """
        return self.assignments.goal_sound(player_name, team)

    def play_cue(self, sound_id: str, force: bool = False) -> bool:
        """Play a sound without waiting for it to finish.

        Parameters
        ----------
        sound_id : str
            Catalogue identifier.
        force : bool, default=False
            Play even when cues are disabled, as sound previews do.

        Returns
        -------
        bool
            ``True`` when playback started.
        """
        if sound_id == NO_SOUND or (not force and not self.enabled):
            return False
        resource = self.resources.get(sound_id)
        if resource is None:
            logger.warning("Unknown sound %s", sound_id)
            return False
        if resource.status == "pending":
            self.load(sound_id)
        if resource.status != "loaded":
            logger.warning("Sound %s is not available (%s): %s", sound_id, resource.status, resource.error)
            return False
        try:
            resource.sound.set_volume(self.volume)
            resource.sound.play()
        except (RuntimeError, OSError) as exc:
            # The mixer may have been shut down elsewhere; reinitialise and reload next time.
            logger.error("Failed to play sound %s: %s", sound_id, exc)
            self._mixer_ready = False
            resource.reset()
            return False
        return True

    def play_goal_cue(self, player_name: Optional[str], team: str) -> bool:
        """Play the cue for a recorded goal or own goal.

        Parameters
        ----------
        player_name : str | None
            Scorer's display name; ``None`` for own goals.
        team : str
            Team credited with the goal.

        Returns
        -------
        bool
            ``True`` when playback started.
        """
        return self.play_cue(self.sound_for(player_name, team))

    def preview(self, sound_id: str) -> bool:
        """Play a sound from the settings screen regardless of the enabled flag.

        Parameters
        ----------
        sound_id : str
            Catalogue identifier.

        Returns
        -------
        bool
            ``True`` when playback started.
        """
        return self.play_cue(sound_id, force=True)

    def stop_all(self) -> None:
        """Stop every loaded sound."""
        for resource in self.resources.values():
            if resource.sound is not None:
                resource.sound.stop()

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------
    def set_enabled(self, enabled: bool) -> None:
        """Turn goal cues on or off and persist the choice.

        Parameters
        ----------
        enabled : bool
            New state.
        """
        self.settings.enabled = enabled
        if self.store is not None:
            self.store.set(self.config.enabled_key, "true" if enabled else "false")
        logger.info("Sounds %s", "enabled" if enabled else "disabled")

    def set_volume(self, volume: float) -> None:
        """Change the volume of all sounds and persist it.

        Parameters
        ----------
        volume : float
            Requested volume; clamped to ``[0, 1]``.
        """
        self.settings.volume = max(0.0, min(1.0, volume))
        for resource in self.resources.values():
            if resource.sound is not None:
                resource.sound.set_volume(self.settings.volume)
        if self.store is not None:
            self.store.set(self.config.volume_key, str(self.settings.volume))

    def assign_player_sound(self, player_name: str, sound_id: str) -> None:
        """Give a player a personal goal sound and persist it.

        Parameters
        ----------
        player_name : str
            Display name of the player.
        sound_id : str
            Catalogue identifier; ``"none"`` silences the player.

        Raises
        ------
        ValueError
            ``sound_id`` is not in the catalogue; nothing changes.
        """
        overrides = {**self.settings.player_sounds, player_name: sound_id}
        self._apply_settings(replace(self.settings, player_sounds=overrides))

    def assign_team_sound(self, team: str, sound_id: str) -> None:
        """Change a team's default goal sound and persist it.

        Parameters
        ----------
        team : str
            Team identifier.
        sound_id : str
            Catalogue identifier.

        Raises
        ------
        ValueError
            ``sound_id`` is not in the catalogue; nothing changes.
        """
        overrides = {**self.settings.team_sounds, team: sound_id}
        self._apply_settings(replace(self.settings, team_sounds=overrides))

    def add_custom_sound(self, sound: CustomSound) -> None:
        """Make an uploaded sound playable and assignable without a restart.

        Parameters
        ----------
        sound : CustomSound
            Metadata returned by the upload.
        """
        customs = [s for s in self.settings.custom_sounds if s.sound_id != sound.sound_id] + [sound]
        self._apply_settings(replace(self.settings, custom_sounds=customs))
        self.resources[sound.sound_id].reset()

    def _apply_settings(self, settings: SoundSettings) -> None:
        """Adopt new preferences once their assignments validate.

        Parameters
        ----------
        settings : SoundSettings
            Candidate preferences.
        """
        assignments = SoundAssignments.from_settings(settings)
        self.settings = settings
        self.assignments = assignments
        for cue in assignments.catalogue.playable():
            self.resources.setdefault(cue.sound_id, SoundResource(cue.sound_id))
        if self.store is not None:
            settings.save(self.store, self.config)

    def status_report(self) -> dict:
        """Describe the mixer and every sound for troubleshooting.

        Returns
        -------
        dict
            ``enabled``, ``volume``, ``mixer_available`` and a per-sound ``sounds`` mapping.
        """
        return {
            "enabled": self.enabled,
            "volume": self.volume,
            "mixer_available": self.mixer is not None,
            "sounds": {
                sound_id: {
                    "status": r.status,
                    "attempts": r.attempts,
                    "error": r.error,
                    "path": str(r.path) if r.path else None,
                }
                for sound_id, r in self.resources.items()
            },
        }
