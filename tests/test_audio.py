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
"""Tests for the sound catalogue, assignments and the mixer-backed manager."""

from pathlib import Path
from typing import Dict, List

import pytest

from kickabout.audio.cues import SoundManager
from kickabout.audio.sounds import PlayerSoundMap, SoundAssignments, SoundCatalogue, TeamSoundMap
from kickabout.utils.settings import CustomSound, SettingsStore, SoundSettings


class FakeSound:
    """Records calls made on a loaded sound.

    Parameters
    ----------
    path : str
        File the sound was created from.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.volume = None
        self.plays = 0
        self.stopped = False
        self.broken = False

    def set_volume(self, volume: float) -> None:
        """Store the volume.

        Parameters
        ----------
        volume : float
            New volume.
        """
        self.volume = volume

    def play(self) -> None:
        """Count a playback, or fail once the mixer was shut down."""
        if self.broken:
            raise RuntimeError("mixer not initialized")
        self.plays += 1

    def stop(self) -> None:
        """Mark the sound stopped."""
        self.stopped = True


class FakeMixer:
    """Stand-in for ``pygame.mixer`` that can fail a number of loads per file.

    Parameters
    ----------
    failures : Dict[str, int] | None
        Number of times ``Sound`` raises for each file name before succeeding.
    init_error : bool
        Raise from ``init`` to simulate a machine without audio.
    """

    def __init__(self, failures: Dict[str, int] | None = None, init_error: bool = False) -> None:
        self.failures = dict(failures or {})
        self.init_error = init_error
        self.initialised = False
        self.loaded: List[str] = []

    def get_init(self) -> bool:
        """Report whether ``init`` ran.

        Returns
        -------
        bool
            Initialisation flag.
        """
        return self.initialised

    def init(self) -> None:
        """Initialise or fail."""
        if self.init_error:
            raise RuntimeError("No available audio device")
        self.initialised = True

    def Sound(self, path: str) -> FakeSound:
        """Create a sound, failing while the configured count lasts.

        Parameters
        ----------
        path : str
            File to load.

        Returns
        -------
        FakeSound
            Loaded sound.
        """
        name = Path(path).name
        if self.failures.get(name, 0) > 0:
            self.failures[name] -= 1
            raise RuntimeError(f"Unable to open file {name}")
        self.loaded.append(name)
        return FakeSound(path)


def _sounds_dir(tmp_path: Path, *names: str) -> Path:
    """Create placeholder sound files.

    Parameters
    ----------
    tmp_path : Path
        Base directory.
    *names : str
        File names to create.

    Returns
    -------
    Path
        Directory holding the files.
    """
    directory = tmp_path / "sounds"
    directory.mkdir()
    for name in names:
        (directory / name).write_bytes(b"\x00")
    return directory


class TestAssignments:
    """Typed sound maps and the resolution order."""

    def test_unknown_sound_rejected(self) -> None:
        """Maps refuse identifiers missing from the catalogue."""
        catalogue = SoundCatalogue()
        with pytest.raises(ValueError):
            PlayerSoundMap.build({"Adam T.": "kazoo"}, catalogue)
        with pytest.raises(ValueError):
            TeamSoundMap.build({"blue": "kazoo"}, catalogue)

    def test_player_sound_beats_team_sound(self) -> None:
        """A personal sound wins; otherwise the team default applies."""
        assignments = SoundAssignments.from_settings(SoundSettings())
        assert assignments.goal_sound("Maciej M.", "yellow") == "horn"
        assert assignments.goal_sound("Nieznany", "yellow") == "yellow-horn"
        assert assignments.goal_sound(None, "blue") == "commentary"
        assert assignments.goal_sound("Nieznany", "red") == "none"

    def test_overrides_and_custom_sounds(self) -> None:
        """Stored overrides may point at uploaded sounds."""
        custom = CustomSound("custom:x.mp3", "x.mp3", "x.mp3", 1)
        settings = SoundSettings(player_sounds={"Maciej M.": "custom:x.mp3"}, custom_sounds=[custom])
        assignments = SoundAssignments.from_settings(settings)
        assert assignments.goal_sound("Maciej M.", "blue") == "custom:x.mp3"
        assert assignments.catalogue.get("custom:x.mp3").files == ("x.mp3",)

    def test_silent_cue_not_playable(self) -> None:
        """The "none" entry is catalogued but never loaded."""
        catalogue = SoundCatalogue()
        assert "none" in catalogue
        assert "none" not in {cue.sound_id for cue in catalogue.playable()}


class TestSoundManager:
    """Loading state machine and playback."""

    def test_load_success(self, tmp_path: Path) -> None:
        """A present file loads on the first attempt at the current volume."""
        mixer = FakeMixer()
        manager = SoundManager(SoundSettings(volume=0.4), _sounds_dir(tmp_path, "goal-horn.mp3"), mixer=mixer)

        resource = manager.load("horn")

        assert resource.status == "loaded"
        assert resource.attempts == 1
        assert resource.sound.volume == pytest.approx(0.4)
        assert mixer.initialised

    def test_load_falls_back_to_second_file(self, tmp_path: Path) -> None:
        """Candidate files are tried in order."""
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path, "goal-bell.ogg"), mixer=FakeMixer())
        assert manager.load("bell").path.name == "goal-bell.ogg"

    def test_retries_then_succeeds(self, tmp_path: Path) -> None:
        """Transient failures are retried with a delay between attempts."""
        delays: List[float] = []
        mixer = FakeMixer(failures={"goal-cheer.mp3": 2})
        manager = SoundManager(
            SoundSettings(), _sounds_dir(tmp_path, "goal-cheer.mp3"), mixer=mixer, sleep=delays.append
        )

        resource = manager.load("cheer")

        assert resource.status == "loaded"
        assert resource.attempts == 3
        assert delays == [2.0, 2.0]

    def test_retries_are_bounded(self, tmp_path: Path) -> None:
        """After the last retry the sound stays failed."""
        delays: List[float] = []
        mixer = FakeMixer(failures={"goal-cheer.mp3": 5})
        manager = SoundManager(
            SoundSettings(), _sounds_dir(tmp_path, "goal-cheer.mp3"), mixer=mixer, sleep=delays.append
        )

        resource = manager.load("cheer")

        assert resource.status == "failed"
        assert resource.attempts == 3
        assert len(delays) == 2
        assert "Unable to open" in resource.error

    def test_missing_file_fails_without_retry(self, tmp_path: Path) -> None:
        """No candidate file means an immediate failure."""
        delays: List[float] = []
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path), mixer=FakeMixer(), sleep=delays.append)
        assert manager.load("whistle").status == "failed"
        assert delays == []

    def test_mixer_unavailable(self, tmp_path: Path) -> None:
        """A broken mixer fails loads and playback quietly."""
        manager = SoundManager(
            SoundSettings(), _sounds_dir(tmp_path, "goal-horn.mp3"), mixer=FakeMixer(init_error=True)
        )
        assert manager.play_cue("horn") is False
        assert manager.resources["horn"].status == "failed"

    def test_play_goal_cue_uses_resolution_order(self, tmp_path: Path) -> None:
        """Goals play the scorer's sound, own goals the team's."""
        mixer = FakeMixer()
        manager = SoundManager(
            SoundSettings(),
            _sounds_dir(tmp_path, "goal-horn.mp3", "goal-commentary.mp3"),
            mixer=mixer,
        )

        assert manager.play_goal_cue("Maciej M.", "blue") is True
        assert manager.play_goal_cue(None, "blue") is True
        assert manager.resources["horn"].sound.plays == 1
        assert manager.resources["commentary"].sound.plays == 1

    def test_disabled_sounds_do_not_play(self, tmp_path: Path) -> None:
        """Cues are silent when disabled, but previews still play."""
        store = SettingsStore()
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path, "goal-horn.mp3"), store=store, mixer=FakeMixer())
        manager.set_enabled(False)

        assert manager.play_goal_cue("Maciej M.", "yellow") is False
        assert manager.preview("horn") is True
        assert store.get("football-sounds-enabled") == "false"

    def test_set_volume_clamps_and_persists(self, tmp_path: Path) -> None:
        """Volume is clamped, applied to loaded sounds and stored."""
        store = SettingsStore()
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path, "goal-horn.mp3"), store=store, mixer=FakeMixer())
        manager.load("horn")

        manager.set_volume(1.7)

        assert manager.volume == 1.0
        assert manager.resources["horn"].sound.volume == 1.0
        assert store.get("football-sounds-volume") == "1.0"

    def test_progress_reload_and_report(self, tmp_path: Path) -> None:
        """Progress counts loaded sounds; force_reload starts over."""
        mixer = FakeMixer()
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path, "goal-horn.mp3", "goal-bell.mp3"), mixer=mixer)

        manager.preload()
        loaded, total = manager.loading_progress()
        assert (loaded, total) == (2, 7)

        manager.force_reload()
        assert mixer.loaded.count("goal-horn.mp3") == 2

        report = manager.status_report()
        assert report["sounds"]["horn"]["status"] == "loaded"
        assert report["sounds"]["cheer"]["status"] == "failed"

    def test_stop_all(self, tmp_path: Path) -> None:
        """Every loaded sound is stopped."""
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path, "goal-horn.mp3"), mixer=FakeMixer())
        manager.play_cue("horn")
        manager.stop_all()
        assert manager.resources["horn"].sound.stopped

    def test_mixer_shutdown_recovers(self, tmp_path: Path) -> None:
        """A playback error reinitialises the mixer and reloads on the next cue."""
        mixer = FakeMixer()
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path, "goal-horn.mp3"), mixer=mixer)
        assert manager.play_cue("horn") is True

        # Another component shut the mixer down.
        mixer.initialised = False
        manager.resources["horn"].sound.broken = True

        assert manager.play_cue("horn") is False
        assert manager.resources["horn"].status == "pending"

        assert manager.play_cue("horn") is True
        assert mixer.initialised
        assert mixer.loaded.count("goal-horn.mp3") == 2
        assert manager.resources["horn"].sound.plays == 1


class TestSoundPreferences:
    """Assigning sounds and registering uploads at runtime."""

    def test_assign_player_and_team_sounds(self, tmp_path: Path) -> None:
        """Assignments take effect immediately and are stored."""
        store = SettingsStore()
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path), store=store, mixer=FakeMixer())

        manager.assign_player_sound("Marcin P.", "bell")
        manager.assign_team_sound("blue", "whistle")

        assert manager.sound_for("Marcin P.", "yellow") == "bell"
        assert manager.sound_for(None, "blue") == "whistle"
        reloaded = SoundSettings.from_store(store)
        assert reloaded.player_sounds == {"Marcin P.": "bell"}
        assert reloaded.team_sounds == {"blue": "whistle"}

    def test_unknown_sound_leaves_preferences_unchanged(self, tmp_path: Path) -> None:
        """A rejected assignment neither applies nor persists."""
        store = SettingsStore()
        manager = SoundManager(SoundSettings(), _sounds_dir(tmp_path), store=store, mixer=FakeMixer())

        with pytest.raises(ValueError):
            manager.assign_player_sound("Marcin P.", "kazoo")

        assert manager.settings.player_sounds == {}
        assert SoundSettings.from_store(store).player_sounds == {}

    def test_uploaded_sound_is_playable_and_assignable(self, tmp_path: Path) -> None:
        """A custom sound joins the catalogue without rebuilding the manager."""
        sounds_dir = _sounds_dir(tmp_path, "my-goal.mp3")
        store = SettingsStore()
        manager = SoundManager(SoundSettings(), sounds_dir, store=store, mixer=FakeMixer())
        custom = CustomSound("custom:my-goal.mp3", "my goal.mp3", "my-goal.mp3", 1)

        manager.add_custom_sound(custom)
        manager.assign_team_sound("yellow", custom.sound_id)

        assert manager.play_goal_cue(None, "yellow") is True
        assert manager.loading_progress()[1] == 8
        assert [s.sound_id for s in SoundSettings.from_store(store).custom_sounds] == ["custom:my-goal.mp3"]
