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
"""Registration of user-supplied goal sounds."""
import logging
import mimetypes
import re
import shutil
from pathlib import Path
from typing import List

from kickabout.engine.config import SCORER_CONFIG, AudioConfig
from kickabout.utils.settings import CustomSound, SettingsStore, SoundSettings

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


class UploadError(ValueError):
    """Raised when a sound file cannot be registered.

    Parameters
    ----------
    filename : str
        Name of the rejected file.
    reason : str
        Why the file was rejected.
    """

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot register {filename}: {reason}")


def clean_filename(filename: str) -> str:
    """Replace characters outside ``[a-zA-Z0-9.-]`` with dashes.

    Parameters
    ----------
    filename : str
        Original file name.

    Returns
    -------
    str
        Name safe to store in the sounds directory.
    """
    return _UNSAFE_FILENAME_CHARS.sub("-", filename)


def is_audio_file(path: Path) -> bool:
    """Check a file's guessed media type.

    Parameters
    ----------
    path : Path
        File to inspect.

    Returns
    -------
    bool
        ``True`` when the extension maps to an ``audio/*`` type.
    """
    mime, _ = mimetypes.guess_type(path.name)
    return bool(mime and mime.startswith("audio/"))


def list_custom_sounds(store: SettingsStore, config: AudioConfig = SCORER_CONFIG.audio) -> List[CustomSound]:
    """Return previously registered uploads.

    Parameters
    ----------
    store : SettingsStore
        Store holding the upload metadata.
    config : AudioConfig, optional
        Key names.

    Returns
    -------
    List[CustomSound]
        Uploaded sounds in registration order.
    """
    return SoundSettings.from_store(store, config).custom_sounds


def register_custom_sound(
    source: Path, sounds_dir: Path, store: SettingsStore, config: AudioConfig = SCORER_CONFIG.audio
) -> CustomSound:
    """Copy an audio file into the sounds directory and record its metadata.

    Registering a file whose cleaned name is already known replaces the earlier
    upload.

    Parameters
    ----------
    source : Path
        Audio file supplied by the user.
    sounds_dir : Path
        Directory the sound manager loads files from.
    store : SettingsStore
        Store receiving the upload metadata.
    config : AudioConfig, optional
        Key names.

    Returns
    -------
    CustomSound
        Metadata of the registered sound.

    Raises
    ------
    UploadError
        The file does not exist or is not an audio file.
    """
    source = Path(source)
    if not source.is_file():
        raise UploadError(source.name, "file not found")
    if not is_audio_file(source):
        raise UploadError(source.name, "not an audio file")

    filename = clean_filename(source.name)
    sounds_dir = Path(sounds_dir)
    sounds_dir.mkdir(parents=True, exist_ok=True)
    target = sounds_dir / filename
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise UploadError(source.name, str(exc)) from exc

    sound = CustomSound(
        sound_id=f"custom:{filename}",
        name=source.name,
        filename=filename,
        size=target.stat().st_size,
    )
    settings = SoundSettings.from_store(store, config)
    settings.custom_sounds = [s for s in settings.custom_sounds if s.sound_id != sound.sound_id] + [sound]
    store.set_json(config.custom_sounds_key, [s.as_dict() for s in settings.custom_sounds])
    logger.info("Registered custom sound %s (%d bytes)", filename, sound.size)
    return sound
