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
"""Player directory sources: remote table, offline cache, local files and built-in list.

The roster picker must never be blocked by an unavailable directory, so
:func:`get_players` walks a fallback chain: the remote ``players`` table, the
last successful fetch cached on disk, and finally the built-in list of
regulars. Network and file errors are logged and swallowed at this boundary.
"""
import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import requests

from kickabout.engine.config import SCORER_CONFIG, DirectoryConfig
from kickabout.models.player import DirectoryPlayer
from kickabout.utils.generator import default_directory

if TYPE_CHECKING:
    from kickabout.engine.match_engine import MatchEngine

logger = logging.getLogger(__name__)


def directory_entry_from_dict(d: dict) -> DirectoryPlayer:
    """Build a ``DirectoryPlayer`` from a plain dictionary payload.

    Parameters
    ----------
    d
        A mapping with ``id``, ``name`` and optionally ``created_at`` keys, as
        returned by the remote table or stored in the offline cache.

    Returns
    -------
    DirectoryPlayer
        Directory entry with defaults for any missing optional values.

    """
    return DirectoryPlayer(
        id=int(d.get("id", 0)),
        name=str(d.get("name", f"player_{d.get('id', 0)}")).strip(),
        created_at=str(d.get("created_at") or ""),
    )


class RemotePlayerDirectory:
    """Client for the hosted ``players`` table exposed over a REST interface.

    Parameters
    ----------
    base_url : str
        Project URL, for example ``"https://example.supabase.co"``.
    api_key : str
        Key sent in the ``apikey`` and bearer ``Authorization`` headers.
    session : requests.Session | None, optional
        HTTP session to reuse; a new one is created when omitted.
    config : DirectoryConfig, optional
        Endpoint path and timeout.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        config: DirectoryConfig = SCORER_CONFIG.directory,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.config = config

    @property
    def players_url(self) -> str:
        """Absolute URL of the players table."""
        return f"{self.base_url}{self.config.players_path}"

    def get_players(self) -> List[DirectoryPlayer]:
        """Fetch the directory ordered by name.

        Returns
        -------
        List[DirectoryPlayer]
            Directory entries as stored remotely.

        Raises
        ------
        requests.RequestException
            The request failed or returned an error status.
        ValueError
            The response body was not a JSON list.
        """
        resp = self.session.get(
            self.players_url,
            params={"select": "*", "order": "name"},
            headers={"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"},
            timeout=self.config.timeout,
        )
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, list):
            raise ValueError("Player directory response is not a list")
        return [directory_entry_from_dict(item) for item in payload]


def remote_directory_from_env(
    environ: Optional[Dict[str, str]] = None, config: DirectoryConfig = SCORER_CONFIG.directory
) -> Optional[RemotePlayerDirectory]:
    """Build a remote directory client from environment variables.

    Parameters
    ----------
    environ : Dict[str, str] | None, optional
        Environment mapping; ``os.environ`` when omitted.
    config : DirectoryConfig, optional
        Names of the URL and key variables.

    Returns
    -------
    Optional[RemotePlayerDirectory]
        Configured client, or ``None`` when either variable is unset.
    """
    env = os.environ if environ is None else environ
    url = env.get(config.url_env)
    key = env.get(config.key_env)
    if not url or not key:
        return None
    return RemotePlayerDirectory(url, key, config=config)


def save_directory_cache(entries: List[DirectoryPlayer], path: Path) -> None:
    """Persist a directory listing for offline use.

    Parameters
    ----------
    entries : List[DirectoryPlayer]
        Listing to store.
    path : Path
        Cache file location; parent directories are created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump([e.as_dict() for e in entries], fh, ensure_ascii=False, indent=2)


def load_directory_from_json(path: str) -> List[DirectoryPlayer]:
    """Load a directory listing from a JSON file.

    Accepts either a bare list of entries or an object with a ``players`` list.

    Parameters
    ----------
    path
        Filesystem path of the JSON document.

    Returns
    -------
    List[DirectoryPlayer]
        Entries in file order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    ValueError
        Raised when the payload has no player list.

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Player directory JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data: Any = json.load(fh)

    if isinstance(data, dict):
        data = data.get("players")
    if not isinstance(data, list):
        raise ValueError(f"No player list found in {path}")
    return [directory_entry_from_dict(item) for item in data]


def get_players(
    remote: Optional[RemotePlayerDirectory] = None, cache_path: Optional[Path] = None
) -> List[DirectoryPlayer]:
    """Return the directory listing, falling back until something is available.

    Parameters
    ----------
    remote : RemotePlayerDirectory | None, optional
        Hosted directory to query first.
    cache_path : Path | None, optional
        Offline cache refreshed after a successful remote fetch and read when
        the remote is unavailable.

    Returns
    -------
    List[DirectoryPlayer]
        Remote listing, cached listing, or the built-in regulars, in that order
        of preference. Empty listings count as unavailable.
    """
    if remote is not None:
        try:
            entries = remote.get_players()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Player directory unavailable: %s", exc)
        else:
            if entries:
                if cache_path is not None:
                    try:
                        save_directory_cache(entries, cache_path)
                    except OSError as exc:
                        logger.warning("Could not write directory cache %s: %s", cache_path, exc)
                return entries
            logger.info("Player directory is empty")

    if cache_path is not None and cache_path.exists():
        try:
            cached = load_directory_from_json(str(cache_path))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable directory cache %s: %s", cache_path, exc)
        else:
            if cached:
                logger.info("Using cached player directory from %s", cache_path)
                return cached

    logger.info("Using built-in player directory")
    return default_directory()


def load_rosters_from_json(path: str, engine: "MatchEngine") -> Tuple[int, int]:
    """Seed an engine's rosters from a saved line-up file.

    The document maps team identifiers to ``{"players": [...]}`` sections whose
    entries are either names or directory-style objects. Loading is
    all-or-nothing: if any entry is rejected, the players already added from
    the file are removed again before the error propagates.

    Parameters
    ----------
    path
        Filesystem path of the line-up JSON document.
    engine
        Engine in setup that receives the players.

    Returns
    -------
    tuple[int, int]
        Number of players added to the first and second team.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    KeyError
        Raised when a configured team section is missing.
    MatchError
        Raised when the engine rejects an entry (full roster, duplicate or blank name).

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Line-up JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    added: List[Tuple[str, str]] = []

    def build_roster(team: str) -> int:
        tdata = data[team]
        count = 0
        for item in tdata.get("players", []):
            if isinstance(item, dict):
                entry = directory_entry_from_dict(item)
                player = engine.add_player(team, entry.name, directory_id=entry.id or None)
            else:
                player = engine.add_player(team, str(item))
            added.append((team, player.player_id))
            count += 1
        return count

    first, second = engine.config.roster.teams
    try:
        return build_roster(first), build_roster(second)
    except (KeyError, ValueError):
        for team, player_id in reversed(added):
            engine.remove_player(team, player_id)
        raise
