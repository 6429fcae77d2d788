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
"""File sink for exported match summaries."""
from datetime import date
from pathlib import Path
from typing import Optional

from kickabout.engine.config import SCORER_CONFIG, ScorerConfig
from kickabout.engine.match_engine import MatchEngine
from kickabout.engine.summary import default_date_label, encode_summary, export_filename


def write_summary(content: str, directory: Path, filename: str, config: ScorerConfig = SCORER_CONFIG) -> Path:
    """Write summary text to disk with a leading byte-order marker.

    Parameters
    ----------
    content : str
        Summary text.
    directory : Path
        Destination directory; created when missing.
    filename : str
        Suggested file name.
    config : ScorerConfig
        Configuration supplying the encoding.

    Returns
    -------
    Path
        Location of the written file.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(encode_summary(content, config))
    return path


def export_match(engine: MatchEngine, directory: Path, today: Optional[date] = None) -> Path:
    """Render the engine's summary and store it under the conventional filename.

    Parameters
    ----------
    engine : MatchEngine
        Engine to summarise.
    directory : Path
        Destination directory.
    today : date | None, optional
        Date for the header and filename; the current date when omitted.

    Returns
    -------
    Path
        Location of the written file.
    """
    date_label = default_date_label(today, engine.config)
    content = engine.build_export_summary(date_label)
    path = write_summary(content, directory, export_filename(date_label, engine.config), engine.config)
    if engine.debugger:
        engine.debugger.log_match_event("export", f"Summary written to {path}")
    return path
