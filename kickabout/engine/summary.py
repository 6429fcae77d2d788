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
"""Plain-text match summary rendering and encoding."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, List, Optional, Tuple

from kickabout.engine.config import SCORER_CONFIG, ScorerConfig
from kickabout.engine.events import GameAction

if TYPE_CHECKING:
    from kickabout.engine.match_engine import MatchSnapshot, PlayerLine


def team_label(team: str, config: ScorerConfig = SCORER_CONFIG) -> str:
    """Return the display label for a team identifier.

    Parameters
    ----------
    team : str
        Team identifier such as ``"yellow"``.
    config : ScorerConfig
        Configuration supplying the labels.

    Returns
    -------
    str
        Configured label, or ``team`` itself when no label is defined.
    """
    return config.labels.team_labels.get(team, team)


def plural(count: int, forms: Tuple[str, str]) -> str:
    """Render ``count`` with the singular form for exactly one, plural otherwise.

    Parameters
    ----------
    count : int
        Number being described.
    forms : Tuple[str, str]
        Singular and plural word forms.

    Returns
    -------
    str
        ``"<count> <word>"``.
    """
    word = forms[0] if count == 1 else forms[1]
    return f"{count} {word}"


def format_action(action: GameAction, config: ScorerConfig = SCORER_CONFIG) -> str:
    """Render one action log entry as a summary line.

    Parameters
    ----------
    action : GameAction
        Entry to render.
    config : ScorerConfig
        Configuration supplying wording and labels.

    Returns
    -------
    str
        Line without a trailing newline.
    """
    words = config.export
    label = team_label(action.team, config)
    if action.is_goal:
        line = f"{action.timestamp} - {words.goal_word}: {action.scorer} ({label})"
        if action.assistant:
            line += f", {words.assist_word}: {action.assistant}"
        return line
    return f"{action.timestamp} - {words.own_goal_word} ({label})"


def format_player(line: "PlayerLine", config: ScorerConfig = SCORER_CONFIG) -> str:
    """Render one player's statistics line.

    Parameters
    ----------
    line : PlayerLine
        Snapshot of the player's tallies.
    config : ScorerConfig
        Configuration supplying the word forms.

    Returns
    -------
    str
        Line without a trailing newline.
    """
    words = config.export
    return (
        f"{line.name} ({team_label(line.team, config)}): "
        f"{plural(line.goals, words.goal_forms)}, {plural(line.assists, words.assist_forms)}"
    )


def ranked_contributors(snapshot: "MatchSnapshot") -> List["PlayerLine"]:
    """Players with at least one goal or assist, best first.

    Parameters
    ----------
    snapshot : MatchSnapshot
        State to rank.

    Returns
    -------
    List[PlayerLine]
        Contributors sorted by goals then assists, both descending; ties keep
        roster order with yellow before blue.
    """
    contributors = [p for p in snapshot.all_players() if p.goals > 0 or p.assists > 0]
    return sorted(contributors, key=lambda p: (-p.goals, -p.assists))


def render_summary(snapshot: "MatchSnapshot", date_label: str, config: ScorerConfig = SCORER_CONFIG) -> str:
    """Produce the human-readable match report.

    Parameters
    ----------
    snapshot : MatchSnapshot
        State to summarise.
    date_label : str
        Date printed in the header, for example ``"01.01.2025"``.
    config : ScorerConfig
        Configuration supplying wording and labels.

    Returns
    -------
    str
        Multi-line report: header with the final score, chronological action
        list and ranked player statistics.
    """
    words = config.export
    first, second = config.roster.teams
    lines = [
        f"{words.title} - {date_label}",
        "",
        (
            f"{words.final_score}: {team_label(first, config)} {snapshot.scoreboard.score_for(first)} - "
            f"{snapshot.scoreboard.score_for(second)} {team_label(second, config)}"
        ),
        "",
        f"{words.events_heading}:",
    ]
    lines.extend(format_action(action, config) for action in snapshot.actions)
    lines.append("")
    lines.append(f"{words.stats_heading}:")
    lines.extend(format_player(player, config) for player in ranked_contributors(snapshot))
    return "\n".join(lines) + "\n"


def encode_summary(summary: str, config: ScorerConfig = SCORER_CONFIG) -> bytes:
    """Encode a summary for file export with a leading byte-order marker.

    Parameters
    ----------
    summary : str
        Text returned by :func:`render_summary`.
    config : ScorerConfig
        Configuration supplying the encoding.

    Returns
    -------
    bytes
        Encoded text starting with the UTF-8 BOM.
    """
    return summary.encode(config.export.encoding)


def default_date_label(today: Optional[date] = None, config: ScorerConfig = SCORER_CONFIG) -> str:
    """Format a date the way exported summaries display it.

    Parameters
    ----------
    today : date, optional
        Date to format; the current local date when omitted.
    config : ScorerConfig
        Configuration supplying the date pattern.

    Returns
    -------
    str
        Formatted label such as ``"01.01.2025"``.
    """
    return (today or date.today()).strftime(config.export.date_format)


def export_filename(date_label: str, config: ScorerConfig = SCORER_CONFIG) -> str:
    """Suggest a filename for an exported summary.

    Parameters
    ----------
    date_label : str
        Date label used in the summary header; dots become dashes.
    config : ScorerConfig
        Configuration supplying the filename pattern.

    Returns
    -------
    str
        Filename such as ``"dziennik_meczu_01-01-2025.txt"``.
    """
    return config.export.filename_pattern.format(date=date_label.replace(".", "-"))
