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
"""Structured logging utilities used to trace scorekeeping sessions."""
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Deque, List, Optional, TextIO, Tuple

if TYPE_CHECKING:
    from kickabout.engine.events import GameAction


@dataclass
class DebugEvent:
    """Record representing a single logged entry.

    Parameters
    ----------
    timestamp : str
        Wall-clock time (``HH:MM:SS``) when the entry was written.
    event_type : str
        Category label describing the entry, for example ``"ACTION"``.
    details : str
        Human-readable description providing additional context.
    """

    timestamp: str
    event_type: str
    details: str

    def render(self) -> str:
        """Format the entry as a single log line.

        Returns
        -------
        str
            Line in the ``[HH:MM:SS] CATEGORY: details`` layout.
        """
        return f"[{self.timestamp}] {self.event_type}: {self.details}"


class MatchDebugger:
    """Helper object that streams match telemetry to disk.

    Parameters
    ----------
    output_dir : str, default="debug_logs"
        Directory where new session logs are created; created automatically when missing.
    """

    def __init__(self, output_dir: str = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str
            Filesystem directory where log files are created.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new logging session."""
        if self.log_file:
            self.log_file.close()

        filename = f"match_log_{self.session_start}.txt"
        self.log_path = self.output_dir / filename
        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Match Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_roster_change(self, team: str, name: str, change: str) -> None:
        """Log a player joining or leaving a roster.

        Parameters
        ----------
        team : str
            Team identifier whose roster changed.
        name : str
            Display name of the affected player.
        change : str
            Either ``"added"`` or ``"removed"``.
        """
        self._write_log("ROSTER", f"Team: {team} | Player: {name} | Change: {change}")

    def log_action(self, action: "GameAction", undone: bool = False) -> None:
        """Log a recorded or reverted scoring action.

        Parameters
        ----------
        action : GameAction
            The action appended to, or popped from, the log.
        undone : bool, default=False
            ``True`` when the action was removed by an undo.
        """
        assist_str = f" | Assist: {action.assistant}" if action.assistant else ""
        self._write_log(
            "UNDO" if undone else "ACTION",
            f"Id: {action.action_id} | Type: {action.action_type} | Team: {action.team} | "
            f"Scorer: {action.scorer}{assist_str}",
        )

    def log_match_event(self, event_type: str, description: str) -> None:
        """Log a lifecycle event (start, pause, reset, export).

        Parameters
        ----------
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log("MATCH_EVENT", f"Event: {event_type} | Details: {description}")

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the file.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        entry = DebugEvent(time.strftime("%H:%M:%S"), event_type, details)
        log_entry = entry.render()

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
