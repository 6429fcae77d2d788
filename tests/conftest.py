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
"""Shared fixtures for engine and collaborator tests."""

from datetime import datetime
from typing import Callable, List

import pytest

from kickabout.engine.match_engine import MatchEngine

YELLOW_NAMES = ["Marcin P.", "Adam T.", "Bartek K.", "Jakub L.", "Wojtek S."]
BLUE_NAMES = ["Kamil R.", "Piotr N.", "Michał G.", "Tomek W.", "Łukasz J."]


def fixed_clock(hour: int = 18, minute: int = 30) -> Callable[[], datetime]:
    """Build a clock that always reports the same wall-clock time.

    Parameters
    ----------
    hour : int
        Hour reported by the clock.
    minute : int
        Minute reported by the clock.

    Returns
    -------
    Callable[[], datetime]
        Zero-argument callable usable as ``MatchEngine(clock=...)``.
    """
    return lambda: datetime(2025, 1, 1, hour, minute)


def fill_rosters(engine: MatchEngine, yellow: List[str] = YELLOW_NAMES, blue: List[str] = BLUE_NAMES) -> None:
    """Register the given names on both rosters.

    Parameters
    ----------
    engine : MatchEngine
        Engine in setup.
    yellow : List[str]
        Names for the yellow roster.
    blue : List[str]
        Names for the blue roster.
    """
    for name in yellow:
        engine.add_player("yellow", name)
    for name in blue:
        engine.add_player("blue", name)


@pytest.fixture
def engine() -> MatchEngine:
    """Engine in setup with empty rosters and a fixed clock."""
    return MatchEngine(clock=fixed_clock())


@pytest.fixture
def live_engine() -> MatchEngine:
    """Engine with five players per side and the match started."""
    eng = MatchEngine(clock=fixed_clock())
    fill_rosters(eng)
    eng.start_match()
    return eng
