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
"""Play a scripted match with the built-in directory and export its summary."""
import random
from pathlib import Path

from kickabout.engine.match_engine import MatchEngine
from kickabout.utils.debug import MatchDebugger
from kickabout.utils.export import export_match
from kickabout.utils.generator import generate_rosters


def run_demo_match(goals: int = 8, seed: int = 7, out_dir: Path = Path("exports")) -> Path:
    """Draw rosters, score random goals and write the summary file.

    Parameters
    ----------
    goals : int
        Number of scoring actions to record (roughly one in six is an own goal).
    seed : int
        Seed for roster selection and scoring.
    out_dir : Path
        Destination of the summary.

    Returns
    -------
    Path
        Location of the written summary.
    """
    rng = random.Random(seed)
    debugger = MatchDebugger()
    engine = MatchEngine(debugger=debugger)

    generate_rosters(engine, per_team=5, rng=rng)
    engine.start_match()

    for _ in range(goals):
        team = rng.choice(engine.config.roster.teams)
        if rng.random() < 1 / 6:
            engine.record_own_goal(team)
            continue
        scorer, assistant = rng.sample(engine.roster(team), 2)
        engine.record_goal(team, scorer.name, assistant.name if rng.random() < 0.5 else None)

    path = export_match(engine, out_dir)
    debugger.close()
    print(path.read_text(encoding=engine.config.export.encoding))
    print(f"Summary written to {path}, telemetry in {debugger.log_path}")
    return path


if __name__ == "__main__":
    run_demo_match()
