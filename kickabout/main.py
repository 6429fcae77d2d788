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
"""Entry point for scorekeeping a match from the console and the optional scoreboard window."""
import argparse
import logging
import shlex
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from kickabout.audio.cues import SoundManager
from kickabout.engine.errors import MatchError
from kickabout.engine.events import GameAction
from kickabout.engine.match_engine import MatchEngine
from kickabout.engine.summary import format_action, format_player, team_label
from kickabout.models.player import DirectoryPlayer
from kickabout.utils.debug import MatchDebugger
from kickabout.utils.export import export_match
from kickabout.utils.generator import generate_rosters
from kickabout.utils.roster import get_players, load_rosters_from_json, remote_directory_from_env
from kickabout.utils.settings import SettingsStore, SoundSettings
from kickabout.utils.uploads import UploadError, register_custom_sound

HELP_TEXT = """Commands:
  add <team> <name>             register a player (team: yellow | blue)
  remove <team> <player_id>     drop a player during setup
  pick                          list directory players not yet selected
  random [per_team]             fill both rosters at random
  list                          show rosters with tallies
  start | pause | resume        control the match
  goal <team> <scorer> [assist] record a goal; quote names with spaces
  owngoal <team>                record an own goal
  undo | reset                  revert the last action or the whole match
  score | log                   show the score or the action log
  export [directory]            write the match summary
  sounds                        show audio status
  sound on|off | volume <0-1>   audio preferences
  preview <sound_id>            play a sound once
  upload <path>                 add a custom sound
  assign player <name> <sound>  give a player a goal sound
  assign team <team> <sound>    change a team's default goal sound
  quit"""


class ConsoleSession:
    """Line-oriented command interface over a :class:`MatchEngine`.

    Parameters
    ----------
    engine : MatchEngine
        Engine receiving the commands.
    directory : List[DirectoryPlayer]
        Player directory offered by ``pick`` and ``random``.
    audio : SoundManager | None, optional
        Plays goal cues after successful scoring commands.
    export_dir : Path, default=Path("exports")
        Default destination of ``export``.
    sounds_dir : Path, default=Path("sounds")
        Destination of uploaded sounds.
    store : SettingsStore | None, optional
        Store receiving uploaded-sound metadata.
    """

    def __init__(
        self,
        engine: MatchEngine,
        directory: List[DirectoryPlayer],
        audio: Optional[SoundManager] = None,
        export_dir: Path = Path("exports"),
        sounds_dir: Path = Path("sounds"),
        store: Optional[SettingsStore] = None,
    ) -> None:
        self.engine = engine
        self.directory = directory
        self.audio = audio
        self.export_dir = Path(export_dir)
        self.sounds_dir = Path(sounds_dir)
        self.store = store
        self.finished = False
        self._commands: Dict[str, Callable[[List[str]], str]] = {
            "add": self._cmd_add,
            "remove": self._cmd_remove,
            "pick": self._cmd_pick,
            "random": self._cmd_random,
            "list": self._cmd_list,
            "start": self._cmd_start,
            "pause": self._cmd_pause,
            "resume": self._cmd_resume,
            "goal": self._cmd_goal,
            "owngoal": self._cmd_own_goal,
            "undo": self._cmd_undo,
            "reset": self._cmd_reset,
            "score": self._cmd_score,
            "log": self._cmd_log,
            "export": self._cmd_export,
            "sounds": self._cmd_sounds,
            "sound": self._cmd_sound,
            "volume": self._cmd_volume,
            "preview": self._cmd_preview,
            "upload": self._cmd_upload,
            "assign": self._cmd_assign,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
        }

    def execute(self, line: str) -> str:
        """Run one command line and return the text to show.

        Engine rejections are reported as ``Error: ...`` lines rather than raised.

        Parameters
        ----------
        line : str
            Raw input such as ``goal yellow "Marcin P." "Adam T."``.

        Returns
        -------
        str
            Output of the command.
        """
        try:
            words = shlex.split(line)
        except ValueError as exc:
            return f"Error: {exc}"
        if not words:
            return ""
        handler = self._commands.get(words[0].lower())
        if handler is None:
            return f"Unknown command '{words[0]}'. Type 'help' for the list."
        try:
            return handler(words[1:])
        except MatchError as exc:
            if self.engine.debugger:
                self.engine.debugger.log_error(exc.code, str(exc))
            return f"Error [{exc.code}]: {exc}"
        except (UploadError, ValueError) as exc:
            return f"Error: {exc}"

    def announce(self, action: GameAction) -> None:
        """Play the goal cue for a freshly recorded action.

        Parameters
        ----------
        action : GameAction
            Goal or own goal just recorded.
        """
        if self.audio is not None:
            self.audio.play_goal_cue(action.scorer if action.is_goal else None, action.team)

    # ------------------------------------------------------------------
    # Roster commands
    # ------------------------------------------------------------------
    def _cmd_add(self, args: List[str]) -> str:
        """Register a player.

        Parameters
        ----------
        args : List[str]
            Team followed by the name words.

        Returns
        -------
        str
            Confirmation with the new player id.
        """
        if len(args) < 2:
            return "Usage: add <team> <name>"
        name = " ".join(args[1:])
        entry = next((e for e in self.directory if e.name == name), None)
        player = self.engine.add_player(args[0], name, directory_id=entry.id if entry else None)
        return f"Added {player.name} ({player.player_id}) to {team_label(args[0], self.engine.config)}"

    def _cmd_remove(self, args: List[str]) -> str:
        """Remove a player by match id.

        Parameters
        ----------
        args : List[str]
            Team and player id.

        Returns
        -------
        str
            Confirmation.
        """
        if len(args) != 2:
            return "Usage: remove <team> <player_id>"
        self.engine.remove_player(args[0], args[1])
        return f"Removed {args[1]}"

    def _cmd_pick(self, args: List[str]) -> str:
        """List directory entries that are still free.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            One name per line.
        """
        free = self.engine.available_for_selection(self.directory)
        if not free:
            return "Everyone in the directory is already selected."
        return "\n".join(f"  {entry.name}" for entry in free)

    def _cmd_random(self, args: List[str]) -> str:
        """Fill the rosters with random directory players.

        Parameters
        ----------
        args : List[str]
            Optional players-per-team count.

        Returns
        -------
        str
            The resulting rosters.
        """
        per_team = int(args[0]) if args else self.engine.config.roster.min_players
        generate_rosters(self.engine, self.directory, per_team=per_team)
        return self._cmd_list([])

    def _cmd_list(self, args: List[str]) -> str:
        """Show both rosters.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Players with ids and tallies, grouped by team.
        """
        config = self.engine.config
        lines = []
        for team, players in self.engine.snapshot().rosters.items():
            lines.append(f"{team_label(team, config)} ({len(players)}/{config.roster.max_players}):")
            lines.extend(f"  [{p.player_id}] {format_player(p, config)}" for p in players)
        if self.engine.phase == "setup":
            lines.append("Ready to start." if self.engine.can_start() else "Not ready to start.")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Match commands
    # ------------------------------------------------------------------
    def _cmd_start(self, args: List[str]) -> str:
        """Start the match.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Confirmation.
        """
        self.engine.start_match()
        return "Match started."

    def _cmd_pause(self, args: List[str]) -> str:
        """Lock scoring.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Confirmation.
        """
        self.engine.pause()
        return "Match paused."

    def _cmd_resume(self, args: List[str]) -> str:
        """Unlock scoring.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Confirmation.
        """
        self.engine.resume()
        return "Match resumed."

    def _cmd_goal(self, args: List[str]) -> str:
        """Record a goal and play its cue.

        Parameters
        ----------
        args : List[str]
            Team, scorer and optional assistant.

        Returns
        -------
        str
            The log line of the new action and the score.
        """
        if len(args) not in (2, 3):
            return 'Usage: goal <team> "<scorer>" ["<assistant>"]'
        action = self.engine.record_goal(args[0], args[1], args[2] if len(args) == 3 else None)
        self.announce(action)
        return f"{format_action(action, self.engine.config)}\n{self._cmd_score([])}"

    def _cmd_own_goal(self, args: List[str]) -> str:
        """Record an own goal and play its cue.

        Parameters
        ----------
        args : List[str]
            Team.

        Returns
        -------
        str
            The log line of the new action and the score.
        """
        if len(args) != 1:
            return "Usage: owngoal <team>"
        action = self.engine.record_own_goal(args[0])
        self.announce(action)
        return f"{format_action(action, self.engine.config)}\n{self._cmd_score([])}"

    def _cmd_undo(self, args: List[str]) -> str:
        """Revert the last action.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            The reverted log line and the score.
        """
        action = self.engine.undo_last()
        return f"Undone: {format_action(action, self.engine.config)}\n{self._cmd_score([])}"

    def _cmd_reset(self, args: List[str]) -> str:
        """Clear scores and tallies, keeping rosters.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Confirmation.
        """
        self.engine.reset_match()
        return "Match reset; rosters kept."

    def _cmd_score(self, args: List[str]) -> str:
        """Show the current score.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Score line with team labels.
        """
        config = self.engine.config
        first, second = config.roster.teams
        return (
            f"{team_label(first, config)} {self.engine.score(first)} - "
            f"{self.engine.score(second)} {team_label(second, config)}"
        )

    def _cmd_log(self, args: List[str]) -> str:
        """Show the action log, newest first.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            One log line per action.
        """
        actions = self.engine.actions
        if not actions:
            return "No actions yet."
        return "\n".join(format_action(a, self.engine.config) for a in reversed(actions))

    def _cmd_export(self, args: List[str]) -> str:
        """Write the summary file.

        Parameters
        ----------
        args : List[str]
            Optional destination directory.

        Returns
        -------
        str
            Path of the written file.
        """
        directory = Path(args[0]) if args else self.export_dir
        try:
            path = export_match(self.engine, directory)
        except OSError as exc:
            return f"Error: could not write summary: {exc}"
        return f"Summary written to {path}"

    # ------------------------------------------------------------------
    # Audio commands
    # ------------------------------------------------------------------
    def _cmd_sounds(self, args: List[str]) -> str:
        """Show audio status.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Enabled flag, volume, load progress and available cues.
        """
        if self.audio is None:
            return "Audio is not configured."
        report = self.audio.status_report()
        loaded, total = self.audio.loading_progress()
        cues = ", ".join(cue.sound_id for cue in self.audio.assignments.catalogue.playable())
        return (
            f"Enabled: {report['enabled']}  Volume: {report['volume']:.2f}  Loaded: {loaded}/{total}\n"
            f"Sounds: {cues}"
        )

    def _cmd_sound(self, args: List[str]) -> str:
        """Turn goal cues on or off.

        Parameters
        ----------
        args : List[str]
            ``on`` or ``off``.

        Returns
        -------
        str
            Confirmation.
        """
        if self.audio is None:
            return "Audio is not configured."
        if args not in (["on"], ["off"]):
            return "Usage: sound on|off"
        self.audio.set_enabled(args[0] == "on")
        return f"Sounds {args[0]}."

    def _cmd_volume(self, args: List[str]) -> str:
        """Change playback volume.

        Parameters
        ----------
        args : List[str]
            Volume between 0 and 1.

        Returns
        -------
        str
            The applied (clamped) volume.
        """
        if self.audio is None:
            return "Audio is not configured."
        if len(args) != 1:
            return "Usage: volume <0-1>"
        self.audio.set_volume(float(args[0]))
        return f"Volume {self.audio.volume:.2f}"

    def _cmd_preview(self, args: List[str]) -> str:
        """Play one sound regardless of the enabled flag.

        Parameters
        ----------
        args : List[str]
            Sound id.

        Returns
        -------
        str
            Whether playback started.
        """
        if self.audio is None:
            return "Audio is not configured."
        if len(args) != 1:
            return "Usage: preview <sound_id>"
        return "Playing." if self.audio.preview(args[0]) else f"Could not play '{args[0]}'."

    def _cmd_upload(self, args: List[str]) -> str:
        """Register a custom sound file.

        Parameters
        ----------
        args : List[str]
            Path of the audio file.

        Returns
        -------
        str
            Id of the new sound.
        """
        if self.store is None:
            return "Settings store is not configured."
        if len(args) != 1:
            return "Usage: upload <path>"
        sound = register_custom_sound(Path(args[0]), self.sounds_dir, self.store)
        if self.audio is not None:
            self.audio.add_custom_sound(sound)
        return f"Registered {sound.sound_id} ({sound.size} bytes); use 'assign' to give it to a player or team."

    def _cmd_assign(self, args: List[str]) -> str:
        """Assign a goal sound to a player or a team.

        Parameters
        ----------
        args : List[str]
            ``player``, the player name and a sound id, or ``team``, the team and a sound id.

        Returns
        -------
        str
            Confirmation.
        """
        if self.audio is None:
            return "Audio is not configured."
        if len(args) != 3 or args[0] not in ("player", "team"):
            return 'Usage: assign player "<name>" <sound_id> | assign team <team> <sound_id>'
        kind, target, sound_id = args
        if kind == "player":
            self.audio.assign_player_sound(target, sound_id)
        else:
            if target not in self.engine.config.roster.teams:
                return f"Unknown team '{target}'"
            self.audio.assign_team_sound(target, sound_id)
        return f"{target} now plays {sound_id}."

    def _cmd_help(self, args: List[str]) -> str:
        """Show the command list.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Help text.
        """
        return HELP_TEXT

    def _cmd_quit(self, args: List[str]) -> str:
        """End the session.

        Parameters
        ----------
        args : List[str]
            Unused.

        Returns
        -------
        str
            Farewell line.
        """
        self.finished = True
        return "Bye."


def build_parser() -> argparse.ArgumentParser:
    """Describe the command-line options.

    Returns
    -------
    argparse.ArgumentParser
        Parser for :func:`main`.
    """
    parser = argparse.ArgumentParser(description="Keep score of a pickup football match.")
    parser.add_argument("--lineup", type=Path, default=Path("data/lineup.json"), help="saved line-up to preload")
    parser.add_argument("--cache", type=Path, default=Path("data/players_cache.json"), help="offline directory cache")
    parser.add_argument("--log-dir", default="debug_logs", help="directory for match telemetry logs")
    parser.add_argument("--sounds-dir", type=Path, default=Path("sounds"), help="directory holding sound files")
    parser.add_argument("--settings", type=Path, default=Path("data/settings.json"), help="settings file")
    parser.add_argument("--export-dir", type=Path, default=Path("exports"), help="summary destination")
    parser.add_argument("--no-window", action="store_true", help="do not open the scoreboard window")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Wire the engine to its collaborators and run the console loop.

    Parameters
    ----------
    argv : List[str] | None, optional
        Command-line arguments; ``sys.argv`` when omitted.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    debugger = MatchDebugger(args.log_dir)
    engine = MatchEngine(debugger=debugger)

    directory = get_players(remote_directory_from_env(), args.cache)
    if args.lineup.exists():
        try:
            first, second = load_rosters_from_json(str(args.lineup), engine)
            print(f"Loaded line-up from {args.lineup}: {first} + {second} players")
        except (OSError, ValueError, KeyError) as e:
            print(f"Error loading line-up from {args.lineup}: {e}")
            print("Starting with empty rosters...")
    else:
        print(f"No line-up file found at {args.lineup}")

    store = SettingsStore(args.settings)
    audio = SoundManager(SoundSettings.from_store(store), args.sounds_dir, store=store)
    audio.preload()

    session = ConsoleSession(engine, directory, audio, args.export_dir, args.sounds_dir, store)

    # The scoreboard window is optional; the console works without pygame.
    vis_thread = None
    if not args.no_window:
        from kickabout.visualizer.scoreboard import pygame as _pygame, start_scoreboard

        if _pygame is not None:
            vis_thread = threading.Thread(
                target=start_scoreboard,
                args=(engine,),
                kwargs={"on_action": session.announce},
                daemon=True,
            )
            vis_thread.start()

    print(HELP_TEXT)
    try:
        while not session.finished:
            try:
                line = input("> ")
            except EOFError:
                break
            output = session.execute(line)
            if output:
                print(output)
    except KeyboardInterrupt:
        print("\nScorekeeping interrupted.")
    finally:
        audio.stop_all()
        debugger.close()

    print(f"\nFinal Score: {session.execute('score')}")
    print(f"Telemetry written to {debugger.log_path}")


if __name__ == "__main__":
    main()
