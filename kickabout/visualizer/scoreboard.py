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
"""Pygame scoreboard window for recording goals by clicking player names.

Left-click a player to credit an unassisted goal, click a team's own-goal
button to record an own goal, ``Space`` starts, pauses or resumes the match,
``U`` undoes the last action and ``Q`` closes the window.
"""
from typing import Callable, List, Optional, Tuple

try:
    import pygame
except Exception:
    pygame = None

from kickabout.engine.errors import MatchError
from kickabout.engine.events import GameAction
from kickabout.engine.match_engine import MatchEngine, MatchSnapshot
from kickabout.engine.summary import format_action, team_label

Rect = Tuple[int, int, int, int]

ROW_HEIGHT = 34
HEADER_HEIGHT = 120
PANEL_MARGIN = 16
LOG_LINES = 6


def layout_player_rows(snapshot: MatchSnapshot, screen_size: Tuple[int, int]) -> List[Tuple[str, str, Rect]]:
    """Compute the clickable row of every player.

    Teams are laid out as side-by-side columns below the score header.

    Parameters
    ----------
    snapshot : MatchSnapshot
        State whose rosters are drawn.
    screen_size : Tuple[int, int]
        Window width and height in pixels.

    Returns
    -------
    List[Tuple[str, str, Rect]]
        ``(team, player_name, (x, y, w, h))`` per player, in roster order.
    """
    width, _ = screen_size
    teams = list(snapshot.rosters)
    column_w = (width - PANEL_MARGIN * (len(teams) + 1)) // max(1, len(teams))
    rows: List[Tuple[str, str, Rect]] = []
    for column, team in enumerate(teams):
        x = PANEL_MARGIN + column * (column_w + PANEL_MARGIN)
        for index, line in enumerate(snapshot.rosters[team]):
            y = HEADER_HEIGHT + index * ROW_HEIGHT
            rows.append((team, line.name, (x, y, column_w, ROW_HEIGHT - 4)))
    return rows


def layout_own_goal_buttons(snapshot: MatchSnapshot, screen_size: Tuple[int, int], max_players: int) -> List[Tuple[str, Rect]]:
    """Compute the own-goal button under each team column.

    Parameters
    ----------
    snapshot : MatchSnapshot
        State whose teams are drawn.
    screen_size : Tuple[int, int]
        Window width and height in pixels.
    max_players : int
        Roster capacity, which fixes the button row below the longest roster.

    Returns
    -------
    List[Tuple[str, Rect]]
        ``(team, (x, y, w, h))`` per team.
    """
    width, _ = screen_size
    teams = list(snapshot.rosters)
    column_w = (width - PANEL_MARGIN * (len(teams) + 1)) // max(1, len(teams))
    y = HEADER_HEIGHT + max_players * ROW_HEIGHT + 8
    return [
        (team, (PANEL_MARGIN + column * (column_w + PANEL_MARGIN), y, column_w, ROW_HEIGHT))
        for column, team in enumerate(teams)
    ]


def hit_test(rect: Rect, pos: Tuple[int, int]) -> bool:
    """Check whether a point falls inside a rectangle.

    Parameters
    ----------
    rect : Rect
        ``(x, y, w, h)`` rectangle.
    pos : Tuple[int, int]
        Point in window coordinates.

    Returns
    -------
    bool
        ``True`` when ``pos`` lies inside ``rect``.
    """
    x, y, w, h = rect
    return x <= pos[0] < x + w and y <= pos[1] < y + h


def handle_click(
    engine: MatchEngine, pos: Tuple[int, int], screen_size: Tuple[int, int]
) -> Optional[GameAction]:
    """Translate a click into a scoring command.

    Parameters
    ----------
    engine : MatchEngine
        Engine receiving the command.
    pos : Tuple[int, int]
        Click position in window coordinates.
    screen_size : Tuple[int, int]
        Window width and height in pixels.

    Returns
    -------
    Optional[GameAction]
        Recorded action, or ``None`` when the click hit nothing.

    Raises
    ------
    MatchError
        The engine rejected the command.
    """
    snapshot = engine.snapshot()
    for team, name, rect in layout_player_rows(snapshot, screen_size):
        if hit_test(rect, pos):
            return engine.record_goal(team, name)
    for team, rect in layout_own_goal_buttons(snapshot, screen_size, engine.config.roster.max_players):
        if hit_test(rect, pos):
            return engine.record_own_goal(team)
    return None


def toggle_play(engine: MatchEngine) -> str:
    """Start the match, or flip between paused and running.

    Parameters
    ----------
    engine : MatchEngine
        Engine to control.

    Returns
    -------
    str
        Status message describing the new state.

    Raises
    ------
    MatchError
        The match cannot be started yet.
    """
    if engine.phase == "setup":
        engine.start_match()
        return "Mecz rozpoczęty"
    if engine.is_paused:
        engine.resume()
        return "Wznowiono"
    engine.pause()
    return "PAUZA"


def start_scoreboard(
    engine: MatchEngine,
    screen_size: Tuple[int, int] = (900, 600),
    fps: int = 30,
    on_action: Optional[Callable[[GameAction], None]] = None,
) -> None:
    """Open the scoreboard window and run its event loop until closed.

    If ``pygame`` is not installed the function returns immediately. Closing
    the window shuts down only the display; the shared audio mixer stays up.

    Parameters
    ----------
    engine : MatchEngine
        Engine rendered and controlled by the window.
    screen_size : Tuple[int, int]
        Initial window size in pixels.
    fps : int
        Redraw rate.
    on_action : Callable[[GameAction], None] | None, optional
        Called after each goal or own goal recorded from the window, for
        example to play a goal cue.
    """
    if pygame is None:
        return

    pygame.display.init()
    pygame.font.init()
    screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
    pygame.display.set_caption("Kickabout")
    clock = pygame.time.Clock()

    # Colors
    BACKGROUND = (254, 243, 199)
    YELLOW = (250, 204, 21)
    BLUE = (59, 130, 246)
    TEXT = (20, 20, 20)
    MUTED = (90, 90, 90)
    OWN_GOAL = (220, 38, 38)
    team_colors = {"yellow": YELLOW, "blue": BLUE}

    font = pygame.font.SysFont(None, 24)
    score_font = pygame.font.SysFont(None, 72)
    status = "Spacja: start/pauza, U: cofnij, Q: wyjdź"

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen_size = (event.w, event.h)
                screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
            elif event.type == pygame.KEYDOWN:
                try:
                    if event.key == pygame.K_q:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        status = toggle_play(engine)
                    elif event.key == pygame.K_u:
                        undone = engine.undo_last()
                        status = f"Cofnięto: {format_action(undone, engine.config)}"
                except MatchError as exc:
                    status = str(exc)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                try:
                    action = handle_click(engine, event.pos, screen_size)
                except MatchError as exc:
                    status = str(exc)
                else:
                    if action is not None:
                        status = format_action(action, engine.config)
                        if on_action:
                            on_action(action)

        snapshot = engine.snapshot()
        screen.fill(BACKGROUND)

        # Score header
        teams = list(snapshot.rosters)
        score_text = " - ".join(str(snapshot.scoreboard.score_for(t)) for t in teams)
        score_surf = score_font.render(score_text, True, TEXT)
        screen.blit(score_surf, ((screen_size[0] - score_surf.get_width()) // 2, 16))
        phase_text = "PAUZA" if snapshot.paused else ("MECZ" if snapshot.phase == "active" else "USTAWIENIA")
        phase_surf = font.render(phase_text, True, MUTED)
        screen.blit(phase_surf, ((screen_size[0] - phase_surf.get_width()) // 2, 80))

        # Rosters
        lines_by_name = {(line.team, line.name): line for line in snapshot.all_players()}
        for team, name, rect in layout_player_rows(snapshot, screen_size):
            line = lines_by_name[(team, name)]
            pygame.draw.rect(screen, team_colors.get(team, MUTED), rect, border_radius=6)
            label = f"{name}   {line.goals}G {line.assists}A"
            screen.blit(font.render(label, True, TEXT), (rect[0] + 8, rect[1] + 6))

        for team, rect in layout_own_goal_buttons(snapshot, screen_size, engine.config.roster.max_players):
            pygame.draw.rect(screen, OWN_GOAL, rect, border_radius=6)
            text = font.render(f"Samobój ({team_label(team, engine.config)})", True, (255, 255, 255))
            screen.blit(text, (rect[0] + 8, rect[1] + 8))

        # Recent actions, newest first
        log_top = HEADER_HEIGHT + engine.config.roster.max_players * ROW_HEIGHT + ROW_HEIGHT + 24
        for idx, action in enumerate(reversed(snapshot.actions[-LOG_LINES:])):
            text = font.render(format_action(action, engine.config), True, TEXT)
            screen.blit(text, (PANEL_MARGIN, log_top + idx * 22))

        screen.blit(font.render(status, True, MUTED), (PANEL_MARGIN, screen_size[1] - 28))

        pygame.display.flip()
        clock.tick(fps)

    # Only the window closes; the mixer keeps serving goal cues from the console.
    pygame.display.quit()
