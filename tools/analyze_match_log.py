#!/usr/bin/env python3
"""
Summarise a scorekeeping telemetry log.

Replays the ACTION and UNDO lines of a ``match_log_*.txt`` file to report the
final score, per-player goals and assists, own goals and how often actions
were undone.

Usage:
    python tools/analyze_match_log.py <log_file_path>
"""

import re
import sys
from collections import Counter, defaultdict
from pathlib import Path

LINE_RE = re.compile(r'^\[(\d\d:\d\d:\d\d)\] (\w+): (.+)$')
ACTION_RE = re.compile(
    r'Id: (\d+) \| Type: (\w+) \| Team: (\w+) \| Scorer: (.+?)(?: \| Assist: (.+))?$'
)


def parse_log_file(log_path):
    """Parse the log and replay its actions in order."""
    categories = Counter()
    live = {}
    undone = []
    errors = Counter()
    match_events = []

    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            match = LINE_RE.match(line.strip())
            if not match:
                continue
            clock, category, details = match.groups()
            categories[category] += 1

            if category in ('ACTION', 'UNDO'):
                action = ACTION_RE.match(details)
                if not action:
                    continue
                action_id, action_type, team, scorer, assist = action.groups()
                if category == 'ACTION':
                    live[action_id] = (action_type, team, scorer, assist)
                else:
                    live.pop(action_id, None)
                    undone.append((clock, action_type, team, scorer))

            elif category == 'MATCH_EVENT':
                event = re.search(r'Event: (\w+)', details)
                if event:
                    match_events.append((clock, event.group(1)))
                    if event.group(1) == 'reset':
                        live.clear()

            elif category == 'ERROR':
                error = re.search(r'Type: (\w+)', details)
                if error:
                    errors[error.group(1)] += 1

    return {
        'categories': categories,
        'actions': list(live.values()),
        'undone': undone,
        'errors': errors,
        'match_events': match_events,
    }


def summarise_actions(actions):
    """Tally the surviving actions per team and per player."""
    scores = Counter()
    own_goals = Counter()
    goals = defaultdict(int)
    assists = defaultdict(int)

    for action_type, team, scorer, assist in actions:
        scores[team] += 1
        if action_type == 'own_goal':
            own_goals[team] += 1
            continue
        goals[(team, scorer)] += 1
        if assist:
            assists[(team, assist)] += 1

    return scores, own_goals, goals, assists


def print_report(data):
    """Print the score, player tallies, undos and errors."""
    scores, own_goals, goals, assists = summarise_actions(data['actions'])

    print("\n=== SCORE ===")
    if not scores:
        print("  No goals recorded")
    for team, count in scores.most_common():
        print(f"  {team}: {count} (own goals: {own_goals[team]})")

    print("\n=== PLAYERS ===")
    players = set(goals) | set(assists)
    ranked = sorted(players, key=lambda p: (-goals[p], -assists[p]))
    for team, name in ranked:
        print(f"  {name} ({team}): {goals[(team, name)]} G, {assists[(team, name)]} A")

    print("\n=== UNDO ===")
    print(f"Total undos: {len(data['undone'])}")
    for clock, action_type, team, scorer in data['undone']:
        print(f"  {clock} {action_type} {team} {scorer}")

    if data['errors']:
        print("\n=== REJECTED COMMANDS ===")
        for code, count in data['errors'].most_common():
            print(f"  {code}: {count}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python tools/analyze_match_log.py <log_file_path>")
        print("\nExample:")
        print("  python tools/analyze_match_log.py debug_logs/match_log_20251117_222236.txt")
        sys.exit(1)

    log_path = Path(sys.argv[1])

    if not log_path.exists():
        print(f"Error: Log file not found: {log_path}")
        sys.exit(1)

    print(f"Analyzing: {log_path.name}")
    print("=" * 60)

    data = parse_log_file(log_path)

    print("\n=== LINE SUMMARY ===")
    for category, count in data['categories'].most_common():
        print(f"  {category}: {count}")
    for clock, event in data['match_events']:
        print(f"  {clock} {event}")

    print_report(data)

    print("\n" + "=" * 60)
    print("Analysis complete!")


if __name__ == '__main__':
    main()
