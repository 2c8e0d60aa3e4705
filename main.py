# main.py

import argparse
import logging
import os
import sys

from scrimstats.dashboard import DEFAULT_DATA_DIR, DEFAULT_TEAMS_PATH, Dashboard
from scrimstats.ui import TerminalUI


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="scrimstats - League of Legends scrim statistics")
    parser.add_argument("--data-dir", default=os.environ.get("SCRIMSTATS_DATA_DIR", DEFAULT_DATA_DIR),
                        help="Directory of exported match JSON files")
    parser.add_argument("--teams", default=os.environ.get("SCRIMSTATS_TEAMS_PATH", DEFAULT_TEAMS_PATH),
                        help="Path to the teams JSON file")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("players", help="Show the player table")
    player = sub.add_parser("player", help="Show one player's details")
    player.add_argument("name", help="Player name (case-insensitive)")
    sub.add_parser("scrims", help="Show recent scrims")
    recap = sub.add_parser("recap", help="Show a match recap")
    recap.add_argument("match_id", help="Match id (file stem)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ui = TerminalUI()
    dashboard = Dashboard(data_dir=args.data_dir, teams_path=args.teams)
    try:
        dashboard.reload_all()
    except ValueError as e:
        ui.show_error(str(e))
        return 1

    team_names = {team.id: team.name for team in dashboard.store.teams.all()}
    command = args.command or "players"

    if command == "players":
        players = sorted(dashboard.store.players.all(), key=lambda p: (p.team_id is None, p.team_id or 0, p.name.lower()))
        ui.show_players([dashboard.calculator.stat_view(p) for p in players], team_names)
        return 0

    if command == "player":
        found = dashboard.player_by_name(args.name)
        if found is None:
            ui.show_error(f"Player '{args.name}' not found")
            return 1
        ui.show_player_details(dashboard.player_view(found.uid), dashboard.per_champion(found.uid))
        return 0

    if command == "scrims":
        ui.show_scrims(dashboard.scrims())
        return 0

    if command == "recap":
        recap = dashboard.recap(args.match_id)
        if recap is None:
            ui.show_error(f"Match '{args.match_id}' not found")
            return 1
        match = dashboard.store.matches.get(args.match_id)
        side_stats = {side: dashboard.recaps.per_side_stat(match, side) for side in (1, 2)}
        ui.show_recap(recap, team_names, side_stats)
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
