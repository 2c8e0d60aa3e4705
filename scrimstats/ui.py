# scrimstats/ui.py

from typing import Any, Dict, List

from scrimstats.models import MatchRecap, PerSideStat
from scrimstats.recap import RecapBuilder


class TerminalUI:
    """Simple terminal rendering of dashboard views."""

    @staticmethod
    def _format_metric(value: Any, decimals: int = 2) -> str:
        if value is None:
            return 'N/A'
        if isinstance(value, float):
            return f'{value:.{decimals}f}'
        return str(value)

    def show_players(self, rows: List[Dict[str, Any]], team_names: Dict[Any, str]):
        """Display the player table (one stat_view row per player)."""
        print("\n" + "="*96)
        print("Players")
        print("="*96)
        print(f"{'#':<4}{'Name':<18}{'Role':<6}{'Team':<14}{'Games':>6}{'KDA':>12}"
              f"{'CS/m':>7}{'GPM':>8}{'DPM':>8}{'KP':>8}{'Win %':>8}")
        print("-"*96)
        for i, row in enumerate(rows, 1):
            team = team_names.get(row['team_id'], 'No Team')
            print(f"{i:<4}{row['name'][:17]:<18}{row['role']:<6}{team[:13]:<14}{row['games']:>6}"
                  f"{row['kda']:>12}{self._format_metric(row['cs_per_minute'], 1):>7}"
                  f"{self._format_metric(row['gold_per_minute'], 1):>8}"
                  f"{self._format_metric(row['damage_per_minute'], 1):>8}"
                  f"{row['kill_participation']:>8}{row['win_rate']:>8}")
        print("="*96)

    def show_player_details(self, details: Dict[str, Any], champions: List[Dict[str, Any]]):
        """Display one player's lifetime stats and per-champion breakdown."""
        view = details['view']
        metrics = details['metrics']
        print("\n" + "="*50)
        print(f"PLAYER DETAILS: {view['name']}")
        print("="*50)
        print(f"Role:             {view['role']}")
        print(f"Team:             {details['team_name']}")
        print(f"Games:            {view['games']}")
        print(f"Wins:             {view['wins']}")
        print(f"Win %:            {view['win_rate']}")
        print(f"Main champion:    {view['most_played_champion']}")

        print("\n" + "-"*50)
        print("COMBAT")
        print("-"*50)
        print(f"KDA:              {view['kda']}")
        print(f"KDA band:         {details['kda_band'] or 'N/A'}")
        print(f"KDA rank:         {self._format_metric(details['kda_rank'])}")
        print(f"Kills/Game:       {view['kills_per_game']}")
        print(f"Deaths/Game:      {view['deaths_per_game']}")
        print(f"Assists/Game:     {view['assists_per_game']}")
        print(f"Kill Part.:       {view['kill_participation']}")

        print("\n" + "-"*50)
        print("ECONOMY & VISION")
        print("-"*50)
        print(f"CS/min:           {view['cs_per_minute']}")
        print(f"Gold/min:         {view['gold_per_minute']}")
        print(f"Damage/min:       {view['damage_per_minute']}")
        print(f"Damage/Gold:      {self._format_metric(metrics['damage_per_gold'])}")
        print(f"Vision/min:       {view['vision_per_minute']}")
        print(f"Control wards/g:  {self._format_metric(metrics['control_wards_per_game'])}")

        if champions:
            print("\n" + "-"*50)
            print("CHAMPIONS")
            print("-"*50)
            for row in champions:
                champ_view = row['view']
                print(f"{row['champion']:<16}{champ_view['games']:>3} games  "
                      f"KDA {champ_view['kda']:<12}Win {champ_view['win_rate']}")
        print("="*50)

    def show_scrims(self, scrims: List[Dict[str, Any]]):
        print("\n" + "="*60)
        print("Scrims")
        print("="*60)
        if not scrims:
            print("No scrims found.")
        for scrim in scrims:
            teams = scrim['teams']
            flag = " [official]" if scrim['is_official'] else ""
            result = "W" if scrim['our_team_won'] else "-"
            print(f"{scrim['display_date']:<14}{teams['a']['name']} vs {teams['b']['name']}"
                  f"  {scrim['score']}  {result}{flag}")
            print(f"    {', '.join(scrim['match_ids'])}")
        print("="*60)

    def show_recap(self, recap: MatchRecap, team_names: Dict[Any, str],
                   side_stats: Dict[int, PerSideStat]):
        """Display a match recap, blue side first."""
        print("\n" + "="*60)
        print(f"MATCH {recap.id}{' (official)' if recap.is_official else ''}")
        print("="*60)
        winner = team_names.get(recap.victorious_team_id, 'N/A') if recap.victorious_team_id is not None else 'N/A'
        print(f"Duration:         {RecapBuilder.format_duration(recap.duration)}")
        print(f"Winner:           {winner}")

        for side, label in ((0, 'BLUE'), (1, 'RED')):
            team_id = recap.team_sides[side]
            stats = side_stats.get(side + 1)
            print("\n" + "-"*60)
            print(f"{label} SIDE: {team_names.get(team_id, f'Team {team_id}')}")
            if stats is not None:
                print(f"Gold {stats.gold:.0f} | Towers {stats.towers:.0f} | Dragons {stats.dragons:.0f} | "
                      f"Grubs {stats.grubs:.0f} | Heralds {stats.heralds:.0f} | Barons {stats.barons:.0f}")
            print("-"*60)
            for player in recap.players:
                if player.side != side:
                    continue
                kda = f"{player.k:.0f}/{player.d:.0f}/{player.a:.0f}"
                print(f"  {player.role.value:<8}{(player.name or player.id)[:18]:<20}"
                      f"{(player.champ or '-'):<14}{kda}")
        print("="*60)

    def show_error(self, message: str):
        """Display error message."""
        print(f"\nERROR: {message}\n")
