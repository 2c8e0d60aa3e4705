# scrimstats/calculator.py

from typing import Any, Dict, Optional

from scrimstats.models import Player, PlayerStat
from scrimstats.thresholds import MS_PER_MINUTE, RADAR_METRIC_KEYS


class MetricsCalculator:
    """Calculate derived metrics from lifetime or subset player totals.

    Every metric is total: a zero denominator gives 0.0 instead of raising.
    """

    @staticmethod
    def _safe_div(numerator: float, denominator: float) -> float:
        """Safely divide and return 0.0 on zero denominator."""
        return numerator / denominator if denominator > 0 else 0.0

    def kda(self, stat: PlayerStat) -> float:
        """(K+A)/D; with zero deaths the finite value K+A."""
        takedowns = stat.total_kills + stat.total_assists
        if stat.total_deaths == 0:
            return float(takedowns)
        return takedowns / stat.total_deaths

    def minutes_played(self, stat: PlayerStat) -> float:
        return stat.total_time_played / MS_PER_MINUTE

    def cs_per_minute(self, stat: PlayerStat) -> float:
        return self._safe_div(stat.total_minions_killed, self.minutes_played(stat))

    def damage_per_minute(self, stat: PlayerStat) -> float:
        return self._safe_div(stat.total_damage_dealt, self.minutes_played(stat))

    def gold_per_minute(self, stat: PlayerStat) -> float:
        return self._safe_div(stat.total_gold_earned, self.minutes_played(stat))

    def damage_per_gold(self, stat: PlayerStat) -> float:
        return self._safe_div(stat.total_damage_dealt, stat.total_gold_earned)

    def kill_participation(self, stat: PlayerStat) -> float:
        """Percentage of same-side kills the player took part in."""
        return self._safe_div(stat.total_kills + stat.total_assists, stat.total_team_kills) * 100.0

    def vision_per_minute(self, stat: PlayerStat) -> float:
        return self._safe_div(stat.total_vision_score, self.minutes_played(stat))

    def control_wards_per_game(self, stat: PlayerStat, match_count: int) -> float:
        return self._safe_div(stat.total_control_wards_purchased or 0, match_count)

    def win_rate(self, stat: PlayerStat, match_count: int) -> float:
        return self._safe_div(stat.wins, match_count) * 100.0

    def per_game(self, total: float, match_count: int) -> float:
        return self._safe_div(total, match_count)

    def _most_played(self, stat: PlayerStat) -> Optional[tuple]:
        # Ties keep the first champion recorded.
        best = None
        for champion, games in stat.champion_played.items():
            if games > 0 and (best is None or games > best[1]):
                best = (champion, games)
        return best

    def most_played_champion(self, stat: PlayerStat) -> str:
        """Display label, e.g. 'Ahri (3)', or 'N/A'."""
        best = self._most_played(stat)
        if best is None:
            return 'N/A'
        return f"{best[0]} ({best[1]})"

    def most_played_champion_key(self, stat: PlayerStat) -> str:
        """Lower-cased champion name for sorting, '' when none."""
        best = self._most_played(stat)
        return best[0].lower() if best else ''

    def raw_metrics(self, stat: PlayerStat) -> Dict[str, float]:
        """The seven comparison metrics, in radar order."""
        values = {
            'kda': self.kda(stat),
            'dpm': self.damage_per_minute(stat),
            'kp': self.kill_participation(stat),
            'gpm': self.gold_per_minute(stat),
            'dpg': self.damage_per_gold(stat),
            'vspm': self.vision_per_minute(stat),
            'cspm': self.cs_per_minute(stat),
        }
        return {key: values[key] for key in RADAR_METRIC_KEYS}

    def calculate_all(self, stat: PlayerStat, match_count: int) -> Dict[str, Any]:
        """
        Calculate all derived metrics.

        Args:
            stat: Lifetime or subset totals
            match_count: Number of distinct matches behind the totals

        Returns:
            Dictionary of computed metrics
        """
        metrics: Dict[str, Any] = {}
        metrics['games'] = match_count
        metrics['wins'] = stat.wins
        metrics['kda'] = self.kda(stat)
        metrics['minutes_played'] = self.minutes_played(stat)
        metrics['cs_per_minute'] = self.cs_per_minute(stat)
        metrics['damage_per_minute'] = self.damage_per_minute(stat)
        metrics['gold_per_minute'] = self.gold_per_minute(stat)
        metrics['damage_per_gold'] = self.damage_per_gold(stat)
        metrics['kill_participation'] = self.kill_participation(stat)
        metrics['vision_per_minute'] = self.vision_per_minute(stat)
        metrics['control_wards_per_game'] = self.control_wards_per_game(stat, match_count)
        metrics['win_rate'] = self.win_rate(stat, match_count)

        # Per-game averages
        metrics['kills_per_game'] = self.per_game(stat.total_kills, match_count)
        metrics['deaths_per_game'] = self.per_game(stat.total_deaths, match_count)
        metrics['assists_per_game'] = self.per_game(stat.total_assists, match_count)

        metrics['most_played_champion'] = self.most_played_champion(stat)
        metrics['most_played_champion_key'] = self.most_played_champion_key(stat)
        return metrics

    # Display formatting
    def format_kda(self, stat: PlayerStat) -> str:
        if stat.total_deaths == 0:
            return 'Perfect KDA'
        return f"{self.kda(stat):.2f}"

    def format_rate(self, value: float, decimals: int = 2) -> str:
        return f"{value:.{decimals}f}"

    def format_percent(self, value: float, decimals: int = 1) -> str:
        return f"{value:.{decimals}f}%"

    def stat_view(self, player: Player, stat: Optional[PlayerStat] = None,
                  match_count: Optional[int] = None) -> Dict[str, Any]:
        """Rounded per-player summary row, lifetime unless a subset is passed."""
        stat = stat if stat is not None else player.stats
        games = match_count if match_count is not None else len(player.match_ids)
        return {
            'id': player.uid,
            'name': player.name,
            'role': player.role.value,
            'team_id': player.team_id,
            'games': games,
            'wins': stat.wins,
            'kda': self.format_kda(stat),
            'kills_per_game': round(self.per_game(stat.total_kills, games), 1),
            'deaths_per_game': round(self.per_game(stat.total_deaths, games), 1),
            'assists_per_game': round(self.per_game(stat.total_assists, games), 1),
            'cs_per_minute': round(self.cs_per_minute(stat), 1),
            'gold_per_minute': round(self.gold_per_minute(stat), 1),
            'damage_per_minute': round(self.damage_per_minute(stat), 1),
            'vision_per_minute': round(self.vision_per_minute(stat), 1),
            'damage_per_gold': round(self.damage_per_gold(stat), 2),
            'kill_participation': self.format_percent(self.kill_participation(stat)),
            'control_wards_per_game': round(self.control_wards_per_game(stat, games), 1),
            'win_rate': self.format_percent(self.win_rate(stat, games)),
            'most_played_champion': self.most_played_champion(stat),
        }
