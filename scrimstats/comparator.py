# scrimstats/comparator.py

import math
from typing import Any, Dict, List, Optional, Sequence

from scrimstats.calculator import MetricsCalculator
from scrimstats.models import Bounds, Player, Role
from scrimstats.thresholds import (
    PERCENTILE_25,
    PERCENTILE_75,
    RADAR_LABELS,
    RADAR_METRIC_KEYS,
    SUPPORT_EXCLUDED_METRIC,
)


class RoleComparator:
    """Compare players against their population and their role peers."""

    def __init__(self, calculator: Optional[MetricsCalculator] = None):
        self.calculator = calculator or MetricsCalculator()

    def kda_band(self, value: float, pool_values: Sequence[float]) -> str:
        """
        Quartile band of a KDA value within a pool.

        Args:
            value: KDA being classified
            pool_values: KDA of every player in the pool

        Returns:
            'high' (>= P75), 'low' (<= P25), 'mid', or '' for an empty pool
        """
        ordered = sorted(pool_values)
        if not ordered:
            return ''
        last = len(ordered) - 1
        p25 = ordered[min(math.floor(len(ordered) * PERCENTILE_25), last)]
        p75 = ordered[min(math.floor(len(ordered) * PERCENTILE_75), last)]
        if value >= p75:
            return 'high'
        if value <= p25:
            return 'low'
        return 'mid'

    def kda_band_for_player(self, player: Player, players: Sequence[Player]) -> str:
        pool = [self.calculator.kda(p.stats) for p in players]
        return self.kda_band(self.calculator.kda(player.stats), pool)

    def kda_ranking(self, player_id: str, players: Sequence[Player]) -> Optional[int]:
        """1-based rank by descending KDA; None when the player is not in the pool."""
        ranked = sorted(players, key=lambda p: self.calculator.kda(p.stats), reverse=True)
        for index, player in enumerate(ranked):
            if player.uid == player_id:
                return index + 1
        return None

    @staticmethod
    def players_for_role(role: Role, players: Sequence[Player]) -> List[Player]:
        return [p for p in players if p.role == role]

    def role_bounds(self, role: Role, players: Sequence[Player]) -> Dict[str, Bounds]:
        """Min/max of each radar metric over the players holding a role."""
        peers = self.players_for_role(role, players)
        metrics = [self.calculator.raw_metrics(p.stats) for p in peers]

        bounds = {}
        for key in RADAR_METRIC_KEYS:
            values = [m[key] for m in metrics if math.isfinite(m[key])]
            low = min(values) if values else 0.0
            high = max(values) if values else 0.0
            # A single-point scale would otherwise map everything to 0 or 100.
            if low == high and high != 0:
                low = 0.0
            bounds[key] = Bounds(min=low, max=high)
        return bounds

    @staticmethod
    def scale_to_percent(value: float, low: float, high: float) -> float:
        if high == low:
            return 100.0 if value == high else 0.0
        clamped = max(low, min(high, value))
        return (clamped - low) / (high - low) * 100.0

    def scale_metrics(self, raw: Dict[str, float], bounds: Dict[str, Bounds]) -> Dict[str, float]:
        return {
            key: round(self.scale_to_percent(raw[key], bounds[key].min, bounds[key].max), 2)
            for key in RADAR_METRIC_KEYS
        }

    def scaled_metrics(self, player: Player, players: Sequence[Player],
                       bounds: Optional[Dict[str, Bounds]] = None) -> Dict[str, float]:
        bounds = bounds or self.role_bounds(player.role, players)
        return self.scale_metrics(self.calculator.raw_metrics(player.stats), bounds)

    def radar_dataset(self, player: Player, players: Sequence[Player]) -> Dict[str, Any]:
        """
        Player vs role-average radar series on a 0-100 axis.

        Args:
            player: Player being charted
            players: Whole population (peers are filtered by role)

        Returns:
            {'labels': [...], 'datasets': [{'label', 'data'}, ...]} with the role
            average first and the player second
        """
        bounds = self.role_bounds(player.role, players)
        peers = self.players_for_role(player.role, players)

        keys = list(RADAR_METRIC_KEYS)
        if player.role == Role.SUPPORT:
            keys.remove(SUPPORT_EXCLUDED_METRIC)

        player_scaled = self.scaled_metrics(player, players, bounds)
        average = {key: 0.0 for key in RADAR_METRIC_KEYS}
        if peers:
            peer_scaled = [self.scaled_metrics(p, players, bounds) for p in peers]
            average = {
                key: round(sum(s[key] for s in peer_scaled) / len(peer_scaled), 2)
                for key in RADAR_METRIC_KEYS
            }

        return {
            'labels': [RADAR_LABELS[key] for key in keys],
            'keys': keys,
            'datasets': [
                {'label': f"Average {player.role.value}", 'data': [average[key] for key in keys]},
                {'label': player.name, 'data': [player_scaled[key] for key in keys]},
            ],
        }
