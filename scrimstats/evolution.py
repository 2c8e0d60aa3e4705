# scrimstats/evolution.py

import re
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from scrimstats.aggregator import SubsetAggregator
from scrimstats.calculator import MetricsCalculator
from scrimstats.comparator import RoleComparator
from scrimstats.models import Period, Player
from scrimstats.store import DataStore
from scrimstats.thresholds import MATCH_DATE_PATTERN, RADAR_LABELS, RADAR_METRIC_KEYS

DATE_PREFIX_RE = re.compile(MATCH_DATE_PATTERN)
ONE_MS = timedelta(milliseconds=1)

DatedIds = List[Tuple[str, datetime]]


def match_date(match_id: str) -> Optional[datetime]:
    """Midnight of the YYYY-MM-DD prefix of a match id, or None."""
    found = DATE_PREFIX_RE.match(match_id or '')
    if not found:
        return None
    try:
        return datetime.strptime(found.group(1), '%Y-%m-%d')
    except ValueError:
        return None


def next_month(start: datetime) -> datetime:
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1, day=1)
    return start.replace(month=start.month + 1, day=1)


class PeriodBucketer:
    """Split a player's matches into week or month periods."""

    GRANULARITIES = ('week', 'month')

    def __init__(self, store: DataStore, subsets: Optional[SubsetAggregator] = None,
                 comparator: Optional[RoleComparator] = None):
        self.store = store
        self.subsets = subsets or SubsetAggregator(store)
        self.comparator = comparator or RoleComparator()
        self.calculator: MetricsCalculator = self.comparator.calculator

    @staticmethod
    def dated_match_ids(match_ids: Sequence[str]) -> DatedIds:
        dated = [(match_id, match_date(match_id)) for match_id in match_ids]
        return sorted(((mid, d) for mid, d in dated if d is not None), key=lambda item: item[1])

    def per_week(self, player: Player) -> List[Period]:
        """Monday-start weeks from the week of the earliest match."""
        dated = self.dated_match_ids(player.match_ids)
        if not dated:
            return []
        first = dated[0][1]
        first_monday = first - timedelta(days=first.weekday())
        return self._bucket(player, dated, first_monday, lambda start: start + timedelta(days=7))

    def per_month(self, player: Player) -> List[Period]:
        """Calendar months from the month of the earliest match."""
        dated = self.dated_match_ids(player.match_ids)
        if not dated:
            return []
        first_of_month = dated[0][1].replace(day=1)
        return self._bucket(player, dated, first_of_month, next_month)

    def periods(self, player: Player, granularity: str) -> List[Period]:
        if granularity == 'month':
            return self.per_month(player)
        return self.per_week(player)

    def _bucket(self, player: Player, dated: DatedIds, start: datetime,
                step: Callable[[datetime], datetime]) -> List[Period]:
        last = dated[-1][1]
        peers = self.comparator.players_for_role(player.role, self.store.players.all())

        periods = []
        period_start = start
        while period_start <= last:
            next_start = step(period_start)
            period_end = next_start - ONE_MS
            in_range = [mid for mid, d in dated if period_start <= d <= period_end]
            if in_range:
                stats = self.subsets.aggregate(player, in_range)
                periods.append(Period(
                    period_start=period_start,
                    period_end=period_end,
                    match_ids=in_range,
                    stats=stats,
                    raw=self.calculator.raw_metrics(stats),
                    role_avg_raw=self._role_average(peers, period_start, period_end),
                ))
            period_start = next_start
        return periods

    def _role_average(self, peers: Sequence[Player], start: datetime,
                      end: datetime) -> Optional[Dict[str, float]]:
        """Mean raw metrics over role peers with at least one match in the range."""
        samples = []
        for peer in peers:
            in_range = [mid for mid, d in self.dated_match_ids(peer.match_ids) if start <= d <= end]
            if in_range:
                samples.append(self.calculator.raw_metrics(self.subsets.aggregate(peer, in_range)))
        if not samples:
            return None
        return {key: sum(s[key] for s in samples) / len(samples) for key in RADAR_METRIC_KEYS}

    def evolution_series(self, player: Player, granularity: str = 'week') -> Dict[str, Any]:
        """
        Per-period player and role-average values scaled against lifetime role bounds.

        Returns:
            {'labels': [...], 'metrics': {key: label}, 'player': {key: [...]},
             'role_average': {key: [...]}, 'player_name': name}
        """
        periods = self.periods(player, granularity)
        bounds = self.comparator.role_bounds(player.role, self.store.players.all())

        player_series: Dict[str, List[float]] = {key: [] for key in RADAR_METRIC_KEYS}
        average_series: Dict[str, List[float]] = {key: [] for key in RADAR_METRIC_KEYS}
        for period in periods:
            role_avg = period.role_avg_raw or {}
            for key in RADAR_METRIC_KEYS:
                low, high = bounds[key].min, bounds[key].max
                player_series[key].append(
                    round(self.comparator.scale_to_percent(period.raw[key], low, high), 2))
                average_series[key].append(
                    round(self.comparator.scale_to_percent(role_avg.get(key, 0.0), low, high), 2))

        return {
            'granularity': 'month' if granularity == 'month' else 'week',
            'labels': [self.period_label(p, granularity) for p in periods],
            'metrics': {key: RADAR_LABELS[key] for key in RADAR_METRIC_KEYS},
            'player': player_series,
            'role_average': average_series,
            'player_name': player.name,
        }

    @staticmethod
    def period_label(period: Period, granularity: str) -> str:
        if granularity == 'month':
            return period.period_start.strftime('%b %Y')
        return period.period_start.strftime('%Y-%m-%d')
