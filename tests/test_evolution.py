# tests/test_evolution.py

from datetime import datetime, timedelta

import pytest

from scrimstats.aggregator import SubsetAggregator
from scrimstats.evolution import PeriodBucketer, match_date, next_month
from scrimstats.thresholds import RADAR_METRIC_KEYS
from tests.helpers import build_store, match_payload, player_id, raw_participant


def solo(name, position='TOP', **kwargs):
    return match_payload([raw_participant(name, position=position, **kwargs)])


class TestMatchDate:

    def test_valid_prefix(self):
        assert match_date('2024-01-08-1') == datetime(2024, 1, 8)
        assert match_date('2024-01-08-1-EUW1-XYZ') == datetime(2024, 1, 8)

    @pytest.mark.parametrize('match_id', ['', 'match-1', '2024-13-45-1', '24-01-08-1'])
    def test_invalid_prefix(self, match_id):
        assert match_date(match_id) is None

    def test_next_month(self):
        assert next_month(datetime(2024, 1, 1)) == datetime(2024, 2, 1)
        assert next_month(datetime(2024, 12, 1)) == datetime(2025, 1, 1)


class TestPeriodBucketer:
    """Week and month bucketing of a player's matches."""

    @pytest.fixture
    def store(self):
        payloads = {
            '2024-01-03-1': solo('Alpha', win=True, kills=4),
            '2024-01-04-1': solo('Alpha', kills=2, deaths=2),
            '2024-01-16-1': solo('Alpha', kills=1),
            '2024-02-02-1': solo('Alpha', kills=6),
            '2024-13-45-1': solo('Alpha', kills=9),
            '2024-01-04-2': solo('Kilo', kills=8),
        }
        store, _roster = build_store(payloads)
        return store

    @pytest.fixture
    def bucketer(self, store):
        return PeriodBucketer(store, SubsetAggregator(store))

    @pytest.fixture
    def alpha(self, store):
        return store.players.by_id(player_id('Alpha'))

    def test_weeks_start_on_monday(self, bucketer, alpha):
        periods = bucketer.per_week(alpha)
        assert [p.period_start for p in periods] == [
            datetime(2024, 1, 1), datetime(2024, 1, 15), datetime(2024, 1, 29)
        ]
        assert all(p.period_start.weekday() == 0 for p in periods)
        assert periods[0].period_end == datetime(2024, 1, 8) - timedelta(milliseconds=1)

    def test_weeks_cover_dated_matches_once(self, bucketer, alpha):
        periods = bucketer.per_week(alpha)
        ids = [mid for p in periods for mid in p.match_ids]
        assert sorted(ids) == ['2024-01-03-1', '2024-01-04-1', '2024-01-16-1', '2024-02-02-1']
        assert len(ids) == len(set(ids))
        assert all(p.match_ids for p in periods)

    def test_periods_do_not_overlap(self, bucketer, alpha):
        periods = bucketer.per_week(alpha)
        for earlier, later in zip(periods, periods[1:]):
            assert earlier.period_end < later.period_start

    def test_undated_match_excluded(self, bucketer, alpha):
        assert '2024-13-45-1' in alpha.match_ids
        ids = [mid for p in bucketer.per_month(alpha) for mid in p.match_ids]
        assert '2024-13-45-1' not in ids

    def test_period_stats(self, bucketer, alpha):
        first = bucketer.per_week(alpha)[0]
        assert first.stats.total_kills == 6
        assert first.stats.wins == 1
        assert first.raw['kda'] == 3.0

    def test_months(self, bucketer, alpha):
        periods = bucketer.per_month(alpha)
        assert [p.period_start for p in periods] == [datetime(2024, 1, 1), datetime(2024, 2, 1)]
        assert len(periods[0].match_ids) == 3
        assert periods[0].period_end == datetime(2024, 2, 1) - timedelta(milliseconds=1)

    def test_role_average_includes_peers(self, bucketer, alpha):
        first = bucketer.per_week(alpha)[0]
        # Alpha KDA 3.0 and Kilo KDA 8.0 in the same week.
        assert first.role_avg_raw['kda'] == 5.5

        later = bucketer.per_week(alpha)[1]
        assert later.role_avg_raw['kda'] == 1.0

    def test_role_average_without_peers(self, bucketer):
        assert bucketer._role_average([], datetime(2024, 1, 1), datetime(2024, 1, 8)) is None

    def test_no_dated_matches(self, bucketer, alpha):
        alpha.match_ids = ['2024-13-45-1']
        assert bucketer.per_week(alpha) == []
        assert bucketer.per_month(alpha) == []

    def test_evolution_series(self, bucketer, alpha):
        series = bucketer.evolution_series(alpha, 'week')
        assert series['granularity'] == 'week'
        assert series['labels'] == ['2024-01-01', '2024-01-15', '2024-01-29']
        assert series['player_name'] == 'Alpha'
        for key in RADAR_METRIC_KEYS:
            assert len(series['player'][key]) == 3
            assert len(series['role_average'][key]) == 3
            assert all(0.0 <= v <= 100.0 for v in series['player'][key])

    def test_evolution_series_month_labels(self, bucketer, alpha):
        series = bucketer.evolution_series(alpha, 'month')
        assert series['labels'] == ['Jan 2024', 'Feb 2024']
