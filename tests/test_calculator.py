# tests/test_calculator.py

import pytest

from scrimstats.calculator import MetricsCalculator
from scrimstats.models import Player, PlayerStat, Role
from scrimstats.thresholds import RADAR_METRIC_KEYS


class TestMetricsCalculator:
    """Test suite for metrics calculator."""

    @pytest.fixture
    def calculator(self):
        """Create calculator instance."""
        return MetricsCalculator()

    @pytest.fixture
    def sample_stat(self):
        """Two 30-minute games."""
        return PlayerStat(
            champion_played={'Ahri': 1, 'Zed': 1},
            wins=1,
            total_kills=10,
            total_deaths=4,
            total_assists=6,
            total_damage_dealt=60000,
            total_vision_score=60,
            total_control_wards_purchased=6,
            total_gold_earned=24000,
            total_minions_killed=480,
            total_time_played=3600000,
            total_team_kills=32,
        )

    def test_kda(self, calculator, sample_stat):
        assert calculator.kda(sample_stat) == 4.0

    def test_kda_zero_deaths(self, calculator):
        stat = PlayerStat(total_kills=5, total_deaths=0, total_assists=3)
        assert calculator.kda(stat) == 8.0
        assert calculator.format_kda(stat) == 'Perfect KDA'

    def test_per_minute_metrics(self, calculator, sample_stat):
        assert calculator.minutes_played(sample_stat) == 60.0
        assert calculator.cs_per_minute(sample_stat) == 8.0
        assert calculator.damage_per_minute(sample_stat) == 1000.0
        assert calculator.gold_per_minute(sample_stat) == 400.0
        assert calculator.vision_per_minute(sample_stat) == 1.0

    def test_ratios(self, calculator, sample_stat):
        assert calculator.damage_per_gold(sample_stat) == 2.5
        assert calculator.kill_participation(sample_stat) == 50.0
        assert calculator.control_wards_per_game(sample_stat, 2) == 3.0
        assert calculator.win_rate(sample_stat, 2) == 50.0
        assert calculator.per_game(sample_stat.total_kills, 2) == 5.0

    def test_zero_denominators(self, calculator):
        """Every metric is total on an empty stat."""
        stat = PlayerStat.empty()
        assert calculator.kda(stat) == 0.0
        assert calculator.cs_per_minute(stat) == 0.0
        assert calculator.damage_per_minute(stat) == 0.0
        assert calculator.gold_per_minute(stat) == 0.0
        assert calculator.damage_per_gold(stat) == 0.0
        assert calculator.kill_participation(stat) == 0.0
        assert calculator.vision_per_minute(stat) == 0.0
        assert calculator.control_wards_per_game(stat, 0) == 0.0
        assert calculator.win_rate(stat, 0) == 0.0
        assert calculator.per_game(3, 0) == 0.0

    def test_most_played_champion(self, calculator):
        stat = PlayerStat(champion_played={'Ahri': 2, 'Zed': 3, 'Lux': 3})
        assert calculator.most_played_champion(stat) == 'Zed (3)'
        assert calculator.most_played_champion_key(stat) == 'zed'

    def test_most_played_champion_empty(self, calculator):
        stat = PlayerStat.empty()
        assert calculator.most_played_champion(stat) == 'N/A'
        assert calculator.most_played_champion_key(stat) == ''

    def test_raw_metrics_order(self, calculator, sample_stat):
        raw = calculator.raw_metrics(sample_stat)
        assert tuple(raw.keys()) == RADAR_METRIC_KEYS
        assert raw['kda'] == 4.0
        assert raw['cspm'] == 8.0

    def test_calculate_all(self, calculator, sample_stat):
        metrics = calculator.calculate_all(sample_stat, 2)
        assert metrics['games'] == 2
        assert metrics['wins'] == 1
        assert metrics['kills_per_game'] == 5.0
        assert metrics['deaths_per_game'] == 2.0
        assert metrics['assists_per_game'] == 3.0
        assert metrics['kill_participation'] == 50.0
        assert metrics['most_played_champion'] == 'Ahri (1)'

    def test_formatting(self, calculator, sample_stat):
        assert calculator.format_kda(sample_stat) == '4.00'
        assert calculator.format_rate(1.234) == '1.23'
        assert calculator.format_percent(66.666) == '66.7%'

    def test_stat_view(self, calculator, sample_stat):
        player = Player(uid='p1', name='Alpha', team_id=0, match_ids=['a', 'b'],
                        role=Role.MID, stats=sample_stat)
        view = calculator.stat_view(player)
        assert view['id'] == 'p1'
        assert view['role'] == 'MID'
        assert view['games'] == 2
        assert view['kda'] == '4.00'
        assert view['cs_per_minute'] == 8.0
        assert view['kill_participation'] == '50.0%'
        assert view['win_rate'] == '50.0%'
        assert view['control_wards_per_game'] == 3.0

    def test_stat_view_subset(self, calculator, sample_stat):
        player = Player(uid='p1', name='Alpha', match_ids=['a', 'b'], stats=sample_stat)
        subset = PlayerStat(wins=1, total_kills=2, total_deaths=0, total_time_played=1800000)
        view = calculator.stat_view(player, subset, 1)
        assert view['games'] == 1
        assert view['kda'] == 'Perfect KDA'
        assert view['win_rate'] == '100.0%'
