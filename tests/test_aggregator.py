# tests/test_aggregator.py

import copy
import logging

import pytest

from scrimstats.aggregator import PlayerAggregator, SubsetAggregator, add_match_to_stat
from scrimstats.match_assembler import MatchAssembler
from scrimstats.models import Match, PlayerStat, Role
from scrimstats.store import DataStore
from scrimstats.thresholds import UNKNOWN_CHAMPION
from tests.helpers import (
    OUR_PLAYERS,
    RIVAL_PLAYERS,
    build_store,
    five_v_five,
    match_payload,
    player_id,
    raw_participant,
)


class TestAddMatchToStat:
    """Per-match contribution into a running total."""

    @pytest.fixture
    def match(self):
        payload = match_payload([
            raw_participant('Alpha', side=100, win=True, kills=5, deaths=0, assists=3,
                            gold=12000, damage=24000, vision=30, minions=200, neutral=20,
                            control_wards=4, champion='Ahri'),
            raw_participant('Bravo', side=100, win=True, kills=4),
            raw_participant('Kilo', side=200, kills=7),
        ], duration=1800000)
        return MatchAssembler().assemble(payload, '2024-01-08-1')

    def test_adds_every_total(self, match):
        stat = PlayerStat.empty()
        assert add_match_to_stat(stat, match, player_id('Alpha'))

        assert stat.champion_played == {'Ahri': 1}
        assert stat.wins == 1
        assert stat.total_kills == 5
        assert stat.total_deaths == 0
        assert stat.total_assists == 3
        assert stat.total_damage_dealt == 24000
        assert stat.total_vision_score == 30
        assert stat.total_control_wards_purchased == 4
        assert stat.total_gold_earned == 12000
        assert stat.total_minions_killed == 220
        assert stat.total_time_played == 1800000

    def test_team_kills_count_same_side_only(self, match):
        stat = PlayerStat.empty()
        add_match_to_stat(stat, match, player_id('Alpha'))
        assert stat.total_team_kills == 9

        stat = PlayerStat.empty()
        add_match_to_stat(stat, match, player_id('Kilo'))
        assert stat.total_team_kills == 7

    def test_missing_control_wards_count_zero(self, match):
        stat = PlayerStat.empty()
        add_match_to_stat(stat, match, player_id('Bravo'))
        assert stat.total_control_wards_purchased == 0

    def test_absent_player(self, match):
        stat = PlayerStat.empty()
        assert not add_match_to_stat(stat, match, 'nobody')
        assert stat == PlayerStat.empty()


class TestPlayerAggregator:
    """Lifetime totals across ingestion."""

    @pytest.fixture
    def store(self):
        store, _roster = build_store({
            '2024-01-08-1': five_v_five(OUR_PLAYERS, RIVAL_PLAYERS, blue_wins=True),
            '2024-01-08-2': five_v_five(OUR_PLAYERS, RIVAL_PLAYERS, blue_wins=False),
        })
        return store

    def test_players_created_on_first_appearance(self, store):
        assert len(store.players) == 10
        alpha = store.players.by_id(player_id('Alpha'))
        assert alpha.name == 'Alpha'
        assert alpha.role == Role.TOP
        assert alpha.team_id == 0
        assert store.players.by_id(player_id('Oscar')).role == Role.SUPPORT

    def test_lifetime_totals(self, store):
        alpha = store.players.by_id(player_id('Alpha'))
        assert alpha.match_ids == ['2024-01-08-1', '2024-01-08-2']
        assert alpha.stats.wins == 1
        assert alpha.stats.total_kills == 4
        assert alpha.stats.total_team_kills == 20
        assert alpha.stats.champion_played == {'TopChamp': 2}

    def test_apply_is_idempotent(self, store):
        aggregator = PlayerAggregator(store)
        match = store.matches.get('2024-01-08-1')
        alpha = store.players.by_id(player_id('Alpha'))
        before = copy.deepcopy(alpha.stats)

        assert aggregator.update_from_match(match) == []
        assert not aggregator.apply_match(alpha, match)
        assert alpha.stats == before
        assert alpha.match_ids.count('2024-01-08-1') == 1

    def test_role_not_reclassified(self, store):
        aggregator = PlayerAggregator(store)
        payload = match_payload([raw_participant('Alpha', position='UTILITY', win=True)])
        match = aggregator.assembler.assemble(payload, '2024-01-09-1')
        store.matches.set(match)

        assert aggregator.update_from_match(match) == [player_id('Alpha')]
        assert store.players.by_id(player_id('Alpha')).role == Role.TOP

    def test_missing_stats_still_recorded(self, caplog):
        store = DataStore()
        aggregator = PlayerAggregator(store)
        match = Match(id='2024-01-08-1', player_ids=['ghost'])
        with caplog.at_level(logging.WARNING):
            assert aggregator.update_from_match(match) == ['ghost']
        ghost = store.players.by_id('ghost')
        assert ghost.match_ids == ['2024-01-08-1']
        assert ghost.stats == PlayerStat.empty()
        assert 'No stats' in caplog.text


class TestSubsetAggregator:
    """Subset totals and per-champion breakdowns."""

    @pytest.fixture
    def store(self):
        payloads = {
            '2024-01-08-1': match_payload([raw_participant('Alpha', win=True, kills=3, champion='Ahri')]),
            '2024-01-08-2': match_payload([raw_participant('Alpha', kills=1, deaths=2, champion='Ahri')]),
            '2024-01-15-1': match_payload([raw_participant('Alpha', win=True, kills=6, champion='Zed')]),
        }
        store, _roster = build_store(payloads)
        return store

    @pytest.fixture
    def subsets(self, store):
        return SubsetAggregator(store)

    @pytest.fixture
    def alpha(self, store):
        return store.players.by_id(player_id('Alpha'))

    def test_full_subset_equals_lifetime(self, subsets, alpha):
        assert subsets.aggregate(alpha, alpha.match_ids) == alpha.stats

    def test_partial_subset(self, subsets, alpha):
        stat = subsets.aggregate(alpha, ['2024-01-08-2', '2024-01-15-1'])
        assert stat.total_kills == 7
        assert stat.wins == 1
        assert stat.champion_played == {'Ahri': 1, 'Zed': 1}

    def test_subset_does_not_touch_lifetime(self, subsets, alpha):
        kills = alpha.stats.total_kills
        subsets.aggregate(alpha, ['2024-01-08-1'])
        assert alpha.stats.total_kills == kills

    def test_unknown_ids_skipped(self, subsets, alpha):
        assert subsets.aggregate(alpha, ['2030-01-01-1']) == PlayerStat.empty()
        assert subsets.aggregate(alpha, []) == PlayerStat.empty()

    def test_per_champion(self, subsets, alpha):
        result = subsets.per_champion(alpha)
        assert set(result) == {'Ahri', 'Zed'}
        assert result['Ahri'].match_ids == ['2024-01-08-1', '2024-01-08-2']
        assert result['Ahri'].stats.total_kills == 4
        assert result['Zed'].stats.wins == 1

    def test_per_champion_cached_until_history_grows(self, store, subsets, alpha):
        first = subsets.per_champion(alpha)
        assert subsets.per_champion(alpha) is first

        aggregator = PlayerAggregator(store)
        match = aggregator.assembler.assemble(
            match_payload([raw_participant('Alpha', champion='Lux')]), '2024-01-16-1')
        store.matches.set(match)
        aggregator.update_from_match(match)

        refreshed = subsets.per_champion(alpha)
        assert refreshed is not first
        assert 'Lux' in refreshed

    def test_empty_champion_grouped_as_unknown(self, store, subsets, alpha):
        aggregator = PlayerAggregator(store)
        match = aggregator.assembler.assemble(
            match_payload([raw_participant('Alpha', champion='')]), '2024-01-17-1')
        store.matches.set(match)
        aggregator.update_from_match(match)

        assert subsets.champion_match_map(alpha)[UNKNOWN_CHAMPION] == ['2024-01-17-1']

    def test_clear_cache(self, subsets, alpha):
        first = subsets.per_champion(alpha)
        subsets.clear_cache()
        assert subsets.per_champion(alpha) is not first
