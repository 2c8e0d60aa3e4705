# scrimstats/dashboard.py

import logging
import os
import threading
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from scrimstats.aggregator import SubsetAggregator
from scrimstats.calculator import MetricsCalculator
from scrimstats.comparator import RoleComparator
from scrimstats.evolution import PeriodBucketer
from scrimstats.loader import DataLoader
from scrimstats.match_assembler import MatchAssembler
from scrimstats.models import LoadingStatus, Match, MatchRecap, Player, PlayerStat, Team
from scrimstats.recap import RecapBuilder
from scrimstats.roster import ParsedRoster, TeamRoster
from scrimstats.scrims import ScrimGrouper
from scrimstats.store import DataStore

LOGGER = logging.getLogger(__name__)

DEFAULT_DATA_DIR = 'data/matches'
DEFAULT_TEAMS_PATH = 'data/teams.json'


def match_to_dict(match: Match) -> Dict[str, Any]:
    data = asdict(match, dict_factory=lambda items: {k: v for k, v in items if k != 'raw'})
    data['is_victory_resolved'] = match.is_victory_resolved
    return data


def player_to_dict(player: Player) -> Dict[str, Any]:
    data = asdict(player)
    data['role'] = player.role.value
    return data


def team_to_dict(team: Team) -> Dict[str, Any]:
    return asdict(team)


class Dashboard:
    """Single entry point over stores, ingestion and every derived view.

    Reads trigger a full load on first use; reloads are serialized.
    """

    def __init__(self, data_dir: str = DEFAULT_DATA_DIR, teams_path: str = DEFAULT_TEAMS_PATH):
        self.data_dir = data_dir
        self.teams_path = teams_path

        self.store = DataStore()
        self.assembler = MatchAssembler()
        self.roster = TeamRoster(self.store)
        self.loader = DataLoader(self.store, self.roster, data_dir, assembler=self.assembler)
        self.subsets = SubsetAggregator(self.store)
        self.calculator = MetricsCalculator()
        self.comparator = RoleComparator(self.calculator)
        self.bucketer = PeriodBucketer(self.store, self.subsets, self.comparator)
        self.recaps = RecapBuilder(self.store)
        self.scrim_grouper = ScrimGrouper()

        self.is_loading = False
        self.is_initialized = False
        self._lock = threading.RLock()

    @classmethod
    def from_env(cls) -> 'Dashboard':
        return cls(
            data_dir=os.environ.get('SCRIMSTATS_DATA_DIR', DEFAULT_DATA_DIR),
            teams_path=os.environ.get('SCRIMSTATS_TEAMS_PATH', DEFAULT_TEAMS_PATH),
        )

    # --- Loading ---

    def ensure_loaded(self) -> None:
        if self.is_initialized:
            return
        try:
            self.reload_all()
        except ValueError as exc:
            LOGGER.error("Teams file %s rejected (%s); loading matches without teams.",
                         self.teams_path, exc)
            self.reload_matches()

    def reload_matches(self) -> List[str]:
        """Ingest match files not loaded yet."""
        with self._lock:
            self.is_loading = True
            try:
                new_ids = self.loader.load_new_matches()
                self.is_initialized = True
            finally:
                self.is_loading = False
        return new_ids

    def reload_teams(self) -> List[Team]:
        """Re-read the teams file and re-attribute every match.

        An invalid file raises ValueError and leaves the current roster untouched.
        """
        with self._lock:
            parsed = self.roster.parse_entries(self.roster.read_file(self.teams_path))
            return self._apply_teams(parsed)

    def _apply_teams(self, parsed: ParsedRoster) -> List[Team]:
        self.is_loading = True
        try:
            teams = self.roster.apply(parsed)
            for match in self.store.matches.all():
                self.assembler.resolve_victory(match, self.roster.team_id_for_player)
        finally:
            self.is_loading = False
        return teams

    def reload_all(self) -> LoadingStatus:
        """Drop everything and load teams, then matches, from scratch.

        The teams file is validated before anything is dropped.
        """
        with self._lock:
            parsed = self.roster.parse_entries(self.roster.read_file(self.teams_path))
            self.store.clear()
            self.subsets.clear_cache()
            self.is_initialized = False
            self._apply_teams(parsed)
            self.reload_matches()
        status = self.status()
        LOGGER.info("Dashboard ready: %s teams, %s players, %s matches.",
                    status.teams_count, status.players_count, status.matches_count)
        return status

    def status(self) -> LoadingStatus:
        return LoadingStatus(
            is_loading=self.is_loading,
            is_initialized=self.is_initialized,
            teams_count=len(self.store.teams),
            players_count=len(self.store.players),
            matches_count=len(self.store.matches),
        )

    # --- Views ---

    def summary(self) -> Dict[str, Any]:
        self.ensure_loaded()
        return {
            'match_ids': self.store.matches.ids(),
            'players': [player_to_dict(p) for p in self.store.players.all()],
            'teams': [team_to_dict(t) for t in self.store.teams.all()],
            'matches': {m.id: match_to_dict(m) for m in self.store.matches.all()},
        }

    def player_by_name(self, name: str) -> Optional[Player]:
        self.ensure_loaded()
        return self.store.players.by_name(name)

    def player_view(self, player_id: str) -> Optional[Dict[str, Any]]:
        """Lifetime stat row, derived metrics and population rank of one player."""
        self.ensure_loaded()
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        players = self.store.players.all()
        return {
            'player': player_to_dict(player),
            'team_name': self.roster.team_name(player.team_id),
            'view': self.calculator.stat_view(player),
            'metrics': self.calculator.calculate_all(player.stats, len(player.match_ids)),
            'kda_band': self.comparator.kda_band_for_player(player, players),
            'kda_rank': self.comparator.kda_ranking(player.uid, players),
        }

    def player_stats_for_matches(self, player_id: str,
                                 match_ids: Optional[List[str]] = None) -> Optional[PlayerStat]:
        """Subset totals; all of the player's matches when no ids are given."""
        self.ensure_loaded()
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        return self.subsets.aggregate(player, player.match_ids if match_ids is None else match_ids)

    def per_champion(self, player_id: str) -> Optional[List[Dict[str, Any]]]:
        self.ensure_loaded()
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        rows = []
        for champion in self.subsets.per_champion(player).values():
            games = len(champion.match_ids)
            rows.append({
                'champion': champion.champion_name,
                'match_ids': list(champion.match_ids),
                'view': self.calculator.stat_view(player, champion.stats, games),
            })
        rows.sort(key=lambda row: (-len(row['match_ids']), row['champion']))
        return rows

    def radar(self, player_id: str) -> Optional[Dict[str, Any]]:
        self.ensure_loaded()
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        return self.comparator.radar_dataset(player, self.store.players.all())

    def evolution(self, player_id: str, granularity: str = 'week') -> Optional[Dict[str, Any]]:
        self.ensure_loaded()
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        return self.bucketer.evolution_series(player, granularity)

    def recap(self, match_id: str) -> Optional[MatchRecap]:
        self.ensure_loaded()
        return self.recaps.recap_by_id(match_id)

    def match_objectives(self, match_id: str) -> Optional[Dict[int, Dict[str, float]]]:
        self.ensure_loaded()
        match = self.store.matches.get(match_id)
        if match is None:
            return None
        return {side: asdict(self.recaps.per_side_stat(match, side)) for side in (1, 2)}

    def scrims(self) -> List[Dict[str, Any]]:
        self.ensure_loaded()
        scrims = self.scrim_grouper.group_scrims(self.store.matches.all(), self.roster.team_id_for_player)
        return [self.scrim_grouper.to_view(s, self.roster.team_name) for s in scrims]

    def team_id_by_player(self, player_id: str) -> Optional[int]:
        self.ensure_loaded()
        return self.roster.team_id_for_player(player_id)
