# scrimstats/aggregator.py

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from scrimstats.match_assembler import MatchAssembler
from scrimstats.models import Match, PerChampionStat, Player, PlayerStat
from scrimstats.store import DataStore
from scrimstats.thresholds import UNKNOWN_CHAMPION

LOGGER = logging.getLogger(__name__)

NameTeamLookup = Callable[[str], Optional[int]]


def add_match_to_stat(stat: PlayerStat, match: Match, player_id: str) -> bool:
    """
    Add one match's contribution for a player into a running PlayerStat.

    Args:
        stat: Accumulator to mutate
        match: Canonical match
        player_id: Participant whose stats are added

    Returns:
        False when the match has no stats for the player (nothing added)
    """
    data = match.stats.get(player_id)
    if data is None:
        return False

    champion = data.champion_played
    stat.champion_played[champion] = stat.champion_played.get(champion, 0) + 1
    if data.win:
        stat.wins += 1

    stat.total_kills += data.combat.kills
    stat.total_deaths += data.combat.deaths
    stat.total_assists += data.combat.assists
    stat.total_damage_dealt += data.damage.total_damage_to_champions
    stat.total_vision_score += data.vision.vision_score
    stat.total_control_wards_purchased += data.vision.control_ward_purchased or 0
    stat.total_gold_earned += data.income.gold_earned
    stat.total_minions_killed += (
        (data.income.total_minions_killed or 0) + (data.income.neutral_minions_killed or 0)
    )
    stat.total_time_played += match.duration

    # Same-side kills in this match, own kills included.
    stat.total_team_kills += sum(
        other.combat.kills
        for other in match.stats.values()
        if other.team_side_number == data.team_side_number
    )
    return True


class PlayerAggregator:
    """Fold newly assembled matches into lifetime player totals, once per match."""

    def __init__(self, store: DataStore, assembler: Optional[MatchAssembler] = None,
                 team_for_name: Optional[NameTeamLookup] = None):
        self.store = store
        self.assembler = assembler or MatchAssembler()
        self.team_for_name = team_for_name

    def update_from_match(self, match: Match) -> List[str]:
        """
        Apply a match to every player appearing in it.

        Players are created on first appearance; name and role come from the raw
        participant record and the role is never reclassified afterwards.

        Returns:
            Ids of players the match was newly applied to
        """
        applied = []
        for player_id in match.player_ids:
            player = self.store.players.by_id(player_id)
            if player is None:
                player = self._create_player(match, player_id)
                self.store.players.set(player)
            if self.apply_match(player, match):
                applied.append(player_id)
        return applied

    def apply_match(self, player: Player, match: Match) -> bool:
        """Idempotent: a match already in the player's ledger is ignored."""
        if match.id in player.match_ids:
            return False

        player.match_ids.append(match.id)
        if not add_match_to_stat(player.stats, match, player.uid):
            LOGGER.warning("No stats for player %s in match %s; match recorded without totals.",
                           player.uid, match.id)
        return True

    def _create_player(self, match: Match, player_id: str) -> Player:
        participant = self.assembler.raw_participant(match, player_id)
        normalizer = self.assembler.normalizer
        name = normalizer.participant_name(participant)
        team_id = self.team_for_name(name) if (self.team_for_name and name) else None
        player = Player(
            uid=player_id,
            name=name,
            team_id=team_id,
            role=normalizer.classify_role(participant),
        )
        LOGGER.debug("New player %s (%s) role=%s team=%s", player_id, name, player.role.value, team_id)
        return player


class SubsetAggregator:
    """Recompute player totals over arbitrary match subsets without touching lifetime stats."""

    def __init__(self, store: DataStore):
        self.store = store
        # player uid -> (match count when computed, result)
        self._champion_cache: Dict[str, Tuple[int, Dict[str, PerChampionStat]]] = {}

    def aggregate(self, player: Player, match_ids: Iterable[str]) -> PlayerStat:
        stat = PlayerStat.empty()
        for match_id in match_ids:
            match = self.store.matches.get(match_id)
            if match is None:
                LOGGER.debug("Match %s referenced by %s not in store; skipped.", match_id, player.uid)
                continue
            add_match_to_stat(stat, match, player.uid)
        return stat

    def champion_match_map(self, player: Player) -> Dict[str, List[str]]:
        """Group the player's match ids by champion played."""
        grouped: Dict[str, List[str]] = {}
        for match_id in player.match_ids:
            match = self.store.matches.get(match_id)
            if match is None or player.uid not in match.stats:
                continue
            champion = match.stats[player.uid].champion_played or UNKNOWN_CHAMPION
            grouped.setdefault(champion, []).append(match_id)
        return grouped

    def per_champion(self, player: Player) -> Dict[str, PerChampionStat]:
        """
        Per-champion breakdown of a player's matches.

        Memoized per player; a player's history only grows, so the cached value is
        reused while the match count is unchanged.
        """
        cached = self._champion_cache.get(player.uid)
        if cached is not None and cached[0] == len(player.match_ids):
            return cached[1]

        result = {
            champion: PerChampionStat(
                champion_name=champion,
                match_ids=match_ids,
                stats=self.aggregate(player, match_ids),
            )
            for champion, match_ids in self.champion_match_map(player).items()
        }
        self._champion_cache[player.uid] = (len(player.match_ids), result)
        return result

    def clear_cache(self) -> None:
        self._champion_cache.clear()
