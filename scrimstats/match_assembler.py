# scrimstats/match_assembler.py

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from scrimstats.models import Match
from scrimstats.normalizer import StatsNormalizer
from scrimstats.store import MatchStore
from scrimstats.thresholds import MATCH_ID_PARTS_NUMBER, NO_TEAM_SIDE, UNRESOLVED_TEAM_ID

LOGGER = logging.getLogger(__name__)

TeamLookup = Callable[[str], Optional[int]]


class MatchAssembler:
    """Build canonical Match records from raw match payloads."""

    def __init__(self, normalizer: Optional[StatsNormalizer] = None):
        self.normalizer = normalizer or StatsNormalizer()

    def assemble(self, raw: Any, match_id: str) -> Match:
        """
        Normalize a raw payload into a Match (victory fields left unresolved).

        Args:
            raw: Decoded JSON payload of one match file
            match_id: Match id, normally the file stem (YYYY-MM-DD-...)

        Returns:
            Match with player ids, per-player stats and duration filled in
        """
        payload: Dict[str, Any] = raw if isinstance(raw, dict) else {}

        player_ids: List[str] = []
        stats = {}
        for participant in self.participants(payload):
            player_id = self.normalizer.participant_id(participant)
            if not player_id or player_id in stats:
                continue
            player_ids.append(player_id)
            stats[player_id] = self.normalizer.normalize(participant)

        duration = self.normalizer._to_number(payload.get('gameDuration')) or 0

        return Match(
            id=match_id,
            player_ids=player_ids,
            stats=stats,
            duration=max(0, duration),
            is_official=self.is_official_id(match_id),
            raw=payload,
        )

    @staticmethod
    def participants(payload: Mapping[str, Any]) -> List[Mapping[str, Any]]:
        participants = payload.get('participants') if isinstance(payload, Mapping) else None
        if not isinstance(participants, list):
            return []
        return [p for p in participants if isinstance(p, Mapping)]

    def raw_participant(self, match: Match, player_id: str) -> Optional[Mapping[str, Any]]:
        for participant in self.participants(match.raw or {}):
            if self.normalizer.participant_id(participant) == player_id:
                return participant
        return None

    @staticmethod
    def is_official_id(match_id: str) -> bool:
        return len(match_id.split('-')) > MATCH_ID_PARTS_NUMBER

    @staticmethod
    def is_processed(match_id: str, matches: MatchStore) -> bool:
        """A match counts as processed once it is stored with a non-empty raw payload."""
        match = matches.get(match_id)
        return match is not None and bool(match.raw)

    def resolve_victory(self, match: Match, team_lookup: TeamLookup) -> Match:
        """
        Back-fill the winning side and team once team membership is known.

        Safe to call repeatedly; each call recomputes from the match stats and the
        current roster.
        """
        team_ids: List[int] = []
        for player_id in match.player_ids:
            team_id = team_lookup(player_id)
            if team_id is not None and team_id not in team_ids:
                team_ids.append(team_id)
        match.team_ids = team_ids

        # Players without stats in the match cannot be the winner.
        winner_id = next(
            (player_id for player_id in match.player_ids
             if player_id in match.stats and match.stats[player_id].win),
            None,
        )
        if winner_id is None:
            match.victorious_team_side = NO_TEAM_SIDE
            match.victorious_team_id = UNRESOLVED_TEAM_ID
            LOGGER.warning("Match %s has no winning participant; victory left unresolved.", match.id)
            return match

        match.victorious_team_side = match.stats[winner_id].team_side_number
        team_id = team_lookup(winner_id)
        if team_id is None:
            match.victorious_team_id = UNRESOLVED_TEAM_ID
            LOGGER.warning(
                "No team found for winning player %s in match %s; victorious team unresolved.",
                winner_id,
                match.id,
            )
        else:
            match.victorious_team_id = team_id
        return match
