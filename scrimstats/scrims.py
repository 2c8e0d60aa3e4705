# scrimstats/scrims.py

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from scrimstats.evolution import match_date
from scrimstats.match_assembler import MatchAssembler
from scrimstats.models import Match, Scrim
from scrimstats.thresholds import OUR_TEAM_ID, SCRIM_MAX_MATCHES, SCRIM_MIN_MATCHES, UNRESOLVED_TEAM_ID

LOGGER = logging.getLogger(__name__)

TeamLookup = Callable[[str], Optional[int]]


class ScrimGrouper:
    """Group matches against the same opponent on the same day into scrims."""

    def __init__(self, our_team_id: int = OUR_TEAM_ID):
        self.our_team_id = our_team_id

    def opponent_for(self, match: Match, team_lookup: TeamLookup) -> Optional[int]:
        """
        Opponent team of a match, by player count.

        Returns:
            None when our team is not represented; -1 when no other team is;
            otherwise the most represented other team (lowest id on ties)
        """
        counts: Dict[int, int] = {}
        for player_id in match.player_ids or list(match.stats.keys()):
            team_id = team_lookup(player_id)
            if team_id is not None:
                counts[team_id] = counts.get(team_id, 0) + 1

        if self.our_team_id not in counts:
            return None

        others = [(count, team_id) for team_id, count in counts.items() if team_id != self.our_team_id]
        if not others:
            return UNRESOLVED_TEAM_ID
        best_count = max(count for count, _ in others)
        return min(team_id for count, team_id in others if count == best_count)

    def group_scrims(self, matches: Iterable[Match], team_lookup: TeamLookup) -> List[Scrim]:
        """
        Build the scrim list, newest first.

        Args:
            matches: Candidate matches (any order)
            team_lookup: player id -> team id

        Returns:
            Scrims of 2 or 3 matches sharing date and opponent
        """
        match_map: Dict[str, Match] = {}
        groups: Dict[tuple, List[str]] = {}
        for match in matches:
            day = match_date(match.id)
            if day is None:
                continue
            opponent = self.opponent_for(match, team_lookup)
            if opponent is None:
                continue
            match_map[match.id] = match
            groups.setdefault((day, opponent), []).append(match.id)

        scrims = []
        for (day, opponent), ids in sorted(groups.items(), key=lambda item: (item[0][0], item[0][1])):
            ids.sort()
            for i in range(0, len(ids), SCRIM_MAX_MATCHES):
                chunk = ids[i:i + SCRIM_MAX_MATCHES]
                if len(chunk) < SCRIM_MIN_MATCHES:
                    continue
                scrims.append(Scrim(
                    date=day,
                    match_ids=chunk,
                    opponent_team_id=opponent,
                    score=self.score(chunk, match_map),
                ))

        scrims.sort(key=lambda s: s.date, reverse=True)
        return scrims

    @staticmethod
    def score(match_ids: List[str], match_map: Mapping[str, Match]) -> Dict[int, int]:
        """Wins per team id; matches without a resolved winner are not counted."""
        score: Dict[int, int] = {}
        for match_id in match_ids:
            match = match_map.get(match_id)
            if match is None or not match.is_victory_resolved:
                LOGGER.warning("Match %s has no resolved victorious team; left out of the score.", match_id)
                continue
            winner = match.victorious_team_id
            score[winner] = score.get(winner, 0) + 1
        return score

    def to_view(self, scrim: Scrim, team_names: Callable[[int], str]) -> Dict[str, Any]:
        """Display row for a scrim: our wins first, opponent second."""
        our_wins = scrim.score.get(self.our_team_id, 0)
        their_wins = scrim.score.get(scrim.opponent_team_id, 0)
        date_iso = scrim.date.strftime('%Y-%m-%d')
        return {
            'key': f"{date_iso}::{scrim.opponent_team_id}::{scrim.match_ids[0] if scrim.match_ids else ''}",
            'date': date_iso,
            'display_date': scrim.date.strftime('%a, %b %d'),
            'match_ids': list(scrim.match_ids),
            'score': f"{our_wins} - {their_wins}",
            'teams': {
                'a': {'id': self.our_team_id, 'name': team_names(self.our_team_id)},
                'b': {'id': scrim.opponent_team_id, 'name': team_names(scrim.opponent_team_id)},
            },
            'is_official': any(MatchAssembler.is_official_id(mid) for mid in scrim.match_ids),
            'our_team_won': our_wins > their_wins,
        }
