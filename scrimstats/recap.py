# scrimstats/recap.py

from typing import Optional

from scrimstats.models import Match, MatchRecap, PerSideStat, PlayerRecap, Role
from scrimstats.store import DataStore
from scrimstats.thresholds import MS_PER_MINUTE, MS_PER_SECOND, NEUTRAL_TEAM_ID


class RecapBuilder:
    """Build display recaps of single matches."""

    def __init__(self, store: DataStore):
        self.store = store

    def recap_by_id(self, match_id: str) -> Optional[MatchRecap]:
        match = self.store.matches.get(match_id)
        if match is None:
            return None
        return self.build_recap(match)

    def build_recap(self, match: Match) -> MatchRecap:
        """
        Convert a Match into a MatchRecap.

        teamSides[0] is the blue side and teamSides[1] the red side; the winner's
        side holds the victorious team id and the other side the first remaining
        team id of the match (0 when there is none).
        """
        victorious_id = match.victorious_team_id if match.is_victory_resolved else None

        team_sides = [NEUTRAL_TEAM_ID, NEUTRAL_TEAM_ID]
        winner_index = self._side_index(match.victorious_team_side)
        team_sides[winner_index] = victorious_id if victorious_id is not None else NEUTRAL_TEAM_ID
        others = [t for t in match.team_ids if t != victorious_id]
        team_sides[1 - winner_index] = others[0] if others else NEUTRAL_TEAM_ID

        players = []
        for player_id in match.player_ids:
            data = match.stats.get(player_id)
            player = self.store.players.by_id(player_id)
            players.append(PlayerRecap(
                id=player_id,
                name=player.name if player else '',
                team_id=player.team_id if player else None,
                champ=data.champion_played if data else None,
                side=self._side_index(data.team_side_number if data else 1),
                k=data.combat.kills if data else 0,
                d=data.combat.deaths if data else 0,
                a=data.combat.assists if data else 0,
                role=player.role if player else Role.UNKNOWN,
            ))

        return MatchRecap(
            id=match.id,
            victorious_team_id=victorious_id,
            duration=match.duration,
            team_sides=team_sides,
            players=players,
            is_official=match.is_official,
        )

    @staticmethod
    def _side_index(side_number: int) -> int:
        # Sides are 1|2; unknown sides fall on index 0.
        return max(0, min(1, side_number - 1))

    @staticmethod
    def per_side_stat(match: Match, side: int) -> PerSideStat:
        """Objective and gold totals for one side (1 blue, 2 red)."""
        totals = PerSideStat()
        for player_id in match.player_ids:
            data = match.stats.get(player_id)
            if data is None or data.team_side_number != side:
                continue
            objectives = data.objectives
            totals.gold += data.income.gold_earned
            totals.grubs += objectives.void_grub_kills or 0
            totals.dragons += objectives.dragon_kills or 0
            totals.heralds += objectives.rift_herald_kills or 0
            totals.barons += objectives.baron_kills or 0
            totals.objectives_stolen += objectives.objectives_stolen or 0
            totals.towers += objectives.turrets_killed or 0
        return totals

    @staticmethod
    def format_duration(duration_ms: float) -> str:
        """'m:ss' from milliseconds."""
        duration_ms = max(0, int(duration_ms))
        minutes = duration_ms // MS_PER_MINUTE
        seconds = (duration_ms % MS_PER_MINUTE) // MS_PER_SECOND
        return f"{minutes}:{seconds:02d}"
