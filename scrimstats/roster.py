# scrimstats/roster.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from scrimstats.models import Match, Team
from scrimstats.store import DataStore
from scrimstats.thresholds import OUR_TEAM_ID

LOGGER = logging.getLogger(__name__)

ParsedRoster = Tuple[List[Team], Dict[str, int]]


class TeamRoster:
    """Team membership from a teams file, resolved by player name."""

    def __init__(self, store: DataStore):
        self.store = store
        # lower-cased player name -> team id
        self._name_to_team: Dict[str, int] = {}

    # --- Loading ---

    def read_file(self, path: Union[str, Path]) -> Any:
        """
        Read the raw entries of a teams JSON file.

        A missing file means no teams are configured; a file that exists but is not
        valid JSON raises ValueError.
        """
        path = Path(path)
        if not path.exists():
            LOGGER.warning("Teams file %s not found; no teams configured.", path)
            return []
        try:
            return json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Teams file {path} is not valid JSON: {exc}") from exc

    def parse_entries(self, entries: Any) -> ParsedRoster:
        """
        Validate team entries without touching the store.

        Returns:
            (teams, lower-cased player name -> team id)
        """
        if not isinstance(entries, list):
            raise ValueError("Teams file must contain a list of teams")

        teams: List[Team] = []
        seen_names = set()
        name_to_team: Dict[str, int] = {}
        for entry in entries:
            if not isinstance(entry, dict) or 'id' not in entry or 'name' not in entry:
                raise ValueError(f"Invalid team entry: {entry!r}")
            try:
                team_id = int(entry['id'])
            except (TypeError, ValueError):
                raise ValueError(f"Invalid team id: {entry['id']!r}")
            name = str(entry['name'])

            if any(t.id == team_id for t in teams):
                raise ValueError(f"Team id {team_id} already exists")
            if name.lower() in seen_names:
                raise ValueError(f"Team '{name}' already exists")
            seen_names.add(name.lower())

            for player_name in entry.get('players') or []:
                key = str(player_name).lower()
                if key in name_to_team and name_to_team[key] != team_id:
                    LOGGER.warning("Player '%s' listed in teams %s and %s; keeping %s.",
                                   player_name, name_to_team[key], team_id, name_to_team[key])
                    continue
                name_to_team[key] = team_id
            teams.append(Team(id=team_id, name=name))
        return teams, name_to_team

    def apply(self, parsed: ParsedRoster) -> List[Team]:
        """Replace the configured teams and reassign players."""
        teams, name_to_team = parsed
        self._name_to_team = name_to_team
        self.store.teams.clear()
        for team in teams:
            self.store.teams.set(team)
        self.reassign_all()
        LOGGER.info("Loaded %s teams (%s players).", len(teams), len(name_to_team))
        return teams

    def load_file(self, path: Union[str, Path]) -> List[Team]:
        return self.apply(self.parse_entries(self.read_file(path)))

    def load_entries(self, entries: Any) -> List[Team]:
        return self.apply(self.parse_entries(entries))

    # --- Lookups ---

    def team_id_for_name(self, name: str) -> Optional[int]:
        if not name:
            return None
        return self._name_to_team.get(name.lower())

    def team_id_for_player(self, player_id: str) -> Optional[int]:
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        return player.team_id

    def team_name(self, team_id: Optional[int]) -> str:
        if team_id is None:
            return 'No Team'
        team = self.store.teams.get(team_id)
        return team.name if team else f"Team {team_id}"

    # --- Membership ---

    def reassign_all(self) -> None:
        """Recompute every player's team and the team member lists."""
        for team in self.store.teams.all():
            team.players_ids = []
        for player in self.store.players.all():
            player.team_id = self.team_id_for_name(player.name)
            self._add_member(player.uid, player.team_id)
        for team in self.store.teams.all():
            team.match_ids = []
        for match in self.store.matches.all():
            self.record_match(match)

    def assign_player(self, player_id: str) -> Optional[int]:
        player = self.store.players.by_id(player_id)
        if player is None:
            return None
        player.team_id = self.team_id_for_name(player.name)
        self._add_member(player_id, player.team_id)
        return player.team_id

    def _add_member(self, player_id: str, team_id: Optional[int]) -> None:
        if team_id is None:
            return
        team = self.store.teams.get(team_id)
        if team is not None and player_id not in team.players_ids:
            team.players_ids.append(player_id)

    def record_match(self, match: Match) -> None:
        """Add the match to the ledger of every team with a player in it."""
        for player_id in match.player_ids:
            team_id = self.team_id_for_player(player_id)
            if team_id is None:
                continue
            team = self.store.teams.get(team_id)
            if team is not None and match.id not in team.match_ids:
                team.match_ids.append(match.id)

    def our_team(self) -> Optional[Team]:
        return self.store.teams.get(OUR_TEAM_ID)
