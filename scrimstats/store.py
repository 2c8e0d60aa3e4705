# scrimstats/store.py

from typing import Dict, List, Optional

from scrimstats.models import Match, Player, Team


class MatchStore:
    """Append-only map of match id -> Match."""

    def __init__(self):
        self._matches: Dict[str, Match] = {}

    def get(self, match_id: str) -> Optional[Match]:
        return self._matches.get(match_id)

    def set(self, match: Match) -> None:
        self._matches[match.id] = match

    def has(self, match_id: str) -> bool:
        return match_id in self._matches

    def ids(self) -> List[str]:
        return list(self._matches.keys())

    def all(self) -> List[Match]:
        return list(self._matches.values())

    def clear(self) -> None:
        self._matches.clear()

    def __len__(self) -> int:
        return len(self._matches)


class PlayerStore:
    """Player directory keyed by uid, with case-insensitive name lookup."""

    def __init__(self):
        self._players: Dict[str, Player] = {}

    def by_id(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def by_name(self, name: str) -> Optional[Player]:
        wanted = (name or '').lower()
        if not wanted:
            return None
        for player in self._players.values():
            if player.name.lower() == wanted:
                return player
        return None

    def all(self) -> List[Player]:
        return list(self._players.values())

    def set(self, player: Player) -> None:
        self._players[player.uid] = player

    def has(self, player_id: str) -> bool:
        return player_id in self._players

    def clear(self) -> None:
        self._players.clear()

    def __len__(self) -> int:
        return len(self._players)


class TeamStore:
    def __init__(self):
        self._teams: Dict[int, Team] = {}

    def get(self, team_id: int) -> Optional[Team]:
        return self._teams.get(team_id)

    def set(self, team: Team) -> None:
        self._teams[team.id] = team

    def all(self) -> List[Team]:
        return list(self._teams.values())

    def clear(self) -> None:
        self._teams.clear()

    def __len__(self) -> int:
        return len(self._teams)


class DataStore:
    """The three shared stores, passed explicitly to every component."""

    def __init__(self):
        self.matches = MatchStore()
        self.players = PlayerStore()
        self.teams = TeamStore()

    def clear(self) -> None:
        self.matches.clear()
        self.players.clear()
        self.teams.clear()
