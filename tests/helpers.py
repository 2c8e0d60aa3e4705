# tests/helpers.py

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from scrimstats.loader import DataLoader
from scrimstats.roster import TeamRoster
from scrimstats.store import DataStore

POSITIONS = ['TOP', 'JUNGLE', 'MIDDLE', 'BOTTOM', 'UTILITY']

OUR_PLAYERS = ['Alpha', 'Bravo', 'Charlie', 'Delta', 'Echo']
RIVAL_PLAYERS = ['Kilo', 'Lima', 'Mike', 'November', 'Oscar']
OTHER_PLAYERS = ['Papa', 'Quebec', 'Romeo', 'Sierra', 'Tango']

TEAMS = [
    {'id': 0, 'name': 'Our Team', 'players': OUR_PLAYERS},
    {'id': 7, 'name': 'Rivals', 'players': RIVAL_PLAYERS},
    {'id': 9, 'name': 'Others', 'players': OTHER_PLAYERS},
]


def raw_participant(name: str, side: int = 100, win: bool = False, kills: Any = 0,
                    deaths: Any = 0, assists: Any = 0, champion: str = 'Ahri',
                    position: str = 'MIDDLE', gold: Any = 10000, damage: Any = 20000,
                    vision: Any = 20, minions: Any = 150, neutral: Any = 10,
                    control_wards: Any = None, **extra: Any) -> Dict[str, Any]:
    """One exported participant, values as strings like the real export."""
    raw = {
        'PUUID': f'puuid-{name.lower()}',
        'RIOT_ID_GAME_NAME': name,
        'TEAM': str(side),
        'WIN': 'Win' if win else 'Fail',
        'SKIN': champion,
        'INDIVIDUAL_POSITION': position,
        'CHAMPIONS_KILLED': str(kills),
        'NUM_DEATHS': str(deaths),
        'ASSISTS': str(assists),
        'GOLD_EARNED': str(gold),
        'TOTAL_DAMAGE_DEALT_TO_CHAMPIONS': str(damage),
        'VISION_SCORE': str(vision),
        'WARD_PLACED': '10',
        'WARD_KILLED': '3',
        'MINIONS_KILLED': str(minions),
        'NEUTRAL_MINIONS_KILLED': str(neutral),
    }
    if control_wards is not None:
        raw['WARD_PLACED_DETECTOR'] = str(control_wards)
    raw.update(extra)
    return raw


def match_payload(participants: List[Dict[str, Any]], duration: Any = 1800000) -> Dict[str, Any]:
    return {'gameDuration': duration, 'participants': participants}


def five_v_five(blue: List[str], red: List[str], blue_wins: bool = True,
                kills: int = 2, deaths: int = 1, assists: int = 3,
                duration: Any = 1800000) -> Dict[str, Any]:
    """A full game; every player gets the same K/D/A line."""
    participants = []
    for names, side, win in ((blue, 100, blue_wins), (red, 200, not blue_wins)):
        for name, position in zip(names, POSITIONS):
            participants.append(raw_participant(
                name, side=side, win=win, kills=kills, deaths=deaths, assists=assists,
                position=position, champion=f'{position.title()}Champ',
            ))
    return match_payload(participants, duration=duration)


def player_id(name: str) -> str:
    return f'puuid-{name.lower()}'


def build_store(payloads: Dict[str, Dict[str, Any]],
                teams: Optional[List[Dict[str, Any]]] = None):
    """Ingest payloads (match id -> payload) into a fresh store. Returns (store, roster)."""
    store = DataStore()
    roster = TeamRoster(store)
    roster.load_entries(TEAMS if teams is None else teams)
    loader = DataLoader(store, roster, data_dir='.')
    for match_id in sorted(payloads):
        loader.ingest(payloads[match_id], match_id)
    return store, roster


def write_match_files(directory: Path, payloads: Dict[str, Any]) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for match_id, payload in payloads.items():
        (directory / f'{match_id}.json').write_text(json.dumps(payload), encoding='utf-8')


def write_teams_file(path: Path, teams: Optional[List[Dict[str, Any]]] = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(TEAMS if teams is None else teams), encoding='utf-8')
