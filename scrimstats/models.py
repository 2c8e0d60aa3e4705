# scrimstats/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from scrimstats.thresholds import NO_TEAM_SIDE, UNRESOLVED_TEAM_ID


class Role(str, Enum):
    TOP = 'TOP'
    JUNGLE = 'JGL'
    MID = 'MID'
    ADC = 'ADC'
    SUPPORT = 'SUP'
    UNKNOWN = 'UNKNOWN'


@dataclass
class CombatStats:
    kills: float = 0
    deaths: float = 0
    assists: float = 0
    double_kills: Optional[float] = None
    triple_kills: Optional[float] = None
    quadra_kills: Optional[float] = None
    penta_kills: Optional[float] = None
    cc_score: Optional[float] = None
    cc_time: Optional[float] = None
    total_cc_time: Optional[float] = None
    longest_time_spent_alive: Optional[float] = None
    time_spent_dead: Optional[float] = None


@dataclass
class DamageStats:
    total_damage_to_champions: float = 0
    physical_damage_to_champions: Optional[float] = None
    magic_damage_to_champions: Optional[float] = None
    true_damage_to_champions: Optional[float] = None
    total_damage_taken: Optional[float] = None
    physical_damage_taken: Optional[float] = None
    magic_damage_taken: Optional[float] = None
    true_damage_taken: Optional[float] = None
    total_healing_done: Optional[float] = None
    total_healing_done_to_teammates: Optional[float] = None
    total_damage_shielded_to_teammates: Optional[float] = None


@dataclass
class VisionStats:
    vision_score: float = 0
    wards_placed: float = 0
    wards_killed: float = 0
    control_ward_purchased: Optional[float] = None


@dataclass
class IncomeStats:
    gold_earned: float = 0
    gold_from_plates: Optional[float] = None
    gold_from_structures: Optional[float] = None
    gold_spent: Optional[float] = None
    total_minions_killed: Optional[float] = None
    neutral_minions_killed: Optional[float] = None
    neutral_minions_killed_team_jungle: Optional[float] = None
    neutral_minions_killed_enemy_jungle: Optional[float] = None


@dataclass
class ObjectiveStats:
    turrets_killed: Optional[float] = None
    turret_plates_destroyed: Optional[float] = None
    total_damage_to_turrets: Optional[float] = None
    total_damage_to_objectives: Optional[float] = None
    objectives_stolen: Optional[float] = None
    void_grub_kills: Optional[float] = None
    rift_herald_kills: Optional[float] = None
    dragon_kills: Optional[float] = None
    baron_kills: Optional[float] = None


@dataclass
class PlayerMatchData:
    """One player's normalized stats for one match."""

    team_side_number: int = NO_TEAM_SIDE
    champion_played: str = ''
    win: bool = False
    combat: CombatStats = field(default_factory=CombatStats)
    damage: DamageStats = field(default_factory=DamageStats)
    vision: VisionStats = field(default_factory=VisionStats)
    income: IncomeStats = field(default_factory=IncomeStats)
    objectives: ObjectiveStats = field(default_factory=ObjectiveStats)


@dataclass
class Match:
    """Canonical match record.

    Built in two phases: ``MatchAssembler.assemble`` fills everything except the
    victory fields, which stay at ``NO_TEAM_SIDE`` / ``UNRESOLVED_TEAM_ID`` until
    ``MatchAssembler.resolve_victory`` runs against the team roster.
    """

    id: str
    player_ids: List[str] = field(default_factory=list)
    team_ids: List[int] = field(default_factory=list)
    victorious_team_side: int = NO_TEAM_SIDE
    victorious_team_id: int = UNRESOLVED_TEAM_ID
    duration: float = 0
    stats: Dict[str, PlayerMatchData] = field(default_factory=dict)
    is_official: bool = False
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @property
    def is_victory_resolved(self) -> bool:
        return self.victorious_team_id != UNRESOLVED_TEAM_ID


@dataclass
class PlayerStat:
    """Running totals for a player, lifetime or over a subset of matches."""

    champion_played: Dict[str, int] = field(default_factory=dict)
    wins: int = 0
    total_kills: float = 0
    total_deaths: float = 0
    total_assists: float = 0
    total_damage_dealt: float = 0
    total_vision_score: float = 0
    total_control_wards_purchased: float = 0
    total_gold_earned: float = 0
    total_minions_killed: float = 0
    total_time_played: float = 0
    total_team_kills: float = 0

    @classmethod
    def empty(cls) -> 'PlayerStat':
        return cls()


@dataclass
class Player:
    uid: str
    name: str = ''
    team_id: Optional[int] = None
    match_ids: List[str] = field(default_factory=list)
    role: Role = Role.UNKNOWN
    stats: PlayerStat = field(default_factory=PlayerStat.empty)


@dataclass
class Team:
    id: int
    name: str
    players_ids: List[str] = field(default_factory=list)
    match_ids: List[str] = field(default_factory=list)


@dataclass
class PerChampionStat:
    champion_name: str
    match_ids: List[str]
    stats: PlayerStat


@dataclass
class Bounds:
    min: float = 0.0
    max: float = 0.0


@dataclass
class PlayerRecap:
    id: str
    name: str
    team_id: Optional[int]
    champ: Optional[str]
    side: int
    k: float
    d: float
    a: float
    role: Role


@dataclass
class MatchRecap:
    id: str
    victorious_team_id: Optional[int]
    duration: float
    team_sides: List[int]
    players: List[PlayerRecap]
    is_official: bool = False


@dataclass
class PerSideStat:
    gold: float = 0
    grubs: float = 0
    dragons: float = 0
    heralds: float = 0
    barons: float = 0
    objectives_stolen: float = 0
    towers: float = 0


@dataclass
class Scrim:
    date: datetime
    match_ids: List[str]
    opponent_team_id: int
    score: Dict[int, int]


@dataclass
class Period:
    period_start: datetime
    period_end: datetime
    match_ids: List[str]
    stats: PlayerStat
    raw: Dict[str, float]
    role_avg_raw: Optional[Dict[str, float]] = None


@dataclass
class LoadingStatus:
    is_loading: bool
    is_initialized: bool
    teams_count: int
    players_count: int
    matches_count: int
