# scrimstats/normalizer.py

import math
from typing import Any, Dict, Mapping, Optional

from scrimstats.models import (
    CombatStats,
    DamageStats,
    IncomeStats,
    ObjectiveStats,
    PlayerMatchData,
    Role,
    VisionStats,
)
from scrimstats.thresholds import NO_TEAM_SIDE, SIDE_NUMBER_DIVISOR, WIN_TOKEN


class StatsNormalizer:
    """
    Normalize one exported match participant into a PlayerMatchData record.

    The export is a flat map of upper-case keys (CHAMPIONS_KILLED, GOLD_EARNED, ...)
    whose values may be strings, numbers, empty or absent. Required fields always
    resolve to a number; optional fields resolve to None when not recorded.
    """

    def __init__(self):
        # Export keys per section. Tuples list fallbacks in priority order.
        self.combat_keys = {
            'double_kills': 'DOUBLE_KILLS',
            'triple_kills': 'TRIPLE_KILLS',
            'quadra_kills': 'QUADRA_KILLS',
            'penta_kills': 'PENTA_KILLS',
            'cc_score': 'TIME_CCING_OTHERS',
            'cc_time': 'TOTAL_TIME_CROWD_CONTROL_DEALT_TO_CHAMPIONS',
            'total_cc_time': 'TOTAL_TIME_CROWD_CONTROL_DEALT',
            'longest_time_spent_alive': 'LONGEST_TIME_SPENT_LIVING',
            'time_spent_dead': 'TOTAL_TIME_SPENT_DEAD',
        }
        self.damage_keys = {
            'physical_damage_to_champions': 'PHYSICAL_DAMAGE_DEALT_TO_CHAMPIONS',
            'magic_damage_to_champions': 'MAGIC_DAMAGE_DEALT_TO_CHAMPIONS',
            'true_damage_to_champions': 'TRUE_DAMAGE_DEALT_TO_CHAMPIONS',
            'total_damage_taken': 'TOTAL_DAMAGE_TAKEN',
            'physical_damage_taken': 'PHYSICAL_DAMAGE_TAKEN',
            'magic_damage_taken': 'MAGIC_DAMAGE_TAKEN',
            'true_damage_taken': 'TRUE_DAMAGE_TAKEN',
            'total_healing_done': 'TOTAL_HEAL',
            'total_healing_done_to_teammates': 'TOTAL_HEAL_ON_TEAMMATES',
            'total_damage_shielded_to_teammates': 'TOTAL_DAMAGE_SHIELDED_ON_TEAMMATES',
        }
        self.income_keys = {
            'gold_from_plates': 'Missions_GoldFromTurretPlatesTaken',
            'gold_from_structures': 'Missions_GoldFromStructuresDestroyed',
            'gold_spent': 'GOLD_SPENT',
            'total_minions_killed': 'MINIONS_KILLED',
            'neutral_minions_killed': 'NEUTRAL_MINIONS_KILLED',
            'neutral_minions_killed_team_jungle': 'NEUTRAL_MINIONS_KILLED_YOUR_JUNGLE',
            'neutral_minions_killed_enemy_jungle': 'NEUTRAL_MINIONS_KILLED_ENEMY_JUNGLE',
        }
        self.objective_keys = {
            'turrets_killed': 'TURRETS_KILLED',
            'turret_plates_destroyed': 'Missions_TurretPlatesDestroyed',
            'total_damage_to_turrets': 'TOTAL_DAMAGE_DEALT_TO_TURRETS',
            'total_damage_to_objectives': 'TOTAL_DAMAGE_DEALT_TO_OBJECTIVES',
            'objectives_stolen': 'OBJECTIVES_STOLEN',
            'void_grub_kills': 'HORDE_KILLS',
            'rift_herald_kills': 'RIFT_HERALD_KILLS',
            'dragon_kills': 'DRAGON_KILLS',
            'baron_kills': 'BARON_KILLS',
        }
        self.role_positions = {
            'TOP': Role.TOP,
            'JUNGLE': Role.JUNGLE,
            'MIDDLE': Role.MID,
            'BOTTOM': Role.ADC,
            'UTILITY': Role.SUPPORT,
        }

    def normalize(self, raw: Mapping[str, Any]) -> PlayerMatchData:
        """
        Build the canonical record for one participant.

        Args:
            raw: Participant map as exported (any string-keyed mapping)

        Returns:
            PlayerMatchData with required numbers defaulted to 0
        """
        if not isinstance(raw, Mapping):
            raw = {}

        side = self._to_number(raw.get('TEAM'))
        side_number = int(side // SIDE_NUMBER_DIVISOR) if side else NO_TEAM_SIDE

        return PlayerMatchData(
            team_side_number=side_number,
            champion_played=self._champion(raw),
            win=raw.get('WIN') == WIN_TOKEN,
            combat=CombatStats(
                kills=self._required(raw, 'CHAMPIONS_KILLED', 'KILLS'),
                deaths=self._required(raw, 'NUM_DEATHS', 'DEATHS'),
                assists=self._required(raw, 'ASSISTS'),
                **self._optional_section(raw, self.combat_keys),
            ),
            damage=DamageStats(
                total_damage_to_champions=self._required(raw, 'TOTAL_DAMAGE_DEALT_TO_CHAMPIONS'),
                **self._optional_section(raw, self.damage_keys),
            ),
            vision=VisionStats(
                vision_score=self._required(raw, 'VISION_SCORE'),
                wards_placed=self._required(raw, 'WARD_PLACED'),
                wards_killed=self._required(raw, 'WARD_KILLED'),
                control_ward_purchased=self._optional(raw.get('WARD_PLACED_DETECTOR')),
            ),
            income=IncomeStats(
                gold_earned=self._required(raw, 'GOLD_EARNED'),
                **self._optional_section(raw, self.income_keys),
            ),
            objectives=ObjectiveStats(**self._optional_section(raw, self.objective_keys)),
        )

    def participant_id(self, raw: Mapping[str, Any]) -> Optional[str]:
        value = raw.get('PUUID') if isinstance(raw, Mapping) else None
        return str(value) if value else None

    def participant_name(self, raw: Optional[Mapping[str, Any]]) -> str:
        if not isinstance(raw, Mapping):
            return ''
        return str(raw.get('RIOT_ID_GAME_NAME') or '')

    def classify_role(self, raw: Optional[Mapping[str, Any]]) -> Role:
        """Map the exported lane position to a Role (UNKNOWN when absent)."""
        if not isinstance(raw, Mapping):
            return Role.UNKNOWN
        position = raw.get('INDIVIDUAL_POSITION') or raw.get('TEAM_POSITION') or ''
        return self.role_positions.get(str(position).upper(), Role.UNKNOWN)

    def _champion(self, raw: Mapping[str, Any]) -> str:
        return str(raw.get('SKIN') or raw.get('CHAMPION') or '')

    def _required(self, raw: Mapping[str, Any], *keys: str) -> float:
        """First present key wins; unparsable or negative values fall back to 0."""
        for key in keys:
            if raw.get(key) is not None:
                value = self._to_number(raw.get(key))
                return max(0, value) if value is not None else 0
        return 0

    def _optional_section(self, raw: Mapping[str, Any], keys: Dict[str, str]) -> Dict[str, Optional[float]]:
        return {field_name: self._optional(raw.get(key)) for field_name, key in keys.items()}

    def _optional(self, value: Any) -> Optional[float]:
        return self._to_number(value)

    @staticmethod
    def _to_number(value: Any) -> Optional[float]:
        """
        Parse an exported value to a finite number.

        Args:
            value: Raw value (number, numeric string, empty, None, ...)

        Returns:
            int or float, or None when the value is missing or not numeric
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = value
        else:
            text = str(value).strip().replace(',', '')
            if not text:
                return None
            try:
                number = float(text)
            except ValueError:
                return None
        if isinstance(number, float):
            if not math.isfinite(number):
                return None
            if number.is_integer():
                return int(number)
        return number
