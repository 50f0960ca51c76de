"""Player combat stats from progression, equipment and the bestiary."""
from __future__ import annotations

from xiuxian_mud.errors import InvalidInput
from xiuxian_mud.mechanics.realms import base_stats, realm_index
from xiuxian_mud.models.character import EquipmentBonus
from xiuxian_mud.models.combat import CombatStats

PLAYER_BASE_SPEED = 10
PLAYER_SPEED_PER_REALM = 2
PLAYER_CRIT_RATE = 10.0
PLAYER_CRIT_DAMAGE = 1.5
PLAYER_DODGE_RATE = 5.0

MAX_CRIT_RATE = 75.0
MAX_DODGE_RATE = 50.0


def clamp_rate(value: float, ceiling: float) -> float:
    return max(0.0, min(value, ceiling))


def derive_combat_stats(
    cultivation: int,
    equipment_bonus: EquipmentBonus | None = None,
    bestiary_bonus_percent: float = 0,
    current_hp: int | None = None,
) -> CombatStats:
    """Combine base stats, additive gear and the per-species attack bonus.

    ``bestiary_bonus_percent`` must come from kills against the opponent's
    species only. ``current_hp`` defaults to full health and is clamped to
    the derived max.
    """
    if bestiary_bonus_percent < 0:
        raise InvalidInput(f"Bestiary bonus cannot be negative: {bestiary_bonus_percent}")
    if current_hp is not None and current_hp < 0:
        raise InvalidInput(f"Current hp cannot be negative: {current_hp}")
    bonus = equipment_bonus or EquipmentBonus()
    base = base_stats(cultivation)

    max_hp = base.hp + bonus.hp
    attack = int((base.attack + bonus.attack) * (100 + bestiary_bonus_percent) // 100)
    hp = max_hp if current_hp is None else min(current_hp, max_hp)

    return CombatStats(
        hp=hp,
        max_hp=max_hp,
        attack=attack,
        defense=base.defense + bonus.defense,
        speed=PLAYER_BASE_SPEED + PLAYER_SPEED_PER_REALM * realm_index(cultivation),
        crit_rate=clamp_rate(PLAYER_CRIT_RATE, MAX_CRIT_RATE),
        crit_damage=PLAYER_CRIT_DAMAGE,
        dodge_rate=clamp_rate(PLAYER_DODGE_RATE, MAX_DODGE_RATE),
    )
