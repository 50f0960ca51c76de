"""Encounter generation and monster stat derivation. Pure, no I/O."""
from __future__ import annotations

import logging
from typing import Sequence

from xiuxian_mud.config import EncounterConfig
from xiuxian_mud.content.loader import load_monsters
from xiuxian_mud.errors import ConfigurationError, InvalidInput
from xiuxian_mud.mechanics.realms import realm_by_name, realm_index
from xiuxian_mud.mechanics.rng import RandomSource, chance, choice, weighted_choice
from xiuxian_mud.models.combat import CombatStats
from xiuxian_mud.models.monster import Encounter, MonsterSpecies, Rarity

logger = logging.getLogger(__name__)

MONSTER_CRIT_RATE = 5.0
MONSTER_CRIT_DAMAGE = 1.5
MONSTER_DODGE_RATE = 3.0

RARITY_SPEED: dict[Rarity, int] = {
    Rarity.COMMON: 8,
    Rarity.RARE: 10,
    Rarity.EPIC: 12,
    Rarity.LEGENDARY: 14,
}

# (minimum attack/power ratio, advice), strongest player first.
HINT_BANDS: tuple[tuple[float, str], ...] = (
    (2.0, "Trivial foe, an easy kill"),
    (1.2, "You have the edge, worth a fight"),
    (0.8, "Evenly matched, risky"),
    (0.5, "A stronger foe, proceed with caution"),
)
FLEE_ADVICE = "Far beyond your strength, flee advised"


def find_species(name: str, catalogue: Sequence[MonsterSpecies] | None = None) -> MonsterSpecies | None:
    catalogue = load_monsters() if catalogue is None else catalogue
    return next((s for s in catalogue if s.name == name), None)


def available_species(
    cultivation: int, catalogue: Sequence[MonsterSpecies] | None = None
) -> list[MonsterSpecies]:
    """Species of the character's realm and the realm directly below it."""
    catalogue = load_monsters() if catalogue is None else catalogue
    tier = realm_index(cultivation)
    return [
        s for s in catalogue
        if tier - 1 <= realm_by_name(s.realm_required)[0] <= tier
    ]


def pick_species(
    available: Sequence[MonsterSpecies],
    rng: RandomSource,
    rarity_weights: dict[str, float] | None = None,
) -> MonsterSpecies:
    weights_by_rarity = rarity_weights or EncounterConfig().rarity_weights
    default_weight = weights_by_rarity.get(Rarity.COMMON.value, 60)
    weights = [weights_by_rarity.get(s.rarity.value, default_weight) for s in available]
    return weighted_choice(rng, list(available), weights)


def generate_encounter(
    cultivation: int,
    rng: RandomSource,
    config: EncounterConfig | None = None,
    catalogue: Sequence[MonsterSpecies] | None = None,
) -> Encounter:
    """Draw a species for the character's tier, then its power and rewards."""
    config = config or EncounterConfig()
    available = available_species(cultivation, catalogue)
    if not available:
        raise ConfigurationError(f"No monster species configured for cultivation {cultivation}")

    species = pick_species(available, rng, config.rarity_weights)
    power = int(species.min_power + rng.random() * (species.max_power - species.min_power))
    reward_item = None
    if species.drops and chance(rng, config.item_drop_chance * 100):
        reward_item = choice(rng, species.drops)

    encounter = Encounter(
        species=species.name,
        description=species.description,
        rarity=species.rarity,
        power=power,
        reward_cultivation=int(power * config.reward_rate),
        reward_item=reward_item,
    )
    logger.debug(
        "Encounter for cultivation %d: %s (%s) power=%d reward=%d item=%s",
        cultivation, encounter.species, encounter.rarity.value, power,
        encounter.reward_cultivation, reward_item,
    )
    return encounter


def derive_monster_stats(power: int, species_name: str) -> CombatStats:
    """Monster stats depend on power alone; the species only sets speed."""
    if power < 0:
        raise InvalidInput(f"Monster power cannot be negative: {power}")
    species = find_species(species_name)
    if species is None:
        logger.warning("Unknown species %r, using common speed", species_name)
        speed = RARITY_SPEED[Rarity.COMMON]
    else:
        speed = RARITY_SPEED[species.rarity]
    max_hp = max(1, power * 5)
    return CombatStats(
        hp=max_hp,
        max_hp=max_hp,
        attack=power,
        defense=int(power * 0.3),
        speed=speed,
        crit_rate=MONSTER_CRIT_RATE,
        crit_damage=MONSTER_CRIT_DAMAGE,
        dodge_rate=MONSTER_DODGE_RATE,
    )


def monster_hint(player_attack: int, monster_power: int) -> str:
    """Advisory only; never blocks a fight."""
    if monster_power <= 0:
        return HINT_BANDS[0][1]
    ratio = player_attack / monster_power
    for threshold, advice in HINT_BANDS:
        if ratio >= threshold:
            return advice
    return FLEE_ADVICE
