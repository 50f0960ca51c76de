"""Equipment quality rolls, realm eligibility and slot bonuses. No I/O."""
from __future__ import annotations

import logging
from typing import Sequence

from xiuxian_mud.content.loader import load_equipment, load_quality_ladder
from xiuxian_mud.errors import ConfigurationError, InvalidInput, RealmTooLow
from xiuxian_mud.mechanics.realms import current_realm, realm_by_name, realm_index
from xiuxian_mud.mechanics.rng import RandomSource, choice, weighted_choice
from xiuxian_mud.models.character import EquipmentBonus
from xiuxian_mud.models.item import Equipment, EquipmentQuality, EquipmentSlot, EquipmentTemplate

logger = logging.getLogger(__name__)

# Slot -> stat it feeds.
SLOT_STATS: dict[EquipmentSlot, str] = {
    EquipmentSlot.WEAPON: "attack",
    EquipmentSlot.ARMOR: "defense",
    EquipmentSlot.ACCESSORY: "hp",
}


def quality_multiplier(quality: EquipmentQuality) -> float:
    for q, multiplier, _ in load_quality_ladder():
        if q is quality:
            return multiplier
    raise ConfigurationError(f"Quality ladder has no {quality.value!r} rung")


def roll_quality(rng: RandomSource) -> EquipmentQuality:
    ladder = load_quality_ladder()
    return weighted_choice(rng, [q for q, _, _ in ladder], [w for _, _, w in ladder])


def final_stat(base_stat: int, quality: EquipmentQuality) -> int:
    return int(base_stat * quality_multiplier(quality))


def find_template(name: str, catalogue: Sequence[EquipmentTemplate] | None = None) -> EquipmentTemplate:
    catalogue = load_equipment() if catalogue is None else catalogue
    for template in catalogue:
        if template.name == name:
            return template
    raise InvalidInput(f"Unknown equipment: {name!r}")


def droppable_equipment(
    realm_name: str, catalogue: Sequence[EquipmentTemplate] | None = None
) -> list[EquipmentTemplate]:
    """Every catalogue piece whose realm requirement is at or below ``realm_name``."""
    catalogue = load_equipment() if catalogue is None else catalogue
    ceiling, _ = realm_by_name(realm_name)
    return [t for t in catalogue if realm_by_name(t.realm_required)[0] <= ceiling]


def generate_equipment(realm_name: str, rng: RandomSource) -> Equipment | None:
    droppable = droppable_equipment(realm_name)
    if not droppable:
        return None
    template = choice(rng, droppable)
    quality = roll_quality(rng)
    return Equipment(
        name=template.name,
        slot=template.slot,
        quality=quality,
        base_stat=template.base_stat,
        final_stat=final_stat(template.base_stat, quality),
        realm_required=template.realm_required,
    )


def can_equip(item: Equipment | EquipmentTemplate, cultivation: int) -> bool:
    required, _ = realm_by_name(item.realm_required)
    return realm_index(cultivation) >= required


def equip_item(owned: Sequence[Equipment], item_id: str, cultivation: int) -> list[Equipment]:
    """Return a new loadout with ``item_id`` equipped.

    Whatever was in the same slot is unequipped. Raises RealmTooLow without
    touching ``owned`` when the character's realm is below the requirement.
    """
    target = next((e for e in owned if e.id == item_id), None)
    if target is None:
        raise InvalidInput(f"No equipment with id {item_id!r}")
    if not can_equip(target, cultivation):
        raise RealmTooLow(target.name, target.realm_required, current_realm(cultivation).name)

    loadout = []
    for piece in owned:
        if piece.id == item_id:
            loadout.append(piece.model_copy(update={"equipped": True}))
        elif piece.slot is target.slot and piece.equipped:
            loadout.append(piece.model_copy(update={"equipped": False}))
        else:
            loadout.append(piece.model_copy())
    logger.debug("Equipped %s (%s) in %s slot", target.name, target.quality.value, target.slot.value)
    return loadout


def unequip_item(owned: Sequence[Equipment], item_id: str) -> list[Equipment]:
    if not any(e.id == item_id for e in owned):
        raise InvalidInput(f"No equipment with id {item_id!r}")
    return [
        e.model_copy(update={"equipped": False}) if e.id == item_id else e.model_copy()
        for e in owned
    ]


def equipment_bonus(owned: Sequence[Equipment]) -> EquipmentBonus:
    """Additive bonus from at most one equipped piece per slot."""
    totals = {"attack": 0, "defense": 0, "hp": 0}
    seen: set[EquipmentSlot] = set()
    for piece in owned:
        if not piece.equipped:
            continue
        if piece.slot in seen:
            logger.warning("Ignoring second equipped %s: %s", piece.slot.value, piece.name)
            continue
        seen.add(piece.slot)
        totals[SLOT_STATS[piece.slot]] += piece.final_stat
    return EquipmentBonus(**totals)
