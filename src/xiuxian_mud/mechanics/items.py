"""Consumable item effects and treasure drops. No I/O."""
from __future__ import annotations

from xiuxian_mud.content.loader import load_items
from xiuxian_mud.errors import InvalidInput
from xiuxian_mud.mechanics.realms import current_realm, max_hp_for
from xiuxian_mud.mechanics.rng import RandomSource
from xiuxian_mud.models.character import CharacterRecord
from xiuxian_mud.models.item import ItemConfig, ItemEffectType


def random_item(rng: RandomSource) -> str | None:
    """One roll checked against each item's drop rate in table order."""
    roll = rng.random()
    for item in load_items().values():
        if roll < item.drop_rate:
            return item.name
    return None


def apply_item_effect(item: ItemConfig, cultivation: int, hp: int) -> tuple[int, int, str]:
    """Return (cultivation, hp, message) after consuming ``item``.

    Healing is capped at the max hp of the current cultivation.
    """
    if item.effect.type is ItemEffectType.CULTIVATION:
        return cultivation + item.effect.value, hp, f"Cultivation +{item.effect.value}"
    healed = min(max_hp_for(cultivation), hp + item.effect.value)
    return cultivation, healed, f"HP +{item.effect.value}"


def use_item(record: CharacterRecord, item_name: str) -> tuple[CharacterRecord, str]:
    """Consume one ``item_name`` from the inventory and apply it."""
    if record.inventory.get(item_name, 0) <= 0:
        raise InvalidInput(f"{record.name} has no {item_name}")
    item = load_items().get(item_name)
    if item is None:
        raise InvalidInput(f"{item_name} cannot be used")

    cultivation, hp, message = apply_item_effect(item, record.cultivation, record.hp)
    inventory = dict(record.inventory)
    inventory[item_name] -= 1
    if inventory[item_name] <= 0:
        del inventory[item_name]

    updated = record.model_copy(update={
        "cultivation": cultivation,
        "hp": hp,
        "realm": current_realm(cultivation).name,
        "inventory": inventory,
    })
    return updated, message
