"""Apply a combat result to a character record. Pure: returns new values."""
from __future__ import annotations

import logging

from xiuxian_mud.mechanics.bestiary import record_kill
from xiuxian_mud.mechanics.realms import current_realm, realm_index
from xiuxian_mud.models.character import CharacterRecord, SettlementReport
from xiuxian_mud.models.combat import CombatResult

logger = logging.getLogger(__name__)


def add_items(inventory: dict[str, int], items: dict[str, int]) -> dict[str, int]:
    updated = dict(inventory)
    for name, quantity in items.items():
        updated[name] = updated.get(name, 0) + quantity
    return updated


def settle_combat(
    record: CharacterRecord, result: CombatResult, species: str
) -> tuple[CharacterRecord, SettlementReport]:
    """Fold a fight into the character.

    Cultivation never drops below 0 and hp never below 1, so a fight cannot
    kill a character outright. Kills and loot are only recorded on victory.
    The realm is recomputed from the new cultivation.
    """
    previous_realm = current_realm(record.cultivation)
    cultivation = max(0, record.cultivation + result.cultivation_delta)
    hp = max(1, record.hp - result.hp_lost)
    realm = current_realm(cultivation)

    inventory = record.inventory
    bestiary = record.bestiary
    granted: dict[str, int] = {}
    if result.is_victory:
        bestiary = record_kill(bestiary, species)
        for reward in result.item_rewards:
            granted[reward.name] = granted.get(reward.name, 0) + reward.quantity
        inventory = add_items(inventory, granted)

    updated = record.model_copy(update={
        "cultivation": cultivation,
        "hp": hp,
        "realm": realm.name,
        "inventory": inventory,
        "bestiary": bestiary,
    })
    broke_through = realm_index(cultivation) > realm_index(record.cultivation)
    if broke_through:
        logger.info("%s broke through to %s", record.name, realm.name)

    report = SettlementReport(
        cultivation=cultivation,
        hp=hp,
        realm=realm.name,
        previous_realm=previous_realm.name,
        realm_changed=realm.name != previous_realm.name,
        broke_through=broke_through,
        items_granted=granted,
        kills=bestiary.get(species, 0),
    )
    return updated, report
