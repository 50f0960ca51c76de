"""The cultivate action: realm gain plus an occasional random event."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from xiuxian_mud.content.loader import load_cultivation_events
from xiuxian_mud.mechanics.realms import current_realm, next_realm
from xiuxian_mud.mechanics.rng import RandomSource, choice, weighted_choice
from xiuxian_mud.models.event import CultivationEvent, CultivationEventTable

logger = logging.getLogger(__name__)


@dataclass
class CultivationOutcome:
    base_gain: int
    gained: int
    cultivation: int
    realm: str
    previous_realm: str
    broke_through: bool = False
    next_threshold: int | None = None
    event: CultivationEvent | None = None
    hp_damage: int = 0
    items: dict[str, int] = field(default_factory=dict)
    dao_resonance: int = 0
    cooldown_reset: bool = False


def roll_cultivation_event(
    rng: RandomSource, table: CultivationEventTable | None = None
) -> CultivationEvent | None:
    table = table or load_cultivation_events()
    if rng.random() >= table.trigger_chance:
        return None
    kinds = list(table.type_weights)
    kind = weighted_choice(rng, kinds, [table.type_weights[k] for k in kinds])
    candidates = [e for e in table.events if e.type is kind]
    if not candidates:
        return None
    return choice(rng, candidates)


def resolve_event_item(
    event: CultivationEvent, rng: RandomSource, table: CultivationEventTable | None = None
) -> str | None:
    if not event.item_reward:
        return None
    if event.item_reward == "random":
        table = table or load_cultivation_events()
        return choice(rng, table.random_items) if table.random_items else None
    return event.item_reward


def event_message(event: CultivationEvent) -> str:
    message = f"{event.name}: {event.description}"
    percent = round(event.cultivation_multiplier * 100)
    if event.cultivation_multiplier > 1:
        message += f" Cultivation +{percent - 100}%!"
    elif 0 < event.cultivation_multiplier < 1:
        message += f" Cultivation -{100 - percent}%!"
    elif event.cultivation_multiplier == 0:
        message += " Nothing gained this session!"
    if event.dao_resonance:
        message += f" Dao resonance +{event.dao_resonance}!"
    if event.hp_damage:
        message += f" HP -{event.hp_damage}!"
    if event.cooldown_reset:
        message += " Cultivation cooldown reset!"
    return message


def cultivate(
    cultivation: int, rng: RandomSource, table: CultivationEventTable | None = None
) -> CultivationOutcome:
    realm = current_realm(cultivation)
    base_gain = realm.cultivation_gain
    event = roll_cultivation_event(rng, table)

    gained = base_gain
    items: dict[str, int] = {}
    if event is not None:
        gained = int(base_gain * event.cultivation_multiplier)
        item = resolve_event_item(event, rng, table)
        if item:
            items[item] = event.item_quantity

    total = cultivation + gained
    new_realm = current_realm(total)
    upcoming = next_realm(total)
    broke_through = new_realm.name != realm.name
    if broke_through:
        logger.info("Breakthrough: %s -> %s at %d cultivation", realm.name, new_realm.name, total)

    return CultivationOutcome(
        base_gain=base_gain,
        gained=gained,
        cultivation=total,
        realm=new_realm.name,
        previous_realm=realm.name,
        broke_through=broke_through,
        next_threshold=upcoming.min_cultivation if upcoming else None,
        event=event,
        hp_damage=event.hp_damage if event else 0,
        items=items,
        dao_resonance=event.dao_resonance if event else 0,
        cooldown_reset=event.cooldown_reset if event else False,
    )
