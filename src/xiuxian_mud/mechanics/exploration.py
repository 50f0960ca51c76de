"""The explore action: a monster, treasure, a wandering NPC, or nothing."""
from __future__ import annotations

from dataclasses import dataclass

from xiuxian_mud.config import EncounterConfig
from xiuxian_mud.content.loader import load_items
from xiuxian_mud.mechanics.items import random_item
from xiuxian_mud.mechanics.monsters import generate_encounter, monster_hint
from xiuxian_mud.mechanics.rng import RandomSource, choice
from xiuxian_mud.models.event import ExploreEvent
from xiuxian_mud.models.monster import Encounter

MONSTER_CHANCE = 0.4
TREASURE_CHANCE = 0.25
NPC_CHANCE = 0.15

NPCS = ("Wandering Taoist", "Mysterious Elder", "Fallen Cultivator", "Herb-Gathering Boy")
WISDOMS = (
    "The way of cultivation lies in perseverance.",
    "Until the heart demon is gone, the great Dao stays out of reach.",
    "When opportunity comes, do not let it pass.",
    "Be kind to others; karma keeps its own accounts.",
)


@dataclass
class ExploreOutcome:
    event: ExploreEvent
    message: str
    encounter: Encounter | None = None
    hint: str | None = None
    item: str | None = None
    npc: str | None = None


def explore(
    cultivation: int,
    player_attack: int,
    rng: RandomSource,
    config: EncounterConfig | None = None,
    location: str = "the wilds",
) -> ExploreOutcome:
    roll = rng.random()
    if roll < MONSTER_CHANCE:
        encounter = generate_encounter(cultivation, rng, config)
        return ExploreOutcome(
            event=ExploreEvent.MONSTER,
            message=f"While exploring {location} you run into a {encounter.species}!",
            encounter=encounter,
            hint=monster_hint(player_attack, encounter.power),
        )
    if roll < MONSTER_CHANCE + TREASURE_CHANCE:
        item = random_item(rng)
        if item:
            return ExploreOutcome(
                event=ExploreEvent.TREASURE,
                message=f"You found {item} in {location}! {load_items()[item].description}",
                item=item,
            )
    elif roll < MONSTER_CHANCE + TREASURE_CHANCE + NPC_CHANCE:
        npc = choice(rng, NPCS)
        wisdom = choice(rng, WISDOMS)
        return ExploreOutcome(
            event=ExploreEvent.NPC,
            message=f"You meet a {npc}, who tells you: \"{wisdom}\"",
            npc=npc,
        )
    return ExploreOutcome(
        event=ExploreEvent.NOTHING,
        message=f"You search {location} but find nothing...",
    )
