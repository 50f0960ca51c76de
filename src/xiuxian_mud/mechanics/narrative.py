"""Combat narration: static phrase tables, kept apart from the numeric rolls.

Placeholders: ``{attacker}``, ``{defender}``, ``{damage}``, ``{technique}``.
"""
from __future__ import annotations

import random

from xiuxian_mud.mechanics.rng import RandomSource, choice
from xiuxian_mud.models.combat import CombatRole, RoundEvent

PLAYER_PHRASES: dict[RoundEvent, tuple[str, ...]] = {
    RoundEvent.NORMAL: (
        "{attacker} channels qi into a palm strike, dealing {damage} damage to {defender}.",
        "{attacker} unleashes a sword light that cuts {defender} for {damage} damage.",
        "{attacker} steps in and lands a solid blow on {defender}: {damage} damage.",
    ),
    RoundEvent.CRIT: (
        "Critical! {attacker} finds an opening and tears into {defender} for {damage} damage!",
        "{attacker}'s technique strikes a vital meridian. Critical hit for {damage} damage!",
    ),
    RoundEvent.DODGE: (
        "{defender} twists aside and {attacker}'s strike meets only air.",
        "{attacker} attacks, but {defender} slips away untouched.",
    ),
    RoundEvent.BLOCK: (
        "{defender} braces and blocks, taking only {damage} damage from {attacker}.",
        "{attacker}'s blow is partly turned aside by {defender}: {damage} damage.",
    ),
    RoundEvent.FLASH: (
        "Heaven and earth resonate! {attacker}'s {technique} erupts in a blinding flash for {damage} damage!",
        "A flash of enlightenment! {attacker} strikes {defender} with the Dao itself for {damage} damage!",
    ),
}

MONSTER_PHRASES: dict[RoundEvent, tuple[str, ...]] = {
    RoundEvent.NORMAL: (
        "{attacker} {technique}, dealing {damage} damage to {defender}.",
        "{attacker} lunges at {defender} and {technique} for {damage} damage.",
    ),
    RoundEvent.CRIT: (
        "{attacker} goes berserk and {technique}! {defender} takes a critical {damage} damage!",
        "A savage blow! {attacker} {technique}, dealing {damage} critical damage.",
    ),
    RoundEvent.DODGE: (
        "{defender} reads the movement and sidesteps {attacker}.",
        "{attacker} pounces, but {defender} is already gone.",
    ),
    RoundEvent.BLOCK: (
        "{defender} raises a qi shield against {attacker}, taking only {damage} damage.",
        "{defender} parries {attacker}'s assault, suffering {damage} damage.",
    ),
    RoundEvent.FLASH: (
        "{attacker}'s primal bloodline awakens! It {technique} with terrible force for {damage} damage!",
    ),
}

COMBO_PHRASES: tuple[str, ...] = (
    "{attacker} presses the advantage and strikes again!",
    "Without pause, {attacker} follows up with another attack!",
)

PLAYER_TECHNIQUES: tuple[str, ...] = (
    "Sword of the Nine Heavens",
    "Thunder Palm",
    "Azure Cloud Fist",
)

# Species -> attack verbs. Species without an entry use DEFAULT_MONSTER_TECHNIQUES.
SPECIES_TECHNIQUES: dict[str, tuple[str, ...]] = {
    "Bifang": ("breathes a gout of fire", "beats its burning wings"),
    "Nine-Tailed Fox": ("casts a bewitching illusion", "lashes out with nine tails"),
    "Zhulong": ("opens its eyes and day turns to flame", "coils its serpent body"),
    "Yinglong": ("summons a torrential storm", "dives with outstretched wings"),
    "Xuanwu": ("strikes with its serpent head", "crashes down with its shell"),
    "Kui": ("stamps and calls down thunder",),
    "Taotie": ("opens its maw to devour everything",),
    "Xiangliu": ("spits venom from nine heads",),
    "Hundun": ("engulfs the world in chaos",),
    "Chiyou": ("swings its bronze-forged weapons",),
    "Xingtian": ("dances with shield and axe",),
    "Red-Eyed Demon Wolf": ("tears with bloodied fangs", "lets out a blood-curdling howl"),
}
DEFAULT_MONSTER_TECHNIQUES: tuple[str, ...] = (
    "bites savagely",
    "rakes with its claws",
    "charges headlong",
)

ROUND_HEADER = "-- Round {round_number} --"
VICTORY_LINE = "{defender} collapses. {attacker} is victorious!"
DEFEAT_LINE = "{attacker} is overwhelmed and retreats in defeat."
ROUND_LIMIT_LINE = "After {rounds} rounds neither side falls. {winner} holds the field with {hp} hp remaining."
ITEM_LINE = "Obtained item: {item}"
CULTIVATION_GAIN_LINE = "Cultivation +{amount}"
CULTIVATION_LOSS_LINE = "Cultivation -{amount}"


class Narrator:
    """Picks phrases with its own random source so narration never shifts combat rolls."""

    def __init__(self, rng: RandomSource | None = None):
        self._rng = rng if rng is not None else random.Random()

    def techniques_for(self, role: CombatRole, species: str) -> tuple[str, ...]:
        if role is CombatRole.PLAYER:
            return PLAYER_TECHNIQUES
        return SPECIES_TECHNIQUES.get(species, DEFAULT_MONSTER_TECHNIQUES)

    def attack_line(
        self,
        role: CombatRole,
        event: RoundEvent,
        attacker: str,
        defender: str,
        damage: int,
        species: str = "",
    ) -> str:
        table = PLAYER_PHRASES if role is CombatRole.PLAYER else MONSTER_PHRASES
        template = choice(self._rng, table.get(event, table[RoundEvent.NORMAL]))
        technique = choice(self._rng, self.techniques_for(role, species))
        return template.format(attacker=attacker, defender=defender, damage=damage, technique=technique)

    def combo_line(self, attacker: str) -> str:
        return choice(self._rng, COMBO_PHRASES).format(attacker=attacker)

    @staticmethod
    def round_header(round_number: int) -> str:
        return ROUND_HEADER.format(round_number=round_number)
