"""Round-based combat resolution. Pure and bounded.

One fight runs NOT_STARTED -> ROUND_IN_PROGRESS -> VICTORY | DEFEAT. Every
roll goes through the injected RandomSource; narration uses its own
source so numeric outcomes never depend on phrase selection.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from xiuxian_mud.config import CombatConfig
from xiuxian_mud.mechanics import narrative
from xiuxian_mud.mechanics.narrative import Narrator
from xiuxian_mud.mechanics.rng import RandomSource, chance, default_rng, uniform
from xiuxian_mud.models.combat import (
    CombatOutcome,
    CombatResult,
    CombatRole,
    CombatStats,
    Exchange,
    ItemReward,
    RoundEvent,
)

logger = logging.getLogger(__name__)


class CombatPhase(str, Enum):
    NOT_STARTED = "not_started"
    ROUND_IN_PROGRESS = "round_in_progress"
    VICTORY = "victory"
    DEFEAT = "defeat"


@dataclass
class AttackRoll:
    event: RoundEvent
    damage: int
    multiplier: float = 1.0
    combo: bool = False


def base_damage(attack: int, defense: int, defense_factor: float = 0.5) -> float:
    """Never below 1, so high defense cannot stall a fight."""
    return max(1.0, attack - defense * defense_factor)


def resolve_attack(
    attacker: CombatStats,
    defender: CombatStats,
    rng: RandomSource,
    config: CombatConfig | None = None,
) -> AttackRoll:
    """Roll one attack: dodge, then flash, crit, block or a normal hit; combo independently."""
    config = config or CombatConfig()

    if chance(rng, defender.dodge_rate + config.base_dodge_chance):
        roll = AttackRoll(event=RoundEvent.DODGE, damage=0, multiplier=0.0)
    else:
        if chance(rng, config.flash_chance):
            event, multiplier = RoundEvent.FLASH, config.flash_multiplier
        elif chance(rng, attacker.crit_rate):
            event = RoundEvent.CRIT
            multiplier = uniform(rng, attacker.crit_damage, attacker.crit_damage + config.crit_spread)
        elif chance(rng, config.block_chance):
            event, multiplier = RoundEvent.BLOCK, config.block_multiplier
        else:
            event, multiplier = RoundEvent.NORMAL, 1.0
        jitter = uniform(rng, config.jitter_low, config.jitter_high)
        raw = base_damage(attacker.attack, defender.defense, config.defense_factor) * jitter * multiplier
        roll = AttackRoll(event=event, damage=max(1, int(raw)), multiplier=multiplier)

    roll.combo = chance(rng, config.combo_chance)
    return roll


def choose_first_actor(player: CombatStats, monster: CombatStats, rng: RandomSource) -> CombatRole:
    """Higher speed acts first; a tie is settled by one coin flip for the whole fight."""
    if player.speed > monster.speed:
        return CombatRole.PLAYER
    if monster.speed > player.speed:
        return CombatRole.MONSTER
    return CombatRole.PLAYER if rng.random() < 0.5 else CombatRole.MONSTER


class CombatSimulation:
    """A single fight between a character and a monster."""

    def __init__(
        self,
        actor_name: str,
        actor_stats: CombatStats,
        opponent_name: str,
        opponent_stats: CombatStats,
        rng: RandomSource,
        config: CombatConfig | None = None,
        narrator: Narrator | None = None,
    ):
        self.names = {CombatRole.PLAYER: actor_name, CombatRole.MONSTER: opponent_name}
        self.stats = {CombatRole.PLAYER: actor_stats, CombatRole.MONSTER: opponent_stats}
        self.hp = {CombatRole.PLAYER: actor_stats.hp, CombatRole.MONSTER: opponent_stats.hp}
        self.rng = rng
        self.config = config or CombatConfig()
        self.narrator = narrator or Narrator()
        self.phase = CombatPhase.NOT_STARTED
        self.first_actor: Optional[CombatRole] = None
        self.round_number = 0
        self.round_limit_reached = False
        self.exchanges: list[Exchange] = []
        self.narrative: list[str] = []
        self.damage = {CombatRole.PLAYER: 0, CombatRole.MONSTER: 0}
        self.crits = 0
        self.dodges = 0

    @property
    def species(self) -> str:
        return self.names[CombatRole.MONSTER]

    def _alive(self, role: CombatRole) -> bool:
        return self.hp[role] > 0

    def _strike(self, attacker: CombatRole, combo: bool) -> AttackRoll:
        defender = attacker.opponent
        roll = resolve_attack(self.stats[attacker], self.stats[defender], self.rng, self.config)
        self.hp[defender] = max(0, self.hp[defender] - roll.damage)
        self.damage[attacker] += roll.damage

        if attacker is CombatRole.PLAYER and roll.event is RoundEvent.CRIT:
            self.crits += 1
        if defender is CombatRole.PLAYER and roll.event is RoundEvent.DODGE:
            self.dodges += 1

        text = self.narrator.attack_line(
            attacker, roll.event, self.names[attacker], self.names[defender], roll.damage, self.species
        )
        self.narrative.append(text)
        self.exchanges.append(Exchange(
            round_number=self.round_number,
            attacker=attacker,
            event=roll.event,
            combo=combo,
            combo_rolled=roll.combo,
            damage=roll.damage,
            attacker_hp=self.hp[attacker],
            defender_hp=self.hp[defender],
            text=text,
        ))
        logger.debug(
            "Round %d: %s -> %s %s dmg=%d (hp %d/%d)",
            self.round_number, attacker.value, defender.value, roll.event.value,
            roll.damage, self.hp[CombatRole.PLAYER], self.hp[CombatRole.MONSTER],
        )
        return roll

    def _take_turn(self, attacker: CombatRole) -> None:
        """One attack plus any combo chain, stopping when the target falls."""
        roll = self._strike(attacker, combo=False)
        extra = 0
        while (
            roll.combo
            and self._alive(attacker.opponent)
            and extra < self.config.max_combo_chain
        ):
            extra += 1
            self.narrative.append(self.narrator.combo_line(self.names[attacker]))
            roll = self._strike(attacker, combo=True)

    def _play_round(self) -> None:
        self.round_number += 1
        self.narrative.append(self.narrator.round_header(self.round_number))
        first = self.first_actor
        for actor in (first, first.opponent):
            if not self._alive(actor):
                break
            self._take_turn(actor)
            if not self._alive(actor.opponent):
                break

    def _decide(self) -> CombatOutcome:
        player_hp = self.hp[CombatRole.PLAYER]
        monster_hp = self.hp[CombatRole.MONSTER]
        if player_hp <= 0:
            return CombatOutcome.DEFEAT
        if monster_hp <= 0:
            return CombatOutcome.VICTORY
        # Round cap with both standing: more remaining hp wins, the character wins ties.
        return CombatOutcome.VICTORY if player_hp >= monster_hp else CombatOutcome.DEFEAT

    def run(self) -> CombatOutcome:
        if self.phase is not CombatPhase.NOT_STARTED:
            raise RuntimeError("A combat simulation can only run once")
        self.phase = CombatPhase.ROUND_IN_PROGRESS
        # A side that starts at 0 hp never takes or deals a blow.
        if self._alive(CombatRole.PLAYER) and self._alive(CombatRole.MONSTER):
            self.first_actor = choose_first_actor(
                self.stats[CombatRole.PLAYER], self.stats[CombatRole.MONSTER], self.rng
            )
            while self.round_number < self.config.max_rounds:
                self._play_round()
                if not (self._alive(CombatRole.PLAYER) and self._alive(CombatRole.MONSTER)):
                    break
            else:
                self.round_limit_reached = True

        outcome = self._decide()
        self.phase = CombatPhase.VICTORY if outcome is CombatOutcome.VICTORY else CombatPhase.DEFEAT
        return outcome


def resolve_combat(
    actor_name: str,
    actor_stats: CombatStats,
    opponent_stats: CombatStats,
    opponent_name: str,
    reward_cultivation: int,
    reward_item: str | None,
    rng: RandomSource | None = None,
    config: CombatConfig | None = None,
    narrator: Narrator | None = None,
) -> CombatResult:
    """Simulate a full fight and price its outcome.

    Victory pays the encounter's precomputed ``reward_cultivation`` and the
    item, if any, at quantity 1. Defeat costs ``floor(attack * 0.05)``
    cultivation regardless of the monster's strength.
    """
    config = config or CombatConfig()
    sim = CombatSimulation(
        actor_name, actor_stats, opponent_name, opponent_stats,
        rng if rng is not None else default_rng(), config, narrator,
    )
    outcome = sim.run()

    player_hp = sim.hp[CombatRole.PLAYER]
    monster_hp = sim.hp[CombatRole.MONSTER]
    lines = sim.narrative
    if sim.round_limit_reached and player_hp > 0 and monster_hp > 0:
        winner = CombatRole.PLAYER if outcome is CombatOutcome.VICTORY else CombatRole.MONSTER
        lines.append(narrative.ROUND_LIMIT_LINE.format(
            rounds=sim.round_number, winner=sim.names[winner], hp=sim.hp[winner],
        ))

    items: list[ItemReward] = []
    if outcome is CombatOutcome.VICTORY:
        cultivation_delta = reward_cultivation
        lines.append(narrative.VICTORY_LINE.format(attacker=actor_name, defender=opponent_name))
        if reward_item:
            items.append(ItemReward(name=reward_item, quantity=1))
            lines.append(narrative.ITEM_LINE.format(item=reward_item))
        lines.append(narrative.CULTIVATION_GAIN_LINE.format(amount=cultivation_delta))
    else:
        penalty = int(actor_stats.attack * config.defeat_penalty_rate)
        cultivation_delta = -penalty
        lines.append(narrative.DEFEAT_LINE.format(attacker=actor_name))
        lines.append(narrative.CULTIVATION_LOSS_LINE.format(amount=penalty))

    logger.info(
        "%s vs %s: %s after %d rounds (hp %d vs %d)",
        actor_name, opponent_name, outcome.value, sim.round_number, player_hp, monster_hp,
    )
    return CombatResult(
        outcome=outcome,
        rounds=sim.round_number,
        damage_dealt=sim.damage[CombatRole.PLAYER],
        damage_taken=sim.damage[CombatRole.MONSTER],
        crit_count=sim.crits,
        dodge_count=sim.dodges,
        hp_lost=actor_stats.hp - player_hp,
        cultivation_delta=cultivation_delta,
        item_rewards=items,
        narrative=lines,
        exchanges=sim.exchanges,
        player_hp=player_hp,
        monster_hp=monster_hp,
        round_limit_reached=sim.round_limit_reached,
        first_actor=sim.first_actor,
    )
