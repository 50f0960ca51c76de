"""Tests for src/xiuxian_mud/mechanics/combat.py."""
from __future__ import annotations

import random

import pytest

from xiuxian_mud.config import CombatConfig
from xiuxian_mud.mechanics.combat import (
    CombatPhase,
    CombatSimulation,
    base_damage,
    choose_first_actor,
    resolve_attack,
    resolve_combat,
)
from xiuxian_mud.mechanics.narrative import Narrator
from xiuxian_mud.models.combat import CombatOutcome, CombatRole, CombatStats, RoundEvent


def _stats(**overrides) -> CombatStats:
    values = dict(hp=1000, max_hp=1000, attack=10, defense=0, speed=10, crit_rate=0, dodge_rate=0)
    values.update(overrides)
    return CombatStats(**values)


class TestBaseDamage:
    @pytest.mark.parametrize("attack, defense, expected", [
        (100, 10, 95.0),
        (30, 20, 20.0),
        (10, 100, 1.0),
        (0, 0, 1.0),
    ])
    def test_formula_with_floor(self, attack, defense, expected):
        assert base_damage(attack, defense) == expected


class TestResolveAttack:
    def test_dodge_deals_nothing(self, scripted_rng, hero_stats, beast_stats):
        roll = resolve_attack(hero_stats, beast_stats, scripted_rng(default=0.0))
        assert roll.event is RoundEvent.DODGE
        assert roll.damage == 0

    def test_dodge_chance_includes_base(self, scripted_rng, hero_stats, beast_stats):
        # Defender has 0 dodge, base adds 5: a 4.9 roll still dodges.
        roll = resolve_attack(hero_stats, beast_stats, scripted_rng([0.049], default=0.99))
        assert roll.event is RoundEvent.DODGE

    def test_normal_hit(self, quiet_rng, hero_stats, beast_stats):
        roll = resolve_attack(hero_stats, beast_stats, quiet_rng)
        assert roll.event is RoundEvent.NORMAL
        assert roll.damage == 95
        assert roll.combo is False

    def test_flash(self, scripted_rng, hero_stats, beast_stats):
        rng = scripted_rng([0.99, 0.0, 0.5, 0.99])
        roll = resolve_attack(hero_stats, beast_stats, rng)
        assert roll.event is RoundEvent.FLASH
        assert roll.damage == 285

    def test_crit_uses_crit_damage_range(self, scripted_rng, hero_stats, beast_stats):
        low = resolve_attack(hero_stats, beast_stats, scripted_rng([0.99, 0.99, 0.0, 0.0, 0.5, 0.99]))
        high = resolve_attack(hero_stats, beast_stats, scripted_rng([0.99, 0.99, 0.0, 0.999999, 0.5, 0.99]))
        assert low.event is RoundEvent.CRIT
        assert low.damage == 142  # 95 * 1.5
        assert high.event is RoundEvent.CRIT
        assert 142 <= high.damage <= 190  # up to 95 * 2.0

    def test_block_halves(self, scripted_rng, hero_stats, beast_stats):
        roll = resolve_attack(hero_stats, beast_stats, scripted_rng([0.99, 0.99, 0.99, 0.0, 0.5, 0.99]))
        assert roll.event is RoundEvent.BLOCK
        assert roll.damage == 47

    def test_combo_rolled_independently(self, scripted_rng, hero_stats, beast_stats):
        roll = resolve_attack(hero_stats, beast_stats, scripted_rng([0.5, 0.5, 0.5, 0.5, 0.5, 0.0]))
        assert roll.event is RoundEvent.NORMAL
        assert roll.combo is True

    def test_damage_never_below_one(self, scripted_rng):
        weak = _stats(attack=1)
        wall = _stats(defense=10_000)
        # Block with the lowest jitter: 1 * 0.9 * 0.5 floors to 0 without the floor.
        roll = resolve_attack(weak, wall, scripted_rng([0.99, 0.99, 0.99, 0.0, 0.0, 0.99]))
        assert roll.event is RoundEvent.BLOCK
        assert roll.damage == 1

    def test_damage_at_least_one_for_random_pairs(self, seeded_rng):
        for _ in range(300):
            attacker = _stats(attack=seeded_rng.randint(1, 500), crit_rate=30)
            defender = _stats(defense=seeded_rng.randint(0, 2000))
            roll = resolve_attack(attacker, defender, seeded_rng)
            if roll.event is not RoundEvent.DODGE:
                assert roll.damage >= 1


class TestChooseFirstActor:
    def test_faster_player(self, quiet_rng):
        assert choose_first_actor(_stats(speed=12), _stats(speed=8), quiet_rng) is CombatRole.PLAYER

    def test_faster_monster(self, quiet_rng):
        assert choose_first_actor(_stats(speed=8), _stats(speed=12), quiet_rng) is CombatRole.MONSTER

    @pytest.mark.parametrize("flip, expected", [
        (0.2, CombatRole.PLAYER),
        (0.7, CombatRole.MONSTER),
    ])
    def test_tie_coin_flip(self, scripted_rng, flip, expected):
        assert choose_first_actor(_stats(), _stats(), scripted_rng([flip])) is expected

    def test_tie_decided_once_per_combat(self, scripted_rng):
        # 0.7 makes the monster win the flip; later 0.2 rolls would favour the player if re-flipped.
        rng = scripted_rng([0.7], default=0.5)
        result = resolve_combat("Han Li", _stats(), _stats(), "Lili", 1, None, rng=rng)
        assert result.first_actor is CombatRole.MONSTER
        firsts = {}
        for exchange in result.exchanges:
            firsts.setdefault(exchange.round_number, exchange.attacker)
        assert set(firsts.values()) == {CombatRole.MONSTER}
        assert len(firsts) == 20


class TestResolveCombat:
    def test_concrete_scenario(self, quiet_rng, hero_stats, beast_stats):
        result = resolve_combat("Han Li", hero_stats, beast_stats, "Lili", 15, None, rng=quiet_rng)
        assert result.outcome is CombatOutcome.VICTORY
        assert result.rounds == 2
        player_hits = [e.damage for e in result.exchanges if e.attacker is CombatRole.PLAYER]
        monster_hits = [e.damage for e in result.exchanges if e.attacker is CombatRole.MONSTER]
        assert player_hits == [95, 95]
        assert monster_hits == [20]
        assert result.monster_hp == 0
        assert result.player_hp == 180
        assert result.hp_lost == 20
        assert result.damage_dealt == 190
        assert result.damage_taken == 20

    def test_victory_pays_precomputed_reward(self, quiet_rng, hero_stats, beast_stats):
        result = resolve_combat("Han Li", hero_stats, beast_stats, "Lili", 37, "Beast Bone", rng=quiet_rng)
        assert result.cultivation_delta == 37
        assert [(r.name, r.quantity) for r in result.item_rewards] == [("Beast Bone", 1)]

    def test_defeat_penalty_is_five_percent_of_attack(self, quiet_rng):
        player = _stats(hp=50, max_hp=50, attack=130, defense=0, speed=5)
        monster = _stats(hp=100_000, max_hp=100_000, attack=500, speed=20)
        result = resolve_combat("Han Li", player, monster, "Taotie", 6000, "Taotie Fang", rng=quiet_rng)
        assert result.outcome is CombatOutcome.DEFEAT
        assert result.cultivation_delta == -6  # floor(130 * 0.05)
        assert result.item_rewards == []
        assert result.hp_lost == 50
        assert result.player_hp == 0

    def test_player_at_zero_is_defeat(self, quiet_rng):
        player = _stats(hp=20, max_hp=20, speed=5)
        monster = _stats(hp=1, max_hp=1000, attack=40, speed=20)
        result = resolve_combat("Han Li", player, monster, "Lili", 10, None, rng=quiet_rng)
        assert result.player_hp == 0
        assert result.outcome is CombatOutcome.DEFEAT
        assert result.rounds == 1

    def test_downed_character_is_not_attacked(self, quiet_rng):
        player = _stats(hp=0, max_hp=100, speed=5)
        monster = _stats(attack=30, speed=20)
        result = resolve_combat("Han Li", player, monster, "Lili", 10, None, rng=quiet_rng)
        assert result.outcome is CombatOutcome.DEFEAT
        assert result.rounds == 0
        assert result.exchanges == []
        assert result.damage_taken == 0
        assert result.hp_lost == 0
        assert quiet_rng.calls == 0

    def test_fallen_monster_is_a_victory(self, quiet_rng):
        result = resolve_combat("Han Li", _stats(), _stats(hp=0), "Lili", 4, None, rng=quiet_rng)
        assert result.outcome is CombatOutcome.VICTORY
        assert result.rounds == 0
        assert result.damage_dealt == 0
        assert result.cultivation_delta == 4

    def test_round_cap_player_ahead_wins(self, quiet_rng):
        result = resolve_combat("Han Li", _stats(attack=10), _stats(attack=5), "Huanyang", 3, None, rng=quiet_rng)
        assert result.round_limit_reached is True
        assert result.rounds == 20
        assert result.player_hp == 900
        assert result.monster_hp == 800
        assert result.outcome is CombatOutcome.VICTORY

    def test_round_cap_monster_ahead_wins(self, quiet_rng):
        result = resolve_combat("Han Li", _stats(attack=5), _stats(attack=10), "Huanyang", 3, None, rng=quiet_rng)
        assert result.round_limit_reached is True
        assert result.player_hp == 800
        assert result.monster_hp == 900
        assert result.outcome is CombatOutcome.DEFEAT

    def test_round_cap_tie_goes_to_character(self, quiet_rng):
        result = resolve_combat("Han Li", _stats(speed=11), _stats(), "Huanyang", 3, None, rng=quiet_rng)
        assert result.player_hp == result.monster_hp
        assert result.outcome is CombatOutcome.VICTORY

    def test_configured_round_limit(self, quiet_rng):
        config = CombatConfig(max_rounds=5)
        result = resolve_combat("Han Li", _stats(), _stats(), "Lili", 1, None, rng=quiet_rng, config=config)
        assert result.rounds == 5
        assert result.round_limit_reached is True

    def test_combo_chain_is_bounded(self, scripted_rng):
        # Every attack: no dodge/flash/crit/block, jitter 1.0, combo.
        rng = scripted_rng([0.5, 0.5, 0.5, 0.5, 0.5, 0.0], cycle=True)
        sim = CombatSimulation("Han Li", _stats(speed=12), "Lili", _stats(), rng)
        sim.config = CombatConfig(max_rounds=1)
        sim.run()
        attackers = [e.attacker for e in sim.exchanges]
        assert attackers == [CombatRole.PLAYER] * 4 + [CombatRole.MONSTER] * 4
        assert [e.combo for e in sim.exchanges[:4]] == [False, True, True, True]
        # The fourth attack rolled a combo too; the cap stopped the follow-up.
        assert sim.exchanges[3].combo_rolled is True
        assert sim.exchanges[3].tags == (RoundEvent.NORMAL, RoundEvent.COMBO)

    def test_combo_stops_when_target_falls(self, scripted_rng):
        rng = scripted_rng([0.5, 0.5, 0.5, 0.5, 0.5, 0.0], cycle=True)
        monster = _stats(hp=15, max_hp=15)
        result = resolve_combat("Han Li", _stats(speed=12), monster, "Lili", 2, None, rng=rng)
        assert result.outcome is CombatOutcome.VICTORY
        assert len(result.exchanges) == 2
        assert result.monster_hp == 0
        assert result.exchanges[1].combo_rolled is True
        assert RoundEvent.COMBO in result.exchanges[1].tags

    def test_counts_crits_and_dodges(self, scripted_rng):
        # Player crits every swing; monster is always dodged.
        player_swing = [0.99, 0.99, 0.0, 0.0, 0.5, 0.99]
        monster_swing = [0.0, 0.99]
        rng = scripted_rng(player_swing + monster_swing, cycle=True)
        result = resolve_combat(
            "Han Li", _stats(speed=12, crit_rate=10), _stats(hp=45, max_hp=45), "Lili", 2, None, rng=rng,
        )
        assert result.crit_count == 3  # 15 + 15 + 15
        assert result.dodge_count == 2
        assert result.hp_lost == 0

    def test_always_terminates(self):
        for seed in range(40):
            rng = random.Random(seed)
            player = _stats(attack=rng.randint(1, 200), defense=rng.randint(0, 200), crit_rate=20, dodge_rate=10)
            monster = _stats(attack=rng.randint(1, 200), defense=rng.randint(0, 200), crit_rate=5, dodge_rate=3)
            result = resolve_combat("Han Li", player, monster, "Lili", 5, None, rng=rng)
            assert 1 <= result.rounds <= 20
            assert result.outcome in (CombatOutcome.VICTORY, CombatOutcome.DEFEAT)

    def test_narration_does_not_change_numbers(self, hero_stats, beast_stats):
        first = resolve_combat(
            "Han Li", hero_stats, beast_stats, "Lili", 1, None,
            rng=random.Random(3), narrator=Narrator(random.Random(1)),
        )
        second = resolve_combat(
            "Han Li", hero_stats, beast_stats, "Lili", 1, None,
            rng=random.Random(3), narrator=Narrator(random.Random(99)),
        )
        numbers = lambda r: [(e.attacker, e.event, e.damage) for e in r.exchanges]
        assert numbers(first) == numbers(second)
        assert first.outcome == second.outcome

    def test_narrative_has_round_headers_and_ending(self, quiet_rng, hero_stats, beast_stats):
        result = resolve_combat("Han Li", hero_stats, beast_stats, "Lili", 15, None, rng=quiet_rng)
        assert result.narrative[0] == "-- Round 1 --"
        assert "-- Round 2 --" in result.narrative
        assert result.narrative[-1] == "Cultivation +15"

    def test_simulation_runs_once(self, quiet_rng, hero_stats, beast_stats):
        sim = CombatSimulation("Han Li", hero_stats, "Lili", beast_stats, quiet_rng)
        assert sim.phase is CombatPhase.NOT_STARTED
        sim.run()
        assert sim.phase is CombatPhase.VICTORY
        with pytest.raises(RuntimeError):
            sim.run()
