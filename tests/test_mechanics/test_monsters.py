"""Tests for src/xiuxian_mud/mechanics/monsters.py."""
from __future__ import annotations

import pytest

from xiuxian_mud.config import EncounterConfig
from xiuxian_mud.errors import ConfigurationError, InvalidInput
from xiuxian_mud.mechanics.monsters import (
    FLEE_ADVICE,
    available_species,
    derive_monster_stats,
    generate_encounter,
    monster_hint,
)
from xiuxian_mud.models.monster import Rarity


class TestAvailableSpecies:
    def test_fresh_character_sees_own_realm(self):
        species = available_species(0)
        assert len(species) == 7
        assert {s.realm_required for s in species} == {"Qi Refining"}

    def test_includes_realm_below(self):
        realms = {s.realm_required for s in available_species(1000)}
        assert realms == {"Qi Refining", "Foundation Establishment"}
        assert len(available_species(1000)) == 16

    def test_peak_realm_falls_back_to_tier_below(self):
        species = available_species(10_000_000)
        assert {s.realm_required for s in species} == {"Deity Transformation"}


class TestGenerateEncounter:
    def test_low_rolls(self, scripted_rng):
        encounter = generate_encounter(0, scripted_rng(default=0.0))
        assert encounter.species == "Xingxing"
        assert encounter.rarity is Rarity.COMMON
        assert encounter.power == 10
        assert encounter.reward_cultivation == 1
        assert encounter.reward_item == "Beast Hide"

    def test_high_rolls(self, scripted_rng):
        encounter = generate_encounter(0, scripted_rng(default=0.99))
        assert encounter.species == "Qiongqi Cub"
        assert encounter.power == 99
        assert encounter.reward_cultivation == 9
        assert encounter.reward_item is None

    def test_power_within_species_range(self, seeded_rng):
        for cultivation in (0, 1500, 20_000, 300_000, 5_000_000):
            for _ in range(20):
                encounter = generate_encounter(cultivation, seeded_rng)
                species = next(s for s in available_species(cultivation) if s.name == encounter.species)
                assert species.min_power <= encounter.power <= species.max_power
                assert encounter.reward_cultivation == int(encounter.power * 0.1)

    def test_drop_chance_configurable(self, scripted_rng):
        never = EncounterConfig(item_drop_chance=0.0)
        assert generate_encounter(0, scripted_rng(default=0.0), never).reward_item is None

    def test_empty_catalogue(self, scripted_rng):
        with pytest.raises(ConfigurationError):
            generate_encounter(0, scripted_rng(), catalogue=[])


class TestDeriveMonsterStats:
    def test_from_power(self):
        stats = derive_monster_stats(100, "Xingxing")
        assert stats.hp == stats.max_hp == 500
        assert stats.attack == 100
        assert stats.defense == 30
        assert stats.speed == 8
        assert stats.crit_rate == 5
        assert stats.dodge_rate == 3

    @pytest.mark.parametrize("species, speed", [
        ("Dangkang", 10),
        ("Qiongqi Cub", 12),
        ("Nobody Knows", 8),
    ])
    def test_speed_by_rarity(self, species, speed):
        assert derive_monster_stats(40, species).speed == speed

    def test_zero_power(self):
        stats = derive_monster_stats(0, "Xingxing")
        assert stats.hp == 1
        assert stats.attack == 0

    def test_negative_power(self):
        with pytest.raises(InvalidInput):
            derive_monster_stats(-1, "Xingxing")


@pytest.mark.parametrize("attack, power, advice", [
    (200, 100, "Trivial foe, an easy kill"),
    (130, 100, "You have the edge, worth a fight"),
    (100, 100, "Evenly matched, risky"),
    (60, 100, "A stronger foe, proceed with caution"),
    (10, 100, FLEE_ADVICE),
])
def test_monster_hint(attack, power, advice):
    assert monster_hint(attack, power) == advice
