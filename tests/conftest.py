"""Shared fixtures for the xiuxian MUD core test suite."""
from __future__ import annotations

import random
from typing import Sequence

import pytest

from xiuxian_mud.models.character import CharacterRecord
from xiuxian_mud.models.combat import CombatStats


class ScriptedRandom:
    """Returns ``values`` in order, then ``default`` forever (or cycles)."""

    def __init__(self, values: Sequence[float] = (), default: float = 0.5, cycle: bool = False):
        self.values = list(values)
        self.default = default
        self.cycle = cycle
        self.calls = 0

    def random(self) -> float:
        index = self.calls
        self.calls += 1
        if index < len(self.values):
            return self.values[index]
        if self.cycle and self.values:
            return self.values[index % len(self.values)]
        return self.default


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def quiet_rng() -> ScriptedRandom:
    """0.5 on every roll: no dodge/flash/crit/block/combo, jitter exactly 1.0."""
    return ScriptedRandom(default=0.5)


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def hero_stats() -> CombatStats:
    return CombatStats(
        hp=200, max_hp=200, attack=100, defense=20, speed=15,
        crit_rate=10, crit_damage=1.5, dodge_rate=5,
    )


@pytest.fixture
def beast_stats() -> CombatStats:
    return CombatStats(hp=150, max_hp=150, attack=30, defense=10, speed=5)


@pytest.fixture
def fresh_character() -> CharacterRecord:
    return CharacterRecord(name="Han Li", cultivation=0, realm="Qi Refining", hp=100)
