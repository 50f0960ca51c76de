"""Bestiary kill counters and the attack bonus they unlock."""
from __future__ import annotations

from typing import Mapping

# (kills needed, attack bonus percent), highest first.
BESTIARY_TIERS: tuple[tuple[int, int], ...] = (
    (100, 5),
    (50, 2),
)


def bestiary_bonus_percent(kills: int) -> int:
    """Attack bonus percent for ``kills`` against one species."""
    for threshold, percent in BESTIARY_TIERS:
        if kills >= threshold:
            return percent
    return 0


def attack_multiplier(kills: int) -> float:
    return 1 + bestiary_bonus_percent(kills) / 100


def kills_for(bestiary: Mapping[str, int], species: str) -> int:
    return bestiary.get(species, 0)


def record_kill(bestiary: Mapping[str, int], species: str) -> dict[str, int]:
    """Return a copy of ``bestiary`` with one more kill against ``species``."""
    updated = dict(bestiary)
    updated[species] = updated.get(species, 0) + 1
    return updated
