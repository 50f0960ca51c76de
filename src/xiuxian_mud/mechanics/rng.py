"""Injectable randomness. Every roll in the core goes through a RandomSource."""
from __future__ import annotations

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float:
        """Next float in [0, 1)."""
        ...


def default_rng(seed: int | None = None) -> random.Random:
    """Production source; pass a seed to make a run reproducible."""
    return random.Random(seed)


def chance(rng: RandomSource, percent: float) -> bool:
    """True with probability ``percent`` / 100."""
    return rng.random() * 100 < percent


def uniform(rng: RandomSource, low: float, high: float) -> float:
    return low + rng.random() * (high - low)


def randint(rng: RandomSource, low: int, high: int) -> int:
    """Integer in [low, high]."""
    return min(high, low + int(rng.random() * (high - low + 1)))


def choice(rng: RandomSource, items: Sequence[T]) -> T:
    if not items:
        raise IndexError("Cannot choose from an empty sequence")
    return items[min(len(items) - 1, int(rng.random() * len(items)))]


def weighted_choice(rng: RandomSource, items: Sequence[T], weights: Sequence[float]) -> T:
    """Walk the cumulative weights; falls back to the first item on a gap."""
    if not items:
        raise IndexError("Cannot choose from an empty sequence")
    total = sum(weights)
    if total <= 0:
        return items[0]
    roll = rng.random() * total
    for item, weight in zip(items, weights):
        roll -= weight
        if roll < 0:
            return item
    return items[0]
