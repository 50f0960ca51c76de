"""Realm progression as pure functions of the cultivation scalar."""
from __future__ import annotations

from typing import Sequence

from xiuxian_mud.content.loader import load_realms, validate_realm_table
from xiuxian_mud.errors import ConfigurationError, InvalidInput
from xiuxian_mud.models.character import BaseStats, Realm

HP_FLOOR = 100
ATTACK_FLOOR = 10
DEFENSE_FLOOR = 5


def _check_cultivation(cultivation: int) -> None:
    if cultivation < 0:
        raise InvalidInput(f"Cultivation cannot be negative: {cultivation}")


def realm_index(cultivation: int, realms: Sequence[Realm] | None = None) -> int:
    """Index of the highest realm whose threshold ``cultivation`` has reached."""
    _check_cultivation(cultivation)
    realms = load_realms() if realms is None else realms
    validate_realm_table(realms)
    index = 0
    for i, realm in enumerate(realms):
        if cultivation >= realm.min_cultivation:
            index = i
        else:
            break
    return index


def current_realm(cultivation: int, realms: Sequence[Realm] | None = None) -> Realm:
    realms = load_realms() if realms is None else realms
    return realms[realm_index(cultivation, realms)]


def next_realm(cultivation: int, realms: Sequence[Realm] | None = None) -> Realm | None:
    """The realm directly above the current one, or None at the top."""
    realms = load_realms() if realms is None else realms
    index = realm_index(cultivation, realms)
    if index + 1 < len(realms):
        return realms[index + 1]
    return None


def realm_by_name(name: str, realms: Sequence[Realm] | None = None) -> tuple[int, Realm]:
    realms = load_realms() if realms is None else realms
    for i, realm in enumerate(realms):
        if realm.name == name:
            return i, realm
    raise ConfigurationError(f"Unknown realm: {name!r}")


def cultivation_gain(cultivation: int, realms: Sequence[Realm] | None = None) -> int:
    """Cultivation earned by one cultivate action at the current realm."""
    return current_realm(cultivation, realms).cultivation_gain


def base_stats(cultivation: int) -> BaseStats:
    """Base hp/attack/defense. Floors keep a fresh character viable."""
    _check_cultivation(cultivation)
    return BaseStats(
        hp=max(HP_FLOOR, cultivation * 10),
        attack=max(ATTACK_FLOOR, cultivation),
        defense=max(DEFENSE_FLOOR, int(cultivation * 0.5)),
    )


def max_hp_for(cultivation: int) -> int:
    return base_stats(cultivation).hp
