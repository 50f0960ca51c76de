"""Static content tables (realms, bestiary, equipment, items, events) from TOML."""
from __future__ import annotations

import tomllib
from functools import cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from xiuxian_mud.errors import ConfigurationError
from xiuxian_mud.models.character import Realm
from xiuxian_mud.models.event import CultivationEventTable
from xiuxian_mud.models.item import EquipmentQuality, EquipmentTemplate, ItemConfig
from xiuxian_mud.models.monster import MonsterSpecies

CONTENT_DIR = Path(__file__).parent


def load_toml(filepath: Path) -> dict[str, Any]:
    try:
        with open(filepath, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Missing content file: {filepath}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Malformed content file {filepath}: {exc}") from exc


def _build(model, rows: list[dict], source: str) -> list:
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid entry in {source}: {exc}") from exc


def validate_realm_table(realms: list[Realm] | tuple[Realm, ...]) -> None:
    """Raise ConfigurationError unless thresholds start at 0 and strictly increase."""
    if not realms:
        raise ConfigurationError("Realm table is empty")
    if realms[0].min_cultivation != 0:
        raise ConfigurationError(
            f"First realm {realms[0].name} must start at 0, not {realms[0].min_cultivation}"
        )
    for prev, cur in zip(realms, realms[1:]):
        if cur.min_cultivation <= prev.min_cultivation:
            raise ConfigurationError(
                f"Realm thresholds must strictly increase: {prev.name} ({prev.min_cultivation}) "
                f">= {cur.name} ({cur.min_cultivation})"
            )
    names = [r.name for r in realms]
    if len(set(names)) != len(names):
        raise ConfigurationError("Realm names must be unique")


def _check_realm_refs(entries, realm_names: set[str], source: str) -> None:
    for entry in entries:
        if entry.realm_required not in realm_names:
            raise ConfigurationError(
                f"{source}: {entry.name} requires unknown realm {entry.realm_required!r}"
            )


@cache
def load_realms(path: Path | None = None) -> tuple[Realm, ...]:
    data = load_toml(path or CONTENT_DIR / "realms.toml")
    realms = tuple(_build(Realm, data.get("realms", []), "realms"))
    validate_realm_table(realms)
    return realms


@cache
def load_monsters(path: Path | None = None) -> tuple[MonsterSpecies, ...]:
    data = load_toml(path or CONTENT_DIR / "monsters.toml")
    species = tuple(_build(MonsterSpecies, data.get("monsters", []), "monsters"))
    if not species:
        raise ConfigurationError("Monster catalogue is empty")
    _check_realm_refs(species, {r.name for r in load_realms()}, "monsters")
    return species


@cache
def load_equipment(path: Path | None = None) -> tuple[EquipmentTemplate, ...]:
    data = load_toml(path or CONTENT_DIR / "equipment.toml")
    templates = tuple(_build(EquipmentTemplate, data.get("equipment", []), "equipment"))
    if not templates:
        raise ConfigurationError("Equipment catalogue is empty")
    _check_realm_refs(templates, {r.name for r in load_realms()}, "equipment")
    return templates


@cache
def load_quality_ladder(path: Path | None = None) -> tuple[tuple[EquipmentQuality, float, float], ...]:
    """Return (quality, multiplier, weight) rows, lowest quality first."""
    data = load_toml(path or CONTENT_DIR / "equipment.toml")
    rows = []
    for row in data.get("qualities", []):
        try:
            rows.append((EquipmentQuality(row["quality"]), float(row["multiplier"]), float(row["weight"])))
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(f"Invalid quality row {row}: {exc}") from exc
    if not rows:
        raise ConfigurationError("Equipment quality ladder is empty")
    listed = [q for q, _, _ in rows]
    missing = [q.value for q in EquipmentQuality if q not in listed]
    duplicated = sorted({q.value for q in listed if listed.count(q) > 1})
    if missing or duplicated:
        raise ConfigurationError(
            f"Equipment quality ladder must list every quality once (missing {missing}, repeated {duplicated})"
        )
    return tuple(rows)


@cache
def load_items(path: Path | None = None) -> dict[str, ItemConfig]:
    data = load_toml(path or CONTENT_DIR / "items.toml")
    items = _build(ItemConfig, data.get("items", []), "items")
    if not items:
        raise ConfigurationError("Item table is empty")
    return {item.name: item for item in items}


@cache
def load_cultivation_events(path: Path | None = None) -> CultivationEventTable:
    data = load_toml(path or CONTENT_DIR / "events.toml")
    try:
        table = CultivationEventTable.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid cultivation events: {exc}") from exc
    if not table.events:
        raise ConfigurationError("Cultivation event table is empty")
    return table
