from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from xiuxian_mud.models.item import Equipment


class Realm(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    name: str
    min_cultivation: int = Field(ge=0)
    cultivation_gain: int = Field(default=0, ge=0)
    locations: list[str] = Field(default_factory=list)


class BaseStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    hp: int
    attack: int
    defense: int


class EquipmentBonus(BaseModel):
    model_config = ConfigDict(frozen=True)

    attack: int = Field(default=0, ge=0)
    defense: int = Field(default=0, ge=0)
    hp: int = Field(default=0, ge=0)


class CharacterRecord(BaseModel):
    """The slice of a persisted character the core reads and settles.

    ``realm`` is a cached projection of ``cultivation`` and is recomputed
    after every cultivation change.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str
    cultivation: int = Field(default=0, ge=0)
    realm: str = ""
    hp: int = Field(default=100, ge=0)
    location: str = ""
    inventory: dict[str, int] = Field(default_factory=dict)
    bestiary: dict[str, int] = Field(default_factory=dict)
    equipment: list[Equipment] = Field(default_factory=list)


class SettlementReport(BaseModel):
    cultivation: int
    hp: int
    realm: str
    previous_realm: str
    realm_changed: bool = False
    broke_through: bool = False
    items_granted: dict[str, int] = Field(default_factory=dict)
    kills: int = 0
