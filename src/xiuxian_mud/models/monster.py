from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class MonsterSpecies(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    min_power: int = Field(ge=0)
    max_power: int = Field(ge=0)
    realm_required: str
    drops: list[str] = Field(default_factory=list)
    rarity: Rarity = Rarity.COMMON

    @model_validator(mode="after")
    def _power_range(self) -> MonsterSpecies:
        if self.min_power > self.max_power:
            raise ValueError(f"{self.name}: min_power {self.min_power} > max_power {self.max_power}")
        return self


class Encounter(BaseModel):
    """A freshly generated monster, consumed by exactly one fight."""

    model_config = ConfigDict(frozen=True)

    species: str
    description: str = ""
    rarity: Rarity = Rarity.COMMON
    power: int = Field(ge=0)
    reward_cultivation: int = Field(ge=0)
    reward_item: Optional[str] = None
