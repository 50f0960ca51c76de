from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EquipmentSlot(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"


class EquipmentQuality(str, Enum):
    MORTAL = "mortal"
    FINE = "fine"
    SUPERIOR = "superior"
    IMMORTAL = "immortal"
    DIVINE = "divine"


class ItemEffectType(str, Enum):
    CULTIVATION = "cultivation"
    HP = "hp"


class EquipmentTemplate(BaseModel):
    """Catalogue entry a piece of equipment is generated from."""

    model_config = ConfigDict(frozen=True)

    name: str
    slot: EquipmentSlot
    base_stat: int = Field(ge=0)
    realm_required: str


class Equipment(BaseModel):
    """A piece of equipment owned by a character."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    slot: EquipmentSlot
    quality: EquipmentQuality = EquipmentQuality.MORTAL
    base_stat: int = Field(ge=0)
    final_stat: int = Field(ge=0)
    realm_required: str
    equipped: bool = False


class ItemEffect(BaseModel):
    type: ItemEffectType
    value: int


class ItemConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    effect: ItemEffect
    drop_rate: float = Field(default=0.0, ge=0, le=1)
