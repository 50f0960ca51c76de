from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CultivationEventType(str, Enum):
    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"


class CultivationEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    type: CultivationEventType
    description: str = ""
    cultivation_multiplier: float = Field(default=1.0, ge=0)
    dao_resonance: int = 0
    hp_damage: int = Field(default=0, ge=0)
    item_reward: Optional[str] = None
    item_quantity: int = 1
    cooldown_reset: bool = False


class CultivationEventTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    trigger_chance: float = Field(default=0.3, ge=0, le=1)
    type_weights: dict[CultivationEventType, float]
    random_items: list[str] = Field(default_factory=list)
    events: list[CultivationEvent]


class ExploreEvent(str, Enum):
    MONSTER = "monster"
    TREASURE = "treasure"
    NPC = "npc"
    NOTHING = "nothing"
