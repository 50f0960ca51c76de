from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RoundEvent(str, Enum):
    NORMAL = "normal"
    CRIT = "crit"
    DODGE = "dodge"
    BLOCK = "block"
    COMBO = "combo"
    FLASH = "flash"


class CombatOutcome(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"


class CombatRole(str, Enum):
    PLAYER = "player"
    MONSTER = "monster"

    @property
    def opponent(self) -> CombatRole:
        return CombatRole.MONSTER if self is CombatRole.PLAYER else CombatRole.PLAYER


class CombatStats(BaseModel):
    """Derived combat attributes. Rates are percentages on a 0-100 scale."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    hp: int = Field(ge=0)
    max_hp: int = Field(ge=1)
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    speed: int = Field(default=10, ge=0)
    crit_rate: float = Field(default=0.0, ge=0, le=100)
    crit_damage: float = Field(default=1.5, ge=1.0)
    dodge_rate: float = Field(default=0.0, ge=0, le=100)

    @model_validator(mode="after")
    def _hp_within_max(self) -> CombatStats:
        if self.hp > self.max_hp:
            raise ValueError(f"hp {self.hp} exceeds max_hp {self.max_hp}")
        return self


class ItemReward(BaseModel):
    name: str
    quantity: int = 1


class Exchange(BaseModel):
    """One attack inside a round.

    ``combo`` marks a follow-up attack granted by an earlier combo;
    ``combo_rolled`` marks the attack whose own roll came up combo, even
    when the chain cap or a fallen target stops the follow-up.
    """

    round_number: int
    attacker: CombatRole
    event: RoundEvent
    combo: bool = False
    combo_rolled: bool = False
    damage: int = 0
    attacker_hp: int = 0
    defender_hp: int = 0
    text: str = ""

    @property
    def tags(self) -> tuple[RoundEvent, ...]:
        """The damage event plus ``RoundEvent.COMBO`` when this attack rolled one."""
        if self.combo_rolled:
            return (self.event, RoundEvent.COMBO)
        return (self.event,)


class CombatResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: CombatOutcome
    rounds: int
    damage_dealt: int = 0
    damage_taken: int = 0
    crit_count: int = 0
    dodge_count: int = 0
    hp_lost: int = 0
    cultivation_delta: int = 0
    item_rewards: list[ItemReward] = Field(default_factory=list)
    narrative: list[str] = Field(default_factory=list)
    exchanges: list[Exchange] = Field(default_factory=list)
    player_hp: int = 0
    monster_hp: int = 0
    round_limit_reached: bool = False
    first_actor: Optional[CombatRole] = None

    @property
    def is_victory(self) -> bool:
        return self.outcome is CombatOutcome.VICTORY
