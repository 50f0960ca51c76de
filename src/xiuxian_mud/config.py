"""Tunable constants, optionally overridden from config.toml."""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from xiuxian_mud.errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"


class CombatConfig(BaseModel):
    """Percent chances use the same 0-100 scale as the stat rates."""

    model_config = ConfigDict(frozen=True)

    max_rounds: int = Field(default=20, ge=1)
    base_dodge_chance: float = Field(default=5.0, ge=0, le=100)
    flash_chance: float = Field(default=1.0, ge=0, le=100)
    flash_multiplier: float = Field(default=3.0, gt=0)
    crit_spread: float = Field(default=0.5, ge=0)
    block_chance: float = Field(default=10.0, ge=0, le=100)
    block_multiplier: float = Field(default=0.5, gt=0)
    combo_chance: float = Field(default=5.0, ge=0, le=100)
    max_combo_chain: int = Field(default=3, ge=0)
    jitter_low: float = Field(default=0.9, gt=0)
    jitter_high: float = Field(default=1.1, gt=0)
    defense_factor: float = Field(default=0.5, ge=0)
    defeat_penalty_rate: float = Field(default=0.05, ge=0)

    @model_validator(mode="after")
    def _jitter_order(self) -> CombatConfig:
        if self.jitter_low > self.jitter_high:
            raise ValueError("jitter_low must not exceed jitter_high")
        return self


class EncounterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    reward_rate: float = Field(default=0.1, ge=0)
    item_drop_chance: float = Field(default=0.5, ge=0, le=1)
    rarity_weights: dict[str, float] = Field(
        default_factory=lambda: {"common": 60, "rare": 25, "epic": 12, "legendary": 3}
    )


class GameConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    combat: CombatConfig = Field(default_factory=CombatConfig)
    encounter: EncounterConfig = Field(default_factory=EncounterConfig)
    seed: int | None = None


def load_config(path: Path | str | None = None) -> GameConfig:
    """Read config.toml; a missing file yields the defaults."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    raw: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Malformed config file {config_path}: {exc}") from exc
    try:
        return GameConfig(
            combat=CombatConfig(**raw.get("combat", {})),
            encounter=EncounterConfig(**raw.get("encounter", {})),
            seed=raw.get("rng", {}).get("seed"),
        )
    except (ValidationError, TypeError) as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc
