"""Engine facade wiring config, randomness and content into the core calls."""
from __future__ import annotations

import logging
from pathlib import Path

from xiuxian_mud.config import GameConfig, load_config
from xiuxian_mud.mechanics import combat, cultivation, exploration, items, monsters, realms, settlement, stats
from xiuxian_mud.mechanics.bestiary import bestiary_bonus_percent, kills_for
from xiuxian_mud.mechanics.equipment import equip_item, equipment_bonus
from xiuxian_mud.mechanics.narrative import Narrator
from xiuxian_mud.mechanics.rng import RandomSource, default_rng
from xiuxian_mud.models.character import CharacterRecord, EquipmentBonus, Realm, SettlementReport
from xiuxian_mud.models.combat import CombatResult, CombatStats
from xiuxian_mud.models.monster import Encounter

logger = logging.getLogger(__name__)


class GameEngine:
    """Stateless entry point for the HTTP/persistence shell.

    Every method takes and returns plain models; the caller owns storage.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: RandomSource | None = None,
        narrator: Narrator | None = None,
        config_path: Path | str | None = None,
    ):
        self._config = config
        self._config_path = config_path
        self._rng = rng
        self._narrator = narrator

    # -- Lazy components --

    @property
    def config(self) -> GameConfig:
        if self._config is None:
            self._config = load_config(self._config_path)
        return self._config

    @property
    def rng(self) -> RandomSource:
        if self._rng is None:
            self._rng = default_rng(self.config.seed)
        return self._rng

    @property
    def narrator(self) -> Narrator:
        if self._narrator is None:
            self._narrator = Narrator()
        return self._narrator

    # -- Core contracts --

    def current_realm(self, cultivation: int) -> Realm:
        return realms.current_realm(cultivation)

    def next_realm(self, cultivation: int) -> Realm | None:
        return realms.next_realm(cultivation)

    def derive_combat_stats(
        self,
        cultivation: int,
        equipment_bonus: EquipmentBonus | None = None,
        bestiary_bonus_percent: float = 0,
        current_hp: int | None = None,
    ) -> CombatStats:
        return stats.derive_combat_stats(cultivation, equipment_bonus, bestiary_bonus_percent, current_hp)

    def derive_monster_stats(self, power: int, species_name: str) -> CombatStats:
        return monsters.derive_monster_stats(power, species_name)

    def generate_encounter(self, cultivation: int) -> Encounter:
        return monsters.generate_encounter(cultivation, self.rng, self.config.encounter)

    def resolve_combat(
        self,
        actor_name: str,
        actor_stats: CombatStats,
        opponent_stats: CombatStats,
        opponent_name: str,
        reward_cultivation: int,
        reward_item: str | None,
    ) -> CombatResult:
        return combat.resolve_combat(
            actor_name, actor_stats, opponent_stats, opponent_name,
            reward_cultivation, reward_item,
            rng=self.rng, config=self.config.combat, narrator=self.narrator,
        )

    # -- Composite actions --

    def character_stats(self, record: CharacterRecord, species: str | None = None) -> CombatStats:
        """Stats for ``record``, with the bestiary bonus for ``species`` if given."""
        kills = kills_for(record.bestiary, species) if species else 0
        return self.derive_combat_stats(
            record.cultivation,
            equipment_bonus(record.equipment),
            bestiary_bonus_percent(kills),
            current_hp=record.hp,
        )

    def fight(
        self, record: CharacterRecord, encounter: Encounter
    ) -> tuple[CharacterRecord, CombatResult, SettlementReport]:
        """Resolve one fight against ``encounter`` and settle it onto ``record``."""
        player = self.character_stats(record, encounter.species)
        monster = self.derive_monster_stats(encounter.power, encounter.species)
        result = self.resolve_combat(
            record.name, player, monster, encounter.species,
            encounter.reward_cultivation, encounter.reward_item,
        )
        updated, report = settlement.settle_combat(record, result, encounter.species)
        return updated, result, report

    def cultivate(self, record: CharacterRecord) -> tuple[CharacterRecord, cultivation.CultivationOutcome]:
        outcome = cultivation.cultivate(record.cultivation, self.rng)
        logger.debug(
            "%s cultivated +%d (event=%s)",
            record.name, outcome.gained, outcome.event.name if outcome.event else None,
        )
        full_hp = realms.max_hp_for(outcome.cultivation)
        updated = record.model_copy(update={
            "cultivation": outcome.cultivation,
            "realm": outcome.realm,
            "hp": max(1, full_hp - outcome.hp_damage),
            "inventory": settlement.add_items(record.inventory, outcome.items),
        })
        return updated, outcome

    def explore(self, record: CharacterRecord) -> exploration.ExploreOutcome:
        attack = self.character_stats(record).attack
        return exploration.explore(
            record.cultivation, attack, self.rng, self.config.encounter,
            location=record.location or self.current_realm(record.cultivation).locations[0],
        )

    def use_item(self, record: CharacterRecord, item_name: str) -> tuple[CharacterRecord, str]:
        return items.use_item(record, item_name)

    def equip(self, record: CharacterRecord, item_id: str) -> CharacterRecord:
        loadout = equip_item(record.equipment, item_id, record.cultivation)
        return record.model_copy(update={"equipment": loadout})
