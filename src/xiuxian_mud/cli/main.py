"""Typer CLI for poking at the combat and progression core."""
from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from xiuxian_mud.errors import GameCoreError

app = typer.Typer(
    name="xiuxian-mud",
    help="Combat and cultivation core of the xiuxian text MUD",
    no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _engine(seed: Optional[int], config: Optional[str]):
    from xiuxian_mud.app import GameEngine
    from xiuxian_mud.mechanics.narrative import Narrator
    from xiuxian_mud.mechanics.rng import default_rng

    if seed is None:
        return GameEngine(config_path=config)
    return GameEngine(config_path=config, rng=default_rng(seed), narrator=Narrator(default_rng(seed)))


def _fail(exc: GameCoreError) -> None:
    from xiuxian_mud.cli.combat_display import console

    console.print(f"[bold red]Error:[/bold red] {exc}")
    raise typer.Exit(code=1)


@app.command()
def realms(
    cultivation: Optional[int] = typer.Option(None, "--cultivation", "-c", help="Highlight this character's realm"),
) -> None:
    """List the realm ladder."""
    from xiuxian_mud.cli.combat_display import CombatDisplay
    from xiuxian_mud.content.loader import load_realms
    from xiuxian_mud.mechanics.realms import current_realm

    try:
        current = current_realm(cultivation).name if cultivation is not None else None
        CombatDisplay().show_realms(load_realms(), current)
    except GameCoreError as exc:
        _fail(exc)


@app.command()
def status(
    cultivation: int = typer.Option(0, "--cultivation", "-c", help="Cultivation of the character"),
    name: str = typer.Option("Wanderer", "--name", help="Character name"),
) -> None:
    """Show the derived combat stats for a cultivation value."""
    from xiuxian_mud.cli.combat_display import CombatDisplay, console
    from xiuxian_mud.mechanics.realms import current_realm, next_realm
    from xiuxian_mud.mechanics.stats import derive_combat_stats

    try:
        stats = derive_combat_stats(cultivation)
        realm = current_realm(cultivation)
        upcoming = next_realm(cultivation)
    except GameCoreError as exc:
        _fail(exc)
        return
    CombatDisplay().show_stats(name, stats, realm.name)
    if upcoming is not None:
        console.print(f"Next realm: {upcoming.name} at {upcoming.min_cultivation:,} cultivation")
    else:
        console.print("You stand at the peak of the Dao.")


@app.command()
def encounter(
    cultivation: int = typer.Option(0, "--cultivation", "-c", help="Cultivation of the character"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed the random source"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Generate a monster for a character."""
    from xiuxian_mud.cli.combat_display import CombatDisplay
    from xiuxian_mud.mechanics.monsters import monster_hint

    engine = _engine(seed, config)
    try:
        found = engine.generate_encounter(cultivation)
        attack = engine.derive_combat_stats(cultivation).attack
    except GameCoreError as exc:
        _fail(exc)
        return
    CombatDisplay().show_encounter(found, monster_hint(attack, found.power))


@app.command()
def fight(
    cultivation: int = typer.Option(0, "--cultivation", "-c", help="Cultivation of the character"),
    name: str = typer.Option("Wanderer", "--name", help="Character name"),
    hp: Optional[int] = typer.Option(None, "--hp", help="Current hp (defaults to full)"),
    kills: int = typer.Option(0, "--kills", help="Kills already recorded against the drawn species"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed the random source"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every exchange"),
) -> None:
    """Draw one encounter for the character and fight it."""
    from xiuxian_mud.cli.combat_display import CombatDisplay
    from xiuxian_mud.mechanics.monsters import monster_hint
    from xiuxian_mud.mechanics.realms import current_realm, max_hp_for
    from xiuxian_mud.models.character import CharacterRecord

    _setup_logging(verbose)
    engine = _engine(seed, config)
    display = CombatDisplay()
    try:
        found = engine.generate_encounter(cultivation)
        record = CharacterRecord(
            name=name,
            cultivation=cultivation,
            realm=current_realm(cultivation).name,
            hp=hp if hp is not None else max_hp_for(cultivation),
            bestiary={found.species: kills} if kills else {},
        )
        attack = engine.character_stats(record, found.species).attack
        display.show_encounter(found, monster_hint(attack, found.power))
        _, result, report = engine.fight(record, found)
    except GameCoreError as exc:
        _fail(exc)
        return
    display.show_combat_log(result)
    display.show_combat_end(result, report)


if __name__ == "__main__":
    app()
