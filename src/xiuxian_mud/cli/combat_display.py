"""Rich rendering for encounters, fights and progression."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from xiuxian_mud.models.character import Realm, SettlementReport
from xiuxian_mud.models.combat import CombatResult, CombatRole, CombatStats, RoundEvent
from xiuxian_mud.models.monster import Encounter, Rarity

console = Console()

RARITY_COLORS = {
    Rarity.COMMON: "white",
    Rarity.RARE: "green",
    Rarity.EPIC: "blue",
    Rarity.LEGENDARY: "yellow",
}

EVENT_STYLES = {
    RoundEvent.CRIT: "bold yellow",
    RoundEvent.FLASH: "bold magenta",
    RoundEvent.DODGE: "dim",
    RoundEvent.BLOCK: "cyan",
}


def hp_bar(current: int, maximum: int, width: int = 12) -> str:
    pct = max(0.0, current / max(maximum, 1))
    color = "green" if pct > 0.5 else ("yellow" if pct > 0.25 else "red")
    filled = int(pct * width)
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * (width - filled)}[/dim] {current}/{maximum}"


class CombatDisplay:
    def __init__(self, console_: Console | None = None) -> None:
        self.console = console_ or console

    def show_realms(self, realms: list[Realm] | tuple[Realm, ...], current: str | None = None) -> None:
        table = Table(title="Realms", box=box.SIMPLE_HEAVY)
        table.add_column("#", justify="right")
        table.add_column("Realm")
        table.add_column("Threshold", justify="right")
        table.add_column("Gain / session", justify="right")
        table.add_column("Locations")
        for i, realm in enumerate(realms):
            style = "bold yellow" if realm.name == current else ""
            table.add_row(
                str(i), realm.name, f"{realm.min_cultivation:,}", str(realm.cultivation_gain),
                ", ".join(realm.locations), style=style,
            )
        self.console.print(table)

    def show_stats(self, name: str, stats: CombatStats, realm: str) -> None:
        content = Text.from_markup(
            f"[bold]{name}[/bold] ({realm})\n\n"
            f"  HP      {hp_bar(stats.hp, stats.max_hp)}\n"
            f"  Attack  {stats.attack}\n"
            f"  Defense {stats.defense}\n"
            f"  Speed   {stats.speed}\n"
            f"  Crit    {stats.crit_rate:g}% x{stats.crit_damage:g}\n"
            f"  Dodge   {stats.dodge_rate:g}%"
        )
        self.console.print(Panel(content, border_style="cyan", box=box.ROUNDED, width=48))

    def show_encounter(self, encounter: Encounter, hint: str | None = None) -> None:
        color = RARITY_COLORS.get(encounter.rarity, "white")
        content = (
            f"[bold {color}]{encounter.species}[/bold {color}] [dim]({encounter.rarity.value})[/dim]\n"
            f"[italic]{encounter.description}[/italic]\n\n"
            f"Power: {encounter.power:,}\n"
            f"Reward: {encounter.reward_cultivation:,} cultivation"
        )
        if encounter.reward_item:
            content += f", {encounter.reward_item}"
        if hint:
            content += f"\n\n[bold]{hint}[/bold]"
        self.console.print(Panel(content, title="Encounter", border_style="red", box=box.HEAVY))

    def show_combat_log(self, result: CombatResult) -> None:
        exchanges = iter(result.exchanges)
        pending = next(exchanges, None)
        for line in result.narrative:
            if line.startswith("-- Round"):
                self.console.print(f"\n[bold]{line}[/bold]")
                continue
            style = ""
            if pending is not None and line == pending.text:
                style = EVENT_STYLES.get(pending.event, "")
                if pending.attacker is CombatRole.MONSTER and not style:
                    style = "red"
                pending = next(exchanges, None)
            self.console.print(f"  [{style}]{line}[/{style}]" if style else f"  {line}")

    def show_combat_end(self, result: CombatResult, report: SettlementReport | None = None) -> None:
        if result.is_victory:
            content = "[bold green]Victory![/bold green]\n"
            content += f"\nRounds: {result.rounds}   Crits: {result.crit_count}   Dodges: {result.dodge_count}"
            content += f"\nCultivation: +{result.cultivation_delta:,}"
            if result.item_rewards:
                content += "\nLoot: " + ", ".join(f"{r.name} x{r.quantity}" for r in result.item_rewards)
            border = "green"
        else:
            content = "[bold red]Defeat...[/bold red]\n"
            content += f"\nRounds: {result.rounds}   HP lost: {result.hp_lost:,}"
            content += f"\nCultivation: {result.cultivation_delta:,}"
            border = "red"
        if result.round_limit_reached:
            content += "\n[dim]The round limit was reached.[/dim]"
        if report is not None:
            content += f"\n\nNow {report.realm}, {report.cultivation:,} cultivation, {report.hp:,} hp"
            if report.broke_through:
                content += f"\n[bold yellow]Breakthrough! {report.previous_realm} -> {report.realm}[/bold yellow]"
        self.console.print(Panel(content, border_style=border, box=box.HEAVY))
