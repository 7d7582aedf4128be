"""CLI application for VaultCards using Rich and Typer."""

import asyncio
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.columns import Columns
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from vaultcards.core.config import (
    SETTINGS_FILE,
    VAULT_DIR,
    setup_logging,
    validate_vault_path,
)
from vaultcards.core.session import CardViewSession
from vaultcards.core.settings import SettingsError, SettingsFile
from vaultcards.core.types import (
    Breadcrumb,
    FileCard,
    FolderCard,
    RenderResult,
    SortBy,
    SortDirection,
    ViewSettings,
)
from vaultcards.vault.store import LocalVaultStore

app = typer.Typer(
    name="vaultcards",
    help="VaultCards - browse a notes vault as a grid of cards",
    no_args_is_help=False,
)

console = Console()

# Card sizes are configured in pixels; terminals lay out in characters
PIXELS_PER_COLUMN = 8
DATE_UNKNOWN = "date unknown"
SORT_USAGE = "Usage: /sort name|created|modified \\[asc|desc]"
SET_USAGE = "Usage: /set <key> <value>"


def _card_columns(settings: ViewSettings) -> int:
    return max(16, settings.card_width // PIXELS_PER_COLUMN)


def format_date(timestamp: float, date_format: str) -> str:
    """Format a card date with the configured strftime pattern."""
    return datetime.fromtimestamp(timestamp).strftime(date_format)


def folder_panel(card: FolderCard, settings: ViewSettings) -> Panel:
    """Panel for a folder card."""
    return Panel(
        Text(f"{card.child_file_count} files", style="dim"),
        title=f"[bold yellow]{escape(card.name)}/[/bold yellow]",
        title_align="left",
        width=_card_columns(settings),
        border_style="yellow",
    )


def file_panel(card: FileCard, settings: ViewSettings, index: int) -> Panel:
    """Panel for a file card, numbered for /open."""
    parts = []
    if card.preview_text is not None:
        parts.append(Text(card.preview_text))
    if card.display_date is not None:
        parts.append(
            Text(format_date(card.display_date, settings.date_format), style="dim")
        )
    elif card.date_unknown:
        parts.append(Text(DATE_UNKNOWN, style="dim italic"))
    return Panel(
        Group(*parts) if parts else Text(""),
        title=f"[bold]{escape(card.file.basename)}[/bold]",
        title_align="left",
        subtitle=f"[dim]#{index}[/dim]",
        subtitle_align="right",
        width=_card_columns(settings),
        border_style="blue",
    )


def format_breadcrumbs(trail: list[Breadcrumb]) -> str:
    return " / ".join(crumb.label for crumb in trail)


def print_result(
    result: RenderResult, settings: ViewSettings, trail: list[Breadcrumb]
) -> None:
    """Print one render pass as a grid of cards."""
    if settings.show_breadcrumbs:
        console.print(f"[bold cyan]{escape(format_breadcrumbs(trail))}[/bold cyan]")
    if result.state.search_term:
        console.print(f"[dim]Search: {escape(result.state.search_term)}[/dim]")

    panels = [folder_panel(card, settings) for card in result.folder_cards]
    panels.extend(
        file_panel(card, settings, index)
        for index, card in enumerate(result.file_cards, 1)
    )

    if not panels:
        console.print("[dim]No notes here.[/dim]")
        return

    console.print(Columns(panels, padding=(0, max(1, settings.card_spacing // 5))))


def print_settings(settings: ViewSettings) -> None:
    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in settings.model_dump(mode="json").items():
        table.add_row(key, str(value))

    console.print(table)


def print_help():
    """Print help message."""
    table = Table(title="Commands", show_header=True, header_style="bold cyan")
    table.add_column("Command", style="green")
    table.add_column("Description")

    commands = [
        ("/cd <folder>", "Open a folder (relative, or /path from the root)"),
        ("/cd ..", "Go to the parent folder"),
        ("/up", "Go to the parent folder"),
        ("/root", "Go to the vault root"),
        ("/search <term>", "Filter cards by name"),
        ("/clear", "Clear the search"),
        ("/sort name|created|modified \\[asc|desc]", "Change the sort order"),
        ("/new", "Create a note in the current folder"),
        ("/open <n>", "Open file card number n"),
        ("/settings", "Show current settings"),
        ("/set <key> <value>", "Change and save a setting"),
        ("/help", "Show this help message"),
        ("/quit", "Exit"),
    ]

    for cmd, desc in commands:
        table.add_row(cmd, desc)

    console.print(table)


def save_settings(
    settings_file: Optional[SettingsFile], settings: ViewSettings
) -> None:
    """Persist settings changed from the shell, if a settings file is in use."""
    if settings_file is None:
        return
    try:
        settings_file.save(settings)
    except OSError as e:
        console.print(f"[yellow]Could not save settings: {escape(str(e))}[/yellow]")


async def handle_command(
    session: CardViewSession,
    command: str,
    settings_file: Optional[SettingsFile] = None,
) -> bool:
    """
    Handle a shell command.

    Setting changes are written to ``settings_file`` when one is given.

    Returns True if the REPL should continue, False to exit.
    """
    parts = command.strip().split(maxsplit=1)
    cmd = parts[0].lower()
    args = parts[1].strip() if len(parts) > 1 else ""

    if cmd in ("/quit", "/exit", "/q"):
        console.print("[dim]Goodbye![/dim]")
        return False

    elif cmd == "/help":
        print_help()
        return True

    elif cmd == "/settings":
        print_settings(session.settings)
        return True

    elif cmd == "/cd":
        if not args:
            console.print("[red]Usage: /cd <folder>[/red]")
            return True
        if args == "..":
            result = await session.navigate_up()
        else:
            # Relative to the current folder unless it starts at the root
            target = args
            if session.current_folder and not args.startswith("/"):
                target = f"{session.current_folder}/{args}"
            result = await session.navigate_to(target)

    elif cmd == "/up":
        result = await session.navigate_up()

    elif cmd == "/root":
        result = await session.navigate_to("")

    elif cmd == "/search":
        result = await session.set_search(args)

    elif cmd == "/clear":
        result = await session.clear_search()

    elif cmd == "/sort":
        sort_args = args.lower().split()
        if not sort_args:
            console.print(f"[red]{SORT_USAGE}[/red]")
            return True
        changes = {"sort_by": sort_args[0]}
        if len(sort_args) > 1:
            changes["sort_direction"] = sort_args[1]
        try:
            result = await session.update_settings(**changes)
        except ValidationError:
            console.print(f"[red]{SORT_USAGE}[/red]")
            return True
        save_settings(settings_file, session.settings)

    elif cmd == "/set":
        set_args = args.split(maxsplit=1)
        if len(set_args) < 2:
            console.print(f"[red]{SET_USAGE}[/red]")
            return True
        key, value = set_args[0].lower(), set_args[1]
        if key not in ViewSettings.model_fields:
            console.print(f"[red]Unknown setting: {escape(key)}[/red]")
            console.print("[dim]Type /settings to list settings.[/dim]")
            return True
        try:
            result = await session.update_settings(**{key: value})
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            console.print(f"[red]Invalid value for {key}: {escape(message)}[/red]")
            console.print(f"[red]{SET_USAGE}[/red]")
            return True
        save_settings(settings_file, session.settings)

    elif cmd == "/new":
        notice = await session.create_new_note()
        style = "red" if notice.is_error else "green"
        console.print(f"[{style}]{escape(notice.message)}[/{style}]")
        result = session.latest

    elif cmd == "/open":
        latest = session.latest
        files = latest.file_cards if latest else []
        if not args.isdigit() or not 1 <= int(args) <= len(files):
            console.print(f"[red]Usage: /open <1-{len(files)}>[/red]")
            return True
        card = files[int(args) - 1]
        session.open_file(card.file)
        console.print(f"[green]Opened {escape(card.file.path)}[/green]")
        return True

    else:
        console.print(f"[red]Unknown command: {cmd}[/red]")
        console.print("[dim]Type /help for available commands.[/dim]")
        return True

    if result is not None:
        print_result(result, session.settings, session.breadcrumbs())
    return True


def _get_vault_path(vault: Optional[str]) -> Optional[Path]:
    """Resolve vault path from argument, env var, or current directory."""
    candidate = vault or VAULT_DIR or os.getcwd()
    is_valid, message = validate_vault_path(candidate)
    if not is_valid:
        console.print(f"[red]Error: {escape(message)}[/red]")
        return None
    return Path(candidate).expanduser()


def _load_settings(
    settings_file: Optional[str],
) -> tuple[SettingsFile, Optional[ViewSettings]]:
    """Open the settings file and load it, printing any error."""
    file = SettingsFile(settings_file or SETTINGS_FILE)
    try:
        return file, file.load()
    except SettingsError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return file, None


def parse_setting_changes(pairs: list[str]) -> dict[str, str]:
    """
    Parse ``key=value`` pairs given on the command line.

    Raises:
        typer.BadParameter: If a pair has no '=' or names an unknown setting.
    """
    changes = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip().lower()
        if not sep:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        if key not in ViewSettings.model_fields:
            raise typer.BadParameter(f"Unknown setting: {key}")
        changes[key] = value.strip()
    return changes


def _configure_logging(debug: bool) -> None:
    if debug:
        setup_logging("DEBUG")
        console.print("[dim]Debug logging enabled[/dim]")


async def repl(
    session: CardViewSession, settings_file: Optional[SettingsFile] = None
):
    """Run the interactive card browser."""
    console.print(
        Panel.fit(
            "[bold blue]VaultCards[/bold blue]\n"
            f"[dim]{session.store}[/dim]\n\n"
            "Commands: /cd, /up, /search, /sort, /set, /new, /open, /help, /quit",
            title="Welcome",
            border_style="blue",
        )
    )

    result = await session.render()
    if result is not None:
        print_result(result, session.settings, session.breadcrumbs())

    while True:
        try:
            text = Prompt.ask(f"[bold blue]{session.current_folder or '/'}[/bold blue]")

            if not text.strip():
                continue

            if text.startswith("/"):
                should_continue = await handle_command(session, text, settings_file)
                if not should_continue:
                    break
            else:
                # Bare text searches
                result = await session.set_search(text.strip())
                if result is not None:
                    print_result(result, session.settings, session.breadcrumbs())

        except KeyboardInterrupt:
            console.print("\n[dim]Use /quit to exit.[/dim]")
        except EOFError:
            break


VaultOption = typer.Option(
    None,
    "--vault",
    "-v",
    help="Path to vault directory (default: $VAULTCARDS_VAULT or current directory)",
)
SettingsOption = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to settings YAML (default: ~/.vaultcards/settings.yaml)",
)
DebugOption = typer.Option(False, "--debug", "-d", help="Enable debug logging")


@app.command()
def browse(
    vault: Optional[str] = VaultOption,
    settings_file: Optional[str] = SettingsOption,
    folder: str = typer.Option("", "--folder", "-f", help="Folder to open"),
    search: str = typer.Option("", "--search", "-q", help="Filter cards by name"),
    sort_by: Optional[SortBy] = typer.Option(None, "--sort-by", help="Sort property"),
    direction: Optional[SortDirection] = typer.Option(
        None, "--direction", help="Sort direction"
    ),
    debug: bool = DebugOption,
):
    """Render a folder of the vault as cards."""
    _configure_logging(debug)
    vault_path = _get_vault_path(vault)
    _, settings = _load_settings(settings_file)
    if vault_path is None or settings is None:
        raise typer.Exit(1)

    overrides = {}
    if sort_by is not None:
        overrides["sort_by"] = sort_by
    if direction is not None:
        overrides["sort_direction"] = direction
    if overrides:
        settings = settings.model_copy(update=overrides)

    session = CardViewSession(LocalVaultStore(vault_path), settings)

    async def _render():
        session.state.search_term = search
        return await session.navigate_to(folder)

    result = asyncio.run(_render())
    if result is not None:
        print_result(result, session.settings, session.breadcrumbs())


@app.command()
def shell(
    vault: Optional[str] = VaultOption,
    settings_file: Optional[str] = SettingsOption,
    debug: bool = DebugOption,
):
    """Browse the vault interactively."""
    _configure_logging(debug)
    vault_path = _get_vault_path(vault)
    file, settings = _load_settings(settings_file)
    if vault_path is None or settings is None:
        raise typer.Exit(1)

    session = CardViewSession(LocalVaultStore(vault_path), settings)
    asyncio.run(repl(session, file))


@app.command()
def settings(
    settings_file: Optional[str] = SettingsOption,
    set_values: Optional[list[str]] = typer.Option(
        None, "--set", help="Change a setting, as key=value (repeatable)"
    ),
):
    """Show the effective view settings, optionally changing some first."""
    file, loaded = _load_settings(settings_file)
    if loaded is None:
        raise typer.Exit(1)

    if set_values:
        try:
            changes = parse_setting_changes(set_values)
            loaded = SettingsFile.parse({**loaded.model_dump(), **changes})
        except (typer.BadParameter, SettingsError) as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(1)
        file.save(loaded)
        console.print(f"[green]Saved {escape(str(file.path))}[/green]")

    print_settings(loaded)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """VaultCards - browse a notes vault as a grid of cards."""
    if ctx.invoked_subcommand is None:
        # Default to the interactive shell
        shell(vault=None, settings_file=None, debug=False)


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
