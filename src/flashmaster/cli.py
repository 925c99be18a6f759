"""CLI commands for FlashMaster."""

import sys
from pathlib import Path

import click
from loguru import logger
from rich.console import Console
from rich.prompt import Prompt

from . import __version__
from .app import AppState, open_app, start_study_all, start_study_deck
from .config import format_config_display, load_config, set_config_value
from .models import Deck
from .storage import clear_snapshot
from .store import ValidationError
from .ui import (
    create_card_table,
    create_deck_table,
    create_palette_table,
    create_stats_panel,
    create_study_prompt_session,
    run_study_loop,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; debug detail only with --verbose."""
    logger.remove()
    logger.add(
        lambda message: click.echo(message, err=True, nl=False),
        level="DEBUG" if verbose else "WARNING",
        format="{time:HH:mm:ss} | {level: <8} | {message}",
    )


def get_app(ctx: click.Context) -> AppState:
    """Load saved decks and cards for this invocation."""
    return open_app(ctx.obj.get("data_file"), config=load_config())


def get_deck(app: AppState, ref: str) -> Deck:
    """Resolve a deck by id or name, exiting if there is none."""
    deck = app.store.find_deck(ref)
    if deck is None:
        console.print(f"[red]✗ No deck named or with ID '{ref}'[/red]")
        console.print("[dim]Run 'flashmaster decks' to see your decks.[/dim]")
        sys.exit(1)
    return deck


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="FLASHMASTER_DATA_FILE",
    default=None,
    help="Where decks and cards are stored.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, data_file: Path | None, verbose: bool) -> None:
    """FlashMaster - Flashcard decks and study sessions in your terminal.

    Organize cards into decks, then drill them in study mode.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["data_file"] = data_file


@cli.command()
@click.option("-s", "--search", "query", default="", help="Only decks matching this text")
@click.pass_context
def decks(ctx: click.Context, query: str) -> None:
    """List all decks."""
    app = get_app(ctx)
    deck_list = app.store.search(query)

    if not deck_list:
        if query:
            console.print(f"[yellow]No decks match '{query}'[/yellow]")
        else:
            console.print("[yellow]No decks yet. Create one with 'flashmaster create-deck'.[/yellow]")
        return

    console.print(create_deck_table(app.store, deck_list))


@cli.command()
@click.argument("name")
@click.option("-e", "--emoji", default=None, help="Deck emoji")
@click.option("-c", "--color", default=None, help="Deck color (e.g. #00b894)")
@click.pass_context
def create_deck(ctx: click.Context, name: str, emoji: str | None, color: str | None) -> None:
    """Create a new deck."""
    app = get_app(ctx)

    try:
        deck = app.store.create_deck(
            name,
            emoji or app.config.default_emoji,
            color or app.config.default_color,
        )
    except ValidationError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ Deck created![/green] {deck.emoji} {deck.name} [dim](ID: {deck.id})[/dim]")


@cli.command()
@click.argument("deck")
@click.option("-n", "--name", default=None, help="New deck name")
@click.option("-e", "--emoji", default=None, help="New deck emoji")
@click.option("-c", "--color", default=None, help="New deck color")
@click.pass_context
def edit_deck(
    ctx: click.Context,
    deck: str,
    name: str | None,
    emoji: str | None,
    color: str | None,
) -> None:
    """Rename a deck or change its emoji/color."""
    app = get_app(ctx)
    target = get_deck(app, deck)

    fields = {k: v for k, v in {"name": name, "emoji": emoji, "color": color}.items() if v is not None}
    if not fields:
        console.print("[yellow]Nothing to change. Use --name, --emoji or --color.[/yellow]")
        return

    try:
        app.store.update_deck(target.id, **fields)
    except ValidationError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ Deck updated successfully![/green] {target.emoji} {target.name}")


@cli.command()
@click.argument("deck")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_deck(ctx: click.Context, deck: str, yes: bool) -> None:
    """Delete a deck and all its cards."""
    app = get_app(ctx)
    target = get_deck(app, deck)

    count = app.store.count_cards_in_deck(target.id)
    if app.config.confirm_deletes and not yes:
        console.print(f"{target.emoji} {target.name} [dim]({count} card(s))[/dim]")
        if not click.confirm("Are you sure you want to delete this deck and all its cards?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    app.store.delete_deck(target.id)
    console.print("[cyan]Deck deleted.[/cyan]")


@cli.command()
@click.argument("deck")
@click.option("-s", "--search", "query", default="", help="Only cards matching this text")
@click.pass_context
def cards(ctx: click.Context, deck: str, query: str) -> None:
    """List cards in a deck."""
    app = get_app(ctx)
    target = get_deck(app, deck)
    app.store.select_deck(target.id)

    card_list = app.store.deck_cards(target.id, query)
    if not card_list:
        console.print(f"[yellow]No cards found in '{target.name}'[/yellow]")
        return

    console.print(create_card_table(card_list, f"{target.emoji} {target.name}"))
    console.print(
        f"\n[dim]Showing {len(card_list)} of {app.store.count_cards_in_deck(target.id)} card(s), "
        f"{app.store.mastery_percent(target.id)}% mastered[/dim]"
    )


@cli.command()
@click.argument("deck")
@click.option("-f", "--front", help="Card front content")
@click.option("-b", "--back", help="Card back content")
@click.pass_context
def add(ctx: click.Context, deck: str, front: str | None, back: str | None) -> None:
    """Add a card to a deck.

    If front/back are not provided, prompts interactively.
    """
    app = get_app(ctx)
    target = get_deck(app, deck)

    # Interactive mode if front/back not provided
    if not front:
        front = Prompt.ask("Front")
    if not back:
        back = Prompt.ask("Back")

    try:
        card = app.store.create_card(target.id, front, back)
    except ValidationError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    console.print(f"[green]✓ Card added![/green] [dim](ID: {card.id})[/dim]")
    console.print()
    console.print(f"[dim]Deck:[/dim] {target.emoji} {target.name}")
    console.print(f"[dim]Front:[/dim] {card.front[:50]}{'...' if len(card.front) > 50 else ''}")
    console.print(f"[dim]Back:[/dim] {card.back[:50]}{'...' if len(card.back) > 50 else ''}")


@cli.command()
@click.argument("deck")
@click.pass_context
def bulk_add(ctx: click.Context, deck: str) -> None:
    """Add multiple cards interactively.

    Prompts for front/back repeatedly until you enter an empty front.
    """
    app = get_app(ctx)
    target = get_deck(app, deck)

    console.print(f"[bold]Adding cards to '{target.name}'[/bold]")
    console.print("[dim]Enter empty front to finish[/dim]\n")

    count = 0
    while True:
        front = Prompt.ask(f"[{count + 1}] Front", default="", show_default=False)
        if not front.strip():
            break

        back = Prompt.ask(f"[{count + 1}] Back", default="", show_default=False)
        try:
            app.store.create_card(target.id, front, back)
        except ValidationError as e:
            console.print(f"[yellow]Skipping card: {e}[/yellow]")
            continue
        count += 1
        console.print(f"[green]✓ Card {count} added[/green]\n")

    console.print(f"\n[bold green]Done! Added {count} card(s) to '{target.name}'[/bold green]")


@cli.command()
@click.argument("card_id")
@click.option("-f", "--front", help="New front content")
@click.option("-b", "--back", help="New back content")
@click.pass_context
def edit_card(ctx: click.Context, card_id: str, front: str | None, back: str | None) -> None:
    """Edit the front and/or back of a card."""
    app = get_app(ctx)
    card = app.store.get_card(card_id)
    if card is None:
        console.print(f"[red]✗ No card with ID '{card_id}'[/red]")
        sys.exit(1)

    if front is None and back is None:
        front = Prompt.ask("Front", default=card.front)
        back = Prompt.ask("Back", default=card.back)

    try:
        app.store.update_card(
            card.id,
            front if front is not None else card.front,
            back if back is not None else card.back,
        )
    except ValidationError as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    console.print("[green]✓ Card updated![/green]")


@cli.command()
@click.argument("card_id")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_card(ctx: click.Context, card_id: str, yes: bool) -> None:
    """Delete a single card."""
    app = get_app(ctx)
    card = app.store.get_card(card_id)
    if card is None:
        console.print(f"[yellow]No card with ID '{card_id}'[/yellow]")
        return

    if app.config.confirm_deletes and not yes:
        console.print(f"[dim]Front:[/dim] {card.front[:50]}")
        if not click.confirm("Are you sure you want to delete this card?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    app.store.delete_card(card.id)
    console.print("[cyan]Card deleted.[/cyan]")


@cli.command()
@click.argument("query")
@click.pass_context
def search(ctx: click.Context, query: str) -> None:
    """Search deck names and card text."""
    app = get_app(ctx)
    deck_list = app.store.search(query)

    if not deck_list:
        console.print("[yellow]No decks or cards found[/yellow]")
        return

    console.print(create_deck_table(app.store, deck_list, title=f"Search Results: {query}"))
    for deck in deck_list:
        matches = app.store.deck_cards(deck.id, query)
        if matches:
            console.print(create_card_table(matches, f"{deck.emoji} {deck.name}"))


@cli.command()
@click.option("-d", "--deck", default=None, help="Only study this deck")
@click.pass_context
def study(ctx: click.Context, deck: str | None) -> None:
    """Flip through cards and rate how well you knew them.

    Space flips the card, 1/2/3 rate it hard/medium/easy.
    """
    app = get_app(ctx)

    if deck is None:
        if not start_study_all(app):
            console.print("[red]No cards to study! Create some cards first.[/red]")
            sys.exit(1)
    else:
        target = get_deck(app, deck)
        if not start_study_deck(app, target.id):
            console.print("[red]No cards in this deck![/red]")
            sys.exit(1)

    run_study_loop(console, app, create_study_prompt_session())
    console.print(f"[dim]Sessions completed: {app.store.total_sessions}[/dim]")


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show card counts, mastery and difficulty breakdown."""
    app = get_app(ctx)
    console.print(create_stats_panel(app.store))


@cli.command()
def palette() -> None:
    """Show the emojis and colors available for decks."""
    cfg = load_config()
    console.print(create_palette_table(cfg.emojis, cfg.colors))


@cli.command()
@click.argument("key", required=False)
@click.argument("value", required=False)
def config(key: str | None, value: str | None) -> None:
    """Show or change settings.

    Without arguments, shows all settings. With KEY and VALUE, changes one.
    """
    cfg = load_config()

    if key is None:
        console.print(format_config_display(cfg))
        return
    if value is None:
        console.print("[red]✗ A value is required.[/red]")
        sys.exit(1)

    try:
        set_config_value(cfg, key, value)
    except KeyError:
        console.print(f"[red]Unknown setting '{key}'.[/red]")
        console.print("[dim]Settable: default_emoji, default_color, confirm_deletes[/dim]")
        sys.exit(1)
    console.print(f"[green]✓ {key} updated[/green]")


@cli.command()
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx: click.Context, yes: bool) -> None:
    """Delete all decks, cards and session history."""
    if not yes and not click.confirm("Delete ALL decks and cards?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    if clear_snapshot(ctx.obj.get("data_file")):
        console.print("[cyan]All data deleted.[/cyan]")
    else:
        console.print("[dim]Nothing to delete.[/dim]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
