"""Terminal rendering and the interactive study loop."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from rich import box
from rich.color import Color, ColorParseError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .app import AppState
from .models import Card, Deck, Difficulty
from .store import FlashcardStore
from .study import FLIP_KEY, KEY_RATINGS, SessionState, StudySession, handle_key

# Style for prompt_toolkit
PROMPT_STYLE = Style.from_dict({
    "prompt": "cyan bold",
})

DIFFICULTY_STYLES = {
    Difficulty.NEW: "blue",
    Difficulty.HARD: "red",
    Difficulty.MEDIUM: "yellow",
    Difficulty.EASY: "green",
}

RESTART_KEY = "r"
QUIT_KEY = "q"


def truncate(text: str, width: int = 40) -> str:
    return text[:width] + "..." if len(text) > width else text


def color_style(color: str) -> str:
    """A rich style for a deck colour, or no style if it cannot be parsed."""
    try:
        Color.parse(color)
    except ColorParseError:
        return ""
    return color


def difficulty_badge(difficulty: Difficulty | str) -> Text:
    difficulty = Difficulty.parse(difficulty)
    return Text(difficulty.value, style=DIFFICULTY_STYLES[difficulty])


def create_bar(percent: int, width: int = 20) -> Text:
    """Render ``[████░░░░] 40%`` coloured by how full it is."""
    percent = max(0, min(100, percent))
    filled = int(width * percent / 100)
    empty = width - filled

    if percent >= 80:
        color = "green"
    elif percent >= 50:
        color = "yellow"
    else:
        color = "cyan"

    text = Text()
    text.append("[", style="dim")
    text.append("█" * filled, style=color)
    text.append("░" * empty, style="dim")
    text.append("] ", style="dim")
    text.append(f"{percent}%", style=f"bold {color}")
    return text


def create_session_progress_bar(session: StudySession) -> Text:
    """Renders: "Card 3/10 [====......] 20%"."""
    text = Text()
    text.append(f"Card {min(session.index + 1, session.total)}/{session.total} ", style="bold")
    text.append_text(create_bar(session.progress_percent))
    return text


def create_deck_table(store: FlashcardStore, decks: list[Deck], title: str = "Your Decks") -> Table:
    table = Table(title=title)
    table.add_column("", justify="center")
    table.add_column("Deck", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Mastery", justify="right")
    table.add_column("ID", style="dim")

    for deck in decks:
        name = Text(deck.name, style=f"bold {color_style(deck.color)}".strip())
        if store.selected_deck_id == deck.id:
            name.append(" *", style="bold")
        table.add_row(
            deck.emoji,
            name,
            str(store.count_cards_in_deck(deck.id)),
            f"{store.mastery_percent(deck.id)}%",
            deck.id,
        )
    return table


def create_card_table(cards: list[Card], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Front", style="cyan", max_width=40)
    table.add_column("Back", style="green", max_width=40)
    table.add_column("Difficulty")
    table.add_column("Reviews", justify="right")
    table.add_column("ID", style="dim")

    for card in cards:
        table.add_row(
            truncate(card.front),
            truncate(card.back),
            difficulty_badge(card.difficulty),
            str(card.review_count),
            card.id,
        )
    return table


def create_stats_panel(store: FlashcardStore) -> Panel:
    """Totals plus a difficulty breakdown across all cards."""
    stats = store.stats()
    content = Text()
    content.append(f"  Decks:     {stats['total_decks']}\n", style="bold")
    content.append(f"  Cards:     {stats['total_cards']}\n", style="bold")
    content.append(f"  Mastered:  {stats['mastered']}\n", style="green")
    content.append(f"  Sessions:  {stats['total_sessions']}\n\n", style="cyan")

    for difficulty in (Difficulty.NEW, Difficulty.HARD, Difficulty.MEDIUM, Difficulty.EASY):
        row = stats["difficulty"][difficulty.value]
        content.append(f"  {difficulty.value:<7}", style=DIFFICULTY_STYLES[difficulty])
        content.append(f"{row['count']:>4}  ")
        content.append_text(create_bar(row["percent"]))
        content.append("\n")

    return Panel(
        content,
        title="[bold cyan]STATS[/bold cyan]",
        border_style="cyan",
        padding=(1, 2),
    )


def create_palette_table(emojis: list[str], colors: list[str]) -> Table:
    table = Table(title="Deck Palette")
    table.add_column("Emoji", justify="center")
    table.add_column("Color")

    for i in range(max(len(emojis), len(colors))):
        emoji = emojis[i] if i < len(emojis) else ""
        color = Text(colors[i], style=color_style(colors[i])) if i < len(colors) else Text("")
        table.add_row(emoji, color)
    return table


def create_study_card_panel(session: StudySession, store: FlashcardStore | None = None) -> Panel:
    """The current card, showing the back once it has been flipped."""
    card = session.current_card
    content = Text()
    content.append_text(create_session_progress_bar(session))
    content.append("\n\n")

    if card is None:
        content.append("No card.", style="dim")
        return Panel(content, border_style="dim")

    deck = store.get_deck(card.deck_id) if store is not None else None
    if deck is not None:
        content.append(f"{deck.emoji} {deck.name}  ", style="dim")
    content.append_text(difficulty_badge(card.difficulty))
    content.append("\n\n")

    content.append("Front:\n", style="dim")
    content.append(f"  {card.front}", style="bold white")

    if session.flipped:
        content.append("\n\n")
        content.append("Back:\n", style="dim")
        content.append(f"  {card.back}", style="bold green")
        title = "[bold bright_blue]ANSWER[/bold bright_blue]"
    else:
        title = "[bold bright_blue]QUESTION[/bold bright_blue]"

    return Panel(
        content,
        title=title,
        border_style="bright_blue",
        padding=(1, 2),
    )


def create_session_complete_panel(session: StudySession) -> Panel:
    """Create a session summary panel."""
    content = Text()
    content.append("ACCURACY\n", style="bold")
    content.append("  ")
    content.append_text(create_bar(session.accuracy, width=30))
    content.append("\n\n")
    content.append(f"  Cards studied: {session.index}\n", style="bold")
    content.append(f"  Correct: {session.correct}", style="green")
    content.append(f"  Wrong: {session.wrong}\n", style="red")

    return Panel(
        content,
        title="[bold cyan]SESSION COMPLETE[/bold cyan]",
        border_style="cyan",
        box=box.DOUBLE,
        padding=(1, 2),
    )


def create_study_commands_panel() -> Panel:
    """Create a small panel showing available study keys."""
    content = Text()
    content.append("space", style="cyan")
    content.append(" flip  ", style="dim")
    content.append("1", style="red")
    content.append(" hard  ", style="dim")
    content.append("2", style="yellow")
    content.append(" medium  ", style="dim")
    content.append("3", style="green")
    content.append(" easy  ", style="dim")
    content.append(RESTART_KEY, style="cyan")
    content.append(" restart  ", style="dim")
    content.append(QUIT_KEY, style="cyan")
    content.append(" quit", style="dim")
    return Panel(content, border_style="dim", box=box.ROUNDED, padding=(0, 1))


def build_study_key_bindings() -> KeyBindings:
    """Single keypresses that end the prompt immediately."""
    kb = KeyBindings()

    def _bind(key: str, result: str) -> None:
        @kb.add(key)
        def _(event) -> None:
            event.app.exit(result=result)

    _bind(FLIP_KEY, FLIP_KEY)
    for key in (*KEY_RATINGS, RESTART_KEY, QUIT_KEY):
        _bind(key, key)
    _bind("c-c", QUIT_KEY)
    return kb


def create_study_prompt_session() -> PromptSession:
    return PromptSession(key_bindings=build_study_key_bindings(), style=PROMPT_STYLE)


def read_key(prompt_session: PromptSession, message: str) -> str:
    """Wait for one study key. Ctrl-C and Ctrl-D quit."""
    try:
        answer = prompt_session.prompt([("class:prompt", message)])
    except (KeyboardInterrupt, EOFError):
        return QUIT_KEY
    if not answer:
        return ""
    # Typed text submitted with Enter: honour its first key
    return answer if answer == FLIP_KEY else answer.strip()[:1].lower()


def run_study_loop(console: Console, app: AppState, prompt_session: PromptSession) -> None:
    """Run the flip-and-rate loop until the user quits.

    The session must already be started.
    """
    session = app.session
    console.print()
    console.print(create_study_commands_panel())
    console.print()

    while session.state != SessionState.IDLE:
        if session.is_complete:
            console.print(create_session_complete_panel(session))
            key = read_key(prompt_session, "r to study again, q to finish: ")
            if key == RESTART_KEY:
                session.restart()
                continue
            session.exit()
            break

        console.print(create_study_card_panel(session, app.store))
        prompt = "Rate 1/2/3: " if session.flipped else "Press space to flip: "
        key = read_key(prompt_session, prompt)

        if key == QUIT_KEY:
            console.print("[dim]Ending study session...[/dim]")
            session.exit()
            break
        if key == RESTART_KEY:
            session.restart()
            console.print("[dim]Queue reshuffled.[/dim]")
            continue
        if not handle_key(session, key) and key in KEY_RATINGS:
            console.print("[dim]Flip the card first (space).[/dim]")

    console.print()
