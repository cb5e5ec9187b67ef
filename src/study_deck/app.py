"""Interactive CLI application."""
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from study_deck.catalog import load_catalog
from study_deck.config import load_settings
from study_deck.dashboard import get_progress_color
from study_deck.deck import cards_left
from study_deck.errors import CatalogMissingError, StudyDeckError
from study_deck.progress import CANCELLED, COMPLETED, INACTIVE, remaining_cards
from study_deck.session import StudySession

console = Console()
logger = logging.getLogger(__name__)

PHASE_STYLES = {"scheduled": "cyan", "due": "bold red", "overdue": "bold red"}


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def confirm(message: str) -> bool:
    return Confirm.ask(f"[green]{message}[/green]")


def notify(message: str) -> None:
    console.print(f"[red]{message}[/red]")


def show_welcome():
    console.print(Panel(
        "[bold]Study Deck[/bold]\n[dim]Weighted topic batches with review deadlines[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu(session: StudySession):
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("batch", "Current batch (draws one if none is active)"),
        ("toggle", "Tick or untick a topic"),
        ("finish", "Mark the batch complete"),
        ("syllabus", "Progress per subject and topic"),
        ("stats", "Cycle totals"),
        ("reset", "Start a fresh cycle"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")
    console.print(f"\n[dim]Cards remaining in deck: {cards_left(session.state)}[/dim]")


def render_batch(session: StudySession):
    state = session.state
    if not state.active:
        console.print("[yellow]No active batch. Use 'batch' to draw one.[/yellow]")
        return
    status = session.countdown()
    if status is not None:
        style = PHASE_STYLES[status["phase"]]
        console.print(Panel(
            f"[{style}]{status['text']}[/{style}]",
            title=status["badge"], border_style=style.split()[-1],
        ))
    table = Table(title="Current Batch")
    table.add_column("#", justify="right")
    table.add_column("Done")
    table.add_column("Subject", style="cyan")
    table.add_column("Topic")
    table.add_column("Weight", justify="right")
    for i, card in enumerate(state.current_batch, 1):
        table.add_row(
            str(i),
            "[green]✓[/green]" if card.done else "[dim]·[/dim]",
            card.subject,
            f"[dim]{card.name}[/dim]" if card.done else card.name,
            f"W{card.weight}",
        )
    console.print(table)
    if session.is_batch_complete():
        console.print("[green]All topics done. Use 'finish' to close the batch.[/green]")
    else:
        left = len(remaining_cards(state))
        console.print(f"[dim]{left} topic(s) left before you can finish.[/dim]")


def cmd_batch(session: StudySession):
    if not session.state.active:
        deadline = session.draw_new_batch()
        if deadline is not None:
            console.print(f"[green]New batch drawn. {session.state.range_str}[/green]")
    render_batch(session)


def cmd_toggle(session: StudySession):
    batch = session.state.current_batch
    if not session.state.active or not batch:
        console.print("[yellow]No active batch.[/yellow]")
        return
    render_batch(session)
    number = IntPrompt.ask("Topic number", choices=[str(i) for i in range(1, len(batch) + 1)])
    card = session.toggle_topic(number - 1)
    if card is not None:
        mark = "done" if card.done else "not done"
        console.print(f"[cyan]{card.subject}[/cyan]: {card.name} marked {mark}")


def cmd_finish(session: StudySession):
    outcome = session.complete_batch()
    if outcome == COMPLETED:
        console.print("[green]Batch complete! Draw the next one with 'batch'.[/green]")
    elif outcome == CANCELLED:
        console.print("[dim]Batch left open.[/dim]")
    elif outcome == INACTIVE:
        console.print("[yellow]No active batch.[/yellow]")


def cmd_syllabus(session: StudySession):
    for subject in session.subject_progress():
        color = get_progress_color(subject["percent"])
        table = Table(title=f"{subject['subject']} [{color}]{subject['percent']}% Done[/{color}]")
        table.add_column("Topic")
        table.add_column("Weight", justify="right")
        table.add_column("Left", justify="right")
        table.add_column("Progress", justify="right")
        for topic in subject["topics"]:
            t_color = get_progress_color(topic["percent"])
            table.add_row(
                topic["name"],
                str(topic["weight"]),
                str(topic["left_in_deck"]),
                f"[{t_color}]{topic['percent']}%[/{t_color}]",
            )
        console.print(table)


def cmd_stats(session: StudySession):
    stats = session.aggregate_stats()
    color = get_progress_color(stats["percent"])
    bar_filled = int(stats["percent"] / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(Panel(
        f"Cycle progress: [bold]{stats['percent']}%[/bold] {bar}\n"
        f"Drawn: [bold]{stats['completed']}[/bold]  |  "
        f"Left: [bold]{stats['current_cards_left']}[/bold]  |  "
        f"Cycle size: [bold]{stats['total_cards_in_cycle']}[/bold]",
        title="Stats", border_style="blue",
    ))


def cmd_reset(session: StudySession):
    if session.reset_progress():
        console.print("[green]Progress reset. Fresh decks are ready.[/green]")


COMMANDS = {
    "batch": cmd_batch,
    "toggle": cmd_toggle,
    "finish": cmd_finish,
    "syllabus": cmd_syllabus,
    "stats": cmd_stats,
    "reset": cmd_reset,
}


def main():
    settings = load_settings()
    setup_logging(settings.log_level)
    try:
        catalog = load_catalog(settings.catalog_path)
    except CatalogMissingError as e:
        console.print(f"[bold red]ERROR: {e}[/bold red]")
        sys.exit(1)

    try:
        session = StudySession(
            catalog,
            db_path=settings.db_path,
            storage_key=settings.storage_key,
            confirm=confirm,
            notify=notify,
        )
    except StudyDeckError as e:
        console.print(f"[bold red]ERROR: {e}[/bold red]")
        sys.exit(1)
    show_welcome()
    render_batch(session)

    while True:
        show_menu(session)
        choice = Prompt.ask("\n[bold]>[/bold]", default="batch").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Keep going![/dim]")
                break
            command = COMMANDS.get(choice)
            if command is None:
                console.print("[red]Unknown command. Try again.[/red]")
            else:
                command(session)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except StudyDeckError as e:
            console.print(f"[red]Error: {e}[/red]")
        except Exception as e:
            logger.exception("Command %r failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
