"""Typer entry-point wiring for the Crazy Eights CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .. import autoplay
from ..state import GameConfig
from .textual import run_textual_app

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_logging(level: str, *, log_file: Path | None = None) -> None:
    """Route engine logs to ``log_file`` when given, otherwise to the console."""

    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"unknown log level '{level}'")

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=numeric, handlers=[handler], force=True)


@app.command()
def play(
    seed: int | None = typer.Option(None, help="Random seed for reproducible games (omit for randomness)."),
    think_delay: float = typer.Option(1.5, min=0.0, help="Seconds the opponent waits before moving."),
    follow_up_delay: float = typer.Option(1.0, min=0.0, help="Seconds before the opponent plays a card it just drew."),
    reveal: bool = typer.Option(False, "--reveal", help="Show the opponent's hand."),
    log_file: Path | None = typer.Option(None, help="Write engine logs to this file."),
    log_level: str = typer.Option("INFO", help="Logging level for --log-file."),
) -> None:
    """Play against the computer in a full-screen terminal UI."""

    if log_file is not None:
        _configure_logging(log_level, log_file=log_file)
    config = GameConfig(
        think_delay=think_delay,
        follow_up_delay=follow_up_delay,
        seed=seed,
    )
    run_textual_app(config=config, reveal=reveal)


@app.command("selfplay")
def selfplay_cli(
    games: int = typer.Option(100, min=1, help="Number of games to simulate."),
    seed: int = typer.Option(123, help="Random seed for the run."),
    turn_limit: int = typer.Option(autoplay.DEFAULT_TURN_LIMIT, min=1, help="Player turns before a game is abandoned."),
    check: bool = typer.Option(False, "--check", help="Verify card conservation after every move."),
    log_level: str = typer.Option("WARNING", help="Console logging level."),
) -> None:
    """Let the opponent policy play both seats and report the results."""

    _configure_logging(log_level)
    report = autoplay.run_selfplay(games, seed=seed, turn_limit=turn_limit, check_invariants=check)

    table = Table(title="Self-play Results", box=box.SIMPLE_HEAVY)
    table.add_column("Seat", justify="center")
    table.add_column("Wins", justify="right")
    table.add_column("Cards left", justify="right")

    for total in report.history.totals():
        table.add_row(total.side.value.title(), str(total.wins), str(total.cards_left))
    console.print(table)

    if report.stalled:
        console.print(f"[yellow]{report.stalled} game(s) stalled after the draw pile ran out.[/yellow]")
    console.print(f"[cyan]{len(report.history.games)} game(s) simulated.[/cyan]")


def main() -> None:
    """Entry-point for ``python -m crazyeights.cli``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
