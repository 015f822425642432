"""Textual-powered interactive Crazy Eights interface."""

from __future__ import annotations

import logging
import random
from contextlib import suppress
from dataclasses import dataclass
from typing import Callable, Sequence

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual import events, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Footer, Header, OptionList, Static
from textual.widgets.option_list import Option

from ... import scoreboard
from ...cards import Card, Suit
from ...engine import CrazyEightsEngine
from ...rules import IllegalAction
from ...state import GameConfig, GameSnapshot, Phase, Side
from ..render import format_card, format_suit, render_state

MAX_EVENT_LINES = 18

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _TimerHandle:
    timer: Timer

    def cancel(self) -> None:
        self.timer.stop()


class TimerScheduler:
    """Adapt :meth:`App.set_timer` to the engine's scheduler interface."""

    def __init__(self, app: App) -> None:
        self.app = app

    def __call__(self, delay: float, callback: Callable[[], None]) -> _TimerHandle:
        return _TimerHandle(self.app.set_timer(delay, callback))


class EventLog(Static):
    """Simple rolling log rendered inside a panel."""

    lines: reactive[tuple[str, ...]] = reactive((), init=False)

    def on_mount(self) -> None:  # pragma: no cover - widget lifecycle glue
        self._refresh()

    def add(self, message: str) -> None:
        log = list(self.lines)
        log.append(message)
        self.lines = tuple(log[-MAX_EVENT_LINES:])

    def watch_lines(self, value: tuple[str, ...]) -> None:
        self._refresh(value)

    def _refresh(self, lines: tuple[str, ...] | None = None) -> None:
        content = Table.grid(padding=(0, 1))
        content.expand = True
        content.add_column(justify="left")
        rows = lines if lines is not None else self.lines
        if rows:
            for line in rows:
                content.add_row(Text.from_markup(line))
        else:
            content.add_row(Text.from_markup("[dim]Event log will appear here[/dim]"))
        self.update(Panel(content, title="Events", border_style="magenta"))


class InfoPanel(Static):
    """Wrapper that expects ``update_panel`` calls with Rich renderables."""

    def update_panel(self, title: str, body) -> None:
        self.update(Panel(body, title=title, border_style="cyan"))


class ScorePanel(Static):
    """Displays the session's running totals."""

    def update_scores(self, history: scoreboard.MatchHistory) -> None:
        table = Table(box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("Seat", justify="left")
        table.add_column("Wins", justify="right")
        for total in history.totals():
            label = "You" if total.side is Side.PLAYER else "Opponent"
            table.add_row(label, str(total.wins))
        table.add_row("[dim]Games[/dim]", str(len(history.games)))
        self.update(Panel(table, title="Session", border_style="bright_blue"))


class StatusStrip(Static):
    """Single line status helper."""

    message: reactive[str] = reactive("", init=False)

    def watch_message(self, value: str) -> None:
        self.update(Panel(Text.from_markup(value or "[dim]Ready[/dim]"), border_style="green"))


class ActionPalette(OptionList):
    """Interactive list used for card, draw and suit selection."""

    class Choice(Message):
        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def __init__(self, entries: Sequence[str]) -> None:
        options = [
            Option(f"[bold]{idx + 1}[/bold] {entry}", id=str(idx))
            for idx, entry in enumerate(entries)
        ]
        super().__init__(*options)
        if options:
            self.highlighted = 0

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:  # pragma: no cover - Textual glue
        event.stop()
        option_id = event.option.id
        if option_id is None:
            return
        self.post_message(self.Choice(int(option_id)))

    def on_key(self, event: events.Key) -> None:  # pragma: no cover - driven by UI interaction
        if event.key.isdigit() and event.key != "0":
            index = int(event.key) - 1
            if 0 <= index < self.option_count:
                self.highlighted = index
                self.post_message(self.Choice(index))
                event.stop()


@dataclass(frozen=True, slots=True)
class _Choice:
    """Entry offered to the player in the action palette."""

    kind: str  # "play", "draw" or "suit"
    card_id: str | None = None
    suit: Suit | None = None


def _choices_for(snapshot: GameSnapshot) -> list[_Choice]:
    if snapshot.phase is not Phase.PLAYING or snapshot.turn is not Side.PLAYER:
        return []
    if snapshot.awaiting_suit:
        return [_Choice("suit", suit=suit) for suit in Suit]
    choices = [_Choice("play", card_id=card_id) for card_id in snapshot.playable]
    choices.append(_Choice("draw"))
    return choices


def _describe_choice(choice: _Choice, snapshot: GameSnapshot) -> str:
    if choice.kind == "suit" and choice.suit is not None:
        return f"Choose {format_suit(choice.suit)}"
    if choice.kind == "play" and choice.card_id is not None:
        card = Card.from_id(choice.card_id)
        suffix = " (wild)" if card.is_wild else ""
        return f"Play {format_card(card)}{suffix}"
    if snapshot.draw_pile_count:
        return f"Draw a card ({snapshot.draw_pile_count} left)"
    return "Draw (pile empty, skip turn)"


class CrazyEightsApp(App):
    """Textual Crazy Eights game UI."""

    CSS = """
    Screen {
        layout: vertical;
        height: 100%;
    }

    #main {
        layout: horizontal;
        height: 1fr;
    }

    #left, #right {
        layout: vertical;
        width: 1fr;
        height: 1fr;
        padding: 0 1;
        overflow-y: auto;
    }

    #actions {
        layout: vertical;
        min-height: 6;
    }

    ActionPalette {
        border: heavy $accent;
        width: 100%;
        height: auto;
        max-height: 16;
    }

    InfoPanel, EventLog, ScorePanel {
        width: 100%;
        min-height: 6;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit"),
        Binding("n", "new_game", "New game"),
        Binding("h", "toggle_reveal", "Reveal opponent"),
    ]

    def __init__(self, *, config: GameConfig, reveal: bool = False) -> None:
        super().__init__()
        if config.seed is None:
            config.seed = random.SystemRandom().randrange(0, 2**63)
        self.config = config
        self.reveal_enabled = reveal
        self.history = scoreboard.MatchHistory()
        self.engine: CrazyEightsEngine | None = None
        self.snapshot: GameSnapshot | None = None
        self._choices: list[_Choice] = []
        self._recorded_games: set[int] = set()
        self._last_message = ""

        self.status_strip: StatusStrip | None = None
        self.table_panel: InfoPanel | None = None
        self.event_log: EventLog | None = None
        self.score_panel: ScorePanel | None = None
        self.actions_container: Vertical | None = None
        self.action_prompt: Static | None = None
        self._active_palette: ActionPalette | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        self.status_strip = StatusStrip(id="status")
        yield self.status_strip

        self.table_panel = InfoPanel(id="table")
        self.table_panel.update_panel("Table", Text.from_markup("[dim]Shuffling…[/dim]"))
        self.action_prompt = Static(Text.from_markup("[dim]Waiting for turn…[/dim]"), id="actions-prompt")
        self.actions_container = Vertical(self.action_prompt, id="actions")
        left = Vertical(self.table_panel, self.actions_container, id="left")

        self.event_log = EventLog(id="events")
        self.score_panel = ScorePanel(id="scores")
        self.score_panel.update_scores(self.history)
        right = Vertical(self.event_log, self.score_panel, id="right")

        yield Horizontal(left, right, id="main")
        yield Footer()

    async def on_mount(self) -> None:
        self.engine = CrazyEightsEngine(
            self.config,
            rng=random.Random(self.config.seed),
            scheduler=TimerScheduler(self),
        )
        self.engine.subscribe(self._on_engine_update)
        await self._start_game()

    async def action_new_game(self) -> None:
        await self._start_game()

    async def action_toggle_reveal(self) -> None:
        self.reveal_enabled = not self.reveal_enabled
        if self.snapshot is not None:
            await self._show(self.snapshot)

    async def _start_game(self) -> None:
        if self.engine is None:
            return
        snapshot = self.engine.new_game()
        if self.event_log:
            top = format_card(snapshot.top_discard) if snapshot.top_discard else "—"
            self.event_log.add(f"[bold cyan]Game {snapshot.game_number}[/bold cyan] starts on {top}")
        await self._show(snapshot)

    def _on_engine_update(self, snapshot: GameSnapshot) -> None:
        self.run_worker(self._show(snapshot), group="ui", exclusive=True)

    async def _show(self, snapshot: GameSnapshot) -> None:
        self.snapshot = snapshot
        if self.event_log and snapshot.message and snapshot.message != self._last_message:
            self.event_log.add(snapshot.message)
        self._last_message = snapshot.message
        self._set_status(snapshot.message)

        if self.table_panel:
            self.table_panel.update_panel(
                "Table",
                render_state(snapshot, reveal_opponent=self.reveal_enabled or snapshot.phase is Phase.GAME_OVER),
            )
        self.title = f"Crazy Eights • Game {snapshot.game_number}"

        if snapshot.phase is Phase.GAME_OVER:
            self._record_result(snapshot)
            await self._dismiss_palette()
            self._set_status(f"{snapshot.message} Press [bold]N[/bold] for a new game or [bold]Q[/bold] to quit.")
            return

        choices = _choices_for(snapshot)
        if not choices:
            await self._dismiss_palette()
            return
        prompt = "Choose the next suit" if snapshot.awaiting_suit else "Play a card or draw"
        await self._mount_palette(choices, prompt, snapshot)

    def _record_result(self, snapshot: GameSnapshot) -> None:
        if snapshot.game_number in self._recorded_games:
            return
        self._recorded_games.add(snapshot.game_number)
        self.history.record(scoreboard.GameSummary.from_snapshot(snapshot))
        if self.score_panel:
            self.score_panel.update_scores(self.history)

    async def _mount_palette(self, choices: list[_Choice], prompt: str, snapshot: GameSnapshot) -> None:
        await self._dismiss_palette()
        self._choices = choices
        palette = ActionPalette([_describe_choice(choice, snapshot) for choice in choices])
        self._active_palette = palette
        if self.actions_container is not None:
            if self.action_prompt:
                self.action_prompt.update(Text.from_markup(f"[bold]{prompt}[/bold] — use arrows or number keys"))
            await self.actions_container.mount(palette)
            palette.focus()

    async def _dismiss_palette(self) -> None:
        palette = self._active_palette
        self._active_palette = None
        self._choices = []
        if palette is None:
            return
        with suppress(Exception):  # pragma: no cover - widget may already be gone
            await palette.remove()
        if self.action_prompt:
            self.action_prompt.update(Text.from_markup("[dim]Waiting for turn…[/dim]"))

    @on(ActionPalette.Choice)
    def _on_palette_choice(self, message: ActionPalette.Choice) -> None:
        message.stop()
        if not (0 <= message.index < len(self._choices)):
            return
        choice = self._choices[message.index]
        self.run_worker(self._apply_choice(choice), group="input", exclusive=True)

    async def _apply_choice(self, choice: _Choice) -> None:
        if self.engine is None:
            return
        try:
            if choice.kind == "suit" and choice.suit is not None:
                snapshot = self.engine.resolve_wild(choice.suit)
            elif choice.kind == "play" and choice.card_id is not None:
                snapshot = self.engine.player_play(choice.card_id)
            else:
                snapshot = self.engine.player_draw()
        except IllegalAction as exc:
            logger.warning("rejected action %s: %s", choice, exc.reason)
            self._set_status(f"[red]{exc.reason}[/red]")
            return
        await self._show(snapshot)

    def _set_status(self, message: str) -> None:
        if self.status_strip:
            self.status_strip.message = message


def run_textual_app(*, config: GameConfig, reveal: bool = False) -> None:
    """Launch the Textual UI."""

    app = CrazyEightsApp(config=config, reveal=reveal)
    app.run()
