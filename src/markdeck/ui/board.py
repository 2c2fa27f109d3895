"""Board screen showing status columns and notes."""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Footer, Static

from markdeck.board import cards_in, columns_for_mode, shift_status, toggle_blocked, upgrade_to_full_mode
from markdeck.errors import MarkdeckError
from markdeck.models import FULL, Project
from markdeck.ui.card import CardWidget, widget_id
from markdeck.ui.column import StatusColumn


def header_text(project: Project, dirty: bool = False) -> Text:
    """Board title line: title, version, date and mode."""
    meta = project.metadata
    text = Text(meta.title, style="bold")
    if meta.version:
        text.append(f"  v{meta.version}", style="dim")
    if meta.last_updated:
        text.append(f"  updated {meta.last_updated}", style="dim")
    text.append(f"  [{project.board_mode} mode]")
    if dirty:
        text.append("  *", style="bold yellow")
    return text


def notes_text(project: Project) -> Text:
    text = Text()
    for note in project.notes:
        title = f"{note.section} / {note.title}" if note.section else note.title
        text.append(title + "\n", style="bold")
        text.append(note.content + "\n\n")
    return text


class BoardScreen(Screen):
    """Main board screen: one column per status the board mode offers."""

    DEFAULT_CSS = """
    #board-header {
        height: 1;
        padding: 0 1;
        background: $boost;
    }
    #board-body {
        height: 1fr;
    }
    #notes {
        width: 32;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    BINDINGS = [
        Binding("left", "shift(-1)", "Move left"),
        Binding("right", "shift(1)", "Move right"),
        Binding("up", "focus_card(-1)", "Previous", show=False),
        Binding("down", "focus_card(1)", "Next", show=False),
        ("b", "toggle_blocked", "Blocked"),
        ("u", "upgrade", "Full mode"),
        ("ctrl+s", "app.save", "Save"),
    ]

    def compose(self) -> ComposeResult:
        project = self.app.project
        lanes = sorted(project.swimlanes, key=lambda s: s.order)
        lane_titles = {lane.id: lane.title for lane in lanes}

        yield Static(header_text(project, self.app.dirty), id="board-header")
        with Horizontal(id="board-body"):
            for status in columns_for_mode(project.board_mode):
                cards = [card for lane in lanes for card in cards_in(project, lane.id, status)]
                yield StatusColumn(status, cards, lane_titles)
            if project.notes:
                with Vertical(id="notes"):
                    yield Static(notes_text(project))
        yield Footer()

    def on_mount(self) -> None:
        self.call_after_refresh(self.focus_card_id, None)

    def focus_card_id(self, card_id: str | None) -> None:
        """Focus the card with card_id, else the first card."""
        widgets = list(self.query(CardWidget))
        for widget in widgets:
            if widget.id == widget_id(card_id or ""):
                widget.focus()
                return
        if widgets:
            widgets[0].focus()

    def _focused_card(self) -> CardWidget | None:
        focused = self.focused
        return focused if isinstance(focused, CardWidget) else None

    async def rebuild(self, card_id: str | None = None) -> None:
        """Recompose from the app's current project, keeping focus on card_id."""
        await self.recompose()
        self.call_after_refresh(self.focus_card_id, card_id)

    async def _mutate(self, action, card_id: str | None) -> None:
        try:
            action(self.app.project)
        except MarkdeckError as e:
            self.notify(str(e), severity="warning")
            return
        self.app.dirty = True
        await self.rebuild(card_id)

    def action_focus_card(self, direction: int) -> None:
        widgets = list(self.query(CardWidget))
        if not widgets:
            return
        current = self._focused_card()
        index = widgets.index(current) + direction if current in widgets else 0
        widgets[index % len(widgets)].focus()

    async def action_shift(self, direction: int) -> None:
        widget = self._focused_card()
        if widget is not None:
            card_id = widget.card.id
            await self._mutate(lambda project: shift_status(project, card_id, direction), card_id)

    async def action_toggle_blocked(self) -> None:
        widget = self._focused_card()
        if widget is None:
            return
        if self.app.project.board_mode != FULL:
            self.notify("Blocked cards need full mode (press u)", severity="warning")
            return
        card_id = widget.card.id
        await self._mutate(lambda project: toggle_blocked(project, card_id), card_id)

    async def action_upgrade(self) -> None:
        if self.app.project.board_mode == FULL:
            return
        widget = self._focused_card()
        self.app.project = upgrade_to_full_mode(self.app.project)
        self.app.dirty = True
        await self.rebuild(widget.card.id if widget else None)
