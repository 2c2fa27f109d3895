"""Main Textual application for markdeck."""

from textual.app import App

from markdeck.errors import StoreError
from markdeck.models import Project
from markdeck.parser import parse_project
from markdeck.store import FileStore
from markdeck.ui.board import BoardScreen
from markdeck.ui.card import CardWidget
from markdeck.writer import serialize_project


class MarkdeckApp(App):
    """Terminal viewer and editor for a STATUS.md board."""

    TITLE = "markdeck"
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, store: FileStore):
        super().__init__()
        self.store = store
        self.project: Project | None = None
        self.revision: str | None = None
        self.dirty = False

    def load(self) -> None:
        """Read and parse the status file. Raises StoreError."""
        snapshot = self.store.load()
        self.project = parse_project(snapshot.text)
        self.revision = snapshot.revision
        self.dirty = False

    def on_mount(self) -> None:
        if self.project is None:
            self.load()
        self.push_screen(BoardScreen())

    def save(self) -> bool:
        """Write the board back and re-parse what was written."""
        text = serialize_project(self.project)
        try:
            self.revision = self.store.save(text, self.revision)
        except StoreError as e:
            self.notify(str(e), title="Save failed", severity="error")
            return False
        self.project = parse_project(text)
        self.dirty = False
        return True

    async def action_save(self) -> None:
        if not self.dirty:
            self.notify("No changes")
            return
        focused = self.focused
        card_id = focused.card.id if isinstance(focused, CardWidget) else None
        if self.save() and isinstance(self.screen, BoardScreen):
            await self.screen.rebuild(card_id)
            self.notify(f"Saved {self.store.path.name}")

    def action_quit(self) -> None:
        """Save and quit. Stays open if the save fails."""
        if self.dirty and not self.save():
            return
        self.exit()
