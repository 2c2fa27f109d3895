"""Status column widget for the markdeck UI."""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Rule, Static

from markdeck.models import DONE, IN_PROGRESS, TODO, Card
from markdeck.ui.card import CardWidget

STATUS_LABELS = {
    TODO: "TODO",
    IN_PROGRESS: "IN PROGRESS",
    DONE: "DONE",
}


class StatusColumn(Vertical):
    """All cards with one status, across lanes."""

    DEFAULT_CSS = """
    StatusColumn {
        width: 1fr;
        height: 100%;
        padding: 0 1;
        border-right: tall $surface-lighten-1;
    }
    StatusColumn > .column-title {
        width: 100%;
        text-align: center;
        text-style: bold;
    }
    StatusColumn > Rule.-horizontal {
        margin: 0;
    }
    StatusColumn > .column-cards {
        height: 1fr;
        overflow-y: auto;
    }
    """

    def __init__(self, status: str, cards: list[Card], lane_titles: dict[str, str]):
        super().__init__(id=f"column-{status}")
        self.status = status
        self.cards = cards
        self.lane_titles = lane_titles

    def compose(self) -> ComposeResult:
        yield Static(f"{STATUS_LABELS[self.status]} ({len(self.cards)})", classes="column-title")
        yield Rule()
        with Vertical(classes="column-cards"):
            for card in self.cards:
                yield CardWidget(card, self.lane_titles.get(card.lane_id, card.lane_id))
