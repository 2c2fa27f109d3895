"""Card widget for the markdeck UI."""

from rich.text import Text
from textual.widgets import Static

from markdeck.markers import status_to_marker
from markdeck.models import Card


def widget_id(card_id: str) -> str:
    """DOM id for a card (card ids may start with a digit)."""
    return f"card-{card_id}"


def card_text(card: Card, lane_title: str) -> Text:
    """Marker, title and lane of a card."""
    text = Text()
    text.append(status_to_marker(card.status, card.blocked, card.original_format) + " ")
    text.append(card.title, style="bold")
    if card.description:
        text.append(" ≡", style="dim")
    text.append("\n" + lane_title, style="dim italic")
    return text


class CardWidget(Static, can_focus=True):
    """A single card in a status column."""

    DEFAULT_CSS = """
    CardWidget {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
    }
    CardWidget:focus {
        background: $primary 30%;
    }
    CardWidget.blocked {
        border-left: tall $error;
    }
    """

    def __init__(self, card: Card, lane_title: str):
        super().__init__(
            card_text(card, lane_title),
            id=widget_id(card.id),
            classes="blocked" if card.blocked else None,
        )
        self.card = card
        self.lane_title = lane_title
