"""Card mutations and board-mode operations.

Changes to a card's own fields (status, blocked, title, description) are
made on the parsed model and written back by the serializer. Adding,
deleting and moving cards change line numbering, so those are done as
edits to the serialized text followed by a fresh parse; they return a new
Project and leave the one passed in untouched.
"""

import dataclasses
from datetime import date

from markdeck.errors import CardNotFoundError, DescriptionError, LaneNotFoundError, MarkerError
from markdeck.ids import slugify
from markdeck.markers import NOTATIONS
from markdeck.models import CHECKBOX, DONE, EMOJI, FULL, SIMPLE, STATUSES, TODO, Card, Project, Swimlane
from markdeck.parser import (
    BULLET,
    LANE_HEADING,
    description_block,
    detect_board_mode,
    extract_links,
    indent_of,
    parse_project,
    uninterpreted_lines,
)
from markdeck.writer import (
    CardSegment,
    description_lines,
    render_card,
    row_forms,
    serialize_project,
    validate_description,
)

__all__ = [
    "add_card",
    "cards_in",
    "columns_for_mode",
    "delete_card",
    "detect_board_mode",
    "find_card",
    "find_lane",
    "lane_summary",
    "move_card",
    "shift_status",
    "toggle_blocked",
    "update_card",
    "upgrade_to_full_mode",
]


def find_card(project: Project, card_id: str) -> Card:
    """Lookup card by ID. Raises CardNotFoundError."""
    for card in project.cards:
        if card.id == card_id:
            return card
    raise CardNotFoundError(card_id)


def find_lane(project: Project, lane_id: str) -> Swimlane:
    """Lookup swimlane by ID. Raises LaneNotFoundError."""
    for lane in project.swimlanes:
        if lane.id == lane_id:
            return lane
    raise LaneNotFoundError(lane_id)


def columns_for_mode(mode: str) -> tuple[str, ...]:
    """Statuses a board in the given mode shows as columns."""
    return (TODO, DONE) if mode == SIMPLE else STATUSES


def cards_in(project: Project, lane_id: str, status: str) -> list[Card]:
    """Cards of one lane with one status, in document order."""
    cards = [c for c in project.cards if c.lane_id == lane_id and c.status == status]
    return sorted(cards, key=lambda c: c.original_line)


def lane_summary(project: Project) -> list[dict]:
    """Per-lane card counts by status, plus blocked count."""
    items = []
    for lane in sorted(project.swimlanes, key=lambda s: s.order):
        cards = [c for c in project.cards if c.lane_id == lane.id]
        item = {"id": lane.id, "title": lane.title, "cards": len(cards)}
        for status in STATUSES:
            item[status] = sum(1 for c in cards if c.status == status)
        item["blocked"] = sum(1 for c in cards if c.blocked)
        items.append(item)
    return items


def _clean_title(title: str) -> str:
    title = " ".join(title.split())
    if not title:
        raise ValueError("Card title cannot be empty")
    return title


def _clean_description(description: str | None) -> str | None:
    return "\n".join(description_lines(description)) or None


def _check_status(status: str) -> None:
    if status not in STATUSES:
        raise MarkerError(f"Unknown status '{status}'")


def _block_rows(project: Project, card: Card) -> list[tuple[int, str]]:
    lines = project.raw_markdown.split("\n")
    rows, _ = description_block(lines, card.original_line, indent_of(lines[card.original_line]))
    return rows


def nested_cards(project: Project, card: Card) -> list[tuple[str, Card]]:
    """Cards written inside card's description, with the row text each was read from."""
    by_line = {c.original_line: c for c in project.cards}
    return [(text, by_line[j]) for j, text in _block_rows(project, card) if j in by_line]


def parent_card(project: Project, card: Card) -> Card | None:
    """The card whose description block holds card, or None."""
    for other in project.cards:
        if other.original_line >= card.original_line:
            break
        if any(j == card.original_line for j, _ in _block_rows(project, other)):
            return other
    return None


def _check_description(project: Project, card: Card, description: str | None) -> None:
    """Raise DescriptionError if description cannot be written for card.

    A nested card's description belongs to its parent's block. Status
    bullets are only allowed where they are rows of cards already nested
    in this one.
    """
    if parent_card(project, card) is not None:
        raise DescriptionError(
            f"Card '{card.id}' is written inside another card's description; edit that card's description instead"
        )
    allowed = set().union(*(row_forms(text, child) for text, child in nested_cards(project, card)))
    issues = validate_description(description or "", allowed)
    if issues:
        raise DescriptionError("; ".join(issues))


def update_card(
    project: Project,
    card_id: str,
    *,
    status: str | None = None,
    blocked: bool | None = None,
    title: str | None = None,
    description: str | None = None,
) -> Card:
    """Change fields of a card in place and return it.

    A done card is always unblocked. Raises MarkerError, leaving the card
    unchanged, if the result cannot be written in the card's notation, and
    DescriptionError if the new description would add cards or belongs to
    a nested card.
    """
    card = find_card(project, card_id)

    new_status = card.status if status is None else status
    _check_status(new_status)
    new_blocked = card.blocked if blocked is None else bool(blocked)
    if new_status == DONE:
        new_blocked = False
    NOTATIONS[card.original_format].encode(new_status, new_blocked)

    new_title = card.title if title is None else _clean_title(title)
    new_description = card.description if description is None else _clean_description(description)
    if new_description != card.description:
        _check_description(project, card, new_description)

    card.status = new_status
    card.blocked = new_blocked
    card.title = new_title
    card.description = new_description
    card.links = extract_links("\n".join(part for part in (new_title, new_description) if part))
    return card


def shift_status(project: Project, card_id: str, direction: int) -> Card:
    """Move a card one status column left (-1) or right (+1).

    Columns are those of the board's mode; at either end nothing changes.
    """
    card = find_card(project, card_id)
    columns = columns_for_mode(project.board_mode)
    index = columns.index(card.status) if card.status in columns else 0
    target = min(max(index + direction, 0), len(columns) - 1)
    if columns[target] == card.status:
        return card
    return update_card(project, card_id, status=columns[target])


def toggle_blocked(project: Project, card_id: str) -> Card:
    """Flip a card's blocked flag. Done cards stay unblocked."""
    card = find_card(project, card_id)
    if card.status == DONE:
        return card
    return update_card(project, card_id, blocked=not card.blocked)


def upgrade_to_full_mode(project: Project) -> Project:
    """Return a copy of project with every checkbox card switched to emoji notation."""
    cards = [
        dataclasses.replace(
            card,
            links=list(card.links),
            original_format=EMOJI if card.original_format == CHECKBOX else card.original_format,
        )
        for card in project.cards
    ]
    return dataclasses.replace(project, cards=cards, board_mode=FULL)


def _insertion_point(project: Project, lane_id: str) -> tuple[int, str, str]:
    """Where a new card for lane_id goes: (line index, indent, bullet char)."""
    lines = project.raw_markdown.split("\n")

    lane_cards = [c for c in project.cards if c.lane_id == lane_id]
    if lane_cards:
        outer = min(indent_of(lines[c.original_line]) for c in lane_cards)
        last = max(
            (c for c in lane_cards if indent_of(lines[c.original_line]) == outer),
            key=lambda c: c.original_line,
        )
        line = lines[last.original_line]
        _, end = description_block(lines, last.original_line, indent_of(line))
        bullet = BULLET.match(line)
        return end, line[: indent_of(line)], line[indent_of(line)] if bullet else "-"

    skipped = uninterpreted_lines(lines)
    for i, line in enumerate(lines):
        if i in skipped:
            continue
        match = LANE_HEADING.match(line)
        if match and slugify(match.group(2).strip()) == lane_id:
            return i + 1, "", "-"

    end = len(lines) - 1 if lines[-1] == "" else len(lines)
    return end, "", "-"


def add_card(
    project: Project,
    lane_id: str,
    title: str,
    status: str = TODO,
    blocked: bool = False,
    description: str | None = None,
    notation: str | None = None,
    today: date | None = None,
) -> Project:
    """Return a new project with a card appended to the end of a lane.

    The card is written in the board's notation (checkboxes for a simple
    board) unless notation is given. Raises MarkerError if the card's
    state cannot be written in that notation, and DescriptionError
    if the description holds status bullets.
    """
    find_lane(project, lane_id)
    _check_status(status)
    if notation is None:
        notation = CHECKBOX if project.board_mode == SIMPLE else EMOJI

    card = Card(
        id="",
        title=_clean_title(title),
        status=status,
        blocked=bool(blocked) and status != DONE,
        lane_id=lane_id,
        description=_clean_description(description),
        original_format=notation,
    )
    NOTATIONS[notation].encode(card.status, card.blocked)
    issues = validate_description(card.description or "")
    if issues:
        raise DescriptionError("; ".join(issues))

    current = parse_project(serialize_project(project, today))
    index, indent, bullet = _insertion_point(current, lane_id)
    lines = current.raw_markdown.split("\n")
    lines[index:index] = render_card(CardSegment(card=card, indent=indent, bullet=bullet))
    return parse_project("\n".join(lines))


def _locate(project: Project, card_id: str, today: date | None) -> tuple[Project, Card]:
    """Serialize project and find card_id again by the line it was written to."""
    find_card(project, card_id)
    positions: dict[str, int] = {}
    current = parse_project(serialize_project(project, today, positions))
    line = positions.get(card_id)
    for card in current.cards:
        if card.original_line == line:
            return current, card
    raise CardNotFoundError(card_id)


def _cut_block(project: Project, card: Card) -> tuple[list[str], list[str]]:
    lines = project.raw_markdown.split("\n")
    _, end = description_block(lines, card.original_line, indent_of(lines[card.original_line]))
    block = lines[card.original_line : end]
    del lines[card.original_line : end]
    return lines, block


def delete_card(project: Project, card_id: str, today: date | None = None) -> Project:
    """Return a new project without the card, its description or any cards nested in it."""
    current, card = _locate(project, card_id, today)
    lines, _ = _cut_block(current, card)
    return parse_project("\n".join(lines))


def move_card(project: Project, card_id: str, lane_id: str, today: date | None = None) -> Project:
    """Return a new project with the card moved to the end of another lane.

    The card's lines move as written, nested cards included, re-indented
    to sit with the outermost cards of the target lane.
    """
    card = find_card(project, card_id)
    find_lane(project, lane_id)
    if card.lane_id == lane_id:
        return project
    current, located = _locate(project, card_id, today)
    lines, block = _cut_block(current, located)

    removed = parse_project("\n".join(lines))
    index, indent, _ = _insertion_point(removed, lane_id)
    lines = removed.raw_markdown.split("\n")
    strip = indent_of(block[0])
    lines[index:index] = [indent + line[strip:] if line.strip() else line for line in block]
    return parse_project("\n".join(lines))
