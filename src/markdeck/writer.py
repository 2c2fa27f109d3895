"""Serialize a Project back to status markdown.

Only card bullets (and their description blocks) are regenerated from
the model, plus the date on "Last Updated:" lines. Every other line is
copied from ``Project.raw_markdown`` unchanged. The document is handled
as a list of segments: runs of verbatim text, and cards anchored to the
line their bullet started on.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date

from markdeck.markers import status_to_marker, starts_with_marker
from markdeck.models import DONE, Card, Project
from markdeck.parser import BULLET, LAST_UPDATED, description_block, indent_of, is_fence

logger = logging.getLogger(__name__)

DESCRIPTION_INDENT = "    "

_MARKER_BULLET = re.compile(r"^([-*])\s+(.*)")


@dataclass
class TextSegment:
    """Lines copied verbatim."""

    lines: list[str] = field(default_factory=list)


@dataclass
class CardSegment:
    """A card bullet plus the description block it replaces."""

    card: Card
    indent: str = ""
    bullet: str = "-"
    eol: str = ""
    rows: list[tuple[int, str]] = field(default_factory=list)
    nested: dict[int, Card] = field(default_factory=dict)


Segment = TextSegment | CardSegment


def format_bullet(card: Card, indent: str = "", bullet: str = "-") -> str:
    """Format a card's bullet line in its own notation.

    A done card is always written unblocked.
    """
    blocked = card.blocked and card.status != DONE
    marker = status_to_marker(card.status, blocked, card.original_format)
    return f"{indent}{bullet} {marker} {card.title}"


def description_lines(description: str | None) -> list[str]:
    """Non-empty, stripped lines of a description."""
    if not description:
        return []
    return [line.strip() for line in description.split("\n") if line.strip()]


def split_segments(project: Project) -> list[Segment]:
    """Split the raw document into text runs and card segments."""
    lines = project.raw_markdown.split("\n")
    by_line = {card.original_line: card for card in project.cards}

    segments: list[Segment] = []
    text: list[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        card = by_line.get(i)
        if card is None:
            text.append(line)
            i += 1
            continue

        if text:
            segments.append(TextSegment(text))
            text = []

        width = indent_of(line)
        bullet = BULLET.match(line)
        rows, end = description_block(lines, i, width)
        segments.append(
            CardSegment(
                card=card,
                indent=line[:width],
                bullet=line[width] if bullet else "-",
                eol="\r" if line.endswith("\r") else "",
                rows=rows,
                nested={j: by_line[j] for j, _ in rows if j in by_line},
            )
        )
        i = end

    if text:
        segments.append(TextSegment(text))
    return segments


def row_forms(text: str, card: Card) -> set[str]:
    """Ways a nested card's row can appear in its parent's description.

    text is the row as it was read; the other form is the row as the
    card would be written now.
    """
    return {text, format_bullet(card, bullet=text[0])}


def render_card(segment: CardSegment, placed: dict[str, int] | None = None) -> list[str]:
    """Lines for one card segment: the bullet, then its description.

    A description line matching a nested card's row is written with that
    card's current marker and title. If placed is given, it receives the
    offset of each nested card's line in the result, by card ID.
    """
    card = segment.card
    lines = [format_bullet(card, segment.indent, segment.bullet) + segment.eol]
    pending = [(row_forms(text, segment.nested[j]), segment.nested[j]) for j, text in segment.rows if j in segment.nested]

    for text in description_lines(card.description):
        for k, (forms, nested) in enumerate(pending):
            if text in forms:
                text = format_bullet(nested, bullet=text[0])
                if placed is not None:
                    placed[nested.id] = len(lines)
                del pending[k]
                break
        lines.append(f"{segment.indent}{DESCRIPTION_INDENT}{text}{segment.eol}")
    return lines


def stamp_last_updated(line: str, today: str) -> str:
    """Replace the date after "Last Updated:" on line, keeping the rest."""
    match = LAST_UPDATED.search(line)
    if not match:
        return line
    return line[: match.start(1)] + today + line[match.end(1) :]


def render_segments(
    segments: list[Segment],
    today: date | None = None,
    positions: dict[str, int] | None = None,
) -> str:
    """Join segments back into a document, stamping "Last Updated:" dates.

    If positions is given, it receives the output line index of every
    card that was written, by card ID.
    """
    stamp = (today or date.today()).isoformat()
    out: list[str] = []
    in_fence = False

    for segment in segments:
        if isinstance(segment, CardSegment):
            placed: dict[str, int] = {}
            lines = render_card(segment, placed)
            if positions is not None:
                positions[segment.card.id] = len(out)
                for card_id, offset in placed.items():
                    positions[card_id] = len(out) + offset
            for line in lines:
                if is_fence(line):
                    in_fence = not in_fence
                out.append(line)
            continue
        for line in segment.lines:
            if is_fence(line):
                in_fence = not in_fence
            elif not in_fence and "Last Updated:" in line:
                line = stamp_last_updated(line, stamp)
            out.append(line)

    return "\n".join(out)


def serialize_project(
    project: Project,
    today: date | None = None,
    positions: dict[str, int] | None = None,
) -> str:
    """Write a project back to markdown.

    Raises MarkerError if a card's state cannot be written in its notation
    (an in-progress or blocked checkbox card); nothing is produced then.
    positions is passed on to render_segments.
    """
    segments = split_segments(project)
    text = render_segments(segments, today, positions)
    logger.debug("serialized %d cards into %d segments", len(project.cards), len(segments))
    return text


def sanitize_description(description: str) -> str:
    """Escape description lines that would be re-read as cards.

    A bullet starting with a status marker gets its bullet character
    backslash-escaped, so it stays text.
    """
    if not description:
        return description
    result = []
    for line in description.split("\n"):
        match = _MARKER_BULLET.match(line.strip())
        if match and starts_with_marker(match.group(2)):
            line = "\\" + line.strip()
        result.append(line)
    return "\n".join(result)


def validate_description(description: str, allowed: set[str] = frozenset()) -> list[str]:
    """Describe lines of a description that would change the board structure.

    Lines whose stripped text is in allowed (rows of cards already nested
    there) are not reported.
    """
    issues = []
    for n, line in enumerate((description or "").split("\n"), start=1):
        if line.strip() in allowed:
            continue
        match = _MARKER_BULLET.match(line.strip())
        if match and starts_with_marker(match.group(2)):
            issues.append(f"Line {n}: bullet with a status marker will become a card")
    return issues
