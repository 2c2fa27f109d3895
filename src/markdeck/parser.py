"""Parse status markdown into a Project.

The dialect is a narrow one: an optional header (H1 title, "Last Updated:"
and "Version:" lines), H2/H3 headings that become swimlanes, and bullets
whose text starts with a status marker, which become cards. Everything
else is either collected as notes or ignored. Nothing here raises on odd
input; unrecognized lines simply are not cards.
"""

import logging
import re

import yaml

from markdeck.ids import IdGenerator, slugify
from markdeck.markers import read_marker
from markdeck.models import (
    DEFAULT_LANE_ID,
    DEFAULT_LANE_TITLE,
    DONE,
    EMOJI,
    FULL,
    IN_PROGRESS,
    SIMPLE,
    Card,
    Note,
    Project,
    ProjectMetadata,
    Swimlane,
)

logger = logging.getLogger(__name__)

HEADER_LINES = 10
FENCE = "```"
NOTES_TITLE = "Notes"

BULLET = re.compile(r"^(\s*)[-*]\s+(.+)")
HEADING = re.compile(r"^(#{1,6})\s+(.+)")
LANE_HEADING = re.compile(r"^(#{2,3})\s+(.+)")
LAST_UPDATED = re.compile(r"Last Updated:.*?(\d{4}-\d{2}-\d{2})")
_TITLE = re.compile(r"^#\s+(.*)")
_VERSION = re.compile(r"Version:\s*(.+)")
_LINK = re.compile(r"https?://[^\s)]+")


def indent_of(line: str) -> int:
    """Number of leading whitespace characters."""
    return len(line) - len(line.lstrip())


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE)


def split_front_matter(lines: list[str]) -> tuple[int, dict]:
    """Find a YAML front-matter block at the top of the document.

    Returns (first_body_line, meta). The block only counts when it is
    closed and its YAML is a mapping; otherwise the result is (0, {}) and
    the dashes are ordinary lines (a horizontal rule, say).
    """
    if not lines or lines[0].rstrip() != "---":
        return 0, {}
    for i in range(1, len(lines)):
        if lines[i].rstrip() == "---":
            try:
                meta = yaml.safe_load("\n".join(lines[1:i]))
            except yaml.YAMLError:
                return 0, {}
            if not isinstance(meta, dict):
                return 0, {}
            return i + 1, meta
    return 0, {}


def uninterpreted_lines(lines: list[str]) -> set[int]:
    """Indices of front-matter lines and lines inside (or opening/closing) code fences."""
    start, _ = split_front_matter(lines)
    skipped = set(range(start))
    in_fence = False
    for i in range(start, len(lines)):
        if is_fence(lines[i]):
            in_fence = not in_fence
            skipped.add(i)
        elif in_fence:
            skipped.add(i)
    return skipped


def extract_metadata(lines: list[str]) -> ProjectMetadata:
    """Read title, version and last-updated date from the document header."""
    start, extra = split_front_matter(lines)
    metadata = ProjectMetadata(extra=extra)
    title = None

    for line in lines[start : start + HEADER_LINES]:
        match = _TITLE.match(line)
        if match and match.group(1).strip():
            title = match.group(1).strip()
        if "Last Updated:" in line:
            match = LAST_UPDATED.search(line)
            if match:
                metadata.last_updated = match.group(1)
        if "Version:" in line:
            match = _VERSION.search(line)
            if match:
                metadata.version = match.group(1).strip()

    if title is None and extra.get("title"):
        title = str(extra["title"])
    if title:
        metadata.title = title
    if metadata.version is None and extra.get("version") is not None:
        metadata.version = str(extra["version"])
    if metadata.last_updated is None and extra.get("last_updated") is not None:
        metadata.last_updated = str(extra["last_updated"])
    return metadata


def parse_swimlanes(lines: list[str]) -> list[Swimlane]:
    """Build lanes from H2 and H3 headings, first occurrence of each slug wins."""
    skipped = uninterpreted_lines(lines)
    swimlanes: list[Swimlane] = []
    seen: set[str] = set()

    for i, line in enumerate(lines):
        if i in skipped:
            continue
        match = LANE_HEADING.match(line)
        if not match:
            continue
        title = match.group(2).strip()
        lane_id = slugify(title)
        if lane_id in seen:
            continue
        seen.add(lane_id)
        swimlanes.append(Swimlane(id=lane_id, title=title, order=len(swimlanes)))

    if not swimlanes:
        swimlanes.append(Swimlane(id=DEFAULT_LANE_ID, title=DEFAULT_LANE_TITLE, order=0))
    return swimlanes


def current_lane_for_line(lines: list[str], index: int, swimlanes: list[Swimlane]) -> str:
    """Lane ID of the nearest H2/H3 heading at or above index."""
    skipped = uninterpreted_lines(lines)
    known = {lane.id for lane in swimlanes}
    for i in range(min(index, len(lines) - 1), -1, -1):
        if i in skipped:
            continue
        match = LANE_HEADING.match(lines[i])
        if match:
            lane_id = slugify(match.group(2).strip())
            if lane_id in known:
                return lane_id
    return swimlanes[0].id if swimlanes else DEFAULT_LANE_ID


def description_block(lines: list[str], index: int, indent: int) -> tuple[list[tuple[int, str]], int]:
    """Collect the indented lines under the bullet at index.

    Blank lines are skipped. The block ends at the first non-blank line
    that is not indented deeper than the bullet, or is a heading.
    Returns ([(line_index, stripped_text), ...], end) where end is one
    past the last collected line, so trailing blank lines stay outside.
    """
    rows: list[tuple[int, str]] = []
    end = index + 1
    i = index + 1
    while i < len(lines):
        line = lines[i]
        if not line.strip():
            i += 1
            continue
        if indent_of(line) > indent and not HEADING.match(line):
            rows.append((i, line.strip()))
            i += 1
            end = i
        else:
            break
    return rows, end


def extract_links(text: str) -> list[str]:
    """URLs in text, in order of appearance, duplicates kept."""
    return _LINK.findall(text)


def parse_card(line: str, index: int, lines: list[str], lane_id: str, ids: IdGenerator) -> Card | None:
    """Turn one bullet line (plus its indented block) into a Card.

    Returns None if the line is not a bullet, has no status marker, or
    has no title after the marker.
    """
    bullet = BULLET.match(line)
    if not bullet:
        return None
    marker = read_marker(bullet.group(2))
    if marker is None:
        return None
    status, blocked, notation, rest = marker

    title = rest.strip()
    if not title:
        return None

    rows, _ = description_block(lines, index, len(bullet.group(1)))
    description = "\n".join(text for _, text in rows)
    links = extract_links("\n".join(part for part in (title, description) if part))

    return Card(
        id=ids.card_id(lane_id, title),
        title=title,
        status=status,
        blocked=blocked and status != DONE,
        lane_id=lane_id,
        description=description or None,
        links=links,
        original_line=index,
        original_format=notation,
    )


def detect_board_mode(cards: list[Card]) -> str:
    """Full mode if any card uses emoji notation or is in progress.

    A board without cards is full mode too.
    """
    if not cards:
        return FULL
    for card in cards:
        if card.original_format == EMOJI or card.status == IN_PROGRESS:
            return FULL
    return SIMPLE


class _NoteCollector:
    """Accumulates note lines under the current heading."""

    def __init__(self) -> None:
        self.notes: list[Note] = []
        self.title: str | None = None
        self.section = ""
        self.lines: list[str] = []

    @property
    def open(self) -> bool:
        return self.title is not None

    def start(self, headings: list[str]) -> None:
        if self.title is None:
            self.title = headings[-1] if headings else NOTES_TITLE
            self.section = " / ".join(headings[:-1])

    def add(self, line: str) -> None:
        self.lines.append(line)

    def flush(self) -> None:
        if self.title is not None and self.lines:
            self.notes.append(Note(title=self.title, content="\n".join(self.lines).strip(), section=self.section))
        self.title = None
        self.section = ""
        self.lines = []


def parse_project(markdown: str) -> Project:
    """Parse a whole status document.

    Raises TypeError if markdown is not a string; any string parses.
    """
    if not isinstance(markdown, str):
        raise TypeError(f"expected str, got {type(markdown).__name__}")

    lines = markdown.split("\n")
    ids = IdGenerator()
    metadata = extract_metadata(lines)
    swimlanes = parse_swimlanes(lines)
    lane_ids = {lane.id for lane in swimlanes}

    cards: list[Card] = []
    notes = _NoteCollector()
    headings: list[str] = []
    lane_id = swimlanes[0].id
    in_fence = False
    block_end = 0

    start, _ = split_front_matter(lines)
    for i in range(start, len(lines)):
        line = lines[i]

        if is_fence(line):
            in_fence = not in_fence
            if notes.open:
                notes.add(line)
            continue
        if in_fence:
            if notes.open:
                notes.add(line)
            continue

        heading = HEADING.match(line)
        if heading:
            notes.flush()
            level = len(heading.group(1))
            title = heading.group(2).strip()
            del headings[max(level - 2, 0) :]
            if level >= 2:
                headings.append(title)
            if level in (2, 3) and slugify(title) in lane_ids:
                lane_id = slugify(title)
            continue

        card = parse_card(line, i, lines, lane_id, ids)
        if card is not None:
            cards.append(card)
            _, end = description_block(lines, i, indent_of(line))
            block_end = max(block_end, end)
            continue
        if i < block_end:
            continue

        bullet = BULLET.match(line)
        if bullet and bullet.group(2).strip():
            notes.start(headings)
            notes.add(line)
        elif line.strip() and not line.startswith("#") and notes.open:
            notes.add(line)

    notes.flush()

    board_mode = detect_board_mode(cards)
    logger.debug("parsed %d cards, %d lanes, %d notes (%s mode)", len(cards), len(swimlanes), len(notes.notes), board_mode)
    return Project(
        metadata=metadata,
        cards=cards,
        swimlanes=swimlanes,
        notes=notes.notes,
        raw_markdown=markdown,
        board_mode=board_mode,
    )
