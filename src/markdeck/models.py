"""Data models for markdeck boards."""

from dataclasses import dataclass, field
from typing import Any, Literal

Status = Literal["todo", "in_progress", "done"]
Notation = Literal["emoji", "checkbox"]
BoardMode = Literal["simple", "full"]

TODO = "todo"
IN_PROGRESS = "in_progress"
DONE = "done"
STATUSES = (TODO, IN_PROGRESS, DONE)

EMOJI = "emoji"
CHECKBOX = "checkbox"

SIMPLE = "simple"
FULL = "full"

DEFAULT_TITLE = "Untitled Project"
DEFAULT_LANE_ID = "default"
DEFAULT_LANE_TITLE = "All Items"


@dataclass
class ProjectMetadata:
    """Header information of a status document."""

    title: str = DEFAULT_TITLE
    version: str | None = None
    last_updated: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Card:
    """One task bullet."""

    id: str
    title: str
    status: Status = TODO
    blocked: bool = False
    lane_id: str = DEFAULT_LANE_ID
    description: str | None = None
    links: list[str] = field(default_factory=list)
    original_line: int = 0
    original_format: Notation = EMOJI


@dataclass
class Swimlane:
    """A section of the board, from an H2 or H3 heading."""

    id: str
    title: str
    order: int = 0


@dataclass
class Note:
    """Free text or non-status bullets collected under a heading."""

    title: str
    content: str
    section: str = ""


@dataclass
class Project:
    """The full board state parsed from one document."""

    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)
    cards: list[Card] = field(default_factory=list)
    swimlanes: list[Swimlane] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    raw_markdown: str = ""
    board_mode: BoardMode = FULL
