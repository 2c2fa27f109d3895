"""Kanban board backed by a plain STATUS.md file."""

from markdeck.board import upgrade_to_full_mode
from markdeck.models import Card, Note, Project, ProjectMetadata, Swimlane
from markdeck.parser import parse_project as parse
from markdeck.writer import serialize_project as serialize

__all__ = [
    "Card",
    "Note",
    "Project",
    "ProjectMetadata",
    "Swimlane",
    "parse",
    "serialize",
    "upgrade_to_full_mode",
]
