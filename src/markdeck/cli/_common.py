"""Shared helpers for CLI command handlers."""

import dataclasses
import json
import logging
import sys

from markdeck.board import find_card, find_lane
from markdeck.errors import MarkdeckError
from markdeck.markers import status_to_marker
from markdeck.models import Card, Project, Swimlane
from markdeck.parser import parse_project
from markdeck.store import FileStore, open_store
from markdeck.writer import serialize_project


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr when --verbose is given."""
    if verbose:
        logging.basicConfig(
            format="%(asctime)s %(levelname)s %(message)s",
            stream=sys.stderr,
            level=logging.DEBUG,
        )


def load_project_or_die(args) -> tuple[FileStore, Project, str]:
    """Open the status file and parse it. Exit 1 with message on failure.

    Returns (store, project, revision).
    """
    setup_logging(getattr(args, "verbose", False))
    try:
        store = open_store(args.repo, args.file)
        snapshot = store.load()
    except MarkdeckError as e:
        error(str(e), args.json)
    return store, parse_project(snapshot.text), snapshot.revision


def save(store: FileStore, project: Project, revision: str, json_mode: bool) -> str:
    """Serialize and save the project. Exit 1 with message on failure."""
    try:
        return store.save(serialize_project(project), revision)
    except MarkdeckError as e:
        error(str(e), json_mode)


def find_card_or_die(project: Project, card_id: str, json_mode: bool) -> Card:
    """Lookup card by ID. Exit 1 if not found."""
    try:
        return find_card(project, card_id)
    except MarkdeckError as e:
        error(str(e), json_mode)


def find_lane_or_die(project: Project, lane_id: str, json_mode: bool) -> Swimlane:
    """Lookup lane by ID. Exit 1 listing available lanes if not found."""
    try:
        return find_lane(project, lane_id)
    except MarkdeckError:
        available = [f"  {lane.id}  {lane.title}" for lane in project.swimlanes]
        error(f"Lane '{lane_id}' not found. Available:\n" + "\n".join(available), json_mode)


def card_marker(card: Card) -> str:
    return status_to_marker(card.status, card.blocked, card.original_format)


def card_to_dict(card: Card) -> dict:
    return dataclasses.asdict(card)


def format_card_line(card: Card, indent: str = "") -> str:
    """Format a card as a text line."""
    return f"{indent}{card.id}  {card_marker(card)} {card.title}"


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)
