"""Handlers for 'markdeck lane' commands."""

from markdeck.board import lane_summary
from markdeck.cli._common import load_project_or_die, output_json


def lane_list(args) -> int:
    """List all lanes."""
    _, project, _ = load_project_or_die(args)
    items = lane_summary(project)

    if args.json:
        output_json(items)
    else:
        for lane in items:
            cards = "card" if lane["cards"] == 1 else "cards"
            print(f"{lane['id']:<20} {lane['title']:<24} {lane['cards']} {cards}")

    return 0
