"""CLI argument parser and dispatch for markdeck."""

import argparse

from markdeck.cli.board import board_get, board_summary, board_upgrade
from markdeck.cli.card import card_add, card_delete, card_get, card_list, card_move, card_set
from markdeck.cli.lane import lane_list
from markdeck.models import STATUSES, TODO


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--repo", default=".", help="Project directory or git repository (default: .)")
    common.add_argument("--file", help="Status file (default: git config markdeck.file, or STATUS.md)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="store_true", help="Log to stderr")

    parser = argparse.ArgumentParser(
        prog="markdeck",
        description="Kanban board backed by a STATUS.md file",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- board ---
    board_p = nouns.add_parser("board", help="Board operations", parents=[common])
    board_verbs = board_p.add_subparsers(dest="verb")

    board_summary_p = board_verbs.add_parser("summary", help="Show board summary", parents=[common])
    board_summary_p.set_defaults(func=board_summary)

    board_get_p = board_verbs.add_parser("get", help="Dump the status file", parents=[common])
    board_get_p.set_defaults(func=board_get)

    board_upgrade_p = board_verbs.add_parser("upgrade", help="Convert checkboxes to emoji markers", parents=[common])
    board_upgrade_p.set_defaults(func=board_upgrade)

    # board with no verb = summary
    board_p.set_defaults(func=board_summary)

    # --- lane ---
    lane_p = nouns.add_parser("lane", help="Lane operations", parents=[common])
    lane_verbs = lane_p.add_subparsers(dest="verb")

    lane_list_p = lane_verbs.add_parser("list", help="List lanes", parents=[common])
    lane_list_p.set_defaults(func=lane_list)

    # lane with no verb = list
    lane_p.set_defaults(func=lane_list)

    # --- card ---
    card_p = nouns.add_parser("card", help="Card operations", parents=[common])
    card_verbs = card_p.add_subparsers(dest="verb")

    card_list_p = card_verbs.add_parser("list", help="List cards", parents=[common])
    card_list_p.add_argument("--lane", help="Filter by lane ID")
    card_list_p.add_argument("--status", choices=STATUSES, help="Filter by status")
    card_list_p.set_defaults(func=card_list)

    card_get_p = card_verbs.add_parser("get", help="Show a card", parents=[common])
    card_get_p.add_argument("id", help="Card ID")
    card_get_p.set_defaults(func=card_get)

    card_set_p = card_verbs.add_parser("set", help="Change a card", parents=[common])
    card_set_p.add_argument("id", help="Card ID")
    card_set_p.add_argument("--status", choices=STATUSES, help="New status")
    card_set_p.add_argument("--blocked", dest="blocked", action="store_const", const=True, help="Mark blocked")
    card_set_p.add_argument("--unblocked", dest="blocked", action="store_const", const=False, help="Clear blocked")
    card_set_p.add_argument("--title", help="New title")
    card_set_p.add_argument("--description", help="New description")
    card_set_p.set_defaults(func=card_set)

    card_add_p = card_verbs.add_parser("add", help="Create a card", parents=[common])
    card_add_p.add_argument("title", help="Card title")
    card_add_p.add_argument("--lane", help="Target lane ID (default: first lane)")
    card_add_p.add_argument("--status", choices=STATUSES, default=TODO, help="Status (default: todo)")
    card_add_p.add_argument("--blocked", action="store_true", help="Mark blocked")
    card_add_p.add_argument("--description", help="Card description")
    card_add_p.set_defaults(func=card_add)

    card_move_p = card_verbs.add_parser("move", help="Move a card to another lane", parents=[common])
    card_move_p.add_argument("id", help="Card ID")
    card_move_p.add_argument("--lane", required=True, help="Target lane ID")
    card_move_p.set_defaults(func=card_move)

    card_delete_p = card_verbs.add_parser("delete", help="Delete a card", parents=[common])
    card_delete_p.add_argument("id", help="Card ID")
    card_delete_p.set_defaults(func=card_delete)

    # card with no verb = list
    card_p.set_defaults(func=card_list, lane=None, status=None)

    return parser
