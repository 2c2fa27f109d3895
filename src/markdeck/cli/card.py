"""Handlers for 'markdeck card' commands."""

from markdeck.board import add_card, delete_card, move_card, update_card
from markdeck.cli._common import (
    card_to_dict,
    error,
    find_card_or_die,
    find_lane_or_die,
    format_card_line,
    load_project_or_die,
    output_json,
    output_result,
    save,
)
from markdeck.errors import MarkdeckError
from markdeck.writer import sanitize_description


def card_list(args) -> int:
    """List cards grouped by lane."""
    _, project, _ = load_project_or_die(args)

    lanes = []
    for lane in sorted(project.swimlanes, key=lambda s: s.order):
        if args.lane and lane.id != args.lane:
            continue
        cards = [c for c in project.cards if c.lane_id == lane.id]
        if args.status:
            cards = [c for c in cards if c.status == args.status]
        lanes.append((lane, cards))

    if args.json:
        output_json([card_to_dict(c) for _, cards in lanes for c in cards])
    else:
        for lane, cards in lanes:
            print(f"{lane.id}  {lane.title}")
            for card in cards:
                print(format_card_line(card, indent="  "))

    return 0


def card_get(args) -> int:
    """Show one card."""
    _, project, _ = load_project_or_die(args)
    card = find_card_or_die(project, args.id, args.json)

    if args.json:
        output_json(card_to_dict(card))
    else:
        print(format_card_line(card))
        state = card.status.replace("_", " ") + (", blocked" if card.blocked else "")
        print(f"  lane: {card.lane_id}")
        print(f"  status: {state}")
        if card.description:
            print()
            for line in card.description.split("\n"):
                print(f"  {line}")
        for link in card.links:
            print(f"  -> {link}")

    return 0


def card_set(args) -> int:
    """Change status, blocked flag, title or description of a card."""
    store, project, revision = load_project_or_die(args)
    find_card_or_die(project, args.id, args.json)

    changes = {
        "status": args.status,
        "blocked": args.blocked,
        "title": args.title,
        "description": args.description,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        error("Nothing to change. Use --status, --blocked, --unblocked, --title or --description.", args.json)

    try:
        card = update_card(project, args.id, **changes)
    except (MarkdeckError, ValueError) as e:
        error(str(e), args.json)

    new_revision = save(store, project, revision, args.json)
    output_result(
        {"card": card_to_dict(card), "revision": new_revision},
        f"Updated {format_card_line(card)}",
        args.json,
    )

    return 0


def card_add(args) -> int:
    """Create a new card at the end of a lane."""
    store, project, revision = load_project_or_die(args)
    lane_id = args.lane or project.swimlanes[0].id
    find_lane_or_die(project, lane_id, args.json)

    description = sanitize_description(args.description) if args.description else None
    try:
        updated = add_card(project, lane_id, args.title, args.status, args.blocked, description)
    except (MarkdeckError, ValueError) as e:
        error(str(e), args.json)

    card = max((c for c in updated.cards if c.lane_id == lane_id), key=lambda c: c.original_line)
    new_revision = save(store, updated, revision, args.json)
    output_result(
        {"card": card_to_dict(card), "revision": new_revision},
        f"Created {format_card_line(card)}",
        args.json,
    )

    return 0


def card_move(args) -> int:
    """Move a card to the end of another lane."""
    store, project, revision = load_project_or_die(args)
    card = find_card_or_die(project, args.id, args.json)
    lane = find_lane_or_die(project, args.lane, args.json)

    try:
        updated = move_card(project, card.id, lane.id)
    except (MarkdeckError, ValueError) as e:
        error(str(e), args.json)

    new_revision = save(store, updated, revision, args.json)
    output_result(
        {"id": card.id, "lane": {"id": lane.id, "title": lane.title}, "revision": new_revision},
        f"Moved {card.title} to {lane.title}",
        args.json,
    )

    return 0


def card_delete(args) -> int:
    """Delete a card and its description."""
    store, project, revision = load_project_or_die(args)
    card = find_card_or_die(project, args.id, args.json)

    updated = delete_card(project, card.id)
    new_revision = save(store, updated, revision, args.json)
    output_result(
        {"id": card.id, "revision": new_revision},
        f"Deleted {card.title}",
        args.json,
    )

    return 0
