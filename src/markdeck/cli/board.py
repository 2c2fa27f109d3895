"""Handlers for 'markdeck board' commands."""

import sys

from markdeck.board import lane_summary, upgrade_to_full_mode
from markdeck.cli._common import load_project_or_die, output_json, output_result, save
from markdeck.models import CHECKBOX, SIMPLE


def board_summary(args) -> int:
    """Show board summary: title, mode, lanes and card counts."""
    _, project, _ = load_project_or_die(args)
    meta = project.metadata
    lanes = lane_summary(project)

    if args.json:
        output_json(
            {
                "title": meta.title,
                "version": meta.version,
                "last_updated": meta.last_updated,
                "mode": project.board_mode,
                "lanes": lanes,
                "notes": len(project.notes),
            }
        )
        return 0

    print(meta.title)
    details = [f"{project.board_mode} mode"]
    if meta.version:
        details.append(f"version {meta.version}")
    if meta.last_updated:
        details.append(f"updated {meta.last_updated}")
    print(f"  {', '.join(details)}")
    for lane in lanes:
        if project.board_mode == SIMPLE:
            counts = f"{lane['todo']} todo, {lane['done']} done"
        else:
            counts = f"{lane['todo']} todo, {lane['in_progress']} in progress, {lane['done']} done"
        blocked = f"  ({lane['blocked']} blocked)" if lane["blocked"] else ""
        print(f"  {lane['id']:<20} {counts}{blocked}")

    return 0


def board_get(args) -> int:
    """Dump the status file as parsed."""
    _, project, revision = load_project_or_die(args)

    if args.json:
        output_json({"title": project.metadata.title, "revision": revision, "markdown": project.raw_markdown})
    else:
        sys.stdout.write(project.raw_markdown)

    return 0


def board_upgrade(args) -> int:
    """Switch every checkbox card to emoji markers and save."""
    store, project, revision = load_project_or_die(args)

    converted = sum(1 for c in project.cards if c.original_format == CHECKBOX)
    upgraded = upgrade_to_full_mode(project)
    new_revision = save(store, upgraded, revision, args.json)

    output_result(
        {"mode": upgraded.board_mode, "converted": converted, "revision": new_revision},
        f"Upgraded to full mode ({converted} cards converted)",
        args.json,
    )

    return 0
