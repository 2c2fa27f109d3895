"""Entry point for markdeck CLI."""

import sys
from pathlib import Path

NOUNS = {"board", "lane", "card"}


def main():
    # No subcommand or non-noun argument = TUI mode
    if len(sys.argv) < 2 or (sys.argv[1] not in NOUNS and not sys.argv[1].startswith("-")):
        from markdeck.errors import StoreError
        from markdeck.store import open_store
        from markdeck.ui import MarkdeckApp

        path = Path(sys.argv[1] if len(sys.argv) > 1 else ".")
        store = open_store(path) if path.is_dir() else open_store(file=path)
        app = MarkdeckApp(store)
        try:
            app.load()
        except StoreError as e:
            print(f"error: {e}", file=sys.stderr)
            sys.exit(1)
        app.run()
        return

    from markdeck.cli import build_parser

    parser = build_parser()
    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
