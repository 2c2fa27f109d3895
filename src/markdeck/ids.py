"""Lane and card ID generation."""

import re

_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(text: str) -> str:
    """Lowercase text and reduce it to ASCII word characters and hyphens.

    "Fix Login Bug!" → "fix-login-bug", "🚀 Launch" → "-launch"
    """
    slug = _NON_WORD.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip()


class IdGenerator:
    """Hands out card IDs that are unique within one parse.

    The first card with a given base ID gets it unchanged; later ones get
    "-1", "-2", ... appended.
    """

    def __init__(self) -> None:
        self.used: dict[str, int] = {}

    def card_id(self, lane_id: str, title: str) -> str:
        base = slugify(f"{lane_id}-{title}")
        if base not in self.used:
            self.used[base] = 0
            return base
        self.used[base] += 1
        return f"{base}-{self.used[base]}"

    def lane_id(self, title: str) -> str:
        return slugify(title)

    def reset(self) -> None:
        self.used.clear()
