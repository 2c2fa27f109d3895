"""Status markers in emoji and checkbox notation.

Every conversion between a card's (status, blocked) pair and the glyph
that prefixes its bullet goes through this module. Two notations exist:

- emoji: five glyphs, one per (status, blocked) pair, except that ``done``
  has a single glyph and cannot be blocked.
- checkbox: ``[ ]`` for todo and ``[x]`` for done. In-progress and blocked
  cards have no checkbox form; the board has to be upgraded first.
"""

import re

from markdeck.errors import MarkerError
from markdeck.models import CHECKBOX, DONE, EMOJI, IN_PROGRESS, TODO

# Legacy marker: "blocked" without a status of its own.
BLOCKED_MARKER = "\u274c"  # ❌
VARIATION_SELECTOR = "\ufe0f"


class EmojiNotation:
    """Five-state glyph notation."""

    name = EMOJI

    MARKERS = {
        (TODO, False): "\U0001f535",  # 🔵
        (TODO, True): "\U0001f534",  # 🔴
        (IN_PROGRESS, False): "\U0001f7e1",  # 🟡
        (IN_PROGRESS, True): "\U0001f7e7",  # 🟧
        (DONE, False): "\U0001f7e2",  # 🟢
    }
    STATES = {marker: pair for pair, marker in MARKERS.items()}

    _LEADING = re.compile("^(" + "|".join(MARKERS.values()) + ")" + VARIATION_SELECTOR + r"?\s*")

    def encode(self, status: str, blocked: bool) -> str:
        marker = self.MARKERS.get((status, bool(blocked)))
        if marker is None:
            state = f"{status}, blocked" if blocked else status
            raise MarkerError(f"No emoji marker for ({state})")
        return marker

    def decode(self, marker: str) -> tuple[str, bool] | None:
        return self.STATES.get(marker.strip().rstrip(VARIATION_SELECTOR))

    def match(self, text: str) -> tuple[str, bool, str] | None:
        """Split a leading marker off text. Returns (status, blocked, rest)."""
        m = self._LEADING.match(text)
        if not m:
            return None
        status, blocked = self.STATES[m.group(1)]
        return status, blocked, text[m.end() :]


class CheckboxNotation:
    """Two-state task-list notation."""

    name = CHECKBOX

    MARKERS = {
        (TODO, False): "[ ]",
        (DONE, False): "[x]",
    }

    _LEADING = re.compile(r"^\[([ xX])\](?:\s+|$)")

    def encode(self, status: str, blocked: bool) -> str:
        marker = self.MARKERS.get((status, bool(blocked)))
        if marker is None:
            state = f"{status}, blocked" if blocked else status
            raise MarkerError(f"No checkbox marker for ({state}); upgrade the board to full mode first")
        return marker

    def decode(self, marker: str) -> tuple[str, bool] | None:
        marker = marker.strip()
        if marker == "[ ]":
            return TODO, False
        if marker.lower() == "[x]":
            return DONE, False
        return None

    def match(self, text: str) -> tuple[str, bool, str] | None:
        """Split a leading checkbox off text. Returns (status, blocked, rest)."""
        m = self._LEADING.match(text)
        if not m:
            return None
        status = TODO if m.group(1) == " " else DONE
        return status, False, text[m.end() :]


EMOJI_NOTATION = EmojiNotation()
CHECKBOX_NOTATION = CheckboxNotation()
NOTATIONS = {EMOJI: EMOJI_NOTATION, CHECKBOX: CHECKBOX_NOTATION}

_LEADING_BLOCKED = re.compile("^" + BLOCKED_MARKER + VARIATION_SELECTOR + r"?\s*")


def status_to_marker(status: str, blocked: bool, notation: str) -> str:
    """Return the marker for (status, blocked) in the given notation.

    Raises MarkerError for pairs the notation cannot express, including
    a blocked ``done`` in either notation.
    """
    try:
        return NOTATIONS[notation].encode(status, blocked)
    except KeyError:
        raise MarkerError(f"Unknown notation '{notation}'") from None


def marker_to_status_blocked(marker: str) -> tuple[str, bool] | None:
    """Decode a marker from either notation, or None if unrecognized."""
    for notation in (EMOJI_NOTATION, CHECKBOX_NOTATION):
        decoded = notation.decode(marker)
        if decoded is not None:
            return decoded
    return None


def read_marker(text: str) -> tuple[str, bool, str, str] | None:
    """Classify the marker at the start of a bullet's text.

    Returns (status, blocked, notation, rest) or None when the text does
    not start with a status marker. Emoji notation is tried before
    checkboxes. A bare legacy blocked marker reads as a blocked todo; in
    front of an emoji marker it adds the blocked flag to that status.
    """
    legacy = _LEADING_BLOCKED.match(text)
    if legacy:
        rest = text[legacy.end() :]
        matched = EMOJI_NOTATION.match(rest)
        if matched is None:
            return TODO, True, EMOJI, rest
        status, _, rest = matched
        return status, status != DONE, EMOJI, rest

    for notation in (EMOJI_NOTATION, CHECKBOX_NOTATION):
        matched = notation.match(text)
        if matched is not None:
            status, blocked, rest = matched
            return status, blocked, notation.name, rest
    return None


def starts_with_marker(text: str) -> bool:
    """True if text starts with any status or legacy blocked marker."""
    return read_marker(text) is not None
