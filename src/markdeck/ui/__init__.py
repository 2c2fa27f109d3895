"""Textual UI for markdeck."""

from markdeck.ui.app import MarkdeckApp

__all__ = ["MarkdeckApp"]
