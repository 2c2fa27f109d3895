"""Exceptions raised by markdeck."""


class MarkdeckError(Exception):
    """Base class for markdeck errors."""


class MarkerError(MarkdeckError, ValueError):
    """A (status, blocked) pair has no marker in the requested notation."""


class DescriptionError(MarkdeckError, ValueError):
    """A description cannot be written without changing the board structure."""


class CardNotFoundError(MarkdeckError, KeyError):
    """No card with the given id exists in the project."""

    def __str__(self) -> str:
        return f"Card '{self.args[0]}' not found."


class LaneNotFoundError(MarkdeckError, KeyError):
    """No swimlane with the given id exists in the project."""

    def __str__(self) -> str:
        return f"Lane '{self.args[0]}' not found."


class StoreError(MarkdeckError):
    """Loading or saving the status file failed."""


class StaleFileError(StoreError):
    """The status file changed on disk since it was loaded."""
