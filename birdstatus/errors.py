"""Exception hierarchy for birdstatus."""

from __future__ import annotations


class BirdStatusError(Exception):
    """Base class for errors that abort a status run."""


class CommandError(BirdStatusError):
    """The control socket could not be reached or the daemon rejected a command."""


class ParseError(BirdStatusError):
    """Daemon output did not have the expected block or field structure."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class ResolverLoadError(BirdStatusError):
    """The protocol name mapping file is missing or malformed."""
