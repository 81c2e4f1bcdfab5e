"""Exception types raised by the day-night core."""

from __future__ import annotations


class DayNightError(Exception):
    """Base class for errors surfaced to callers of the day-night core."""


class ConfigError(DayNightError):
    """Raised when a lighting configuration cannot be loaded or validated."""


class ReservedIdentifierError(DayNightError):
    """Raised when code outside the clock writes a reserved switch or variable."""

    def __init__(self, kind: str, identifier: int) -> None:
        super().__init__(
            f"{kind.capitalize()} {identifier} is reserved for the day-night clock "
            "and should not be set outside of it."
        )
        self.kind = kind
        self.identifier = identifier
