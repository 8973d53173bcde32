"""Enumerations for nsl10n type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class LoadStatus(StrEnum):
    """Outcome of a single resource fetch attempt.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Bundle fetched and validated."""

    NOT_FOUND = "not_found"
    """No resource exists for the exact (language, namespace) pair."""

    ERROR = "error"
    """Transport failure or malformed payload."""


class PreferenceSource(StrEnum):
    """Where the active language came from.

    Members are listed in initialization precedence order; EXPLICIT marks a
    value set through set_active_language() after startup.
    """

    STORED = "stored"
    """Previously persisted explicit choice."""

    DETECTED = "detected"
    """Inferred from the runtime environment."""

    DEFAULT = "default"
    """Static default language."""

    EXPLICIT = "explicit"
    """Set by the application during this process."""


class DateStyle(StrEnum):
    """Date styles accepted by the ``date:<style>`` interpolation format.

    Values are passed through to Babel's ``format_date``.
    """

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    FULL = "full"


__all__ = [
    "DateStyle",
    "LoadStatus",
    "PreferenceSource",
]
