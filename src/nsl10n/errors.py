"""nsl10n exception hierarchy.

Three failure kinds exist at the loader boundary:

- ResourceNotFoundError: no resource for the exact (language, namespace) pair.
  Expected; routed to the fallback language.
- TransportError: the retrieval mechanism itself failed. Routed to the
  fallback language as well, since the effect on the user is identical.
- UnsupportedLanguageError: rejected input to set_active_language().
  Surfaced to the caller.

The first two never escape FallbackResolver. Only UnsupportedLanguageError
reaches application code.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    "L10nError",
    "MalformedResourceError",
    "ResourceNotFoundError",
    "TransportError",
    "UnsupportedLanguageError",
]


class L10nError(Exception):
    """Base exception for all nsl10n errors."""


class ResourceNotFoundError(L10nError):
    """No resource exists for the exact (language, namespace) pair.

    Attributes:
        language: Requested language code
        namespace: Requested namespace
    """

    def __init__(self, language: str, namespace: str, detail: str | None = None) -> None:
        """Initialize ResourceNotFoundError.

        Args:
            language: Requested language code
            namespace: Requested namespace
            detail: Optional location description (path or URL)
        """
        self.language = language
        self.namespace = namespace
        msg = f"No resource for namespace '{namespace}' in language '{language}'"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class TransportError(L10nError):
    """The underlying retrieval mechanism failed.

    Distinct from ResourceNotFoundError: the resource may exist, but it
    could not be read. The original exception is chained as ``__cause__``.

    Attributes:
        language: Requested language code
        namespace: Requested namespace
    """

    def __init__(self, language: str, namespace: str, reason: str) -> None:
        """Initialize TransportError.

        Args:
            language: Requested language code
            namespace: Requested namespace
            reason: Human-readable failure description
        """
        self.language = language
        self.namespace = namespace
        self.reason = reason
        super().__init__(
            f"Failed to fetch namespace '{namespace}' for language '{language}': {reason}"
        )


class MalformedResourceError(TransportError):
    """Resource was retrieved but is not a valid bundle.

    Raised for undecodable JSON, a non-object top level, or values that are
    neither strings nor nested objects.
    """


class UnsupportedLanguageError(L10nError, ValueError):
    """Language code is not in the supported set.

    Subclasses ValueError so callers validating user input can catch either.

    Attributes:
        language: The rejected code
        supported: Supported codes at the time of rejection
    """

    def __init__(self, language: str, supported: Iterable[str]) -> None:
        """Initialize UnsupportedLanguageError.

        Args:
            language: The rejected code
            supported: Supported language codes
        """
        self.language = language
        self.supported: tuple[str, ...] = tuple(supported)
        super().__init__(
            f"Unsupported language '{language}'; expected one of {self.supported}"
        )
