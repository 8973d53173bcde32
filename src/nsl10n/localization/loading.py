"""Resource fetching infrastructure for the namespace loader.

Provides the protocol for bundle fetchers, concrete fetchers for in-memory
tables, the filesystem and HTTP, and result/summary data structures for
tracking fetch attempts.

Components:
    ResourceFetcher - Protocol for fetching one (language, namespace) bundle
    MappingResourceFetcher - Explicit lookup table
    CallbackResourceFetcher - Injected async resolver function
    PathResourceFetcher - Disk-based fetcher with path-traversal prevention
    HttpResourceFetcher - Remote fetcher over httpx
    parse_bundle - JSON decoding and shape validation shared by all fetchers
    FallbackInfo - Immutable record of a language fallback event
    ResourceLoadResult - Immutable result of a single fetch attempt
    LoadSummary - Immutable aggregate of fetch attempts

Fetchers are purely mechanical: no retries, no fallback, no caching.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import aiofiles
import httpx

from nsl10n.constants import DEFAULT_FETCH_TIMEOUT, RESOURCE_FILE_SUFFIX
from nsl10n.enums import LoadStatus
from nsl10n.errors import MalformedResourceError, ResourceNotFoundError, TransportError
from nsl10n.localization.types import Bundle, LanguageCode, Namespace, freeze_bundle

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceFetcher",
    # Concrete fetchers
    "MappingResourceFetcher",
    "CallbackResourceFetcher",
    "PathResourceFetcher",
    "HttpResourceFetcher",
    # Payload handling
    "parse_bundle",
    # Fallback observability
    "FallbackInfo",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
]

logger = logging.getLogger(__name__)

type RawResource = str | bytes | Mapping[str, Any]


class ResourceFetcher(Protocol):
    """Protocol for fetching a translation bundle for one (language, namespace) pair.

    This is a Protocol (structural typing) rather than ABC so that any
    object with a matching ``fetch`` coroutine can be injected.

    Example:
        >>> class StaticFetcher:
        ...     async def fetch(self, language: str, namespace: str) -> Bundle:
        ...         if (language, namespace) != ("en", "common"):
        ...             raise ResourceNotFoundError(language, namespace)
        ...         return {"hello": "Hello"}
        ...     def describe_path(self, language: str, namespace: str) -> str:
        ...         return f"static:{language}/{namespace}"
    """

    async def fetch(self, language: LanguageCode, namespace: Namespace) -> Bundle:
        """Fetch a bundle.

        Args:
            language: Exact language code
            namespace: Namespace name

        Returns:
            Immutable Bundle

        Raises:
            ResourceNotFoundError: No resource exists for this exact pair
            TransportError: Retrieval failed (includes MalformedResourceError)
        """
        ...

    def describe_path(self, language: LanguageCode, namespace: Namespace) -> str:
        """Return human-readable location for diagnostics.

        Default implementation returns "{language}/{namespace}".
        """
        return f"{language}/{namespace}"


def _validate_tree(
    data: Mapping[Any, Any], language: LanguageCode, namespace: Namespace, path: str = ""
) -> None:
    for key, value in data.items():
        if not isinstance(key, str):
            raise MalformedResourceError(
                language, namespace, f"non-string key {key!r} at '{path or '<root>'}'"
            )
        location = f"{path}.{key}" if path else key
        if isinstance(value, Mapping):
            _validate_tree(value, language, namespace, location)
        elif not isinstance(value, str):
            raise MalformedResourceError(
                language,
                namespace,
                f"value at '{location}' must be a string or object, got {type(value).__name__}",
            )


def parse_bundle(raw: RawResource, language: LanguageCode, namespace: Namespace) -> Bundle:
    """Decode and validate a serialized bundle.

    Args:
        raw: JSON text (str or UTF-8 bytes) or an already-decoded mapping
        language: Language code, for error reporting
        namespace: Namespace, for error reporting

    Returns:
        Frozen Bundle

    Raises:
        MalformedResourceError: Undecodable JSON (including oversized
            integers), non-object top level, nesting too deep to decode,
            or values that are neither strings nor nested objects
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise MalformedResourceError(language, namespace, f"invalid JSON: {e}") from e
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise MalformedResourceError(
            language, namespace, f"top level must be an object, got {type(data).__name__}"
        )
    try:
        _validate_tree(data, language, namespace)
        return freeze_bundle(data)
    except RecursionError as e:
        raise MalformedResourceError(language, namespace, "bundle nested too deeply") from e


def _validate_segment(kind: str, value: str) -> None:
    """Reject path traversal and separators in a single path/URL segment.

    Raises:
        ValueError: If the segment is empty or unsafe
    """
    if not value:
        msg = f"{kind} cannot be empty"
        raise ValueError(msg)
    if value.strip() != value:
        msg = f"{kind} contains leading/trailing whitespace: {value!r}"
        raise ValueError(msg)
    if ".." in value:
        msg = f"Path traversal sequences not allowed in {kind}: '{value}'"
        raise ValueError(msg)
    if "/" in value or "\\" in value:
        msg = f"Path separators not allowed in {kind}: '{value}'"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class MappingResourceFetcher:
    """Fetcher backed by an explicit lookup table.

    Values may be mappings or JSON text; both are validated on fetch.

    Example:
        >>> fetcher = MappingResourceFetcher({("en", "common"): {"save": "Save"}})
        >>> bundle = await fetcher.fetch("en", "common")
    """

    resources: Mapping[tuple[LanguageCode, Namespace], RawResource]

    def describe_path(self, language: LanguageCode, namespace: Namespace) -> str:
        """Return the table key as "{language}/{namespace}"."""
        return f"{language}/{namespace}"

    async def fetch(self, language: LanguageCode, namespace: Namespace) -> Bundle:
        """Look up and validate the table entry for the pair.

        Raises:
            ResourceNotFoundError: Pair not present in the table
            MalformedResourceError: Entry is not a valid bundle
        """
        try:
            raw = self.resources[(language, namespace)]
        except KeyError:
            raise ResourceNotFoundError(language, namespace) from None
        return parse_bundle(raw, language, namespace)


@dataclass(frozen=True, slots=True)
class CallbackResourceFetcher:
    """Fetcher delegating to an injected async resolver function.

    The resolver returns the raw resource, or None when it does not exist.
    Exceptions raised by the resolver other than the nsl10n taxonomy are
    reported as TransportError.

    Example:
        >>> async def resolve(language, namespace):
        ...     return await my_store.get(f"{language}:{namespace}")
        >>> fetcher = CallbackResourceFetcher(resolve)
    """

    resolver: Callable[[LanguageCode, Namespace], Awaitable[RawResource | None]]

    def describe_path(self, language: LanguageCode, namespace: Namespace) -> str:
        """Return "{language}/{namespace}"."""
        return f"{language}/{namespace}"

    async def fetch(self, language: LanguageCode, namespace: Namespace) -> Bundle:
        """Invoke the resolver and validate its result.

        Raises:
            ResourceNotFoundError: Resolver returned None
            TransportError: Resolver raised, or returned an invalid bundle
        """
        try:
            raw = await self.resolver(language, namespace)
        except (ResourceNotFoundError, TransportError):
            raise
        except Exception as e:
            raise TransportError(language, namespace, f"{type(e).__name__}: {e}") from e
        if raw is None:
            raise ResourceNotFoundError(language, namespace)
        return parse_bundle(raw, language, namespace)


@dataclass(frozen=True, slots=True)
class PathResourceFetcher:
    """File system fetcher using a path template.

    Loads ``<base_path with {language} substituted>/<namespace>.json``.

    Security:
        Validates both language and namespace to prevent directory traversal.
        Codes containing path separators or ".." are rejected.
        All resolved paths are validated against a fixed root directory.

    Example:
        >>> fetcher = PathResourceFetcher("locales/{language}")
        >>> bundle = await fetcher.fetch("fr", "dashboard")
        # Loads from: locales/fr/dashboard.json

    Attributes:
        base_path: Path template with {language} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of base_path.
        suffix: File suffix appended to the namespace
    """

    base_path: str
    root_dir: str | None = None
    suffix: str = RESOURCE_FILE_SUFFIX
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory and validate template at initialization.

        Raises:
            ValueError: If base_path does not contain {language} placeholder
        """
        # Without the placeholder every language would read the same files.
        if "{language}" not in self.base_path:
            msg = (
                f"base_path must contain '{{language}}' placeholder for language "
                f"substitution, got: '{self.base_path}'"
            )
            raise ValueError(msg)

        if self.root_dir is not None:
            resolved = Path(self.root_dir).resolve()
        else:
            static_prefix = self.base_path.split("{language}")[0].rstrip("/\\")
            resolved = Path(static_prefix).resolve() if static_prefix else Path.cwd().resolve()
        object.__setattr__(self, "_resolved_root", resolved)

    def _resource_path(self, language: LanguageCode, namespace: Namespace) -> Path:
        _validate_segment("language", language)
        _validate_segment("namespace", namespace)
        base_dir = Path(self.base_path.replace("{language}", language)).resolve()
        full_path = (base_dir / f"{namespace}{self.suffix}").resolve()
        try:
            full_path.relative_to(self._resolved_root)
        except ValueError:
            msg = (
                f"Path traversal detected: resolved path escapes root directory. "
                f"language='{language}', namespace='{namespace}'"
            )
            raise ValueError(msg) from None
        return full_path

    def describe_path(self, language: LanguageCode, namespace: Namespace) -> str:
        """Return the language-substituted file path."""
        language_path = self.base_path.replace("{language}", language)
        return f"{language_path}/{namespace}{self.suffix}"

    async def fetch(self, language: LanguageCode, namespace: Namespace) -> Bundle:
        """Read and validate the bundle file.

        Raises:
            ResourceNotFoundError: File does not exist
            TransportError: Unsafe path, unreadable file or invalid content
        """
        try:
            path = self._resource_path(language, namespace)
        except ValueError as e:
            raise TransportError(language, namespace, str(e)) from e

        try:
            async with aiofiles.open(path, encoding="utf-8") as handle:
                text = await handle.read()
        except FileNotFoundError:
            raise ResourceNotFoundError(
                language, namespace, self.describe_path(language, namespace)
            ) from None
        except UnicodeDecodeError as e:
            raise MalformedResourceError(language, namespace, f"not UTF-8: {e}") from e
        except OSError as e:
            raise TransportError(language, namespace, f"cannot read {path}: {e}") from e

        logger.debug("Read %s (%d chars)", path, len(text))
        return parse_bundle(text, language, namespace)


class HttpResourceFetcher:
    """Remote fetcher using httpx.

    The URL template must contain ``{language}`` and ``{namespace}``; both
    are URL-quoted on substitution. HTTP 404 means the resource does not
    exist; every other unsuccessful response and every httpx error
    (connection failures, timeouts) is a TransportError.

    The fetcher owns the client it creates and closes it in aclose(). A
    client passed in by the caller is never closed here.

    Example:
        >>> fetcher = HttpResourceFetcher("https://cdn.example.com/locales/{language}/{namespace}.json")
        >>> bundle = await fetcher.fetch("fr", "common")
        >>> await fetcher.aclose()
    """

    __slots__ = ("_client", "_owns_client", "_url_template")

    def __init__(
        self,
        url_template: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the HTTP fetcher.

        Args:
            url_template: URL with {language} and {namespace} placeholders
            client: Shared AsyncClient (optional); created when omitted
            timeout: Request timeout in seconds for an owned client
            headers: Default headers for an owned client

        Raises:
            ValueError: If a placeholder is missing from url_template
        """
        for placeholder in ("{language}", "{namespace}"):
            if placeholder not in url_template:
                msg = f"url_template must contain '{placeholder}', got: '{url_template}'"
                raise ValueError(msg)
        self._url_template = url_template
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, headers=dict(headers or {}), follow_redirects=True
        )

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"HttpResourceFetcher({self._url_template!r})"

    def describe_path(self, language: LanguageCode, namespace: Namespace) -> str:
        """Return the substituted URL."""
        return self._url_template.replace("{language}", quote(language, safe="")).replace(
            "{namespace}", quote(namespace, safe="")
        )

    async def fetch(self, language: LanguageCode, namespace: Namespace) -> Bundle:
        """GET and validate the bundle.

        Raises:
            ResourceNotFoundError: Server answered 404
            TransportError: Unsafe segment, request failure or non-success status
        """
        try:
            _validate_segment("language", language)
            _validate_segment("namespace", namespace)
        except ValueError as e:
            raise TransportError(language, namespace, str(e)) from e

        url = self.describe_path(language, namespace)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(language, namespace, f"{type(e).__name__}: {e}") from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise ResourceNotFoundError(language, namespace, url)
        if not response.is_success:
            raise TransportError(language, namespace, f"HTTP {response.status_code} from {url}")

        return parse_bundle(response.content, language, namespace)

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a language fallback event.

    Provided to the on_fallback callback when a bundle was obtained from the
    fallback language instead of the requested one.

    Attributes:
        requested_language: The language originally requested
        resolved_language: The fallback language that supplied the bundle
        namespace: The namespace that was resolved

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.namespace}: {info.requested_language} -> {info.resolved_language}")
    """

    requested_language: LanguageCode
    resolved_language: LanguageCode
    namespace: Namespace


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of a single fetch attempt.

    Attributes:
        language: Language code that was fetched
        namespace: Namespace that was fetched
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source_path: Human-readable location of the resource
    """

    language: LanguageCode
    namespace: Namespace
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if the bundle was fetched successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if the resource was absent."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if the fetch failed with a transport error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of fetch attempts.

    All statistics are computed properties derived from ``results``.

    Attributes:
        results: All individual load results in attempt order

    Example:
        >>> summary = cache.get_load_summary()
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.source_path}: {result.error}")
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of fetch attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful fetches."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of absent resources."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of transport errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def has_errors(self) -> bool:
        """Check if any fetch failed with a transport error."""
        return self.errors > 0

    @property
    def all_successful(self) -> bool:
        """Check if every attempt succeeded (no errors, nothing missing)."""
        return self.errors == 0 and self.not_found == 0

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with transport errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results where the resource was absent."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_successful(self) -> tuple[ResourceLoadResult, ...]:
        """Get all successful results."""
        return tuple(r for r in self.results if r.is_success)

    def get_by_language(self, language: LanguageCode) -> tuple[ResourceLoadResult, ...]:
        """Get all results for one language."""
        return tuple(r for r in self.results if r.language == language)

    def get_by_namespace(self, namespace: Namespace) -> tuple[ResourceLoadResult, ...]:
        """Get all results for one namespace."""
        return tuple(r for r in self.results if r.namespace == namespace)
