"""Single-hop language fallback around a ResourceFetcher.

FallbackResolver is the boundary below which fetch failures are absorbed.
A failed fetch for the requested language is retried exactly once against
the fallback language; a second failure yields EMPTY_BUNDLE. The hop is
never chained, so adding languages cannot create fallback cycles.

Both ResourceNotFoundError and TransportError take the same route: to the
user a missing resource and an unreachable one look identical. Other
exceptions are programming errors and propagate.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable

from nsl10n.constants import MAX_LOAD_RESULTS
from nsl10n.enums import LoadStatus
from nsl10n.errors import ResourceNotFoundError, TransportError
from nsl10n.localization.loading import (
    FallbackInfo,
    LoadSummary,
    ResourceFetcher,
    ResourceLoadResult,
)
from nsl10n.localization.types import EMPTY_BUNDLE, Bundle, LanguageCode, Namespace

__all__ = ["FallbackResolver"]

logger = logging.getLogger(__name__)


class FallbackResolver:
    """Resolve a bundle with at most one fallback hop.

    Every fetch attempt is recorded as a ResourceLoadResult and can be
    inspected through get_load_summary(). Only the most recent
    ``max_load_results`` attempts are retained.

    Example:
        >>> resolver = FallbackResolver(PathResourceFetcher("locales/{language}"))
        >>> bundle = await resolver.resolve("fr", "dashboard", "en")
        # Tries locales/fr/dashboard.json, then locales/en/dashboard.json
    """

    __slots__ = ("_fetcher", "_load_results", "_on_fallback")

    def __init__(
        self,
        fetcher: ResourceFetcher,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        max_load_results: int = MAX_LOAD_RESULTS,
    ) -> None:
        """Initialize the resolver.

        Args:
            fetcher: Fetcher used for both the primary and the fallback attempt
            on_fallback: Optional callback invoked when the fallback language
                supplied the bundle. Useful for spotting untranslated namespaces.
            max_load_results: Attempts kept for get_load_summary(); must be positive

        Raises:
            ValueError: If max_load_results is not positive
        """
        if max_load_results <= 0:
            msg = f"max_load_results must be positive, got {max_load_results}"
            raise ValueError(msg)
        self._fetcher = fetcher
        self._on_fallback = on_fallback
        self._load_results: deque[ResourceLoadResult] = deque(maxlen=max_load_results)

    @property
    def fetcher(self) -> ResourceFetcher:
        """The wrapped fetcher."""
        return self._fetcher

    def _describe(self, language: LanguageCode, namespace: Namespace) -> str:
        describe = getattr(self._fetcher, "describe_path", None)
        if describe is None:
            return f"{language}/{namespace}"
        return str(describe(language, namespace))

    async def _attempt(self, language: LanguageCode, namespace: Namespace) -> Bundle | None:
        """Fetch once and record the outcome. Returns None on a taxonomy failure."""
        source_path = self._describe(language, namespace)
        try:
            bundle = await self._fetcher.fetch(language, namespace)
        except ResourceNotFoundError as e:
            logger.warning("Namespace '%s' not found for language '%s'", namespace, language)
            self._record(language, namespace, LoadStatus.NOT_FOUND, e, source_path)
            return None
        except TransportError as e:
            logger.warning(
                "Failed to load namespace '%s' for language '%s': %s", namespace, language, e
            )
            self._record(language, namespace, LoadStatus.ERROR, e, source_path)
            return None

        logger.debug("Loaded namespace '%s' for language '%s'", namespace, language)
        self._record(language, namespace, LoadStatus.SUCCESS, None, source_path)
        return bundle

    def _record(
        self,
        language: LanguageCode,
        namespace: Namespace,
        status: LoadStatus,
        error: Exception | None,
        source_path: str,
    ) -> None:
        self._load_results.append(
            ResourceLoadResult(
                language=language,
                namespace=namespace,
                status=status,
                error=error,
                source_path=source_path,
            )
        )

    async def resolve(
        self,
        language: LanguageCode,
        namespace: Namespace,
        fallback_language: LanguageCode,
    ) -> Bundle:
        """Fetch ``namespace`` for ``language``, falling back once.

        Args:
            language: Requested language
            namespace: Requested namespace
            fallback_language: Language tried when the first fetch fails

        Returns:
            The fetched bundle, unmodified, or EMPTY_BUNDLE when neither the
            requested nor the fallback language could supply it
        """
        bundle = await self._attempt(language, namespace)
        if bundle is not None:
            return bundle

        if language == fallback_language:
            logger.error(
                "Namespace '%s' unavailable for language '%s'; using empty bundle",
                namespace,
                language,
            )
            return EMPTY_BUNDLE

        bundle = await self._attempt(fallback_language, namespace)
        if bundle is None:
            logger.error(
                "Namespace '%s' unavailable for '%s' and fallback '%s'; using empty bundle",
                namespace,
                language,
                fallback_language,
            )
            return EMPTY_BUNDLE

        logger.info(
            "Namespace '%s' resolved from fallback '%s' (requested '%s')",
            namespace,
            fallback_language,
            language,
        )
        if self._on_fallback is not None:
            info = FallbackInfo(
                requested_language=language,
                resolved_language=fallback_language,
                namespace=namespace,
            )
            try:
                self._on_fallback(info)
            except Exception:
                # Observer failures must not turn a resolved bundle into an error
                logger.exception("on_fallback callback failed for %s", info)
        return bundle

    def get_load_summary(self) -> LoadSummary:
        """Get summary of the retained fetch attempts.

        Returns:
            LoadSummary over the most recent attempts, oldest first
        """
        return LoadSummary(results=tuple(self._load_results))
