"""Per-(language, namespace) memo of resolved bundles with single-flight loading.

Architecture:
    - Resolved bundles (or EMPTY_BUNDLE) stored in a dict keyed by
      (language, namespace)
    - Pending-load markers are asyncio tasks in a second dict under the same key
    - Concurrent callers for a pending key await the same task via
      asyncio.shield, so a cancelled caller never cancels the shared load
    - No timer expiry: entries leave only through invalidate()/invalidate_all()

Concurrency model:
    Single event loop, cooperative scheduling. Both dicts are mutated only
    between suspension points, so no lock is needed. The instance is not
    thread-safe; use one per event loop.

Invalidation while a load is pending drops the marker. The orphaned task
still completes and delivers its bundle to callers already awaiting it, but
does not write to the cache.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging

from nsl10n.localization.fallback import FallbackResolver
from nsl10n.localization.loading import LoadSummary
from nsl10n.localization.types import Bundle, LanguageCode, Namespace

__all__ = ["NamespaceCache"]

logger = logging.getLogger(__name__)

type _CacheKey = tuple[LanguageCode, Namespace]


def _consume_task_exception(task: asyncio.Task[Bundle]) -> None:
    # Retrieve the exception so an abandoned load does not warn at GC time.
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Bundle load %s failed: %r", task.get_name(), task.exception())


class NamespaceCache:
    """Memoize bundles per (language, namespace) and collapse duplicate loads.

    Single-flight holds within one cache generation: at most one load per
    key is outstanding until that key is invalidated. invalidate() and
    invalidate_all() start a new generation, so a caller arriving after an
    invalidation starts a fresh load even if the orphaned one is still
    running.

    Example:
        >>> resolver = FallbackResolver(fetcher)
        >>> cache = NamespaceCache(resolver, fallback_language="en")
        >>> bundle = await cache.get_bundle("fr", "dashboard")
        >>> bundle is await cache.get_bundle("fr", "dashboard")
        True
        >>> cache.invalidate("fr")
        1
    """

    __slots__ = (
        "_entries",
        "_fallback_language",
        "_hits",
        "_joins",
        "_misses",
        "_pending",
        "_resolver",
    )

    def __init__(self, resolver: FallbackResolver, fallback_language: LanguageCode) -> None:
        """Initialize an empty cache.

        Args:
            resolver: Resolver invoked on cache misses
            fallback_language: Fallback language passed to every resolution
        """
        self._resolver = resolver
        self._fallback_language = fallback_language
        self._entries: dict[_CacheKey, Bundle] = {}
        self._pending: dict[_CacheKey, asyncio.Task[Bundle]] = {}
        self._hits = 0
        self._misses = 0
        self._joins = 0

    @property
    def fallback_language(self) -> LanguageCode:
        """Language used for the single fallback hop."""
        return self._fallback_language

    def __len__(self) -> int:
        """Number of resolved entries (pending loads excluded)."""
        return len(self._entries)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"NamespaceCache(entries={len(self._entries)}, pending={len(self._pending)}, "
            f"fallback={self._fallback_language!r})"
        )

    async def get_bundle(self, language: LanguageCode, namespace: Namespace) -> Bundle:
        """Return the bundle for the pair, loading it at most once.

        Never raises for fetch failures; the worst case is EMPTY_BUNDLE.

        Args:
            language: Requested language
            namespace: Requested namespace

        Returns:
            Cached bundle (reference-identical across calls until invalidated)
        """
        key = (language, namespace)

        bundle = self._entries.get(key)
        if bundle is not None:
            self._hits += 1
            logger.debug("Cache hit for %s/%s", language, namespace)
            return bundle

        task = self._pending.get(key)
        if task is None:
            self._misses += 1
            task = asyncio.get_running_loop().create_task(
                self._load(key), name=f"nsl10n-load:{language}/{namespace}"
            )
            task.add_done_callback(_consume_task_exception)
            self._pending[key] = task
        else:
            self._joins += 1
            logger.debug("Joining pending load for %s/%s", language, namespace)

        return await asyncio.shield(task)

    async def _load(self, key: _CacheKey) -> Bundle:
        language, namespace = key
        try:
            bundle = await self._resolver.resolve(language, namespace, self._fallback_language)
        except BaseException:
            self._release(key)
            raise

        if self._release(key):
            self._entries[key] = bundle
        else:
            logger.debug("Discarding %s/%s: invalidated while loading", language, namespace)
        return bundle

    def _release(self, key: _CacheKey) -> bool:
        """Drop the pending marker if it still belongs to the running task.

        Returns:
            True if the marker was current (result may be stored)
        """
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]
            return True
        return False

    def peek(self, language: LanguageCode, namespace: Namespace) -> Bundle | None:
        """Return a resolved bundle without loading.

        Returns:
            The cached bundle, or None if not resolved yet (including pending)
        """
        return self._entries.get((language, namespace))

    def is_loaded(self, language: LanguageCode, namespace: Namespace) -> bool:
        """Check whether the pair has a resolved entry."""
        return (language, namespace) in self._entries

    def is_pending(self, language: LanguageCode, namespace: Namespace) -> bool:
        """Check whether a load for the pair is in flight."""
        return (language, namespace) in self._pending

    def loaded_namespaces(self, language: LanguageCode) -> tuple[Namespace, ...]:
        """Namespaces with a resolved entry for ``language``, in load order."""
        return tuple(ns for lang, ns in self._entries if lang == language)

    def invalidate(self, language: LanguageCode) -> int:
        """Drop every entry and pending marker for ``language``.

        Args:
            language: Language whose entries are dropped

        Returns:
            Number of resolved entries removed
        """
        stale = [key for key in self._entries if key[0] == language]
        for key in stale:
            del self._entries[key]
        for key in [key for key in self._pending if key[0] == language]:
            del self._pending[key]
        logger.debug("Invalidated %d entries for language '%s'", len(stale), language)
        return len(stale)

    def invalidate_all(self) -> None:
        """Drop every entry and pending marker."""
        count = len(self._entries)
        self._entries.clear()
        self._pending.clear()
        logger.debug("Invalidated all %d entries", count)

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Resolved entries
            - pending (int): Loads in flight
            - hits (int): Calls served from a resolved entry
            - misses (int): Calls that started a new load
            - joins (int): Calls that awaited an already pending load
            - hit_rate (float): Hits as percentage of all calls (0.0-100.0)
        """
        total = self._hits + self._misses + self._joins
        hit_rate = (self._hits / total * 100) if total > 0 else 0.0
        return {
            "size": len(self._entries),
            "pending": len(self._pending),
            "hits": self._hits,
            "misses": self._misses,
            "joins": self._joins,
            "hit_rate": round(hit_rate, 2),
        }

    def get_load_summary(self) -> LoadSummary:
        """Get summary of every fetch attempt made by the resolver."""
        return self._resolver.get_load_summary()
