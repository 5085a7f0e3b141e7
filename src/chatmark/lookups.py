"""Username lookup providers.

The renderer resolves mentions through an injected ``UserNameLookup`` and
never caches, retries or substitutes names itself. These providers put that
behavior where it belongs, inside the lookup, and compose by wrapping:

    >>> lookup = FallbackLookup(CachedLookup(MappingLookup(members)))
    >>> html = await parse_message(message, lookup_user_name=lookup)

Thread Safety:
    MappingLookup and FallbackLookup hold no mutable state. CachedLookup
    tracks in-flight requests and must be used from a single event loop;
    its cache object is caller-owned and scoped to the CachedLookup.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Protocol

from chatmark.errors import UnknownUserError
from chatmark.protocols import UserNameLookup
from chatmark.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FALLBACK_NAME = "Unknown User"


def format_display_name(username: str, display_name: str | None = None) -> str:
    """Format a user the way Discord archives show mentions.

    Example:
        >>> format_display_name("crutchcorn", "Corbin Crutchley")
        'crutchcorn (Corbin Crutchley)'
        >>> format_display_name("crutchcorn")
        'crutchcorn'
    """
    if display_name and display_name != username:
        return f"{username} ({display_name})"
    return username


class MappingLookup:
    """Resolve names from a fixed ``{user_id: name}`` mapping.

    Unknown ids raise UnknownUserError. Wrap in FallbackLookup to degrade
    to a placeholder instead.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Mapping[str, str]) -> None:
        self._names = dict(names)

    async def __call__(self, user_id: str) -> str:
        try:
            return self._names[user_id]
        except KeyError:
            raise UnknownUserError(user_id) from None


class LookupCache(Protocol):
    """Protocol for username caches used by CachedLookup."""

    def get(self, user_id: str) -> str | None:
        """Return the cached name if present, else None."""
        ...

    def put(self, user_id: str, name: str) -> None:
        """Store a resolved name."""
        ...


class DictLookupCache:
    """In-memory username cache using a dict.

    Unbounded; create one per build or per batch.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, user_id: str) -> str | None:
        return self._data.get(user_id)

    def put(self, user_id: str, name: str) -> None:
        self._data[user_id] = name

    def __len__(self) -> int:
        return len(self._data)


class CachedLookup:
    """Memoize another lookup in an explicit cache object.

    Concurrent requests for the same id share a single call to the wrapped
    lookup. Failures are not cached, so the next request retries.

    Args:
        inner: Lookup to call on a cache miss
        cache: Cache to read and fill. Defaults to a fresh DictLookupCache.

    """

    __slots__ = ("_inner", "_cache", "_inflight")

    def __init__(self, inner: UserNameLookup, cache: LookupCache | None = None) -> None:
        self._inner = inner
        self._cache: LookupCache = cache if cache is not None else DictLookupCache()
        self._inflight: dict[str, asyncio.Future[str]] = {}

    @property
    def cache(self) -> LookupCache:
        return self._cache

    async def __call__(self, user_id: str) -> str:
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        pending = self._inflight.get(user_id)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(user_id))
            # Marks a failure as retrieved even if every waiter was cancelled
            pending.add_done_callback(_consume_exception)
            self._inflight[user_id] = pending
        # Shielded so one cancelled waiter does not cancel the shared call
        return await asyncio.shield(pending)

    async def _fetch(self, user_id: str) -> str:
        try:
            name = await self._inner(user_id)
            self._cache.put(user_id, name)
            return name
        finally:
            self._inflight.pop(user_id, None)


def _consume_exception(future: asyncio.Future[str]) -> None:
    if not future.cancelled():
        future.exception()


class FallbackLookup:
    """Substitute a placeholder name when the wrapped lookup fails.

    Only the listed exception types are caught; cancellation always
    propagates.

    Args:
        inner: Lookup to try first
        fallback: Name to return on failure
        exceptions: Exception types that trigger the fallback

    """

    __slots__ = ("_inner", "_fallback", "_exceptions")

    def __init__(
        self,
        inner: UserNameLookup,
        fallback: str = DEFAULT_FALLBACK_NAME,
        exceptions: tuple[type[Exception], ...] = (Exception,),
    ) -> None:
        self._inner = inner
        self._fallback = fallback
        self._exceptions = exceptions

    async def __call__(self, user_id: str) -> str:
        try:
            return await self._inner(user_id)
        except self._exceptions as exc:
            logger.warning("Using fallback name for user %r: %s", user_id, exc)
            return self._fallback


__all__ = [
    "DEFAULT_FALLBACK_NAME",
    "CachedLookup",
    "DictLookupCache",
    "FallbackLookup",
    "LookupCache",
    "MappingLookup",
    "format_display_name",
]
