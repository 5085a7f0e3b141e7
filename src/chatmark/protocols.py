"""Protocols for chatmark.

Defines the username lookup capability injected into the renderer.
"""

from __future__ import annotations

from typing import Protocol


class UserNameLookup(Protocol):
    """Resolve a mention id to a display name, asynchronously.

    Any ``async def lookup(user_id: str) -> str`` conforms. The lookup may
    raise; the renderer propagates the exception and produces no output.
    Caching, retries and fallbacks belong inside the lookup (see
    ``chatmark.lookups``), never in the renderer.

    Thread Safety:
        A single lookup may be shared by many concurrent renders. It is
        responsible for its own synchronization.

    """

    async def __call__(self, user_id: str) -> str:
        """Return the display name for ``user_id``.

        Args:
            user_id: Identifier captured from a ``<@id>`` marker (may be
                empty or truncated for unterminated markers)

        Returns:
            Display name, inserted after the mention prefix

        """
        ...
