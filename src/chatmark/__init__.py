"""
chatmark — Discord-style message markup to safe HTML

Converts message text containing custom emoji markers (``<:name:id>``) and
user mentions (``<@id>``) into an HTML fragment. Free text is escaped, emoji
become CDN image tags, and mentions are resolved through an async lookup you
provide. Zero runtime dependencies.

Quick Start:
    >>> import asyncio
    >>> from chatmark import parse_message
    >>>
    >>> async def lookup(user_id: str) -> str:
    ...     return "crutchcorn (Corbin Crutchley)"
    >>>
    >>> asyncio.run(parse_message("hello <@270063754576789504>", lookup_user_name=lookup))
    'hello @crutchcorn (Corbin Crutchley)'

    >>> # Or bind the lookup once with MessageParser
    >>> from chatmark import MessageParser
    >>> parser = MessageParser(lookup)
    >>> html = await parser("<:shrugging:519267805871341568> hi")

Resilient lookups:
    >>> from chatmark.lookups import CachedLookup, FallbackLookup
    >>> parser = MessageParser(FallbackLookup(CachedLookup(fetch_member_name)))
"""

import asyncio
from collections.abc import Iterable

from chatmark.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from chatmark.errors import ChatmarkError, ConfigError, UnknownUserError
from chatmark.lexer import Lexer, tokenize
from chatmark.protocols import UserNameLookup
from chatmark.renderers.html import HtmlRenderer
from chatmark.renderers.protocol import TokenRenderer
from chatmark.serialization import from_dict, from_json, to_dict, to_json
from chatmark.tokens import Emoji, Mention, Text, Token, TokenType
from chatmark.utils.text import escape_html

__version__ = "0.1.0"


async def render(
    tokens: Iterable[Token],
    lookup_user_name: UserNameLookup,
    *,
    config: RenderConfig | None = None,
) -> str:
    """Render tokens to an HTML fragment.

    Args:
        tokens: Tokens in source order
        lookup_user_name: Async capability resolving mention ids to names
        config: Render configuration (context config if None)

    Returns:
        HTML string; ``""`` for an empty token sequence

    Raises:
        Exception: Whatever the lookup raised for a failing mention. No
            partial output is produced.
    """
    return await HtmlRenderer(lookup_user_name, config=config).render(tokens)


async def parse_message(
    message: str,
    *,
    lookup_user_name: UserNameLookup,
    config: RenderConfig | None = None,
) -> str:
    """Tokenize and render a message in one call.

    Args:
        message: Raw message text
        lookup_user_name: Async capability resolving mention ids to names
        config: Render configuration (context config if None)

    Returns:
        HTML string

    Example:
        >>> await parse_message("<:shrugging:519267805871341568> hi", lookup_user_name=lookup)
        '<img src="https://cdn.discordapp.com/emojis/519267805871341568.png" alt="shrugging"> hi'
    """
    return await render(tokenize(message), lookup_user_name, config=config)


class MessageParser:
    """High-level message parser with a bound lookup and config.

    Usage:
        >>> parser = MessageParser(lookup)
        >>> html = await parser("hello <@270063754576789504>")
        >>> pages = await parser.parse_many(messages)

    Thread Safety:
        Holds only the lookup and an immutable config. Safe to share across
        tasks when the lookup is.

    """

    __slots__ = ("_renderer",)

    def __init__(
        self,
        lookup_user_name: UserNameLookup,
        *,
        config: RenderConfig | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            lookup_user_name: Async capability resolving mention ids to names
            config: Render configuration (context config if None)
        """
        self._renderer = HtmlRenderer(lookup_user_name, config=config)

    async def __call__(self, message: str) -> str:
        """Tokenize and render one message."""
        return await self._renderer.render(tokenize(message))

    def tokenize(self, message: str) -> tuple[Token, ...]:
        """Tokenize one message without rendering."""
        return tokenize(message)

    async def render(self, tokens: Iterable[Token]) -> str:
        """Render already-tokenized input."""
        return await self._renderer.render(tokens)

    async def parse_many(self, messages: Iterable[str]) -> list[str]:
        """Render a batch of messages concurrently.

        Results are returned in input order. If any message fails, the
        remaining renders are cancelled and the failure propagates.

        Args:
            messages: Iterable of raw message strings

        Returns:
            List of HTML strings, one per message

        """
        tasks = [asyncio.create_task(self(message)) for message in messages]
        if not tasks:
            return []
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise


__all__ = [  # noqa: RUF022 — grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "tokenize",
    "render",
    "parse_message",
    "escape_html",
    # High-level
    "MessageParser",
    # Tokens
    "Token",
    "TokenType",
    "Text",
    "Emoji",
    "Mention",
    # Lexer / renderer
    "Lexer",
    "HtmlRenderer",
    "TokenRenderer",
    "UserNameLookup",
    # Configuration (ContextVar-based)
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Errors
    "ChatmarkError",
    "ConfigError",
    "UnknownUserError",
]
