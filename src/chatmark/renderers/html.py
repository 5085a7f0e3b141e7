"""Async HTML renderer for message tokens.

Maps each token to an HTML fragment and joins the fragments in token order:

- Text: HTML-escaped content
- Emoji: ``<img src="{cdn url}" alt="{name}">``
- Mention: mention prefix + name from the injected lookup

Mention lookups are the only step that can suspend. All of them are started
as tasks before any is awaited (fan-out), then joined in token order
(fan-in), so a later mention resolving first never reorders the output.
If one lookup fails, the rest are cancelled and the failure propagates;
no partial HTML is returned.

Thread Safety:
All per-render state lives in local variables of render(). A single
HtmlRenderer can serve concurrent renders as long as its lookup can.
"""

import asyncio
from collections.abc import Iterable
from typing import assert_never

from chatmark.config import RenderConfig, get_render_config
from chatmark.protocols import UserNameLookup
from chatmark.tokens import Emoji, Mention, Text, Token
from chatmark.utils.logger import get_logger
from chatmark.utils.text import escape_html

logger = get_logger(__name__)


class HtmlRenderer:
    """Render token sequences to an HTML fragment.

    Usage:
        >>> async def lookup(user_id: str) -> str:
        ...     return "crutchcorn (Corbin Crutchley)"
        >>> renderer = HtmlRenderer(lookup)
        >>> await renderer.render(tokenize("hello <@270063754576789504>"))
        'hello @crutchcorn (Corbin Crutchley)'

    Args:
        lookup_user_name: Async capability resolving mention ids to names
        config: Render configuration. When None, the context's config
            (``get_render_config()``) is read at each render() call.

    """

    __slots__ = ("_lookup_user_name", "_config")

    def __init__(
        self,
        lookup_user_name: UserNameLookup,
        *,
        config: RenderConfig | None = None,
    ) -> None:
        self._lookup_user_name = lookup_user_name
        self._config = config

    async def render(self, tokens: Iterable[Token]) -> str:
        """Render tokens to HTML.

        Args:
            tokens: Tokens in source order (as produced by ``tokenize``)

        Returns:
            Concatenation of every token's fragment, in order

        Raises:
            Exception: Whatever the lookup raised for a failing mention.
        """
        config = self._config if self._config is not None else get_render_config()

        fragments: list[str | asyncio.Task[str]] = []
        lookups: list[asyncio.Task[str]] = []

        try:
            for token in tokens:
                match token:
                    case Text():
                        fragments.append(escape_html(token.content))
                    case Emoji():
                        fragments.append(self._render_emoji(token, config))
                    case Mention():
                        task = asyncio.create_task(self._render_mention(token, config))
                        lookups.append(task)
                        fragments.append(task)
                    case _:
                        assert_never(token)

            if lookups:
                logger.debug("Resolving %d mention(s)", len(lookups))
                await asyncio.gather(*lookups)
        except BaseException:
            # Abandon in-flight lookups and let them settle before re-raising
            for task in lookups:
                task.cancel()
            await asyncio.gather(*lookups, return_exceptions=True)
            raise

        return "".join(f if isinstance(f, str) else f.result() for f in fragments)

    def _render_emoji(self, token: Emoji, config: RenderConfig) -> str:
        """Render an emoji marker as an image tag."""
        emoji_id, name = token.id, token.name
        if config.escape_marker_fields:
            emoji_id, name = escape_html(emoji_id), escape_html(name)
        src = config.emoji_url_template.format(id=emoji_id, name=name)
        return f'<img src="{src}" alt="{name}">'

    async def _render_mention(self, token: Mention, config: RenderConfig) -> str:
        """Resolve a mention through the lookup and render it."""
        try:
            name = await self._lookup_user_name(token.id)
        except Exception:
            logger.debug("Username lookup failed for %r", token.id, exc_info=True)
            raise
        if config.escape_marker_fields:
            name = escape_html(name)
        return f"{config.mention_prefix}{name}"


__all__ = ["HtmlRenderer"]
