"""TokenRenderer protocol — stable interface for token renderers.

Any renderer that implements ``async render(tokens) -> str`` conforms to
this protocol. The built-in ``HtmlRenderer`` is the reference implementation.

Example:
    from chatmark.renderers.protocol import TokenRenderer

    async def render_message(renderer: TokenRenderer, message: str) -> str:
        return await renderer.render(tokenize(message))

"""

from collections.abc import Iterable
from typing import Protocol

from chatmark.tokens import Token


class TokenRenderer(Protocol):
    """Protocol for token renderers.

    Implementations accept tokens in source order and return one string.
    The built-in ``HtmlRenderer`` conforms to this protocol.

    """

    async def render(self, tokens: Iterable[Token]) -> str:
        """Render a token sequence to a string.

        Args:
            tokens: Tokens in source order.

        Returns:
            Rendered string output.

        """
        ...
