"""Single-pass lexer for Discord-style message markup.

Recognizes two markers and treats everything else as literal text:

- ``<:name:id>`` custom emoji
- ``<@id>`` user mention

Scanning is left to right with one character of lookahead. Once a marker
sigil (``<:`` or ``<@``) is seen the lexer commits to that marker; missing
terminators shorten its fields instead of turning it back into text. So
``"<:oops"`` lexes to ``Emoji(name="oops", id="")``.

No regex. Each position is visited once, so tokenization is O(n).

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator

from chatmark.tokens import Emoji, Mention, Text, Token

EMOJI_SIGIL = "<:"
MENTION_SIGIL = "<@"


class Lexer:
    """Message lexer.

    Usage:
            >>> lexer = Lexer("hi <:wave:123> <@42>")
            >>> list(lexer.tokenize())
        [Text(content='hi '), Emoji(name='wave', id='123'), Text(content=' '), Mention(id='42')]

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_source",
        "_source_len",  # Cached len(source)
        "_pos",
        "_text_start",  # Start of the pending text run
    )

    def __init__(self, source: str) -> None:
        """Initialize lexer with source text.

        Args:
            source: Raw message text
        """
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self._text_start = 0

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            Token objects in source order

        Complexity: O(n) where n = len(source)
        """
        source = self._source
        source_len = self._source_len

        while self._pos < source_len:
            if source[self._pos] == "<" and self._pos + 1 < source_len:
                sigil = source[self._pos : self._pos + 2]
                if sigil == EMOJI_SIGIL:
                    yield from self._flush_text()
                    yield self._scan_emoji()
                    continue
                if sigil == MENTION_SIGIL:
                    yield from self._flush_text()
                    yield self._scan_mention()
                    continue
            self._pos += 1

        yield from self._flush_text()

    # =========================================================================
    # Scanning helpers
    # =========================================================================

    def _flush_text(self) -> Iterator[Text]:
        """Emit the pending text run, if any, and start a new one."""
        if self._pos > self._text_start:
            yield Text(
                content=self._source[self._text_start : self._pos],
                offset=self._text_start,
                end_offset=self._pos,
            )
        self._text_start = self._pos

    def _read_until(self, terminator: str) -> str:
        """Read up to ``terminator`` or end of input, then skip the terminator.

        Uses str.find so the scan runs in C.

        Returns:
            The characters before the terminator (possibly empty).
        """
        idx = self._source.find(terminator, self._pos)
        if idx == -1:
            idx = self._source_len
        value = self._source[self._pos : idx]
        # Skips the terminator when present; clamps at end of input otherwise
        self._pos = min(idx + 1, self._source_len)
        return value

    def _scan_emoji(self) -> Emoji:
        """Scan ``<:name:id>`` starting at the sigil."""
        start = self._pos
        self._pos += len(EMOJI_SIGIL)
        name = self._read_until(":")
        emoji_id = self._read_until(">")
        self._text_start = self._pos
        return Emoji(name=name, id=emoji_id, offset=start, end_offset=self._pos)

    def _scan_mention(self) -> Mention:
        """Scan ``<@id>`` starting at the sigil."""
        start = self._pos
        self._pos += len(MENTION_SIGIL)
        user_id = self._read_until(">")
        self._text_start = self._pos
        return Mention(id=user_id, offset=start, end_offset=self._pos)


def tokenize(source: str) -> tuple[Token, ...]:
    """Tokenize a message into an immutable token sequence.

    Never raises. Malformed markers degrade to partially filled tokens.

    Args:
        source: Raw message text

    Returns:
        Tuple of tokens in source order (empty for empty input)

    Example:
        >>> tokenize("<@270063754576789504>")
        (Mention(id='270063754576789504'),)
    """
    return tuple(Lexer(source).tokenize())


__all__ = [
    "EMOJI_SIGIL",
    "MENTION_SIGIL",
    "Lexer",
    "tokenize",
]
