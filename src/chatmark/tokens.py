"""Token definitions for the chatmark lexer.

The lexer produces an ordered tuple of tokens that the renderer consumes.
A token is one of three frozen classes:

- Text: literal text between markers (raw, not yet escaped)
- Emoji: a custom emoji marker ``<:name:id>``
- Mention: a user mention marker ``<@id>``

``Token`` is the closed union of the three. Consumers dispatch with ``match``
and ``typing.assert_never`` so a missing case is a type error.

Thread Safety:
All tokens are frozen (immutable) and safe to share across threads and tasks.

"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar


class TokenType(Enum):
    """Discriminator for the three token kinds."""

    TEXT = auto()
    EMOJI = auto()
    MENTION = auto()


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text between markers.

    ``content`` is the raw source text. Escaping happens at render time.

    Attributes:
        content: Raw text (never empty when produced by the lexer)
        offset: Absolute start position in source
        end_offset: Absolute end position in source (exclusive)

    """

    type: ClassVar[TokenType] = TokenType.TEXT

    content: str
    offset: int = field(default=0, compare=False, repr=False)
    end_offset: int = field(default=0, compare=False, repr=False)

    @property
    def markup(self) -> str:
        """Source form of this token."""
        return self.content


@dataclass(frozen=True, slots=True)
class Emoji:
    """Custom emoji marker ``<:name:id>``.

    Fields may be empty or truncated when the marker was unterminated.

    Attributes:
        name: Display label between ``<:`` and ``:``
        id: Emoji identifier between ``:`` and ``>``
        offset: Absolute start position in source
        end_offset: Absolute end position in source (exclusive)

    """

    type: ClassVar[TokenType] = TokenType.EMOJI

    name: str
    id: str
    offset: int = field(default=0, compare=False, repr=False)
    end_offset: int = field(default=0, compare=False, repr=False)

    @property
    def markup(self) -> str:
        """Canonical source form (always fully terminated)."""
        return f"<:{self.name}:{self.id}>"


@dataclass(frozen=True, slots=True)
class Mention:
    """User mention marker ``<@id>``.

    Attributes:
        id: User identifier between ``<@`` and ``>``
        offset: Absolute start position in source
        end_offset: Absolute end position in source (exclusive)

    """

    type: ClassVar[TokenType] = TokenType.MENTION

    id: str
    offset: int = field(default=0, compare=False, repr=False)
    end_offset: int = field(default=0, compare=False, repr=False)

    @property
    def markup(self) -> str:
        """Canonical source form (always fully terminated)."""
        return f"<@{self.id}>"


Token = Text | Emoji | Mention


__all__ = [
    "Emoji",
    "Mention",
    "Text",
    "Token",
    "TokenType",
]
