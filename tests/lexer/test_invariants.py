"""Property-based tests for lexer and escaping invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

import asyncio
import re

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from chatmark import escape_html, render, tokenize
from chatmark.tokens import Emoji, Mention, Text

# Characters that exercise every branch of the lexer
MARKUP_ALPHABET = "<>:@a1 \n&\"'"

# Marker fields that cannot contain their own terminators
_names = st.text(alphabet="ab1<>@ &\n", max_size=20)
_ids = st.text(alphabet="ab1<:@ &\n", max_size=20)


async def _echo_lookup(user_id: str) -> str:
    return user_id


class TestTokenizeInvariants:
    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_never_raises(self, source: str) -> None:
        tokenize(source)

    @given(st.text(alphabet=MARKUP_ALPHABET, max_size=200))
    @settings(max_examples=200)
    def test_spans_are_contiguous(self, source: str) -> None:
        """Token spans tile the source from 0 to len(source)."""
        position = 0
        for token in tokenize(source):
            assert token.offset == position
            assert token.end_offset > token.offset
            position = token.end_offset
        assert position == len(source)

    @given(st.text(alphabet=MARKUP_ALPHABET, max_size=200))
    @settings(max_examples=200)
    def test_text_tokens_never_empty_or_adjacent(self, source: str) -> None:
        tokens = tokenize(source)
        for prev, token in zip(tokens, tokens[1:]):
            assert not (isinstance(prev, Text) and isinstance(token, Text))
        for token in tokens:
            if isinstance(token, Text):
                assert token.content

    @given(st.text(alphabet=MARKUP_ALPHABET, max_size=200))
    @settings(max_examples=200)
    def test_text_tokens_hold_no_sigils(self, source: str) -> None:
        for token in tokenize(source):
            if isinstance(token, Text):
                assert "<:" not in token.content
                assert "<@" not in token.content

    @given(st.text(alphabet=MARKUP_ALPHABET, max_size=200))
    @settings(max_examples=200)
    def test_text_content_matches_source_slice(self, source: str) -> None:
        for token in tokenize(source):
            if isinstance(token, Text):
                assert source[token.offset : token.end_offset] == token.content

    @given(
        st.lists(
            st.one_of(
                st.text(alphabet="ab <>:@&", min_size=1, max_size=10).filter(
                    lambda s: "<:" not in s and "<@" not in s and not s.endswith("<")
                ),
                st.builds(lambda n, i: f"<:{n}:{i}>", _names, _ids),
                st.builds(lambda i: f"<@{i}>", _ids),
            ),
            max_size=10,
        )
    )
    @settings(max_examples=200)
    def test_well_formed_markup_round_trips(self, parts: list[str]) -> None:
        """Concatenated token markup reproduces well-formed input exactly."""
        source = "".join(parts)
        assert "".join(t.markup for t in tokenize(source)) == source


class TestEscapingInvariants:
    @given(st.text(max_size=300))
    @settings(max_examples=200)
    def test_no_raw_reserved_characters(self, text: str) -> None:
        escaped = escape_html(text)
        assert "<" not in escaped
        assert ">" not in escaped
        assert '"' not in escaped
        assert "'" not in escaped
        # Every remaining '&' starts one of the five entities
        stripped = re.sub(r"&(amp|lt|gt|quot|#039);", "", escaped)
        assert "&" not in stripped

    @given(st.text(max_size=300))
    @settings(max_examples=100)
    def test_plain_text_renders_as_escaped(self, text: str) -> None:
        """Without sigils, rendering equals escaping the whole input."""
        assume("<:" not in text and "<@" not in text)
        html = asyncio.run(render(tokenize(text), _echo_lookup))
        assert html == escape_html(text)

    @given(st.text(alphabet=MARKUP_ALPHABET, max_size=100))
    @settings(max_examples=100)
    def test_render_never_leaks_text_markup(self, source: str) -> None:
        """Text fragments in the output contain no raw '<' or '>'."""
        tokens = tokenize(source)
        texts = [t for t in tokens if isinstance(t, Text)]
        html = asyncio.run(render(texts, _echo_lookup))
        assert "<" not in html and ">" not in html


class TestMarkerFields:
    @given(_names, _ids)
    @settings(max_examples=50)
    def test_emoji_fields_are_captured_verbatim(self, name: str, emoji_id: str) -> None:
        assert tokenize(f"<:{name}:{emoji_id}>") == (Emoji(name=name, id=emoji_id),)

    @given(_ids)
    @settings(max_examples=50)
    def test_mention_id_is_captured_verbatim(self, user_id: str) -> None:
        assert tokenize(f"<@{user_id}>") == (Mention(id=user_id),)
