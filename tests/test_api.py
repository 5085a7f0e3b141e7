"""Tests for the public chatmark API."""

import asyncio

import pytest

from chatmark import (
    Emoji,
    Mention,
    MessageParser,
    Text,
    parse_message,
    render,
    tokenize,
)

NAMES = {
    "270063754576789504": "crutchcorn (Corbin Crutchley)",
    "1": "one",
    "2": "two",
}


async def lookup(user_id: str) -> str:
    return NAMES[user_id]


class TestTokenize:
    def test_mixed_message(self) -> None:
        assert tokenize("hey <@1>, <:wave:5>") == (
            Text(content="hey "),
            Mention(id="1"),
            Text(content=", "),
            Emoji(name="wave", id="5"),
        )

    def test_empty(self) -> None:
        assert tokenize("") == ()


class TestRender:
    def test_empty_tokens_render_empty(self) -> None:
        assert asyncio.run(render([], lookup)) == ""

    def test_render_tokens(self) -> None:
        html = asyncio.run(render(tokenize("<@1> & <@2>"), lookup))
        assert html == "@one &amp; @two"


class TestParseMessage:
    def test_emoji(self) -> None:
        html = asyncio.run(
            parse_message("<:shrugging:519267805871341568> hi", lookup_user_name=lookup)
        )
        assert html == (
            '<img src="https://cdn.discordapp.com/emojis/519267805871341568.png" '
            'alt="shrugging"> hi'
        )

    def test_mention(self) -> None:
        html = asyncio.run(
            parse_message("hello <@270063754576789504>", lookup_user_name=lookup)
        )
        assert html == "hello @crutchcorn (Corbin Crutchley)"

    def test_empty_message(self) -> None:
        assert asyncio.run(parse_message("", lookup_user_name=lookup)) == ""

    def test_unknown_mention_fails_whole_message(self) -> None:
        with pytest.raises(KeyError):
            asyncio.run(parse_message("ok <@1> <@nobody>", lookup_user_name=lookup))

    def test_script_injection_is_escaped(self) -> None:
        html = asyncio.run(
            parse_message("<script>alert('x')</script>", lookup_user_name=lookup)
        )
        assert html == "&lt;script&gt;alert(&#039;x&#039;)&lt;/script&gt;"


class TestMessageParser:
    def test_call(self) -> None:
        parser = MessageParser(lookup)
        assert asyncio.run(parser("<@1>")) == "@one"

    def test_tokenize_and_render(self) -> None:
        parser = MessageParser(lookup)
        tokens = parser.tokenize("<@2>!")
        assert asyncio.run(parser.render(tokens)) == "@two!"

    def test_parse_many_preserves_order(self) -> None:
        async def slow_first(user_id: str) -> str:
            if user_id == "1":
                await asyncio.sleep(0.01)
            return NAMES[user_id]

        parser = MessageParser(slow_first)
        results = asyncio.run(parser.parse_many(["<@1>", "<@2>", "plain"]))
        assert results == ["@one", "@two", "plain"]

    def test_parse_many_empty(self) -> None:
        assert asyncio.run(MessageParser(lookup).parse_many([])) == []

    def test_parse_many_failure_propagates(self) -> None:
        parser = MessageParser(lookup)
        with pytest.raises(KeyError):
            asyncio.run(parser.parse_many(["<@1>", "<@missing>"]))
