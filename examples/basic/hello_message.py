"""Render a Discord message to HTML with the default configuration."""

import asyncio

from chatmark import parse_message


async def lookup(user_id: str) -> str:
    return "crutchcorn (Corbin Crutchley)"


html = asyncio.run(
    parse_message(
        "hello <@270063754576789504> <:shrugging:519267805871341568> <b>bold?</b>",
        lookup_user_name=lookup,
    )
)
print(html)
