"""Resilient mention lookups: caching plus a fallback name for unknown users.

The renderer never caches or retries; resilience lives in the lookup.
Here a slow member directory is wrapped so repeated mentions hit it once
and unknown users render as a placeholder instead of failing the page.

Run::

    python examples/lookups/resilient_lookup.py

"""

import asyncio
import logging

from chatmark import MessageParser
from chatmark.lookups import CachedLookup, FallbackLookup, MappingLookup, format_display_name

logging.basicConfig(level=logging.WARNING)

MEMBERS = MappingLookup(
    {
        "270063754576789504": format_display_name("crutchcorn", "Corbin Crutchley"),
    }
)


async def slow_directory(user_id: str) -> str:
    await asyncio.sleep(0.05)
    return await MEMBERS(user_id)


parser = MessageParser(FallbackLookup(CachedLookup(slow_directory)))

messages = [
    "hello <@270063754576789504>",
    "<@270063754576789504> posted <:shrugging:519267805871341568>",
    "who is <@1>?",
]

for html in asyncio.run(parser.parse_many(messages)):
    print(html)
