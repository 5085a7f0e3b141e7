"""Token serialization — JSON round-trip for chatmark token sequences.

Converts tokens to/from JSON-compatible dicts. Useful for:
- Caching tokenized messages between build steps
- Resolving mentions in a separate process from tokenization
- Debugging and inspection

All output is deterministic (sorted keys) for cache-key stability.

Example:
    from chatmark import tokenize
    from chatmark.serialization import to_json, from_json

    tokens = tokenize("hi <@42>")
    assert from_json(to_json(tokens)) == tokens

Thread Safety:
    All functions are pure — safe to call from any thread.

"""

import json
from dataclasses import fields
from typing import Any

from chatmark.tokens import Emoji, Mention, Text, Token

# Registry of token type names to classes for deserialization
_TOKEN_TYPES: dict[str, type[Token]] = {
    "Text": Text,
    "Emoji": Emoji,
    "Mention": Mention,
}


def to_dict(token: Token) -> dict[str, Any]:
    """Convert a token to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.

    Args:
        token: Any chatmark token.

    Returns:
        Dict with ``_type`` and all token fields (offsets included).

    """
    result: dict[str, Any] = {"_type": type(token).__name__}
    for f in fields(token):
        result[f.name] = getattr(token, f.name)
    return result


def from_dict(data: dict[str, Any]) -> Token:
    """Reconstruct a token from a dict.

    Args:
        data: Dict with ``_type`` and token fields (as produced by to_dict).

    Returns:
        Token (frozen dataclass).

    Raises:
        ValueError: If ``_type`` is missing or unknown.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized token"
        raise ValueError(msg)

    token_cls = _TOKEN_TYPES.get(type_name)
    if token_cls is None:
        msg = f"Unknown token type: {type_name!r}"
        raise ValueError(msg)

    kwargs = {f.name: data[f.name] for f in fields(token_cls) if f.name in data}
    return token_cls(**kwargs)


def to_json(tokens: tuple[Token, ...], *, indent: int | None = None) -> str:
    """Serialize a token sequence to a JSON array string.

    Args:
        tokens: Tokens in source order.
        indent: JSON indentation level (None for compact).

    Returns:
        JSON string.

    """
    return json.dumps([to_dict(t) for t in tokens], sort_keys=True, indent=indent)


def from_json(data: str) -> tuple[Token, ...]:
    """Deserialize a token sequence from a JSON string.

    Args:
        data: JSON string (as produced by to_json).

    Returns:
        Tuple of tokens in their serialized order.

    Raises:
        ValueError: If the JSON is not an array of serialized tokens.

    """
    raw = json.loads(data)
    if not isinstance(raw, list):
        msg = f"Expected a JSON array of tokens, got {type(raw).__name__}"
        raise ValueError(msg)
    return tuple(from_dict(item) for item in raw)


__all__ = [
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
]
