"""ContextVar-based render configuration for chatmark.

Config is an immutable dataclass. Pass one to a renderer explicitly, or set
it for the current context and let renderers without an explicit config
pick it up at render time.

Thread Safety:
    ContextVars are per-thread and per-asyncio-task. Setting config in one
    task does not affect renders running in another.

Usage:
    # Explicit
    renderer = HtmlRenderer(lookup, config=RenderConfig(mention_prefix=""))

    # Contextual
    with render_config_context(RenderConfig(escape_marker_fields=True)):
        html = await parse_message(message, lookup_user_name=lookup)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from string import Formatter

from chatmark.errors import ConfigError

DISCORD_EMOJI_URL_TEMPLATE = "https://cdn.discordapp.com/emojis/{id}.png"


def _check_emoji_url_template(template: str) -> None:
    """Reject templates that would fail or drop the id at render time.

    Raises:
        ConfigError: If the template is malformed, references fields other
            than ``id`` and ``name``, or has no ``{id}`` replacement field.
    """
    try:
        field_names = {field for _, field, _, _ in Formatter().parse(template) if field}
        template.format(id="0", name="x")
    except (KeyError, IndexError, ValueError, AttributeError) as exc:
        raise ConfigError(
            "emoji_url_template", f"cannot format {template!r}: {exc!r}"
        ) from exc
    if "id" not in field_names:
        raise ConfigError(
            "emoji_url_template",
            f"template must contain an {{id}} field, got {template!r}",
        )


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        emoji_url_template: ``str.format`` template for the emoji image URL.
            Receives ``id`` and ``name``; must reference ``{id}``.
        mention_prefix: Text placed before each resolved mention name
        escape_marker_fields: HTML-escape emoji name/id and resolved mention
            names too. Off by default: marker fields come from the fixed
            marker grammar and lookups are trusted, matching Discord's own
            rendering.

    """

    emoji_url_template: str = DISCORD_EMOJI_URL_TEMPLATE
    mention_prefix: str = "@"
    escape_marker_fields: bool = False

    def __post_init__(self) -> None:
        _check_emoji_url_template(self.emoji_url_template)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "RenderConfig":
        """Create RenderConfig from dictionary.

        Only includes keys that are valid RenderConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                RenderConfig attribute names.

        Returns:
            New RenderConfig instance with values from dict.

        Raises:
            ConfigError: If a value fails validation.

        Example:
            >>> config = RenderConfig.from_dict({
            ...     "mention_prefix": "",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.mention_prefix
            ''

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get the render configuration for the current context."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for the current context.

    Args:
        config: RenderConfig instance to use for this context.

    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset the current context to the default configuration."""
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config on exit, even if an exception is raised.

    Args:
        config: RenderConfig to use within the context.

    Example:
        >>> with render_config_context(RenderConfig(mention_prefix="")):
        ...     get_render_config().mention_prefix
        ''

    """
    token = _render_config.set(config)
    try:
        yield
    finally:
        _render_config.reset(token)


__all__ = [
    "DISCORD_EMOJI_URL_TEMPLATE",
    "RenderConfig",
    "get_render_config",
    "render_config_context",
    "reset_render_config",
    "set_render_config",
]
