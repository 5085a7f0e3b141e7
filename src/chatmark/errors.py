"""Exception classes for chatmark.

The lexer never raises. Rendering fails only when the injected username
lookup fails, and in that case the lookup's own exception propagates
unchanged. The classes here cover configuration and the bundled lookup
providers.
"""

from __future__ import annotations


class ChatmarkError(Exception):
    """Base exception for all chatmark errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(ChatmarkError, ValueError):
    """Invalid render configuration.

    Raised when a RenderConfig is constructed with values the renderer
    cannot use (e.g., an emoji URL template without an ``{id}`` field).
    """

    def __init__(self, field_name: str, message: str) -> None:
        """Initialize config error.

        Args:
            field_name: Name of the offending RenderConfig field
            message: Description of the problem
        """
        self.field_name = field_name
        super().__init__(f"Invalid config '{field_name}': {message}")


class UnknownUserError(ChatmarkError, LookupError):
    """A lookup provider has no display name for a user id."""

    def __init__(self, user_id: str) -> None:
        """Initialize unknown user error.

        Args:
            user_id: The mention identifier that could not be resolved
        """
        self.user_id = user_id
        super().__init__(f"Unknown user id: {user_id!r}")
