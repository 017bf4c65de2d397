"""
Error types for the Loopdash layout engine.
"""

from dataclasses import dataclass


class LoopdashError(Exception):
    """Base exception for all Loopdash errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message

    def __str__(self) -> str:
        return self._format_message()


class UnknownWidgetError(LoopdashError, KeyError):
    """
    Raised when a widget type is not present in the registry.

    Subclasses KeyError so callers treating the registry as a mapping
    can keep catching the builtin.
    """

    def __init__(self, widget_type: str):
        self.widget_type = widget_type
        super().__init__(f"Unknown widget type: {widget_type!r}")


class PersistenceError(LoopdashError):
    """
    Raised when the key-value backend cannot read or write a record.

    Examples:
    - State file is not writable
    - Stored value is not valid JSON
    - Quota exceeded on the backing store
    """

    pass


class LayoutFormatError(PersistenceError):
    """
    Raised when a persisted layout record cannot be decoded.

    Examples:
    - Record written by a newer schema version
    - Widget entry missing required coordinates
    """

    pass


class ConfigError(LoopdashError):
    """Raised when ``loopdash.toml`` contains invalid values."""

    pass


@dataclass
class ErrorContext:
    """
    Where an error originated.

    Attributes:
        source: File path or storage key the error relates to
        detail: Optional extra location detail (e.g. a TOML table name)
    """

    source: str
    detail: str | None = None

    def format(self) -> str:
        if self.detail:
            return f"{self.source} [{self.detail}]"
        return self.source
