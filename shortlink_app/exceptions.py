"""
Custom exceptions for the telemetry pipeline.

Extraction never raises; these cover programming errors in the slot
schema and lookups of fields the schema does not know.
"""

from typing import Optional


class TelemetryError(Exception):
    """
    Base exception for all telemetry-related errors.

    Allows broad exception catching when needed.
    """

    pass


class SchemaError(TelemetryError, ValueError):
    """
    Raised when a slot table violates the positional schema rules.

    Attributes:
        slot: The offending slot id (optional)
        field: The offending field name (optional)
        message: Detailed error message
    """

    def __init__(
        self,
        message: str,
        slot: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.slot = slot
        self.field = field
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with slot and field context."""
        context = []
        if self.slot:
            context.append(f"slot='{self.slot}'")
        if self.field:
            context.append(f"field='{self.field}'")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message


class UnknownFieldError(TelemetryError, KeyError):
    """Raised when a field name or slot id has no entry in a channel."""

    def __init__(self, channel: str, key: str):
        self.channel = channel
        self.key = key
        super().__init__(f"Unknown {channel} key: {key!r}")

    def __str__(self) -> str:
        return self.args[0]
