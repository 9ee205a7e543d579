"""
Error types for token ingestion, dependency ordering, and store materialization.
"""

from dataclasses import dataclass


class InjectorError(Exception):
    """Base exception for all mode injector errors."""

    def __init__(self, message: str, context: "ErrorContext | None" = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class DocumentError(InjectorError):
    """
    Raised when a token document cannot be read into definitions.

    Examples:
    - Invalid JSON or YAML
    - Top-level value that is neither a flat map nor a collection list
    - Collection without modes
    """

    pass


class ConfigError(InjectorError):
    """Raised when modeinjector.toml holds values of the wrong type."""

    pass


class StructuralError(InjectorError):
    """
    Raised when the batch as a whole cannot proceed.

    Structural errors abort the batch. Nothing applied after the failure
    point should be assumed consistent.
    """

    pass


class CircularDependencyError(StructuralError):
    """Raised when collections alias into each other in a cycle."""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(
            f"Circular dependency detected involving collection '{collection}'. "
            "Break the cycle by moving the shared tokens into their own collection."
        )


class ModeLimitError(StructuralError):
    """Raised when adding a mode would exceed the per-collection mode cap."""

    def __init__(self, collection: str, mode: str, limit: int):
        self.collection = collection
        self.mode = mode
        self.limit = limit
        super().__init__(
            f"Cannot add mode '{mode}' to collection '{collection}': "
            f"collections are limited to {limit} modes. "
            "Remove a mode or split the collection."
        )


class CollectionNotFoundError(StructuralError):
    """Raised when the legacy entry point targets a collection that does not exist."""

    pass


class StoreError(InjectorError):
    """
    Raised when the variable store rejects a single call.

    Examples:
    - Value shape does not match the variable's resolved type
    - Unknown mode id
    - Alias to a variable that does not exist
    """

    pass


class ColorParseError(InjectorError):
    """Raised by strict hex parsing when a '#' value is not 6 or 8 hex digits."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside a batch.

    Attributes:
        collection: Collection name being processed
        variable: Optional variable name
        mode: Optional mode name
    """

    collection: str
    variable: str | None = None
    mode: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "Brand/Primary [dark]"
        """
        location = self.collection
        if self.variable:
            location += f"/{self.variable}"
        if self.mode:
            location += f" [{self.mode}]"
        return location
