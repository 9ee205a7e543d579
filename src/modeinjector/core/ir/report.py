"""
Batch processing results.

ProcessingResult is the running accumulator mutated by the materializer
and the linker. SyncReport is the immutable summary handed back to the
caller once the batch has finished or aborted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ERROR_LIMIT = 10


@dataclass
class ProcessingResult:
    """Counters and error strings collected while a batch runs."""

    collections_created: int = 0
    collections_updated: int = 0
    variables_created: int = 0
    variables_updated: int = 0
    values_set: int = 0
    aliases_linked: int = 0
    errors: list[str] = field(default_factory=list)
    order: list[str] = field(default_factory=list)  # collections in processing order
    mode_name: str | None = None  # legacy path: the mode that was added
    aborted: bool = False

    def record_error(self, message: str) -> None:
        self.errors.append(message)

    def abort(self, message: str) -> None:
        """Mark the batch as stopped by a structural error."""
        self.aborted = True
        self.errors.append(message)

    def to_report(self) -> SyncReport:
        return SyncReport(
            collections_created=self.collections_created,
            collections_updated=self.collections_updated,
            variables_created=self.variables_created,
            variables_updated=self.variables_updated,
            values_set=self.values_set,
            aliases_linked=self.aliases_linked,
            errors=list(self.errors),
            order=list(self.order),
            mode_name=self.mode_name,
            aborted=self.aborted,
        )


class SyncReport(BaseModel):
    """Final summary of one batch run."""

    model_config = ConfigDict(frozen=True)

    collections_created: int = 0
    collections_updated: int = 0
    variables_created: int = 0
    variables_updated: int = 0
    values_set: int = 0
    aliases_linked: int = 0
    errors: list[str] = Field(default_factory=list)
    order: list[str] = Field(default_factory=list)
    mode_name: str | None = None
    aborted: bool = False

    @property
    def ok(self) -> bool:
        """True when the batch ran to completion without recording problems."""
        return not self.aborted and not self.errors

    def error_digest(self, limit: int = DEFAULT_ERROR_LIMIT) -> list[str]:
        """
        First ``limit`` error strings, plus a "+K more" line when truncated.

        Args:
            limit: Maximum number of error strings to include

        Returns:
            List of at most ``limit + 1`` lines
        """
        if len(self.errors) <= limit:
            return list(self.errors)
        hidden = len(self.errors) - limit
        return [*self.errors[:limit], f"+{hidden} more"]

    def format_summary(self, limit: int = DEFAULT_ERROR_LIMIT) -> str:
        """Render the human-readable summary message."""
        if self.aborted:
            lines = ["Sync aborted."]
        else:
            lines = ["Sync complete."]
        if self.mode_name is not None:
            lines.append(f"• Mode: \"{self.mode_name}\"")
        else:
            lines.append(
                f"• Collections: {self.collections_created} created, "
                f"{self.collections_updated} updated"
            )
        lines.append(
            f"• Variables: {self.variables_created} created, {self.variables_updated} updated"
        )
        if self.aliases_linked:
            lines.append(f"• Aliases linked: {self.aliases_linked}")
        digest = self.error_digest(limit)
        if digest:
            lines.append("")
            lines.append(f"Warnings ({len(self.errors)}):")
            lines.extend(f"  - {line}" for line in digest)
        return "\n".join(lines)
