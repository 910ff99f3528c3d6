"""
Data Models for Quote Sync

Defines the Quote record and the structures produced while reconciling the
local collection with the remote source.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


# Filter sentinel matching every category
ALL_CATEGORIES = "all"

# Conflict resolution choices
KEEP_LOCAL = "local"
KEEP_SERVER = "server"

# Sync engine states
STATE_IDLE = "idle"
STATE_SYNCING = "syncing"
STATE_FAILED = "failed"

# Status messages announced by the sync engine
STATUS_SYNCING = "Syncing..."
STATUS_SYNCED = "Quotes synced with server!"
STATUS_FAILED = "Sync Failed!"
STATUS_NO_QUOTES = "No quotes available"


@dataclass(frozen=True)
class Quote:
    """A single quote. Two quotes are the same quote for sync when their text matches."""
    text: str
    category: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"text": self.text, "category": self.category}

    @classmethod
    def from_dict(cls, data: dict) -> "Quote":
        """Create from dictionary."""
        return cls(text=data["text"], category=data["category"])

    @classmethod
    def coerce(cls, item: Any) -> Any:
        """
        Turn a quote-shaped dict into a Quote, leaving anything else untouched.

        Imported and synced data is not validated, so the collection may
        hold raw values that are passed through as-is.
        """
        if isinstance(item, cls):
            return item
        if isinstance(item, dict) and set(item) == {"text", "category"}:
            return cls(text=item["text"], category=item["category"])
        return item

    def display(self) -> str:
        """Human-readable form used by the CLI."""
        return f'"{self.text}" — {self.category}'


def to_json_value(item: Any) -> Any:
    """Serialize a collection entry, quote or raw passthrough value."""
    if isinstance(item, Quote):
        return item.to_dict()
    return item


@dataclass
class ConflictRecord:
    """
    A local quote and a remote quote sharing the same text but differing.

    Held only until the user picks a side; never persisted.
    """
    local: Quote
    server: Quote
    index: int

    def __str__(self) -> str:
        return (
            f"[{self.index}] \"{self.local.text}\": "
            f"local={self.local.category!r} server={self.server.category!r}"
        )


@dataclass
class Pick:
    """Outcome of a random selection."""
    quote: Optional[Quote] = None
    category_filter: str = ALL_CATEGORIES

    @property
    def available(self) -> bool:
        return self.quote is not None

    def display(self) -> str:
        if self.quote is None:
            return STATUS_NO_QUOTES
        return self.quote.display()


@dataclass
class SyncResult:
    """Summary of a sync operation."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    fetched: int = 0
    appended: int = 0
    conflicts: int = 0
    no_change: int = 0
    skipped: bool = False
    errors: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and not self.skipped

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "fetched": self.fetched,
            "appended": self.appended,
            "conflicts": self.conflicts,
            "no_change": self.no_change,
            "skipped": self.skipped,
            "errors": self.errors,
        }

    def summary(self) -> str:
        """Generate a human-readable summary."""
        if self.skipped:
            return "Sync skipped: another sync is in progress"
        lines = [
            f"Sync completed at {self.completed_at}",
            f"Fetched from server: {self.fetched}",
            f"Appended: {self.appended}",
            f"Conflicts pending: {self.conflicts}",
            f"No-op (unchanged): {self.no_change}",
        ]
        if self.errors:
            lines.append(f"Errors: {len(self.errors)}")
        return "\n".join(lines)
