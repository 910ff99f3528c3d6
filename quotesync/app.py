"""
Quote Application

Wires the stores and services together and exposes the operations a user
surface calls. Every operation recovers from its own errors, reports them
through the status message, and returns a falsy value instead of raising.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional
import logging

from .categories import CategoryIndex
from .errors import QuoteSyncError
from .import_export import ImportExport
from .models import ALL_CATEGORIES, ConflictRecord, Pick, Quote, SyncResult
from .quote_store import QuoteStore
from .remote import RemoteQuoteSource
from .selector import Selector
from .storage import PersistentStore, SessionStore
from .sync_engine import SyncEngine

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything the application owns, built once at startup."""
    storage: PersistentStore
    session: SessionStore
    quote_store: QuoteStore
    category_index: CategoryIndex
    selector: Selector
    import_export: ImportExport
    sync_engine: SyncEngine
    status: str = ""


class QuoteApp:
    """Coordinates the quote collection, selection, import/export and sync."""

    def __init__(
        self,
        storage: Optional[PersistentStore] = None,
        session: Optional[SessionStore] = None,
        remote: Optional[RemoteQuoteSource] = None,
        on_status: Optional[Callable[[str], None]] = None,
        **sync_options
    ):
        """
        Build the application state.

        Args:
            storage: PersistentStore instance (creates default if None)
            session: SessionStore instance (creates default if None)
            remote: RemoteQuoteSource instance (creates default if None)
            on_status: Called with every status message
            sync_options: Extra keyword arguments for SyncEngine
        """
        self.on_status = on_status
        storage = storage or PersistentStore()
        session = session or SessionStore()
        quote_store = QuoteStore(storage)
        category_index = CategoryIndex(quote_store, storage)

        self.state = AppState(
            storage=storage,
            session=session,
            quote_store=quote_store,
            category_index=category_index,
            selector=Selector(quote_store, category_index, session),
            import_export=ImportExport(quote_store, category_index),
            sync_engine=SyncEngine(
                quote_store,
                category_index,
                remote=remote,
                on_status=self._set_status,
                **sync_options
            ),
        )

    def _set_status(self, message: str):
        self.state.status = message
        if self.on_status:
            self.on_status(message)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> Optional[Quote]:
        """Load the collection and return the quote last viewed this session, if any."""
        self.state.quote_store.load()
        self.state.category_index.refresh()
        return self.state.selector.restore_last_viewed()

    def shutdown(self):
        """Stop the auto-sync timer."""
        self.state.sync_engine.shutdown()

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    @property
    def quotes(self) -> list:
        return self.state.quote_store.quotes

    def show_quote(self, category_filter: Optional[str] = None) -> Pick:
        """Pick a random quote under the given or persisted filter."""
        pick = self.state.selector.pick(category_filter)
        if not pick.available:
            self._set_status(pick.display())
        return pick

    def add_quote(self, text: str, category: str) -> Optional[Quote]:
        """Add a quote from user input. Returns None when validation fails."""
        try:
            quote = self.state.quote_store.add(text, category)
        except QuoteSyncError as e:
            logger.warning(f"Add rejected: {e}")
            self._set_status(str(e))
            return None
        self.state.category_index.refresh()
        self._set_status("Quote added successfully!")
        return quote

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def categories(self) -> list[str]:
        return self.state.category_index.choices()

    def set_filter(self, value: str):
        self.state.category_index.set_filter(value)

    def get_filter(self) -> str:
        return self.state.category_index.get_filter()

    def display_status(self) -> str:
        """Describe what the active filter shows."""
        category_filter = self.get_filter()
        count = len(self.state.selector.matching(category_filter))
        if category_filter == ALL_CATEGORIES:
            return f"Showing {count} quotes in all categories"
        return f"Showing {count} quotes in '{category_filter}'"

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_quotes(self, directory: Optional[Path] = None) -> Optional[Path]:
        """Write quotes.json. Returns None when the file cannot be written."""
        try:
            path = self.state.import_export.export_to_file(directory)
        except OSError as e:
            logger.error(f"Export failed: {e}")
            self._set_status(f"Export failed: {e}")
            return None
        self._set_status(f"Exported to {path}")
        return path

    def import_quotes(self, path: Path) -> Optional[int]:
        """Merge a JSON file into the collection. Returns None on failure."""
        try:
            count = self.state.import_export.import_file(path)
        except (QuoteSyncError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Import failed: {e}")
            self._set_status(f"Import failed: {e}")
            return None
        self._set_status("Quotes imported successfully!")
        return count

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def sync_now(self) -> SyncResult:
        return self.state.sync_engine.sync_once()

    def set_auto_sync(self, enabled: bool, interval: Optional[float] = None):
        self.state.sync_engine.set_auto_sync(enabled, interval)

    @property
    def conflicts(self) -> list[ConflictRecord]:
        return self.state.sync_engine.conflicts()

    def resolve(self, record: ConflictRecord, choice: str) -> bool:
        """Settle a conflict. Returns False when it was stale or the choice is invalid."""
        try:
            resolved = self.state.sync_engine.resolve_conflict(record, choice)
        except (ValueError, IndexError) as e:
            logger.error(f"Conflict resolution failed: {e}")
            self._set_status(f"Conflict resolution failed: {e}")
            return False
        if not resolved:
            self._set_status("Conflict no longer applies, discarded")
        return resolved

    def post_quote(self, text: str, category: str) -> Optional[dict]:
        """Send a quote to the remote. Returns the remote's echo, or None on failure."""
        try:
            echo = self.state.sync_engine.post_local_quote(Quote(text=text, category=category))
        except QuoteSyncError as e:
            logger.error(f"Post failed: {e}")
            self._set_status(f"Post failed: {e}")
            return None
        self._set_status("Quote posted to server")
        return echo
