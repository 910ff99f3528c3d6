"""
Sync Engine

Reconciles the local quote collection with the remote quote set.
New remote quotes are appended; remote quotes whose text matches a local
quote with a different category are held as conflicts for manual resolution.
"""

from datetime import datetime
from typing import Callable, Optional
import logging
import threading

from .categories import CategoryIndex
from .models import (
    ConflictRecord,
    Quote,
    SyncResult,
    KEEP_LOCAL,
    KEEP_SERVER,
    STATE_FAILED,
    STATE_IDLE,
    STATE_SYNCING,
    STATUS_FAILED,
    STATUS_SYNCED,
    STATUS_SYNCING,
)
from .quote_store import QuoteStore
from .remote import RemoteQuoteSource
from . import config

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls a function every `interval` seconds on a daemon thread until cancelled."""

    def __init__(self, interval: float, function: Callable[[], object]):
        self.interval = interval
        self.function = function
        self._timer: Optional[threading.Timer] = None
        self._stopped = threading.Event()

    def start(self):
        self._schedule()

    def _schedule(self):
        if self._stopped.is_set():
            return
        self._timer = threading.Timer(self.interval, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self):
        if self._stopped.is_set():
            return
        try:
            self.function()
        except Exception:
            logger.exception("Timer callback failed")
        self._schedule()

    def cancel(self):
        self._stopped.set()
        if self._timer is not None:
            self._timer.cancel()

    @property
    def active(self) -> bool:
        return not self._stopped.is_set()


class SyncEngine:
    """
    One-way pull sync from the remote source into the local QuoteStore.

    Key features:
    - Text-equality matching between local and remote quotes
    - Append-only handling of new remote quotes
    - Manual conflict resolution (keep local / keep server)
    - Optional repeating auto-sync, at most one timer at a time
    """

    def __init__(
        self,
        quote_store: QuoteStore,
        category_index: CategoryIndex,
        remote: Optional[RemoteQuoteSource] = None,
        on_status: Optional[Callable[[str], None]] = None,
        timer_factory: Optional[Callable[[float, Callable[[], object]], RepeatingTimer]] = None,
        exclusive: Optional[bool] = None
    ):
        """
        Initialize the sync engine.

        Args:
            quote_store: Local collection to reconcile
            category_index: Refreshed after every mutation
            remote: RemoteQuoteSource instance (creates default if None)
            on_status: Called with each status message
            timer_factory: Builds the auto-sync timer (RepeatingTimer if None)
            exclusive: Reject overlapping syncs (env: QUOTESYNC_SYNC_EXCLUSIVE)
        """
        self.quote_store = quote_store
        self.category_index = category_index
        self.remote = remote or RemoteQuoteSource()
        self.on_status = on_status
        self.timer_factory = timer_factory or RepeatingTimer
        self.exclusive = config.SYNC_EXCLUSIVE if exclusive is None else exclusive

        self.state = STATE_IDLE
        self.status = ""
        self.pending_conflicts: list[ConflictRecord] = []
        self._timer = None
        self._lock = threading.Lock()

    def _announce(self, message: str):
        self.status = message
        logger.info(message)
        if self.on_status:
            self.on_status(message)

    def sync_once(self) -> SyncResult:
        """
        Fetch the remote quote set and reconcile it with the local collection.

        Failures are reported through the status message and the result's
        errors; quotes appended before the failure are kept.

        Returns:
            SyncResult with summary of operations
        """
        result = SyncResult(started_at=datetime.now())

        if self.exclusive and not self._lock.acquire(blocking=False):
            result.skipped = True
            result.completed_at = datetime.now()
            logger.info("Sync already in progress, skipping")
            return result

        try:
            self.state = STATE_SYNCING
            self._announce(STATUS_SYNCING)

            try:
                server_quotes = self.remote.fetch_quotes()
                result.fetched = len(server_quotes)

                with self.quote_store.lock:
                    for server_quote in server_quotes:
                        self._reconcile(server_quote, result)

                    self.quote_store.save()
                    self.category_index.refresh()

            except Exception as e:
                logger.error(f"Sync failed: {e}")
                result.errors.append(str(e))
                result.completed_at = datetime.now()
                self.state = STATE_FAILED
                self._announce(STATUS_FAILED)
                self.quote_store.storage.log_action("sync_failed", details=result.to_dict())
                self.state = STATE_IDLE
                return result

            result.completed_at = datetime.now()
            self.state = STATE_IDLE
            self._announce(STATUS_SYNCED)
            self.quote_store.storage.log_action("sync_complete", details=result.to_dict())
            logger.info("\n" + result.summary())
            return result

        finally:
            if self.exclusive:
                self._lock.release()

    def _reconcile(self, server_quote: Quote, result: SyncResult):
        """Apply a single remote quote to the local collection."""
        index = self.quote_store.find_index(server_quote.text)

        if index is None:
            self.quote_store.append(server_quote)
            result.appended += 1
            logger.info(f"  + New from server: '{server_quote.text}'")
            return

        local_quote = self.quote_store.get(index)
        if local_quote == server_quote:
            result.no_change += 1
            return

        if any(
            c.local.text == local_quote.text and c.server == server_quote
            for c in self.pending_conflicts
        ):
            logger.info(f"  Conflict on '{server_quote.text}' already pending")
            return

        self.pending_conflicts.append(ConflictRecord(
            local=local_quote,
            server=server_quote,
            index=index
        ))
        result.conflicts += 1
        logger.info(f"  ! Conflict on '{server_quote.text}'")

    def _locate(self, record: ConflictRecord) -> Optional[int]:
        """
        Find where the conflicting local quote lives now.

        The recorded index is trusted only while it still holds a quote with
        the same text; otherwise the collection is searched by text.
        """
        if 0 <= record.index < len(self.quote_store):
            current = self.quote_store.get(record.index)
            if isinstance(current, Quote) and current.text == record.local.text:
                return record.index
        return self.quote_store.find_index(record.local.text)

    def resolve_conflict(self, record: ConflictRecord, choice: str) -> bool:
        """
        Settle a pending conflict.

        Args:
            record: A conflict produced by sync_once
            choice: KEEP_LOCAL or KEEP_SERVER

        Returns:
            False if the local quote no longer exists and the record was
            discarded as stale, True otherwise.
        """
        if choice not in (KEEP_LOCAL, KEEP_SERVER):
            raise ValueError(f"Unknown conflict choice: {choice!r}")

        with self.quote_store.lock:
            self.pending_conflicts[:] = [c for c in self.pending_conflicts if c is not record]

            if choice == KEEP_LOCAL:
                logger.info(f"  Kept local version of '{record.local.text}'")
                return True

            index = self._locate(record)
            if index is None:
                logger.warning(f"  Discarding stale conflict for '{record.local.text}'")
                return False

            self.quote_store.replace_at(index, record.server)
            self.category_index.refresh()
        logger.info(f"  Kept server version of '{record.server.text}'")
        return True

    def conflicts(self) -> list[ConflictRecord]:
        """A snapshot of the pending conflicts."""
        with self.quote_store.lock:
            return list(self.pending_conflicts)

    def set_auto_sync(self, enabled: bool, interval: Optional[float] = None):
        """
        Turn periodic syncing on or off.

        Enabling while a timer is already running replaces it.

        Args:
            enabled: Start (True) or stop (False) auto-sync
            interval: Seconds between syncs (env: QUOTESYNC_AUTO_SYNC_INTERVAL)
        """
        self._cancel_timer()
        if not enabled:
            logger.info("Auto-sync disabled")
            return

        interval = interval if interval is not None else config.AUTO_SYNC_INTERVAL
        self._timer = self.timer_factory(interval, self.sync_once)
        self._timer.start()
        logger.info(f"Auto-sync enabled every {interval:g}s")

    @property
    def auto_sync_enabled(self) -> bool:
        return self._timer is not None

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def post_local_quote(self, quote: Quote) -> dict:
        """Push a quote to the remote. The local collection is not touched."""
        return self.remote.post_quote(quote)

    def shutdown(self):
        """Stop auto-sync."""
        self._cancel_timer()
