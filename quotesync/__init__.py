"""
Quote Sync

A quote collection with category filtering, JSON import/export, and
periodic reconciliation against a remote quote server with manual
conflict resolution.
"""

from .models import Quote, ConflictRecord, Pick, SyncResult
from .errors import QuoteSyncError, ValidationError, FormatError, RemoteError
from .storage import PersistentStore, SessionStore
from .quote_store import QuoteStore
from .categories import CategoryIndex
from .selector import Selector
from .import_export import ImportExport
from .remote import RemoteQuoteSource
from .sync_engine import SyncEngine
from .app import QuoteApp, AppState

__all__ = [
    "Quote",
    "ConflictRecord",
    "Pick",
    "SyncResult",
    "QuoteSyncError",
    "ValidationError",
    "FormatError",
    "RemoteError",
    "PersistentStore",
    "SessionStore",
    "QuoteStore",
    "CategoryIndex",
    "Selector",
    "ImportExport",
    "RemoteQuoteSource",
    "SyncEngine",
    "QuoteApp",
    "AppState",
]

__version__ = "0.1.0"
