"""
Quote Store

Owns the in-memory quote collection and keeps it mirrored in the persistent
store after every mutation.
"""

from typing import Any, Iterable, Iterator, Optional
import json
import logging
import threading

from .errors import ValidationError
from .models import Quote, to_json_value
from .storage import PersistentStore, QUOTES_KEY

logger = logging.getLogger(__name__)

DEFAULT_QUOTES = (
    Quote("The best way to predict the future is to create it.", "Motivation"),
    Quote("Life is what happens when you're busy making other plans.", "Life"),
    Quote("Happiness depends upon ourselves.", "Philosophy"),
)


class QuoteStore:
    """
    The single source of truth for the quote collection.

    Entries are normally Quote objects. Imported and synced data bypasses
    validation, so entries that are not quote-shaped are kept in their raw
    form and written back unchanged.
    """

    def __init__(self, storage: PersistentStore):
        self.storage = storage
        self._quotes: list[Any] = []
        # Guards _quotes; the auto-sync timer mutates it from its own thread
        self.lock = threading.RLock()

    def load(self) -> list[Any]:
        """
        Read the collection from persistent storage.

        Falls back to the built-in defaults when nothing is stored or the
        stored value is not a JSON array. Never raises.
        """
        raw = self.storage.get(QUOTES_KEY)
        data = None
        if raw is not None:
            try:
                data = json.loads(raw)
            except ValueError as e:
                logger.warning(f"Stored quotes are not valid JSON, using defaults: {e}")

        with self.lock:
            if isinstance(data, list):
                self._quotes = [Quote.coerce(item) for item in data]
            else:
                self._quotes = list(DEFAULT_QUOTES)
                logger.info("Initialized quote collection with defaults")

            return self.quotes

    def save(self):
        """Write the collection to persistent storage."""
        with self.lock:
            payload = json.dumps([to_json_value(q) for q in self._quotes])
            self.storage.set(QUOTES_KEY, payload)

    def add(self, text: str, category: str) -> Quote:
        """Validate and append a new quote."""
        text = (text or "").strip()
        category = (category or "").strip()
        if not text or not category:
            raise ValidationError("Please enter both a quote and a category.")

        quote = Quote(text=text, category=category)
        with self.lock:
            self._quotes.append(quote)
            self.save()
        logger.info(f"Added quote in '{category}'")
        return quote

    def replace_at(self, index: int, quote: Quote):
        """Overwrite the entry at index."""
        with self.lock:
            if not 0 <= index < len(self._quotes):
                raise IndexError(f"Quote index {index} out of range (size {len(self._quotes)})")
            self._quotes[index] = quote
            self.save()

    def merge_append(self, quotes: Iterable[Any]) -> int:
        """Append external entries without validation or dedup. Returns the count appended."""
        items = [Quote.coerce(item) for item in quotes]
        with self.lock:
            self._quotes.extend(items)
            self.save()
        return len(items)

    def append(self, quote: Quote):
        """Append a single unvalidated entry."""
        self.merge_append([quote])

    def find_index(self, text: str) -> Optional[int]:
        """Position of the first quote whose text matches exactly."""
        with self.lock:
            for i, item in enumerate(self._quotes):
                if isinstance(item, Quote) and item.text == text:
                    return i
        return None

    def get(self, index: int) -> Any:
        with self.lock:
            return self._quotes[index]

    @property
    def quotes(self) -> list[Any]:
        """A copy of the collection."""
        with self.lock:
            return list(self._quotes)

    def __len__(self) -> int:
        with self.lock:
            return len(self._quotes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.quotes)
