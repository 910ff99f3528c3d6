"""
Category Index

Derives the distinct categories from the quote store and remembers the
active filter across sessions.
"""

from .models import ALL_CATEGORIES, Quote
from .quote_store import QuoteStore
from .storage import PersistentStore, SELECTED_CATEGORY_KEY


class CategoryIndex:
    """Category set derived from a QuoteStore, plus the persisted filter."""

    def __init__(self, quote_store: QuoteStore, storage: PersistentStore):
        self.quote_store = quote_store
        self.storage = storage
        self._categories: list[str] = []
        self.refresh()

    def refresh(self) -> list[str]:
        """Recompute the category set after the collection changed."""
        self._categories = sorted({
            q.category for q in self.quote_store
            if isinstance(q, Quote) and isinstance(q.category, str)
        })
        return self.categories()

    def categories(self) -> list[str]:
        """Distinct categories present in the collection."""
        return list(self._categories)

    def choices(self) -> list[str]:
        """Categories as offered in a picker, led by the 'all' sentinel."""
        return [ALL_CATEGORIES] + self.categories()

    def set_filter(self, value: str):
        """Persist the selected filter. Any string is accepted."""
        self.storage.set(SELECTED_CATEGORY_KEY, value)

    def get_filter(self) -> str:
        """The persisted filter, or 'all' when none was chosen."""
        value = self.storage.get(SELECTED_CATEGORY_KEY)
        return value if value is not None else ALL_CATEGORIES
