"""
Quote Selector

Random quote selection under the active category filter.
"""

from typing import Optional
import json
import logging
import random

from .categories import CategoryIndex
from .models import ALL_CATEGORIES, Pick, Quote
from .quote_store import QuoteStore
from .storage import SessionStore, LAST_VIEWED_KEY

logger = logging.getLogger(__name__)


class Selector:
    """Picks a random quote and remembers it as the last one viewed."""

    def __init__(
        self,
        quote_store: QuoteStore,
        category_index: CategoryIndex,
        session: SessionStore,
        rng: Optional[random.Random] = None
    ):
        self.quote_store = quote_store
        self.category_index = category_index
        self.session = session
        self.rng = rng or random.Random()

    def matching(self, category_filter: str) -> list[Quote]:
        """Quotes visible under the given filter."""
        quotes = [q for q in self.quote_store if isinstance(q, Quote)]
        if category_filter == ALL_CATEGORIES:
            return quotes
        return [q for q in quotes if q.category == category_filter]

    def pick(self, category_filter: Optional[str] = None) -> Pick:
        """
        Choose a quote uniformly at random among those matching the filter.

        Args:
            category_filter: Category to restrict to; defaults to the persisted filter

        Returns:
            Pick holding the quote, or an empty Pick when nothing matches
        """
        if category_filter is None:
            category_filter = self.category_index.get_filter()

        subset = self.matching(category_filter)
        if not subset:
            logger.info(f"No quotes available for filter '{category_filter}'")
            return Pick(quote=None, category_filter=category_filter)

        quote = subset[self.rng.randrange(len(subset))]
        self.session.set(LAST_VIEWED_KEY, json.dumps(quote.to_dict()))
        return Pick(quote=quote, category_filter=category_filter)

    def restore_last_viewed(self) -> Optional[Quote]:
        """The quote shown last in this session, if any."""
        raw = self.session.get(LAST_VIEWED_KEY)
        if raw is None:
            return None
        try:
            return Quote.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable last viewed quote: {e}")
            return None
