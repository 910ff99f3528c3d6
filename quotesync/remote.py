"""
Remote Quote Source

HTTP interface to the server holding the shared quote set.

Remote records are posts shaped like {"id", "title", "body"}; each one is
mapped to a Quote using its title as text and a placeholder category when
the record has none.
"""

from typing import Optional
import logging

import requests

from .errors import RemoteError
from .models import Quote
from . import config

logger = logging.getLogger(__name__)


class RemoteQuoteSource:
    """Fetches and posts quotes over HTTP."""

    def __init__(
        self,
        url: Optional[str] = None,
        limit: Optional[int] = None,
        timeout: Optional[float] = None,
        default_category: Optional[str] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the remote source.

        Args:
            url: Endpoint for GET and POST (env: QUOTESYNC_REMOTE_URL)
            limit: Number of remote records taken per fetch (env: QUOTESYNC_REMOTE_LIMIT)
            timeout: Request timeout in seconds (env: QUOTESYNC_REMOTE_TIMEOUT)
            default_category: Category for records without one (env: QUOTESYNC_SERVER_CATEGORY)
            session: requests.Session to reuse (creates one if None)
        """
        self.url = url or config.REMOTE_URL
        self.limit = limit if limit is not None else config.REMOTE_LIMIT
        self.timeout = timeout if timeout is not None else config.REMOTE_TIMEOUT
        self.default_category = default_category or config.DEFAULT_SERVER_CATEGORY
        self.session = session or requests.Session()

    def _request(self, method: str, **kwargs):
        """Send a request and decode the JSON body."""
        try:
            resp = self.session.request(method, self.url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise RemoteError(f"{method} {self.url} failed: {e}") from e
        except ValueError as e:
            raise RemoteError(f"{method} {self.url} returned invalid JSON: {e}") from e

    def _record_to_quote(self, record: dict) -> Optional[Quote]:
        """Map a remote record into the local Quote shape, or None when it has no text field."""
        if isinstance(record.get("title"), str):
            text = record["title"]
        elif isinstance(record.get("text"), str):
            text = record["text"]
        else:
            return None
        return Quote(text=text, category=record.get("category") or self.default_category)

    def fetch_quotes(self) -> list[Quote]:
        """
        Get the first `limit` remote records as quotes.

        Raises:
            RemoteError: on transport, HTTP status or decoding failure
        """
        data = self._request("GET")
        if not isinstance(data, list):
            raise RemoteError(f"Expected a list from {self.url}, got {type(data).__name__}")

        quotes = []
        for record in data[:self.limit]:
            if not isinstance(record, dict):
                raise RemoteError(f"Unexpected remote record: {record!r}")
            quote = self._record_to_quote(record)
            if quote is None:
                logger.warning(f"  Skipping remote record without a title: {record!r}")
                continue
            quotes.append(quote)

        logger.info(f"  Fetched {len(quotes)} remote quotes")
        return quotes

    def post_quote(self, quote: Quote) -> dict:
        """
        Send a single quote to the remote endpoint.

        Returns:
            The remote's representation of the created record
        """
        data = self._request("POST", json=quote.to_dict())
        logger.info(f"  Posted quote to {self.url}")
        return data

    def test_connection(self) -> bool:
        """Check the endpoint answers."""
        try:
            self._request("GET")
            return True
        except RemoteError:
            return False
