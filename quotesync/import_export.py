"""
Import / Export

Serializes the quote collection to a JSON file and merges JSON files back in.
"""

from pathlib import Path
from typing import Optional
import json
import logging

from . import config
from .categories import CategoryIndex
from .errors import FormatError
from .models import to_json_value
from .quote_store import QuoteStore

logger = logging.getLogger(__name__)


class ImportExport:
    """Moves the collection in and out as a pretty-printed JSON array."""

    def __init__(self, quote_store: QuoteStore, category_index: CategoryIndex):
        self.quote_store = quote_store
        self.category_index = category_index

    def export_all(self) -> str:
        """The whole collection as a pretty-printed JSON array."""
        return json.dumps(
            [to_json_value(q) for q in self.quote_store],
            indent=2,
            ensure_ascii=False,
        )

    def export_to_file(self, directory: Optional[Path] = None) -> Path:
        """
        Write the collection to quotes.json.

        Args:
            directory: Target directory (env: QUOTESYNC_EXPORT_DIR)

        Returns:
            Path to the written file.
        """
        directory = Path(directory) if directory is not None else config.EXPORT_DIR
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / config.EXPORT_FILENAME

        path.write_text(self.export_all(), encoding="utf-8")
        logger.info(f"Exported {len(self.quote_store)} quotes to {path}")
        return path

    def import_merge(self, raw_payload: str) -> int:
        """
        Append the quotes in a JSON array to the collection.

        Only the array-ness of the payload is checked; individual records
        are merged as they are.

        Returns:
            Number of records merged.

        Raises:
            FormatError: the payload is not JSON or not an array
        """
        try:
            data = json.loads(raw_payload)
        except (TypeError, ValueError) as e:
            raise FormatError(f"Invalid JSON file: {e}") from e

        if not isinstance(data, list):
            raise FormatError("Invalid JSON format: expected an array of quotes")

        count = self.quote_store.merge_append(data)
        self.category_index.refresh()
        logger.info(f"Imported {count} quotes")
        return count

    def import_file(self, path: Path) -> int:
        """Read a JSON file and merge it into the collection."""
        raw = Path(path).read_text(encoding="utf-8")
        return self.import_merge(raw)
