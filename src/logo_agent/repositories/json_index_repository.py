"""JSON file implementation of IndexStore.

The whole index is a single JSON list. Writes go to a temporary file in the
same directory which is flushed, fsynced and then renamed over the index, so
readers never observe a partially written file.
"""

import json
import logging
import os
from pathlib import Path
from uuid import uuid4

from logo_agent.config import settings
from logo_agent.entities import CacheEntryEntity
from logo_agent.errors import CacheIOError

from .records import entry_to_record, record_to_entry

logger = logging.getLogger(__name__)


class JsonIndexRepository:
    """JSON file index with atomic replace.

    This class satisfies the IndexStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize the JSON index repository.

        Args:
            path: Location of the index file. Defaults to settings.
        """
        self._path = Path(path or settings.index_path)

    @classmethod
    def create(cls, path: str | Path | None = None) -> "JsonIndexRepository":
        """Factory method to create JsonIndexRepository with defaults.

        Args:
            path: Index file path. If None, uses settings.

        Returns:
            Configured JsonIndexRepository
        """
        return cls(path=path)

    def load(self) -> dict[str, CacheEntryEntity]:
        """Load the index file.

        Returns:
            Mapping of brand key to entry; empty if the file does not exist

        Raises:
            CacheIOError: If the file cannot be read or parsed
        """
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load cache index %s", self._path, exc_info=True)
            raise CacheIOError("index read", self._path, str(e)) from e

        if not isinstance(raw, list):
            raise CacheIOError("index read", self._path, "expected a JSON list")

        entries: dict[str, CacheEntryEntity] = {}
        for record in raw:
            try:
                entry = record_to_entry(record)
            except (KeyError, TypeError, ValueError) as e:
                raise CacheIOError("index read", self._path, f"malformed entry: {e}") from e
            entries[entry.brand] = entry
        return entries

    def save(self, entries: dict[str, CacheEntryEntity]) -> None:
        """Atomically replace the index file.

        Args:
            entries: Mapping of brand key to entry

        Raises:
            CacheIOError: If the file cannot be written
        """
        records = [entry_to_record(entry) for entry in entries.values()]
        payload = json.dumps(records, indent=2, ensure_ascii=False)
        tmp_path = self._path.with_name(f".{self._path.name}.tmp.{uuid4().hex}")

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.error("Failed to save cache index %s", self._path, exc_info=True)
            tmp_path.unlink(missing_ok=True)
            raise CacheIOError("index write", self._path, str(e)) from e

    def health_check(self) -> bool:
        """Check that the index directory exists and is writable."""
        directory = self._path.parent
        return directory.is_dir() and os.access(directory, os.W_OK)

    @property
    def path(self) -> Path:
        """Get the index file path."""
        return self._path
