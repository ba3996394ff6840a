"""File-backed storage for the cached repository snapshot."""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from showcase.domain.errors import StorageError
from showcase.domain.repository import CacheEntry

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Persists exactly one snapshot under a fixed key."""

    def read(self) -> Optional[CacheEntry]:
        ...

    def write(self, entry: CacheEntry) -> None:
        ...


class FileCacheStore:
    """Stores the snapshot as a JSON document named after the cache key."""

    def __init__(self, cache_dir: Path, cache_key: str):
        self.cache_key = cache_key
        self.cache_file = Path(cache_dir) / f"{cache_key}.json"

    def read(self) -> Optional[CacheEntry]:
        """Return the stored snapshot, or None if it is absent or unreadable."""
        if not self.cache_file.exists():
            return None

        try:
            payload = json.loads(self.cache_file.read_text(encoding="utf-8"))
            return CacheEntry.from_payload(payload)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable cache {self.cache_file}: {e}")
            return None

    def write(self, entry: CacheEntry) -> None:
        """
        Replace the stored snapshot.

        Raises:
            StorageError: If the snapshot cannot be written
        """
        tmp = self.cache_file.with_name(f"{self.cache_file.name}.tmp.{os.getpid()}")
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(entry.to_payload(), separators=(",", ":")), encoding="utf-8")
            # Atomic replace so readers never see a partial snapshot
            os.replace(tmp, self.cache_file)
        except OSError as e:
            raise StorageError(f"Could not write cache {self.cache_file}: {e}") from e

    def invalidate(self) -> None:
        """Remove the stored snapshot if present."""
        try:
            self.cache_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Could not remove cache {self.cache_file}: {e}") from e
