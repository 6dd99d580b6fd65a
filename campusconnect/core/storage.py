# campusconnect/core/storage.py
"""
Flat-file persistence.

Each collection is a single JSON array on disk (``<DATA_DIR>/<collection>.json``).
Every logical operation reads the whole array, changes it in memory and writes
the whole array back. There are no partial writes, no indexes and no
cross-process locking; the per-collection lock only serialises threads of the
current process.
"""
import json
import logging
import os
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, List

from campusconnect.core.exceptions import StorageError

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "notices", "events", "materials", "resumes")


class JsonStore:
    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{collection}.json")

    def _lock_for(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            if collection not in self._locks:
                self._locks[collection] = threading.RLock()
            return self._locks[collection]

    def load_all(self, collection: str) -> List[dict]:
        """Return every record of a collection; a missing or broken file reads as empty."""
        path = self.path_for(collection)
        try:
            with open(path, "r", encoding="utf-8") as fp:
                records = json.load(fp)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read collection '{collection}' from {path}: {e}")
            return []

        if not isinstance(records, list):
            logger.warning(f"Collection '{collection}' is not a JSON array, treating as empty")
            return []
        return records

    def save_all(self, collection: str, records: Iterable[dict]) -> None:
        path = self.path_for(collection)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fp:
                json.dump(list(records), fp, indent=2, ensure_ascii=False)
        except (OSError, TypeError) as e:
            logger.error(f"Could not write collection '{collection}': {e}")
            raise StorageError(f"Could not save {collection}") from e

    @contextmanager
    def mutate(self, collection: str):
        """
        Read-modify-write block for one collection.

        Yields the loaded list; the caller mutates it in place. The list is
        written back only if the block finishes without raising.
        """
        with self._lock_for(collection):
            records = self.load_all(collection)
            yield records
            self.save_all(collection, records)

    def ensure_layout(self, collections: Iterable[str] = COLLECTIONS) -> List[str]:
        """Create the data directory and an empty array file per missing collection."""
        os.makedirs(self.data_dir, exist_ok=True)
        created = []
        for collection in collections:
            if not os.path.exists(self.path_for(collection)):
                self.save_all(collection, [])
                created.append(collection)
        return created
