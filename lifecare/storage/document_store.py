"""
JSON document storage module.

Stores each collection (bookings, reviews, ...) as a single JSON file of
documents keyed by id. Writes go to a temp file and are moved into place.

Thread-safe: all reads and writes of a collection go through one lock.
"""

import json
import logging
import os
import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Default directory for collection files
DEFAULT_DATA_DIR = "data"

Document = Dict[str, Any]

# Collections the application keeps under the data directory
COLLECTIONS = ("bookings", "contacts", "subscribers", "reviews", "applications")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class DocumentStore:
    """
    File-backed collection of JSON documents.

    Documents get an ``id`` (uuid hex) plus ``created_at``/``updated_at``
    timestamps on insert. Returned documents are copies; mutate them and
    call ``update`` to persist.
    """

    def __init__(self, collection: str, data_dir: Optional[str] = None) -> None:
        """
        Initialize the store.

        Args:
            collection: Collection name, used as the file stem.
            data_dir: Directory for collection files.
        """
        self.collection = collection
        self.data_dir = Path(data_dir or DEFAULT_DATA_DIR)
        self.path = self.data_dir / f"{collection}.json"
        self._lock = threading.Lock()
        self._documents: Optional[Dict[str, Document]] = None

    def _load(self) -> Dict[str, Document]:
        """Load documents from file (cached after first read)."""
        if self._documents is not None:
            return self._documents

        if not self.path.exists():
            self._documents = {}
            return self._documents

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt collection file {self.path}: {e}")
            raise

        self._documents = {doc["id"]: doc for doc in data.get("documents", [])}
        logger.debug(f"Loaded {len(self._documents)} documents from {self.path}")
        return self._documents

    def _save(self) -> None:
        """Write all documents to file atomically."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")

        payload = {
            "collection": self.collection,
            "documents": list(self._documents.values()),
        }
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, default=str)

        os.replace(tmp_path, self.path)

    def insert(self, document: Document) -> Document:
        """
        Insert a new document.

        Args:
            document: Document fields (without id).

        Returns:
            The stored document including id and timestamps.
        """
        now = utc_now_iso()
        doc = dict(document)
        doc["id"] = uuid.uuid4().hex
        doc.setdefault("created_at", now)
        doc["updated_at"] = now

        with self._lock:
            self._load()[doc["id"]] = doc
            self._save()

        logger.debug(f"Inserted {self.collection} document {doc['id']}")
        return dict(doc)

    def get(self, doc_id: str) -> Optional[Document]:
        """Get a document by id, or None if missing."""
        with self._lock:
            doc = self._load().get(doc_id)
        return dict(doc) if doc is not None else None

    def update(self, doc_id: str, **fields: Any) -> Optional[Document]:
        """
        Update fields of a document.

        Returns:
            The updated document, or None if the id is unknown.
        """
        with self._lock:
            documents = self._load()
            doc = documents.get(doc_id)
            if doc is None:
                return None

            doc.update(fields)
            doc["updated_at"] = utc_now_iso()
            self._save()
            return dict(doc)

    def delete(self, doc_id: str) -> bool:
        """Delete a document. Returns True if it existed."""
        with self._lock:
            documents = self._load()
            if doc_id not in documents:
                return False
            del documents[doc_id]
            self._save()

        logger.debug(f"Deleted {self.collection} document {doc_id}")
        return True

    def find(
        self,
        predicate: Optional[Callable[[Document], bool]] = None,
        sort_key: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """
        Find documents matching a predicate.

        Args:
            predicate: Filter function; all documents when None.
            sort_key: Field to sort by.
            descending: Sort newest/largest first.
            skip: Number of matches to skip.
            limit: Maximum number of documents returned.

        Returns:
            List of matching document copies.
        """
        with self._lock:
            matches = [dict(d) for d in self._load().values() if predicate is None or predicate(d)]

        # Ties keep insertion order in the requested direction
        if descending:
            matches.reverse()
        matches.sort(key=lambda d: str(d.get(sort_key, "")), reverse=descending)
        end = None if limit is None else skip + limit
        return matches[skip:end]

    def find_one(self, predicate: Callable[[Document], bool]) -> Optional[Document]:
        """Return the first document matching the predicate, or None."""
        with self._lock:
            for doc in self._load().values():
                if predicate(doc):
                    return dict(doc)
        return None

    def count(self, predicate: Optional[Callable[[Document], bool]] = None) -> int:
        """Count documents matching a predicate."""
        with self._lock:
            return sum(1 for d in self._load().values() if predicate is None or predicate(d))

    def is_writable(self) -> bool:
        """Check that the data directory can be written."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            return os.access(self.data_dir, os.W_OK)
        except OSError:
            return False
