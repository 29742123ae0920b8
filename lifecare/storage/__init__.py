"""
Storage modules for data persistence.
"""

from lifecare.storage.document_store import COLLECTIONS, DocumentStore, utc_now_iso
from lifecare.storage.outbox_store import OutboxStore

__all__ = [
    "COLLECTIONS",
    "DocumentStore",
    "OutboxStore",
    "utc_now_iso",
]
