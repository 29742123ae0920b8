"""
Notification outbox storage.

Composed messages are appended as JSON lines. Delivery is handled outside
this application; the outbox is the hand-off point.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_OUTBOX_PATH = "data/outbox.jsonl"


class OutboxStore:
    """Append-only JSON-lines file of outgoing messages."""

    def __init__(self, outbox_path: Optional[str] = None) -> None:
        self.outbox_path = Path(outbox_path or DEFAULT_OUTBOX_PATH)
        self._lock = threading.Lock()

    def append(self, message: Dict[str, Any]) -> None:
        """Append one message."""
        with self._lock:
            self.outbox_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.outbox_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(message, default=str) + "\n")

    def read_all(self) -> List[Dict[str, Any]]:
        """Read all messages in order."""
        if not self.outbox_path.exists():
            return []

        messages = []
        with self._lock, open(self.outbox_path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    messages.append(json.loads(line))
                except json.JSONDecodeError as e:
                    logger.warning(f"Skipping malformed outbox line {line_no}: {e}")
        return messages
