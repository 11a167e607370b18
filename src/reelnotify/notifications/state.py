"""
Message state — which remote message belongs to which job.

The dispatcher only needs ``get``/``put``; callers pick the backing.
Entries are written after a successful create and never removed.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class MessageStateStore(Protocol):
    def get(self, job_id: str) -> Optional[str]: ...

    def put(self, job_id: str, message_id: str) -> None: ...


class InMemoryMessageStore:
    """Process-local store backed by a dict."""

    def __init__(self) -> None:
        self._messages: dict[str, str] = {}

    def get(self, job_id: str) -> Optional[str]:
        return self._messages.get(job_id)

    def put(self, job_id: str, message_id: str) -> None:
        self._messages[job_id] = message_id

    def __len__(self) -> int:
        return len(self._messages)


class FileMessageStore:
    """
    JSON file store, for hosts that start a fresh process per event.

    The file is re-read on every ``get`` so separate processes see each
    other's writes.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError):
            logger.warning("Unreadable message state file %s, starting empty", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def get(self, job_id: str) -> Optional[str]:
        return self._load().get(job_id)

    def put(self, job_id: str, message_id: str) -> None:
        messages = self._load()
        messages[job_id] = message_id
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # readers only ever see the old file or the new one
        with tempfile.NamedTemporaryFile(
            "w", dir=self.path.parent, prefix=f".{self.path.name}.", delete=False
        ) as tmp:
            tmp.write(json.dumps(messages, indent=2))
        Path(tmp.name).replace(self.path)
