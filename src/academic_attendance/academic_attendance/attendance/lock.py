from __future__ import annotations

import threading
from typing import Protocol, Set


class SessionLockStore(Protocol):
    """Remembers which sessions already had attendance taken."""

    def has_been_marked(self, session_key: str) -> bool:
        raise NotImplementedError

    def mark_as_marked(self, session_key: str) -> None:
        raise NotImplementedError


class InMemorySessionLockStore(SessionLockStore):
    def __init__(self):
        self._marked: Set[str] = set()
        self._lock = threading.Lock()

    def has_been_marked(self, session_key: str) -> bool:
        return session_key in self._marked

    def mark_as_marked(self, session_key: str) -> None:
        with self._lock:
            self._marked.add(session_key)
