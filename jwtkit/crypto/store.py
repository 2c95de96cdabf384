"""Key-id indexed registry of signing and verifying algorithms."""

import logging
import threading
from collections.abc import Mapping
from typing import Protocol

from jwtkit.crypto.types import Signer, Verifier

logger = logging.getLogger(__name__)

StoreEntry = Signer | Verifier


class Store(Protocol):
    """Anything that can resolve a key id to an algorithm object."""

    def lookup(self, key_id: str) -> StoreEntry | None: ...


KeySource = Store | Mapping[str, StoreEntry]


def lookup_entry(source: KeySource, key_id: str) -> StoreEntry | None:
    """Resolve ``key_id`` in a ``Store`` or in a plain mapping such as a dict."""
    if isinstance(source, Mapping):
        return source.get(key_id)
    return source.lookup(key_id)


class KeyStore:
    """In-memory store keyed by exact key-id match.

    Reads and writes share one lock, so keys may be registered or removed
    while other threads are verifying tokens.
    """

    def __init__(self, entries: Mapping[str, StoreEntry] | None = None) -> None:
        self._lock = threading.RLock()
        self._entries: dict[str, StoreEntry] = {}
        for key_id, entry in (entries or {}).items():
            self.register(key_id, entry)

    def register(self, key_id: str, entry: StoreEntry) -> None:
        """Add or replace the algorithm registered under ``key_id``."""
        if not key_id:
            raise ValueError("key_id must be a non-empty string")
        with self._lock:
            self._entries[key_id] = entry
        logger.debug("Registered key %s (%s)", key_id, entry.algorithm)

    def remove(self, key_id: str) -> StoreEntry | None:
        with self._lock:
            return self._entries.pop(key_id, None)

    def lookup(self, key_id: str) -> StoreEntry | None:
        with self._lock:
            return self._entries.get(key_id)

    def key_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def __contains__(self, key_id: object) -> bool:
        with self._lock:
            return key_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
