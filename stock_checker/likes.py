"""In-memory like ledger keyed by ticker symbol."""
import hashlib
import threading
from typing import Dict, Set


def anonymize_address(address: str) -> str:
    """Return the SHA-256 hex digest of a network address.

    Used only to deduplicate likes; the digest is not an identity.
    """
    return hashlib.sha256(address.encode("utf-8")).hexdigest()


class LikeLedger:
    """Symbol -> set of anonymized visitor ids, kept for the process lifetime.

    Each symbol has its own lock so that concurrent likes on the same symbol
    serialize while different symbols never wait on each other. Nothing is
    persisted or evicted.
    """

    def __init__(self):
        self._likes: Dict[str, Set[str]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, symbol: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(symbol)
            if lock is None:
                lock = self._locks[symbol] = threading.Lock()
                self._likes[symbol] = set()
            return lock

    def record_like(self, symbol: str, visitor_id: str) -> bool:
        """Add *visitor_id* to the likes for *symbol*. Returns False if already present."""
        with self._lock_for(symbol):
            visitors = self._likes[symbol]
            if visitor_id in visitors:
                return False
            visitors.add(visitor_id)
            return True

    def count_likes(self, symbol: str) -> int:
        """Return the number of distinct visitors who liked *symbol*."""
        with self._guard:
            lock = self._locks.get(symbol)
        if lock is None:
            return 0
        with lock:
            return len(self._likes[symbol])
