"""Session-scoped directories of a user's service accounts."""

import logging
import threading
import time
from collections.abc import Callable, Iterable

from servicepay.models.service_account import ServiceAccount

logger = logging.getLogger(__name__)

DEFAULT_IDLE_SECONDS = 3600


class LedgerDirectory:
    """Ordered collection of ServiceAccounts for one signed-in session.

    Insertion order is display order. Accounts are neither deduplicated nor
    reordered. Safe to share between threadpool workers serving one session.
    """

    def __init__(self, accounts: Iterable[ServiceAccount] = ()):
        self._accounts: list[ServiceAccount] = list(accounts)
        self._lock = threading.RLock()
        # Set once hydrated from the persistent store
        self.loaded = False

    def add(self, account: ServiceAccount) -> None:
        """Append an account to the end of the directory."""
        with self._lock:
            self._accounts.append(account)

    def list(self) -> list[ServiceAccount]:
        """Current accounts in insertion order (a copy)."""
        with self._lock:
            return list(self._accounts)

    def hydrate(self, loader: Callable[[], Iterable[ServiceAccount]]) -> bool:
        """Load stored accounts once, ahead of anything added this session.

        The loaded check, the load and the insert happen under one lock, so
        concurrent first requests load the store exactly once. If the loader
        raises, the directory stays unloaded.

        Args:
            loader: Zero-argument callable returning the stored accounts

        Returns:
            True if this call performed the load
        """
        with self._lock:
            if self.loaded:
                return False
            accounts = list(loader())
            self._accounts[:0] = accounts
            self.loaded = True
            logger.debug("Hydrated ledger directory with %d accounts", len(accounts))
            return True

    def clear(self) -> None:
        """Remove every account."""
        with self._lock:
            self._accounts.clear()
            self.loaded = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)


class SessionDirectoryStore:
    """Directories keyed by session id.

    Passed explicitly to whoever needs it; each session gets an isolated
    LedgerDirectory that lives until the session logs out or stays idle
    longer than idle_seconds.
    """

    def __init__(
        self,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize store.

        Args:
            idle_seconds: Seconds without access after which a directory is evicted
            clock: Monotonic clock returning seconds
        """
        self.idle_seconds = idle_seconds
        self.clock = clock
        self._directories: dict[str, LedgerDirectory] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()

    def _evict_idle(self, now: float) -> None:
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self.idle_seconds]
        for session_id in expired:
            self._directories.pop(session_id).clear()
            del self._last_seen[session_id]
        if expired:
            logger.info("Evicted %d idle ledger directories", len(expired))

    def get(self, session_id: str) -> LedgerDirectory:
        """Return the session's directory, creating an empty one on first use."""
        with self._lock:
            now = self.clock()
            self._evict_idle(now)
            directory = self._directories.get(session_id)
            if directory is None:
                directory = LedgerDirectory()
                self._directories[session_id] = directory
                logger.debug("Created ledger directory for session")
            self._last_seen[session_id] = now
            return directory

    def drop(self, session_id: str) -> bool:
        """Discard the session's directory (logout).

        Returns:
            True if a directory existed for the session
        """
        with self._lock:
            directory = self._directories.pop(session_id, None)
            self._last_seen.pop(session_id, None)
        if directory is None:
            return False
        directory.clear()
        return True

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._directories

    def __len__(self) -> int:
        with self._lock:
            return len(self._directories)


__all__ = ["LedgerDirectory", "SessionDirectoryStore"]
