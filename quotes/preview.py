from __future__ import annotations

import logging
from typing import MutableMapping, Sequence

from django.core.cache import cache

from .exceptions import CommitInProgress, NothingToImport
from .records import Quote
from .store import QuoteStore

logger = logging.getLogger(__name__)

NOTHING_TO_IMPORT = "لا توجد اقتباسات للاستيراد."
COMMIT_BUSY = "جارٍ الحفظ... يرجى الانتظار."

EMPTY = 'empty'
PREVIEWING = 'previewing'
COMMITTING = 'committing'


class CommitLock:
    """At-most-one commit per key, held in the Django cache.

    ``cache.add`` only sets the key when it is absent, which makes acquiring
    atomic on every shared cache backend.
    """

    def __init__(self, key: str, timeout: int = 120):
        self.key = f"quotes:commit:{key}"
        self.timeout = timeout

    def acquire(self) -> bool:
        return bool(cache.add(self.key, True, self.timeout))

    def release(self) -> None:
        cache.delete(self.key)

    def held(self) -> bool:
        return cache.get(self.key) is not None


class PreviewWorkflow:
    """Parsed-but-unconfirmed quotes waiting for the admin to confirm.

    The batch lives in ``state`` (the user's session in the web app) under
    SESSION_KEY, so it survives between requests and a failed commit.
    """

    SESSION_KEY = 'quotes_preview'

    def __init__(self, store: QuoteStore, state: MutableMapping, lock: CommitLock):
        self.store = store
        self.state = state
        self.lock = lock

    @property
    def batch(self) -> list[Quote]:
        return [Quote(**d) for d in self.state.get(self.SESSION_KEY) or []]

    @property
    def status(self) -> str:
        if self.lock.held():
            return COMMITTING
        return PREVIEWING if self.state.get(self.SESSION_KEY) else EMPTY

    def start_preview(self, candidates: Sequence[Quote]) -> int:
        """Replace the pending batch with ``candidates``.

        An empty candidate list leaves the current state untouched and raises
        NothingToImport.
        """
        if not candidates:
            raise NothingToImport(NOTHING_TO_IMPORT)
        self.state[self.SESSION_KEY] = [q.to_dict() for q in candidates]
        return len(candidates)

    def cancel_preview(self) -> None:
        self.state.pop(self.SESSION_KEY, None)

    def _reload(self) -> None:
        load = getattr(self.state, 'load', None)
        if load is None:
            return
        fresh = load()
        self.state.clear()
        self.state.update(fresh)

    def commit(self) -> int:
        """Append the whole pending batch to the store.

        On success the batch is cleared and its size returned. On failure the
        batch stays pending and PersistenceError propagates.
        """
        if not self.state.get(self.SESSION_KEY):
            raise NothingToImport(NOTHING_TO_IMPORT)
        if not self.lock.acquire():
            raise CommitInProgress(COMMIT_BUSY)
        try:
            # Re-read under the lock; a concurrent commit may have emptied it.
            self._reload()
            batch = self.batch
            if not batch:
                raise NothingToImport(NOTHING_TO_IMPORT)
            count = self.store.add_batch(batch)
            self.cancel_preview()
            # Persist the cleared batch before another request can take the lock.
            save = getattr(self.state, 'save', None)
            if save is not None:
                save()
        finally:
            self.lock.release()
        logger.info("Committed %s imported quote(s) (remote=%s)", count, self.store.is_remote)
        return count
