from __future__ import annotations

import logging
import threading
from typing import Iterable, Sequence

from .exceptions import PersistenceError
from .records import Quote
from .samples import SAMPLE_QUOTES

logger = logging.getLogger(__name__)


def filter_quotes(quotes: Iterable[Quote], query: str) -> list[Quote]:
    """Return the quotes whose "text author" contains the query.

    Case-sensitive substring match; only surrounding whitespace is stripped
    from the query. An empty query matches everything. Order is preserved.
    """
    q = (query or '').strip()
    if not q:
        return list(quotes)
    return [item for item in quotes if q in f"{item.text} {item.author}"]


class QuoteStore:
    """Ordered quote collection, newest first.

    ``backend`` is the persistence collaborator: a remote table
    (``backend.is_remote``) or the null backend for local-only mode.
    """

    def __init__(
        self,
        backend,
        samples: Sequence[dict] | None = None,
        load_limit: int = 200,
        refresh_limit: int = 500,
    ):
        self.backend = backend
        self.samples = list(SAMPLE_QUOTES if samples is None else samples)
        self.load_limit = load_limit
        self.refresh_limit = refresh_limit
        self._quotes: list[Quote] = []
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def is_remote(self) -> bool:
        return bool(getattr(self.backend, 'is_remote', False))

    def _sample_quotes(self) -> list[Quote]:
        out = []
        for data in self.samples:
            q = Quote.from_dict(data)
            if q is not None:
                out.append(q)
        return out

    def load(self) -> list[Quote]:
        """(Re)load the collection.

        Reads from the remote table when one is configured. Any read error is
        logged and the built-in samples are used instead.
        """
        quotes = None
        if self.is_remote:
            try:
                quotes = self.backend.fetch(self.load_limit)
            except PersistenceError as e:
                logger.warning("Remote quote fetch failed, using samples: %s", e)
        if quotes is None:
            quotes = self._sample_quotes()
        with self._lock:
            self._quotes = list(quotes)
            self._loaded = True
            return list(self._quotes)

    def all(self) -> list[Quote]:
        if not self._loaded:
            return self.load()
        with self._lock:
            return list(self._quotes)

    def filter(self, query: str) -> list[Quote]:
        return filter_quotes(self.all(), query)

    def __len__(self) -> int:
        return len(self.all())

    def add(self, quote: Quote) -> Quote:
        """Add one quote at the front.

        In remote mode the quote is only added locally once the insert
        succeeded; PersistenceError propagates otherwise.
        """
        self.all()
        if self.is_remote:
            self.backend.insert([quote])
        with self._lock:
            self._quotes.insert(0, quote)
        return quote

    def add_batch(self, quotes: Sequence[Quote]) -> int:
        """Add a batch of quotes, keeping their order, ahead of existing ones.

        In remote mode the whole batch is inserted in one request and the
        collection is then re-read from the table.
        """
        batch = list(quotes)
        if not batch:
            return 0
        self.all()
        if not self.is_remote:
            with self._lock:
                self._quotes[:0] = batch
            return len(batch)

        self.backend.insert(batch)
        try:
            fresh = self.backend.fetch(self.refresh_limit)
        except PersistenceError as e:
            logger.warning("Quotes saved but refresh failed; prepending locally: %s", e)
            with self._lock:
                self._quotes[:0] = batch
        else:
            with self._lock:
                self._quotes = list(fresh)
        return len(batch)
