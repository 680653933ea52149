from __future__ import annotations

from django.apps import apps
from django.core.cache import cache

from quotes.backends import NullBackend
from quotes.exceptions import PersistenceError
from quotes.records import Quote
from quotes.store import QuoteStore


class FakeRemote:
    """In-memory stand-in for the remote quote table.

    Rows are kept oldest first, like ids; fetch returns newest first.
    """

    is_remote = True

    def __init__(self, rows=None, fail_fetch=False, fail_insert=False):
        self.rows: list[Quote] = list(rows or [])
        self.fail_fetch = fail_fetch
        self.fail_insert = fail_insert
        self.fetch_calls: list[int] = []
        self.insert_calls: list[list[Quote]] = []

    def fetch(self, limit: int) -> list[Quote]:
        self.fetch_calls.append(limit)
        if self.fail_fetch:
            raise PersistenceError("fetch down")
        return list(reversed(self.rows))[:limit]

    def insert(self, quotes) -> None:
        self.insert_calls.append(list(quotes))
        if self.fail_insert:
            raise PersistenceError("insert down")
        self.rows.extend(quotes)


class StoreMixin:
    """Swap the app's store for a fresh one per test and clear the cache."""

    backend = None

    def setUp(self) -> None:  # type: ignore[override]
        super().setUp()  # type: ignore[misc]
        cache.clear()
        self.config = apps.get_app_config('quotes')
        self._orig_store = self.config.store
        self.store = QuoteStore(self.make_backend())
        self.config.store = self.store

    def tearDown(self) -> None:  # type: ignore[override]
        self.config.store = self._orig_store
        cache.clear()
        super().tearDown()  # type: ignore[misc]

    def make_backend(self):
        return NullBackend()

    def enable_admin(self) -> None:
        session = self.client.session  # type: ignore[attr-defined]
        session['admin_mode'] = True
        session.save()
