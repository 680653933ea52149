from __future__ import annotations

from django.test import SimpleTestCase

from quotes.backends import NullBackend
from quotes.exceptions import PersistenceError
from quotes.records import Quote, UNKNOWN_AUTHOR, share_text
from quotes.samples import SAMPLE_QUOTES
from quotes.store import QuoteStore, filter_quotes

from .helpers import FakeRemote


class LocalStoreTests(SimpleTestCase):
    def setUp(self) -> None:
        self.store = QuoteStore(NullBackend())

    def test_loads_samples_without_remote(self):
        quotes = self.store.load()
        self.assertFalse(self.store.is_remote)
        self.assertEqual(len(quotes), len(SAMPLE_QUOTES))
        self.assertEqual(quotes[0].text, SAMPLE_QUOTES[0]["text"])

    def test_add_prepends(self):
        q = Quote("جديد", "أنا")
        self.store.add(q)
        self.assertEqual(self.store.all()[0], q)
        self.assertEqual(len(self.store), len(SAMPLE_QUOTES) + 1)

    def test_add_batch_prepends_in_input_order(self):
        batch = [Quote("one"), Quote("two"), Quote("three")]
        self.assertEqual(self.store.add_batch(batch), 3)
        self.assertEqual(self.store.all()[:3], batch)
        self.assertEqual(self.store.all()[3].text, SAMPLE_QUOTES[0]["text"])

    def test_add_batch_empty_is_noop(self):
        self.assertEqual(self.store.add_batch([]), 0)
        self.assertEqual(len(self.store), len(SAMPLE_QUOTES))


class RemoteStoreTests(SimpleTestCase):
    def test_load_uses_remote_rows_newest_first(self):
        remote = FakeRemote(rows=[Quote("old"), Quote("new")])
        store = QuoteStore(remote, load_limit=200)
        self.assertEqual([q.text for q in store.load()], ["new", "old"])
        self.assertEqual(remote.fetch_calls, [200])

    def test_load_falls_back_to_samples_on_error(self):
        store = QuoteStore(FakeRemote(fail_fetch=True))
        with self.assertLogs("quotes.store", level="WARNING"):
            quotes = store.load()
        self.assertEqual(len(quotes), len(SAMPLE_QUOTES))

    def test_add_inserts_then_prepends(self):
        remote = FakeRemote(rows=[Quote("existing")])
        store = QuoteStore(remote)
        store.add(Quote("fresh"))
        self.assertEqual(remote.insert_calls, [[Quote("fresh")]])
        self.assertEqual(store.all()[0], Quote("fresh"))

    def test_add_failure_leaves_collection_unchanged(self):
        remote = FakeRemote(rows=[Quote("existing")], fail_insert=True)
        store = QuoteStore(remote)
        before = store.all()
        with self.assertRaises(PersistenceError):
            store.add(Quote("lost"))
        self.assertEqual(store.all(), before)

    def test_add_batch_refetches_with_refresh_limit(self):
        remote = FakeRemote(rows=[Quote("existing")])
        store = QuoteStore(remote, load_limit=200, refresh_limit=500)
        store.all()
        store.add_batch([Quote("a"), Quote("b")])
        self.assertEqual(len(remote.insert_calls), 1)
        self.assertEqual(remote.fetch_calls, [200, 500])
        self.assertEqual([q.text for q in store.all()], ["b", "a", "existing"])

    def test_add_batch_refresh_failure_prepends_locally(self):
        remote = FakeRemote(rows=[Quote("existing")])
        store = QuoteStore(remote)
        store.all()
        remote.fail_fetch = True
        with self.assertLogs("quotes.store", level="WARNING"):
            store.add_batch([Quote("a"), Quote("b")])
        self.assertEqual([q.text for q in store.all()], ["a", "b", "existing"])


class FilterTests(SimpleTestCase):
    quotes = [
        Quote("الوقت كالسيف", "مثل عربي"),
        Quote("Done is better than perfect", "Sheryl"),
        Quote("النجاح رحلة", "مجهول"),
    ]

    def test_empty_query_matches_everything(self):
        self.assertEqual(filter_quotes(self.quotes, ""), self.quotes)
        self.assertEqual(filter_quotes(self.quotes, "   "), self.quotes)

    def test_matches_text_or_author(self):
        self.assertEqual(filter_quotes(self.quotes, "عربي"), [self.quotes[0]])
        self.assertEqual(filter_quotes(self.quotes, "النجاح"), [self.quotes[2]])

    def test_case_sensitive(self):
        self.assertEqual(filter_quotes(self.quotes, "done"), [])
        self.assertEqual(filter_quotes(self.quotes, "Done"), [self.quotes[1]])

    def test_subsequence_and_idempotent(self):
        once = filter_quotes(self.quotes, "ا")
        indexes = [self.quotes.index(q) for q in once]
        self.assertEqual(indexes, sorted(indexes))
        self.assertEqual(filter_quotes(once, "ا"), once)

    def test_store_filter_uses_loaded_collection(self):
        store = QuoteStore(NullBackend(), samples=[{"text": "abc", "author": "x"}, {"text": "def"}])
        self.assertEqual(store.filter("def"), [Quote("def", UNKNOWN_AUTHOR)])


class ShareTextTests(SimpleTestCase):
    def test_format(self):
        self.assertEqual(share_text(Quote("نص", "كاتب")), '"نص" — كاتب')
