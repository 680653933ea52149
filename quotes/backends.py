from __future__ import annotations

import json
import logging
from typing import Iterable, Sequence
from urllib import error, parse, request

from .exceptions import PersistenceError
from .records import Quote

logger = logging.getLogger(__name__)


class NullBackend:
    """Backend used when no remote table is configured.

    The store keeps quotes in process memory only; nothing here is ever called
    for reads or writes.
    """

    is_remote = False

    def fetch(self, limit: int) -> list[Quote]:
        raise PersistenceError("No remote quote table configured")

    def insert(self, quotes: Sequence[Quote]) -> None:
        raise PersistenceError("No remote quote table configured")

    def __repr__(self) -> str:
        return "NullBackend()"


class SupabaseBackend:
    """Quote table served over Supabase's PostgREST interface.

    Rows have columns ``id`` (server-assigned), ``text`` and ``author``.
    """

    is_remote = True

    def __init__(self, url: str, key: str, table: str = 'quotes', timeout: float = 10.0):
        self.base = url.rstrip('/')
        self.key = key
        self.table = table
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"SupabaseBackend({self.base!r}, table={self.table!r})"

    def _endpoint(self, query: dict | None = None) -> str:
        url = f"{self.base}/rest/v1/{parse.quote(self.table)}"
        if query:
            url += '?' + parse.urlencode(query)
        return url

    def _headers(self) -> dict:
        return {
            'apikey': self.key,
            'Authorization': f'Bearer {self.key}',
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        }

    def _call(self, req: request.Request) -> bytes:
        try:
            with request.urlopen(req, timeout=self.timeout) as resp:  # nosec - remote table by config
                return resp.read()
        except error.HTTPError as e:
            detail = ''
            try:
                detail = e.read().decode('utf-8', errors='replace')[:200]
            except Exception:
                pass
            raise PersistenceError(f"{req.get_method()} {self.table} failed: HTTP {e.code} {detail}".strip()) from e
        except (error.URLError, OSError) as e:
            raise PersistenceError(f"{req.get_method()} {self.table} failed: {e}") from e

    def fetch(self, limit: int) -> list[Quote]:
        """Return up to ``limit`` quotes, newest (highest id) first."""
        url = self._endpoint({'select': '*', 'order': 'id.desc', 'limit': str(int(limit))})
        raw = self._call(request.Request(url, headers=self._headers(), method='GET'))
        try:
            rows = json.loads(raw.decode('utf-8'))
        except ValueError as e:
            raise PersistenceError(f"Malformed response from {self.table}") from e
        if not isinstance(rows, list):
            raise PersistenceError(f"Malformed response from {self.table}: expected a list")
        out: list[Quote] = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            q = Quote.from_dict(row)
            if q is not None:
                out.append(q)
        return out

    def insert(self, quotes: Sequence[Quote]) -> None:
        """Insert all quotes in a single request."""
        body = json.dumps(as_payload(quotes), ensure_ascii=False).encode('utf-8')
        headers = self._headers()
        headers['Prefer'] = 'return=minimal'
        self._call(request.Request(self._endpoint(), data=body, headers=headers, method='POST'))


def build_backend(url: str | None, key: str, table: str = 'quotes', timeout: float = 10.0):
    """Return a SupabaseBackend when both connection settings are present, else a NullBackend."""
    if url and key:
        return SupabaseBackend(url, key, table=table, timeout=timeout)
    logger.info("Supabase not configured; quotes are kept in memory only")
    return NullBackend()


def backend_from_settings():
    from django.conf import settings
    return build_backend(
        getattr(settings, 'SUPABASE_URL', ''),
        getattr(settings, 'SUPABASE_ANON_KEY', ''),
        table=getattr(settings, 'SUPABASE_TABLE', 'quotes'),
        timeout=float(getattr(settings, 'SUPABASE_TIMEOUT', 10)),
    )


def as_payload(quotes: Iterable[Quote]) -> list[dict]:
    return [q.to_dict() for q in quotes]
