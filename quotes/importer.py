from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from typing import Iterator

from .exceptions import ParseError, RowError
from .records import Quote

logger = logging.getLogger(__name__)

UNSUPPORTED_FILE = "الرجاء رفع ملف CSV أو JSON فقط."
INVALID_JSON = "ملف JSON غير صالح."

CSV_DELIMITERS = (',', '\t', '|', ';')
SNIFF_ROWS = 10


@dataclass
class ImportResult:
    quotes: list[Quote] = field(default_factory=list)
    error: str = ''

    @property
    def ok(self) -> bool:
        return not self.error


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a BOM and replacing bad bytes."""
    return data.decode('utf-8-sig', errors='replace')


def parse_json(content: str) -> list[Quote]:
    """Parse a JSON array of {"text", "author"} objects.

    Any structural problem rejects the whole file with ParseError. Entries
    without text (or that are not objects) are dropped.
    """
    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as e:
        raise ParseError(INVALID_JSON) from e
    if not isinstance(data, list):
        raise ParseError(INVALID_JSON)
    out: list[Quote] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        q = Quote.from_dict(item)
        if q is not None:
            out.append(q)
    return out


def guess_delimiter(content: str) -> str:
    """Pick the delimiter giving the most consistent multi-column rows.

    Looks at the first few non-empty lines only; defaults to a comma.
    """
    lines = [ln for ln in content.splitlines() if ln.strip()][:SNIFF_ROWS]
    best, best_delta = ',', None
    for delim in CSV_DELIMITERS:
        try:
            counts = [len(row) for row in csv.reader(lines, delimiter=delim)]
        except csv.Error:
            continue
        if not counts:
            continue
        avg = sum(counts) / len(counts)
        if avg < 2:
            continue
        delta = sum(abs(a - b) for a, b in zip(counts, counts[1:]))
        if best_delta is None or delta < best_delta:
            best, best_delta = delim, delta
    return best


def _next_row(reader: Iterator[list[str]]) -> list[str]:
    try:
        return next(reader)
    except csv.Error as e:
        raise RowError(str(e)) from e


def parse_csv(content: str) -> list[Quote]:
    """Parse headerless "text,author" rows.

    Lenient: rows the reader cannot tokenize are skipped, missing columns are
    treated as empty and extra columns ignored.
    """
    out: list[Quote] = []
    reader = csv.reader(io.StringIO(content, newline=''), delimiter=guess_delimiter(content))
    while True:
        try:
            row = _next_row(reader)
        except StopIteration:
            break
        except RowError as e:
            logger.debug("Skipping unreadable CSV row: %s", e)
            continue
        text = row[0] if row else ''
        author = row[1] if len(row) > 1 else None
        q = Quote.coerce(text, author)
        if q is not None:
            out.append(q)
    return out


def parse_import(filename: str, content: str) -> ImportResult:
    """Turn an uploaded file into candidate quotes.

    Dispatches on the (case-insensitive) extension. Never raises: problems
    come back as a user-facing ``error`` with no quotes.
    """
    name = (filename or '').lower()
    try:
        if name.endswith('.json'):
            return ImportResult(quotes=parse_json(content))
        if name.endswith('.csv'):
            return ImportResult(quotes=parse_csv(content))
    except ParseError as e:
        logger.info("Rejected import %s: %s", filename, e)
        return ImportResult(error=str(e))
    return ImportResult(error=UNSUPPORTED_FILE)
