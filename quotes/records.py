from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

UNKNOWN_AUTHOR = "مجهول"


def _clean(value: Any) -> str:
    """Stringify a loosely-typed field the way JSON spells scalars."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass(frozen=True)
class Quote:
    text: str
    author: str = UNKNOWN_AUTHOR

    @classmethod
    def coerce(cls, text: Any, author: Any = None) -> "Quote | None":
        """Build a quote from loosely-typed input.

        Both fields are stringified and trimmed; an empty author falls back to
        UNKNOWN_AUTHOR. Returns None when the trimmed text is empty.
        """
        t = _clean(text)
        if not t:
            return None
        return cls(text=t, author=_clean(author) or UNKNOWN_AUTHOR)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Quote | None":
        return cls.coerce(data.get("text"), data.get("author"))

    def to_dict(self) -> dict:
        return asdict(self)


def share_text(quote: Quote) -> str:
    """Text placed on the clipboard or handed to the platform share sheet."""
    return f'"{quote.text}" — {quote.author or UNKNOWN_AUTHOR}'
