"""Case-insensitive, ordered, multi-valued MIME header mapping."""

from __future__ import annotations

import email.parser
import email.policy
import email.utils
import re
from collections.abc import Iterable, Iterator, Mapping
from datetime import UTC, datetime

_FOLD_RE = re.compile(r"\r?\n(?=[ \t])")
# Four-digit year token; skips zone offsets (+0000) and clock fields.
_YEAR_RE = re.compile(r"(?<![+\-:\d])(\d{4})(?![\d:])")

ZERO_DATE = datetime.min.replace(tzinfo=UTC)


def is_zero_date(value: datetime | None) -> bool:
    """True for a missing date or one at the start of the calendar."""
    return value is None or value.year <= 1


class MIMEHeader:
    """Header fields keyed case-insensitively, each holding ordered values.

    Field names keep the spelling of the most recent :meth:`set` (or the
    first :meth:`add`), so ``X-Pm-ConversationID-Id`` is written back out
    exactly as it was set.  Instances are mutable and not thread-safe.
    """

    def __init__(self, fields: Mapping[str, str | Iterable[str]] | None = None) -> None:
        self._fields: dict[str, tuple[str, list[str]]] = {}
        for key, value in (fields or {}).items():
            if isinstance(value, str):
                self.add(key, value)
            else:
                for item in value:
                    self.add(key, item)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, key: str, default: str = "") -> str:
        """Return the first value of *key*, or *default* if it is unset."""
        entry = self._fields.get(key.lower())
        if entry is None or not entry[1]:
            return default
        return entry[1][0]

    def get_all(self, key: str) -> list[str]:
        entry = self._fields.get(key.lower())
        return list(entry[1]) if entry else []

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._fields

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MIMEHeader):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"MIMEHeader({self.to_dict()!r})"

    def fields(self) -> Iterator[tuple[str, str]]:
        """Yield ``(name, value)`` pairs, one per value, in insertion order."""
        for name, values in self._fields.values():
            for value in values:
                yield name, value

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, key: str, value: str) -> None:
        """Replace every value of *key* with the single *value*."""
        self._fields[key.lower()] = (key, [value])

    def add(self, key: str, value: str) -> None:
        """Append *value* to *key*, keeping any existing values."""
        entry = self._fields.setdefault(key.lower(), (key, []))
        entry[1].append(value)

    def delete(self, key: str) -> None:
        self._fields.pop(key.lower(), None)

    def copy(self) -> MIMEHeader:
        clone = MIMEHeader()
        clone._fields = {k: (name, list(values)) for k, (name, values) in self._fields.items()}
        return clone

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def date(self) -> datetime | None:
        """Parse the ``Date`` field as an aware datetime.

        Returns None when the field is missing or cannot be parsed, and
        :data:`ZERO_DATE` for a literal year 0000 or 0001.
        Dates without zone information (``-0000``) are taken as UTC.
        """
        value = self.get("Date")
        if not value:
            return None
        # The stdlib parser reads years below 100 as two-digit years.
        year = _YEAR_RE.search(value)
        if year is not None and int(year.group(1)) <= 1:
            return ZERO_DATE
        try:
            parsed = email.utils.parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError, OverflowError):
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_bytes(cls, raw_bytes: bytes) -> MIMEHeader:
        """Read the header block of a raw RFC 822 message.

        Only the headers are parsed, the body is never walked.  Folded
        lines are unfolded and undecodable 8-bit bytes become U+FFFD.
        """
        parser = email.parser.BytesHeaderParser(policy=email.policy.compat32)
        msg = parser.parsebytes(raw_bytes)

        header = cls()
        for name, value in msg.raw_items():
            value = _FOLD_RE.sub("", value).rstrip("\r\n")
            value = value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
            header.add(name, value)
        return header

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(values) for name, values in self._fields.values()}

    def as_string(self, linesep: str = "\r\n") -> str:
        """Serialize as a header block (without the terminating blank line)."""
        return "".join(f"{name}: {value}{linesep}" for name, value in self.fields())
