"""Defensive address-list parsing for inbound headers.

Mail from non-compliant senders often reaches us with its RFC 2047
markers stripped by relays.  The display names are then garbage, but the
``<user@domain>`` part usually survives.  Parsing therefore runs as an
ordered chain of stages:

1. decode the field, drop ``(comments)`` and parse it strictly;
2. keep only the bracketed mailboxes of the *raw* value and parse those.

The first stage that succeeds wins.
"""

from __future__ import annotations

import email.utils
import re
from collections.abc import Callable, Sequence

import structlog

from .encoding import decode_header
from .errors import AddressParseFailure, FieldNotPresent, HeaderError
from .headers import MIMEHeader
from .models import Address

logger = structlog.get_logger()

ParseStage = Callable[[str], list[Address]]

_BRACKETED_RE = re.compile(r"<[^>]*>")
_MAILBOX_RE = re.compile(
    r'^(?:"[^"]*"|[^\s@<>()\[\],;:"]+)@(?:\[[^\]\s]*\]|[^\s@<>()\[\],;:"]+)$'
)


def strip_address_comments(value: str) -> str:
    """Remove parenthesized comments, honouring quotes, escapes and nesting.

    Text inside quoted strings and ``<...>`` is left alone.
    """
    out: list[str] = []
    depth = 0
    in_quotes = False
    in_angle = False
    escaped = False

    for char in value:
        if escaped:
            if depth == 0:
                out.append(char)
            escaped = False
            continue
        if char == "\\" and (in_quotes or depth):
            escaped = True
            if depth == 0:
                out.append(char)
            continue
        if depth:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            continue
        if in_quotes:
            in_quotes = char != '"'
        elif char == '"':
            in_quotes = True
        elif char == "<":
            in_angle = True
        elif char == ">":
            in_angle = False
        elif char == "(" and not in_angle:
            depth = 1
            continue
        out.append(char)

    return "".join(out)


def parse_address_list(value: str) -> list[Address]:
    """Strictly parse an RFC 5322 address list.

    Every entry must carry a syntactically plausible ``local@domain``
    mailbox, otherwise :class:`AddressParseFailure` is raised.  A list
    that legitimately contains no mailboxes yields ``[]``.
    """
    if not value.strip():
        raise AddressParseFailure("no address")

    addresses: list[Address] = []
    for name, addr in email.utils.getaddresses([value]):
        if not _MAILBOX_RE.match(addr):
            raise AddressParseFailure(f"invalid mailbox {addr!r} in {value!r}")
        addresses.append(Address(name=name, address=addr))
    return addresses


def extract_bracketed(raw: str) -> str:
    """Keep only the ``<...>`` spans of *raw*, joined by ``", "``.

    Each span runs from an opening bracket to the next closing bracket;
    text outside brackets (display names, unencoded junk) is discarded.
    An opening bracket with no closing bracket after it is ignored.
    """
    return ", ".join(_BRACKETED_RE.findall(raw))


class AddressSanitizer:
    """Turn an address header field into addresses, recovering where possible.

    *decoder* and *parser* default to the RFC 2047 decoder and the strict
    list parser; substituting them lets each stage be exercised on its own.
    """

    def __init__(
        self,
        *,
        decoder: Callable[[str], str] = decode_header,
        parser: Callable[[str], list[Address]] = parse_address_list,
    ) -> None:
        self._decode = decoder
        self._parse = parser

    @property
    def stages(self) -> Sequence[tuple[str, ParseStage]]:
        return (
            ("strict", self.parse_decoded),
            ("bracket_recovery", self.parse_bracketed),
        )

    def parse_decoded(self, raw: str) -> list[Address]:
        decoded = self._decode(raw)
        return self._parse(strip_address_comments(decoded))

    def parse_bracketed(self, raw: str) -> list[Address]:
        bracketed = extract_bracketed(raw)
        if not bracketed:
            raise AddressParseFailure("no bracketed address to recover")
        return self._parse(bracketed)

    def sanitize(self, header: MIMEHeader, field: str) -> list[Address]:
        """Return the addresses of *field*.

        Raises :class:`FieldNotPresent` when the field is missing or empty,
        and :class:`AddressParseFailure` when every stage fails.  A present
        field that holds no mailbox yields an empty list, never None.
        """
        raw = header.get(field)
        if not raw:
            raise FieldNotPresent(f"{field} is not present", field=field)

        errors: list[HeaderError] = []
        for index, (stage, parse) in enumerate(self.stages):
            try:
                addresses = parse(raw) or []
            except HeaderError as exc:
                exc.field = field
                errors.append(exc)
                logger.debug("address_parse_stage_failed", field=field, stage=stage, error=str(exc))
                continue

            if index:
                logger.info(
                    "address_list_recovered",
                    field=field,
                    stage=stage,
                    count=len(addresses),
                )
            return addresses

        final = errors[-1]
        if not isinstance(final, AddressParseFailure):
            raise AddressParseFailure(str(final), field=field) from final
        cause = errors[0] if errors[0] is not final else None
        raise final from cause


def sanitize_address_list(header: MIMEHeader, field: str) -> list[Address]:
    return AddressSanitizer().sanitize(header, field)
