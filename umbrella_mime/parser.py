"""Inbound header parsing: MIME header fields → structured message.

Inbound mail is untrusted.  A field that cannot be decoded or parsed is
left at its default and parsing carries on; :meth:`HeaderParser.parse`
itself never raises.
"""

from __future__ import annotations

import structlog

from .encoding import decode_header
from .errors import DecodeFailure, FieldNotPresent, HeaderError
from .headers import MIMEHeader, is_zero_date
from .models import Address, Message
from .sanitizer import AddressSanitizer

logger = structlog.get_logger()


class HeaderParser:
    """Stateless parser: header mapping → :class:`Message`."""

    def __init__(self, sanitizer: AddressSanitizer | None = None) -> None:
        self._sanitizer = sanitizer or AddressSanitizer()

    def parse(self, header: MIMEHeader) -> Message:
        message = Message()

        try:
            message.subject = decode_header(header.get("Subject"))
        except DecodeFailure as exc:
            logger.debug("header_field_skipped", field="Subject", error=str(exc))

        if senders := self._addresses(header, "From"):
            message.sender = senders[0]
        if reply_tos := self._addresses(header, "Reply-To"):
            message.reply_tos = reply_tos
        message.to_list = self._addresses(header, "To") or []
        message.cc_list = self._addresses(header, "Cc") or []
        message.bcc_list = self._addresses(header, "Bcc") or []

        date = header.date()
        if not is_zero_date(date):
            message.time = int(date.timestamp())

        message.header = header
        return message

    def _addresses(self, header: MIMEHeader, field: str) -> list[Address] | None:
        try:
            return self._sanitizer.sanitize(header, field)
        except FieldNotPresent:
            return None
        except HeaderError as exc:
            logger.debug("header_field_skipped", field=field, error=str(exc))
            return None


def parse_header(header: MIMEHeader) -> Message:
    return HeaderParser().parse(header)


def parse_header_bytes(raw_bytes: bytes) -> Message:
    """Parse the header block of raw RFC 822 bytes; the body is ignored."""
    return HeaderParser().parse(MIMEHeader.from_bytes(raw_bytes))
