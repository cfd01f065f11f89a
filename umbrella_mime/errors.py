"""Error taxonomy for header decoding and address sanitizing."""

from __future__ import annotations


class HeaderError(Exception):
    """Base class for all header processing failures."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class FieldNotPresent(HeaderError):
    """The requested header field is absent or empty."""


class DecodeFailure(HeaderError):
    """An RFC 2047 encoded header value could not be decoded."""


class AddressParseFailure(HeaderError):
    """An address list could not be parsed, even after recovery."""
