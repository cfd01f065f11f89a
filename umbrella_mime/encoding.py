"""RFC 2047 header-value encoding and decoding."""

from __future__ import annotations

import binascii
import email.errors
import email.header

from .errors import DecodeFailure

_CHARSET = "utf-8"


def encode_header(text: str) -> str:
    """Encode *text* for use in a header field.

    Pure ASCII passes through unchanged.  Anything else becomes UTF-8
    encoded-words on a single line (the header container does the folding).
    """
    if text.isascii():
        return text
    return email.header.Header(text, _CHARSET, maxlinelen=0).encode()


def decode_header(value: str) -> str:
    """Decode every encoded-word in *value* and return plain text.

    Raises :class:`DecodeFailure` for unknown charsets, corrupt
    base64/quoted-printable payloads, or bytes invalid in their charset.
    """
    try:
        return str(email.header.make_header(email.header.decode_header(value)))
    except (
        email.errors.MessageError,
        binascii.Error,
        LookupError,
        UnicodeError,
    ) as exc:
        raise DecodeFailure(f"cannot decode header value: {exc}") from exc
