"""Umbrella MIME headers: build outbound header blocks and parse inbound ones."""

from .boundary import get_boundary, get_related_boundary
from .builder import (
    HeaderBuilder,
    get_attachment_header,
    get_body_header,
    get_header,
    get_related_header,
    set_body_content_fields,
)
from .config import HeaderConfig
from .encoding import decode_header, encode_header
from .errors import AddressParseFailure, DecodeFailure, FieldNotPresent, HeaderError
from .headers import MIMEHeader
from .logging import setup_logging
from .models import Address, Attachment, Message, format_address_list
from .parser import HeaderParser, parse_header, parse_header_bytes
from .sanitizer import AddressSanitizer, sanitize_address_list

__all__ = [
    "Address",
    "AddressParseFailure",
    "AddressSanitizer",
    "Attachment",
    "DecodeFailure",
    "FieldNotPresent",
    "HeaderBuilder",
    "HeaderConfig",
    "HeaderError",
    "HeaderParser",
    "MIMEHeader",
    "Message",
    "decode_header",
    "encode_header",
    "format_address_list",
    "get_attachment_header",
    "get_body_header",
    "get_boundary",
    "get_header",
    "get_related_boundary",
    "get_related_header",
    "parse_header",
    "parse_header_bytes",
    "sanitize_address_list",
    "set_body_content_fields",
    "setup_logging",
]
