"""Outbound header construction: structured message → MIME header fields.

Every builder returns a header mapping owned by the caller.  The input
message and attachment are never mutated; the one in-place helper,
:func:`set_body_content_fields`, takes the mapping to fill explicitly.
"""

from __future__ import annotations

import email.utils
import re
from datetime import UTC, datetime

import structlog

from .boundary import get_related_boundary
from .config import HeaderConfig
from .encoding import encode_header
from .headers import MIMEHeader, is_zero_date
from .models import Attachment, Message, format_address_list

logger = structlog.get_logger()

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

# Original part fields carried over to a rebuilt attachment header.
FORWARDED_ATTACHMENT_FIELDS = ("Content-Id", "Content-Description", "Content-Location")


def format_date(timestamp: int) -> str:
    """Render a Unix timestamp as RFC 1123 with a numeric zone, in UTC."""
    return email.utils.format_datetime(datetime.fromtimestamp(timestamp, UTC))


def format_media_type(media_type: str, params: dict[str, str]) -> str:
    """Join a media type and its parameters, quoting values that are not tokens."""
    parts = [media_type.lower()]
    for key in sorted(params):
        value = params[key]
        if not _TOKEN_RE.match(value):
            value = '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
        parts.append(f"{key}={value}")
    return "; ".join(parts)


def set_body_content_fields(header: MIMEHeader, message: Message) -> None:
    """Write the inline, quoted-printable body fields into *header*."""
    header.set("Content-Type", f"{message.mime_type}; charset=utf-8")
    header.set("Content-Disposition", "inline")
    header.set("Content-Transfer-Encoding", "quoted-printable")


class HeaderBuilder:
    """Build message, body, related-part and attachment headers.

    The identifier domains come from *config* so deployments can differ.
    """

    def __init__(self, config: HeaderConfig | None = None) -> None:
        self._config = config or HeaderConfig()

    # ------------------------------------------------------------------
    # Message header
    # ------------------------------------------------------------------

    def get_header(self, message: Message) -> MIMEHeader:
        """Build the top-level header for *message*.

        Custom fields already present on ``message.header`` are preserved;
        standard fields derived from the message overwrite their old values.
        """
        h = message.header.copy() if message.header is not None else MIMEHeader()

        h.set("Subject", encode_header(message.subject))
        if message.sender is not None:
            h.set("From", encode_header(str(message.sender)))
        for name, addresses in (
            ("Reply-To", message.reply_tos),
            ("To", message.to_list),
            ("Cc", message.cc_list),
            ("Bcc", message.bcc_list),
        ):
            if addresses:
                h.set(name, encode_header(format_address_list(addresses)))

        self._set_date_fields(h, message)
        self._set_identifier_fields(h, message)
        return h

    def _set_date_fields(self, h: MIMEHeader, message: Message) -> None:
        if message.time <= 0:
            return
        try:
            rendered = format_date(message.time)
        except (ValueError, OverflowError, OSError) as exc:
            logger.warning("message_time_out_of_range", time=message.time, error=str(exc))
            return
        h.set("X-Pm-Date", rendered)
        # A valid client-supplied Date wins over the provider timestamp.
        if is_zero_date(h.date()):
            h.set("Date", rendered)

    def _set_identifier_fields(self, h: MIMEHeader, message: Message) -> None:
        # The external ID keeps client threading intact for imported mail.
        if message.external_id:
            h.set("X-Pm-External-Id", f"<{message.external_id}>")
            if not h.get("Message-Id"):
                h.set("Message-Id", f"<{message.external_id}>")

        if message.id:
            internal_ref = f"<{message.id}@{self._config.internal_id_domain}>"
            if not h.get("Message-Id"):
                h.set("Message-Id", internal_ref)
            h.set("X-Pm-Internal-Id", message.id)
            _append_reference(h, message.id, internal_ref)

        if message.conversation_id:
            h.set("X-Pm-ConversationID-Id", message.conversation_id)
            _append_reference(
                h,
                message.conversation_id,
                f"<{message.conversation_id}@{self._config.conversation_id_domain}>",
            )

    # ------------------------------------------------------------------
    # Part headers
    # ------------------------------------------------------------------

    def get_body_header(self, message: Message) -> MIMEHeader:
        h = MIMEHeader()
        set_body_content_fields(h, message)
        return h

    def get_related_header(self, message: Message) -> MIMEHeader:
        h = MIMEHeader()
        h.set("Content-Type", f"multipart/related; boundary={get_related_boundary(message)}")
        return h

    def get_attachment_header(self, attachment: Attachment) -> MIMEHeader:
        """Build a base64 part header for *attachment*.

        PGP-encrypted blobs are relabelled ``application/octet-stream`` so
        clients without PGP support can still save them.
        """
        media_type = attachment.mime_type
        if media_type == "application/pgp-encrypted":
            media_type = "application/octet-stream"

        encoded_name = encode_header(attachment.name)
        disposition = "attachment"
        if "inline" in attachment.header.get("Content-Disposition"):
            disposition = "inline"

        h = MIMEHeader()
        h.set("Content-Type", format_media_type(media_type, {"name": encoded_name}))
        h.set("Content-Transfer-Encoding", "base64")
        h.set("Content-Disposition", format_media_type(disposition, {"filename": encoded_name}))

        for key in FORWARDED_ATTACHMENT_FIELDS:
            value = attachment.header.get(key)
            if value:
                h.set(key, value)
        return h


def _append_reference(h: MIMEHeader, ident: str, reference: str) -> None:
    # Substring match: an ID already mentioned anywhere in References is not added again.
    references = h.get("References")
    if ident in references:
        return
    h.set("References", f"{references} {reference}".lstrip())


def get_header(message: Message) -> MIMEHeader:
    return HeaderBuilder().get_header(message)


def get_body_header(message: Message) -> MIMEHeader:
    return HeaderBuilder().get_body_header(message)


def get_related_header(message: Message) -> MIMEHeader:
    return HeaderBuilder().get_related_header(message)


def get_attachment_header(attachment: Attachment) -> MIMEHeader:
    return HeaderBuilder().get_attachment_header(attachment)
