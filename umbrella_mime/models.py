"""Data models exchanged between the composer/importer and the header layer."""

from __future__ import annotations

import email.utils
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .encoding import encode_header
from .headers import MIMEHeader


def _coerce_header(value: Any) -> MIMEHeader:
    if isinstance(value, MIMEHeader):
        return value
    if isinstance(value, dict):
        try:
            return MIMEHeader(value)
        except TypeError as exc:
            raise ValueError(f"header values must be strings or lists of strings: {exc}") from exc
    raise ValueError("header must be a mapping of field names to values")


class Address(BaseModel):
    """A single mailbox with an optional display name."""

    name: str = Field(default="", description="Display name (may be empty)")
    address: str = Field(description="Mailbox, e.g. user@example.com")

    def __str__(self) -> str:
        """Format as ``Name <mailbox>`` with an encoded or quoted display name."""
        try:
            return email.utils.formataddr((self.name, self.address))
        except UnicodeEncodeError:
            # formataddr only accepts ASCII mailboxes
            if not self.name:
                return f"<{self.address}>"
            return f"{encode_header(self.name)} <{self.address}>"


def format_address_list(addresses: Iterable[Address]) -> str:
    return ", ".join(str(addr) for addr in addresses)


class Message(BaseModel):
    """Structured message metadata.

    ``header`` holds the underlying header mapping.  It may be None on a
    freshly composed message; the header parser always populates it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(default="", description="Internal, provider-assigned message ID")
    external_id: str = Field(default="", description="Provider-assigned import ID")
    conversation_id: str = Field(default="", description="ID grouping related messages")

    subject: str = Field(default="")
    sender: Address | None = Field(default=None)
    reply_tos: list[Address] = Field(default_factory=list)
    to_list: list[Address] = Field(default_factory=list)
    cc_list: list[Address] = Field(default_factory=list)
    bcc_list: list[Address] = Field(default_factory=list)

    mime_type: str = Field(default="text/plain", description="Media type of the body")
    time: int = Field(default=0, description="Unix timestamp, 0 meaning unset")

    header: MIMEHeader | None = Field(default=None)

    @field_validator("header", mode="plain")
    @classmethod
    def coerce_header(cls, value: Any) -> MIMEHeader | None:
        return None if value is None else _coerce_header(value)

    @field_serializer("header")
    def serialize_header(self, header: MIMEHeader | None) -> dict[str, list[str]] | None:
        return header.to_dict() if header is not None else None


class Attachment(BaseModel):
    """An attachment whose part header is being (re)built."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mime_type: str = Field(description="Media type, e.g. application/pdf")
    name: str = Field(default="", description="Original filename")
    header: MIMEHeader = Field(
        default_factory=MIMEHeader,
        description="Original part header, used for disposition and forwarded fields",
    )

    @field_validator("header", mode="plain")
    @classmethod
    def coerce_header(cls, value: Any) -> MIMEHeader:
        return _coerce_header(value)

    @field_serializer("header")
    def serialize_header(self, header: MIMEHeader) -> dict[str, list[str]]:
        return header.to_dict()
