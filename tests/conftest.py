"""Shared test fixtures for the umbrella_mime test suite."""

from __future__ import annotations

from email.mime.text import MIMEText

import pytest

from umbrella_mime.builder import HeaderBuilder
from umbrella_mime.config import HeaderConfig
from umbrella_mime.models import Address, Message
from umbrella_mime.parser import HeaderParser


@pytest.fixture
def header_config() -> HeaderConfig:
    return HeaderConfig(
        internal_id_domain="protonmail.internalid",
        conversation_id_domain="protonmail.conversationid",
    )


@pytest.fixture
def builder(header_config: HeaderConfig) -> HeaderBuilder:
    return HeaderBuilder(header_config)


@pytest.fixture
def parser() -> HeaderParser:
    return HeaderParser()


@pytest.fixture
def message() -> Message:
    return Message(
        id="msg-001",
        subject="Quarterly report",
        sender=Address(name="Alice", address="alice@example.com"),
        to_list=[
            Address(name="Bob", address="bob@example.com"),
            Address(address="carol@example.com"),
        ],
        time=1_700_000_000,
    )


# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


def build_plain_email(
    *,
    subject: str = "Test Subject",
    from_addr: str = "Sender <sender@example.com>",
    to_addr: str = "recipient@example.com",
    date: str | None = "Mon, 02 Jun 2025 12:00:00 +0000",
    cc: str | None = None,
    reply_to: str | None = None,
) -> bytes:
    """Build a simple plain-text email as raw bytes."""
    msg = MIMEText("Hello, World!", "plain")
    msg["Subject"] = subject
    msg["From"] = from_addr
    msg["To"] = to_addr
    msg["Message-ID"] = "<test-001@example.com>"
    if date:
        msg["Date"] = date
    if cc:
        msg["Cc"] = cc
    if reply_to:
        msg["Reply-To"] = reply_to
    return msg.as_bytes()


@pytest.fixture
def plain_eml_bytes() -> bytes:
    return build_plain_email()
