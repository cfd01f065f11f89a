"""Tests for umbrella_mime.headers."""

from __future__ import annotations

from datetime import UTC, datetime

from umbrella_mime.headers import ZERO_DATE, MIMEHeader, is_zero_date


class TestMIMEHeaderAccess:
    def test_get_is_case_insensitive(self):
        h = MIMEHeader({"Message-ID": "<a@b>"})
        assert h.get("message-id") == "<a@b>"
        assert h.get("MESSAGE-ID") == "<a@b>"
        assert "Message-Id" in h

    def test_get_missing_returns_default(self):
        h = MIMEHeader()
        assert h.get("Subject") == ""
        assert h.get("Subject", "n/a") == "n/a"

    def test_get_returns_first_value(self):
        h = MIMEHeader({"Received": ["first", "second"]})
        assert h.get("Received") == "first"
        assert h.get_all("received") == ["first", "second"]

    def test_get_all_missing(self):
        assert MIMEHeader().get_all("To") == []


class TestMIMEHeaderMutation:
    def test_set_replaces_all_values(self):
        h = MIMEHeader({"Received": ["first", "second"]})
        h.set("Received", "only")
        assert h.get_all("Received") == ["only"]

    def test_set_keeps_given_spelling(self):
        h = MIMEHeader()
        h.set("X-Pm-ConversationID-Id", "conv")
        assert list(h) == ["X-Pm-ConversationID-Id"]

    def test_add_appends(self):
        h = MIMEHeader()
        h.add("Received", "a")
        h.add("received", "b")
        assert h.get_all("Received") == ["a", "b"]
        assert len(h) == 1

    def test_delete(self):
        h = MIMEHeader({"To": "a@b.com"})
        h.delete("to")
        h.delete("missing")
        assert "To" not in h

    def test_copy_is_independent(self):
        h = MIMEHeader({"Received": "a"})
        clone = h.copy()
        clone.add("Received", "b")
        clone.set("Subject", "new")
        assert h.get_all("Received") == ["a"]
        assert "Subject" not in h
        assert clone == MIMEHeader({"Received": ["a", "b"], "Subject": "new"})


class TestMIMEHeaderDate:
    def test_parses_date(self):
        h = MIMEHeader({"Date": "Mon, 02 Jun 2025 12:00:00 +0200"})
        assert h.date() == datetime(2025, 6, 2, 10, 0, tzinfo=UTC)

    def test_missing_date(self):
        assert MIMEHeader().date() is None

    def test_unparsable_date(self):
        assert MIMEHeader({"Date": "yesterday-ish"}).date() is None

    def test_naive_date_is_utc(self):
        h = MIMEHeader({"Date": "Mon, 02 Jun 2025 12:00:00 -0000"})
        assert h.date() == datetime(2025, 6, 2, 12, 0, tzinfo=UTC)

    def test_literal_zero_year(self):
        h = MIMEHeader({"Date": "Mon, 01 Jan 0001 00:00:00 +0000"})
        assert h.date() == ZERO_DATE
        assert is_zero_date(h.date())

    def test_two_digit_year_is_not_zero(self):
        h = MIMEHeader({"Date": "Mon, 01 Jan 01 00:00:00 +0000"})
        assert h.date() == datetime(2001, 1, 1, tzinfo=UTC)

    def test_overflowing_year(self):
        h = MIMEHeader({"Date": "Mon, 02 Jun 99999999999999999999 12:00:00 +0000"})
        assert h.date() is None

    def test_is_zero_date(self):
        assert is_zero_date(None)
        assert is_zero_date(datetime(1, 1, 1, tzinfo=UTC))
        assert not is_zero_date(datetime(1970, 1, 1, tzinfo=UTC))


class TestMIMEHeaderConversion:
    def test_from_bytes_reads_headers_only(self, plain_eml_bytes: bytes):
        h = MIMEHeader.from_bytes(plain_eml_bytes)
        assert h.get("Subject") == "Test Subject"
        assert h.get("From") == "Sender <sender@example.com>"
        assert h.get("Content-Type").startswith("text/plain")
        assert "Hello" not in h.as_string()

    def test_from_bytes_unfolds(self):
        raw = b"To: a@example.com,\r\n b@example.com\r\nSubject: x\r\n\r\nbody"
        h = MIMEHeader.from_bytes(raw)
        assert h.get("To") == "a@example.com, b@example.com"

    def test_from_bytes_keeps_utf8_and_replaces_garbage(self):
        raw = b"Subject: caf\xc3\xa9\r\nX-Junk: a\xffb\r\n\r\n"
        h = MIMEHeader.from_bytes(raw)
        assert h.get("Subject") == "café"
        assert h.get("X-Junk") == "a\ufffdb"

    def test_as_string(self):
        h = MIMEHeader({"Subject": "hi", "Received": ["a", "b"]})
        assert h.as_string() == "Subject: hi\r\nReceived: a\r\nReceived: b\r\n"
        assert h.as_string(linesep="\n") == "Subject: hi\nReceived: a\nReceived: b\n"

    def test_to_dict(self):
        h = MIMEHeader({"To": "a@b.com"})
        assert h.to_dict() == {"To": ["a@b.com"]}
