"""
Tests for Message serialization.
"""

import email
import io
from email import policy

import pytest

from gmail_mime import Message
from gmail_mime.interface import BodyType, Header, EmptyMessage, EncodingWriteFailure
from tests.helpers import BrokenStream


def parse(raw: bytes):
    return email.message_from_bytes(raw, policy=policy.default)


class TestEmptyMessage:
    def test_no_parts_fails(self, message):
        with pytest.raises(EmptyMessage):
            message.as_bytes()

    def test_removed_parts_leave_message_empty(self, message):
        message.attach("a.txt", b"data")
        message.attach("a.txt", b"")
        with pytest.raises(EmptyMessage):
            message.as_bytes()

    def test_nothing_written_when_empty(self, message):
        buf = io.BytesIO()
        with pytest.raises(EmptyMessage):
            message.write_to(buf)
        assert buf.getvalue() == b""


class TestSingleBody:
    def test_exact_bytes(self):
        msg = Message({"To": '"A" <a@x>', "Subject": "Hi"})
        msg.set_body(b"hello", BodyType.TEXT)

        assert msg.as_bytes() == (
            b"MIME-Version: 1.0\r\n"
            b'To: "A" <a@x>\r\n'
            b"Subject: Hi\r\n"
            b"Content-Type: text/plain; charset=utf-8\r\n"
            b"Content-Transfer-Encoding: quoted-printable\r\n"
            b"\r\n"
            b"hello"
        )

    def test_html_body_not_multipart(self, message):
        message.set_body(b"<p>hi</p>", BodyType.HTML)
        raw = message.as_bytes()

        assert b"multipart" not in raw
        assert b"Content-Type: text/html\r\n" in raw

    def test_body_headers_replace_top_level(self):
        msg = Message({"Content-Type": "application/json", "Subject": "Hi"})
        msg.set_body(b"hello")
        raw = msg.as_bytes()

        assert raw.count(b"Content-Type:") == 1
        assert b"Content-Type: text/plain; charset=utf-8\r\n" in raw

    def test_single_attachment_is_multipart(self, message):
        message.attach("a.txt", b"data")
        parsed = parse(message.as_bytes())

        assert parsed.get_content_type() == "multipart/mixed"
        assert len(parsed.get_payload()) == 1


class TestMultipart:
    def test_body_and_attachment(self, png_bytes):
        msg = Message({"Subject": "Photos"})
        msg.set_body(b"see attached")
        msg.attach("photo.png", png_bytes)
        raw = msg.as_bytes()

        parsed = parse(raw)
        boundary = parsed.get_boundary()
        assert raw.count(f"--{boundary}\r\n".encode()) == 2
        assert raw.endswith(f"\r\n--{boundary}--\r\n".encode())

        body, attachment = parsed.get_payload()
        assert body.get_content().strip() == "see attached"
        assert attachment.get_content_type() == "image/png"
        assert attachment.get_filename() == "photo.png"
        assert attachment.get_payload(decode=True) == png_bytes

    def test_parts_in_insertion_order(self, message):
        message.attach("b.txt", b"second")
        message.attach("a.txt", b"first")
        message.set_body(b"body")

        names = [part.get_filename() for part in parse(message.as_bytes()).get_payload()]
        assert names == ["b.txt", "a.txt", None]

    def test_html_and_text_alternatives(self, message):
        message.set_body(b"<p>hi</p>", BodyType.HTML)
        message.set_body(b"hi", BodyType.TEXT)

        types = [part.get_content_type() for part in parse(message.as_bytes()).get_payload()]
        assert types == ["text/html", "text/plain"]

    def test_binary_attachment_round_trip(self, message):
        data = bytes(range(256)) * 4
        message.attach("blob.bin", data)
        message.set_body(b"body")

        attachment = parse(message.as_bytes()).get_payload()[0]
        assert attachment.get_payload(decode=True) == data


class TestHeaders:
    def test_caller_mime_version_not_duplicated(self):
        msg = Message({"MIME-Version": "1.0", "Subject": "Hi"})
        msg.set_body(b"hello")
        assert msg.as_bytes().count(b"MIME-Version") == 1

    def test_mime_version_first(self):
        msg = Message({"Subject": "Hi", "From": "a@x"})
        msg.set_body(b"hello")
        assert msg.as_bytes().startswith(b"MIME-Version: 1.0\r\nSubject: Hi\r\nFrom: a@x\r\n")

    def test_serialization_leaves_message_unchanged(self):
        msg = Message(Header({"Subject": "Hi"}))
        msg.set_body(b"hello")
        msg.attach("a.txt", b"data")

        first = msg.as_bytes()
        assert list(msg.header) == ["Subject"]
        second = msg.as_bytes()

        # Same structure apart from the random boundary
        assert len(first) == len(second)

    def test_caller_header_copied(self):
        header = Header({"Subject": "Hi"})
        msg = Message(header)
        header.set("Subject", "Changed")
        header.add("X-Late", "1")

        assert msg.header.get("Subject") == "Hi"
        assert "X-Late" not in msg.header

    def test_long_subject_folded(self, message):
        message.header.set("Subject", " ".join(["word"] * 40))
        message.set_body(b"hello")

        head = message.as_bytes().split(b"\r\n\r\n", 1)[0]
        assert all(len(line) <= 76 for line in head.split(b"\r\n"))


class TestWriteTo:
    def test_returns_byte_count(self, message):
        message.set_body(b"hello")
        message.attach("a.txt", b"data")

        buf = io.BytesIO()
        assert message.write_to(buf) == len(buf.getvalue())

    def test_stream_failure(self, message):
        message.set_body(b"hello " * 100)
        with pytest.raises(EncodingWriteFailure):
            message.write_to(BrokenStream(limit=100))
