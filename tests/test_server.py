import pytest

from gmail_mime.interface import Address, BodyType
from gmail_mime.server import compose_email, mail_compose, parse_addresses


def test_parse_addresses():
    assert parse_addresses(["Alice <alice@example.com>", "bob@example.com"]) == [
        Address("alice@example.com", "Alice"),
        Address("bob@example.com"),
    ]


def test_parse_addresses_empty():
    assert parse_addresses(None) == []
    assert parse_addresses([""]) == []


def test_compose_email():
    msg = compose_email(
        "Me <me@example.com>",
        ["Alice <alice@example.com>"],
        "Hi",
        "hello",
        attachments={"notes.txt": "bm90ZXM="},
        in_reply_to="<b@x>",
        references=["<a@x>", "<b@x>"],
        headers={"X-Mailer": "tests"},
    )

    assert msg.header.get("From") == "me@example.com"
    assert msg.header.get("To") == '"Alice" <alice@example.com>'
    assert msg.header.get("References") == "<a@x> <b@x>"
    assert msg.header.get("X-Mailer") == "tests"
    assert msg.parts["notes.txt"].data == b"notes"
    assert msg.has(BodyType.AUTO)


def test_compose_email_invalid_sender():
    with pytest.raises(ValueError):
        compose_email("", ["a@x"], "Hi", "hello")


def call_tool(tool, *args, **kwargs):
    # fastmcp wraps decorated functions in a Tool object exposing .fn
    return getattr(tool, "fn", tool)(*args, **kwargs)


def test_mail_compose_threading_headers():
    raw = call_tool(
        mail_compose,
        "me@example.com",
        ["a@x"],
        "Re: Hi",
        "hello",
        in_reply_to="<b@x>",
        references=["<a@x>", "<b@x>"],
    )

    assert "In-Reply-To: <b@x>\r\n" in raw
    assert "References: <a@x> <b@x>\r\n" in raw


def test_mail_compose_error_string():
    assert call_tool(mail_compose, "", ["a@x"], "Hi", "hello").startswith("❌")
