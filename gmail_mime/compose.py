"""
High-level message composition.

Builds a Message from a plain Email description: sender, recipients,
subject, text/HTML body, base64 attachments and reply threading headers.
"""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .address import AddressList, encode_header_value
from .interface import Address, BodyType
from .message import Message

logger = logging.getLogger(__name__)


@dataclass
class AttachmentData:
    """Attachment with base64 encoded content."""
    filename: str
    encoded: str


@dataclass
class Email:
    """Information for the email to be sent."""
    from_address: Address
    to: List[Address] = field(default_factory=list)
    cc: List[Address] = field(default_factory=list)
    bcc: List[Address] = field(default_factory=list)
    subject: str = ""
    body: str = ""
    attachments: List[AttachmentData] = field(default_factory=list)
    in_reply_to: str = ""  # Message-Id of the message being replied to
    references: List[str] = field(default_factory=list)


def decode_attachment(attachment: AttachmentData) -> bytes:
    try:
        return base64.b64decode(attachment.encoded, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Attachment {attachment.filename!r} is not valid base64: {e}") from e


def build_message(email: Email, custom_headers: Optional[Dict[str, str]] = None) -> Message:
    """
    Build a Message from an Email.

    Args:
        email: Sender, recipients, subject, body and attachments
        custom_headers: Extra header fields, replacing any set from email

    Returns:
        The assembled Message

    Raises:
        ValueError: If an attachment is not valid base64
        InvalidPartName: If an attachment filename is path-like
        UnsupportedBodyContentType: If the body is not text
    """
    msg = Message()
    header = msg.header

    header.set("From", email.from_address.email)
    header.set("Reply-To", email.from_address.email)

    if email.to:
        header.set("To", AddressList(email.to).render())
    if email.cc:
        header.set("Cc", AddressList(email.cc).render())
    if email.bcc:
        header.set("Bcc", AddressList(email.bcc).render())

    if email.subject:
        header.set("Subject", encode_header_value(email.subject, header_name="Subject"))

    if email.in_reply_to and email.references:
        header.set("In-Reply-To", email.in_reply_to)
        header.set("References", " ".join(email.references))

    for name, value in (custom_headers or {}).items():
        header.set(name, value)

    for attachment in email.attachments:
        msg.attach(attachment.filename, decode_attachment(attachment))

    if email.body:
        msg.set_body(email.body.encode("utf-8"), BodyType.AUTO)

    logger.debug(f"Composed message with {len(msg.parts)} parts")
    return msg
