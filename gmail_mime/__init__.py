"""gmail-mime - RFC 5322 / MIME message builder with Gmail submission."""

from .interface import (
    AccessToken,
    Address,
    BodyType,
    Header,
    Part,
    SubmissionAccount,
    SubmissionAdapter,
    MimeError,
    InvalidPartName,
    UnsupportedBodyContentType,
    UnsupportedTransferEncoding,
    EmptyMessage,
    EncodingWriteFailure,
    SubmissionFailure,
)
from .address import AddressList, format_address, format_address_list
from .message import Message
from .compose import AttachmentData, Email, build_message
from .manager import SubmissionManager
from .adapters.gmail import GmailAdapter

__all__ = [
    "AccessToken",
    "Address",
    "AddressList",
    "BodyType",
    "Header",
    "Part",
    "SubmissionAccount",
    "SubmissionAdapter",
    "MimeError",
    "InvalidPartName",
    "UnsupportedBodyContentType",
    "UnsupportedTransferEncoding",
    "EmptyMessage",
    "EncodingWriteFailure",
    "SubmissionFailure",
    "format_address",
    "format_address_list",
    "Message",
    "AttachmentData",
    "Email",
    "build_message",
    "SubmissionManager",
    "GmailAdapter",
]
