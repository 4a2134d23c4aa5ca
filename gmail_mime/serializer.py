"""
Message serialization.

Turns headers plus parts into an RFC 5322 byte stream: a single encoded
body when the message is just a body, multipart/mixed otherwise.
"""

import logging
from typing import BinaryIO, Dict

from .config import MIME_VERSION
from .folding import write_headers
from .interface import BodyType, Header, Part, PartKey, EmptyMessage
from .writers import MultipartWriter, transfer_writer

logger = logging.getLogger(__name__)


def write_part_data(out: BinaryIO, part: Part) -> int:
    """Write a part's payload through its transfer encoding."""
    with transfer_writer(part.transfer_encoding, out) as enc:
        enc.write(part.data)
    return enc.bytes_written


def build_header(header: Header) -> Header:
    """Top-level working header set: MIME-Version first, then the message's own fields."""
    working = Header()
    if "MIME-Version" not in header:
        working.set("MIME-Version", MIME_VERSION)
    for name, values in header.items():
        for value in values:
            working.add(name, value)
    return working


def write_message(out: BinaryIO, header: Header, parts: Dict[PartKey, Part]) -> int:
    """
    Write a complete message.

    Parts are written in insertion order. Output already written before an
    error is not rolled back; discard the buffer on failure.

    Returns:
        Number of bytes written

    Raises:
        EmptyMessage: If there are no parts
        EncodingWriteFailure: If the stream fails mid-write
        UnsupportedTransferEncoding: If a part carries an unknown encoding
    """
    if not parts:
        raise EmptyMessage("contents are undefined")

    headers = build_header(header)
    written = 0

    # Only a body, no attachments
    if len(parts) == 1:
        key, part = next(iter(parts.items()))
        if isinstance(key, BodyType):
            for name, values in part.header.items():
                headers.delete(name)
                for value in values:
                    headers.add(name, value)
            written += write_headers(out, headers)
            written += write_part_data(out, part)
            logger.debug(f"Wrote single-part message: {written} bytes")
            return written

    with MultipartWriter(out) as mw:
        headers.set("Content-Type", mw.content_type)
        written += write_headers(out, headers)

        for part in parts.values():
            stream = mw.create_part(part.header)
            written += write_part_data(stream, part)

    written += mw.bytes_written
    logger.debug(f"Wrote multipart message with {len(parts)} parts: {written} bytes")
    return written
