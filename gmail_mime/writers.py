"""
Streaming transfer-encoding writers and the multipart boundary writer.

Every writer must be closed after the last write so that base64 padding,
the final quoted-printable line and the closing boundary reach the output.
Use them as context managers.
"""

import base64
import binascii
import uuid
from typing import BinaryIO, Optional

from .config import CRLF, QUOTED_PRINTABLE, BASE64
from .folding import write_headers
from .interface import Header, EncodingWriteFailure, UnsupportedTransferEncoding

# Raw bytes per 76-column base64 line
BASE64_LINE_BYTES = 57


class _EncodingWriter:
    """Shared plumbing: output accounting, error wrapping, close-once."""

    def __init__(self, out: BinaryIO):
        self._out = out
        self.bytes_written = 0
        self.closed = False

    def _emit(self, data: bytes) -> None:
        if not data:
            return
        try:
            self._out.write(data)
        except OSError as e:
            raise EncodingWriteFailure(f"write failed: {e}") from e
        self.bytes_written += len(data)

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("write to closed writer")

    def write(self, data: bytes) -> int:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def _encode_qp_line(line: bytes) -> bytes:
    # binary mode: lone CR/LF are escaped, soft breaks come out as "=\n"
    encoded = binascii.b2a_qp(line, quotetabs=False, istext=False, header=False)
    return encoded.replace(b"=\n", b"=\r\n")


class QuotedPrintableWriter(_EncodingWriter):
    """
    Quoted-printable encoder (RFC 2045).

    CRLF pairs in the input become hard line breaks; every other control
    byte, non-ASCII byte and trailing whitespace is escaped, so decoding
    gives back exactly the bytes written.
    """

    def __init__(self, out: BinaryIO):
        super().__init__(out)
        self._pending = b""

    def write(self, data: bytes) -> int:
        self._check_open()
        self._pending += bytes(data)
        end = self._pending.rfind(b"\r\n")
        if end != -1:
            complete, self._pending = self._pending[:end], self._pending[end + 2:]
            for line in complete.split(b"\r\n"):
                self._emit(_encode_qp_line(line) + b"\r\n")
        return len(data)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        pending, self._pending = self._pending, b""
        self._emit(_encode_qp_line(pending))


class Base64Writer(_EncodingWriter):
    """Base64 encoder with 76-column CRLF separated lines."""

    def __init__(self, out: BinaryIO):
        super().__init__(out)
        self._pending = b""
        self._started = False

    def _emit_lines(self, chunk: bytes) -> None:
        for line in base64.encodebytes(chunk).splitlines():
            if self._started:
                self._emit(CRLF.encode("ascii"))
            self._emit(line)
            self._started = True

    def write(self, data: bytes) -> int:
        self._check_open()
        self._pending += bytes(data)
        whole = len(self._pending) // BASE64_LINE_BYTES * BASE64_LINE_BYTES
        if whole:
            chunk, self._pending = self._pending[:whole], self._pending[whole:]
            self._emit_lines(chunk)
        return len(data)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        pending, self._pending = self._pending, b""
        if pending:
            self._emit_lines(pending)


def transfer_writer(encoding: str, out: BinaryIO) -> _EncodingWriter:
    """
    Wrap a stream in the encoder for a Content-Transfer-Encoding.

    Raises:
        UnsupportedTransferEncoding: For anything but quoted-printable/base64
    """
    coding = (encoding or "").lower()
    if coding == QUOTED_PRINTABLE:
        return QuotedPrintableWriter(out)
    if coding == BASE64:
        return Base64Writer(out)
    raise UnsupportedTransferEncoding(f"unsupported transfer encoding: {encoding}")


class MultipartWriter(_EncodingWriter):
    """
    Writes multipart boundaries and part header blocks.

    Usage:
        with MultipartWriter(out) as mw:
            stream = mw.create_part(part_header)
            with transfer_writer(encoding, stream) as enc:
                enc.write(data)
    """

    def __init__(self, out: BinaryIO, boundary: Optional[str] = None):
        super().__init__(out)
        self.boundary = boundary or uuid.uuid4().hex
        self._parts = 0

    @property
    def content_type(self) -> str:
        return f"multipart/mixed; boundary={self.boundary}"

    def create_part(self, header: Header) -> BinaryIO:
        """Start a new part and return the stream its body goes to."""
        self._check_open()
        if self._parts:
            delimiter = f"{CRLF}--{self.boundary}{CRLF}"
        else:
            delimiter = f"--{self.boundary}{CRLF}"
        self._emit(delimiter.encode("ascii"))
        self.bytes_written += write_headers(self._out, header)
        self._parts += 1
        return self._out

    def write(self, data: bytes) -> int:
        raise TypeError("write part bodies to the stream returned by create_part()")

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        prefix = CRLF if self._parts else ""
        self._emit(f"{prefix}--{self.boundary}--{CRLF}".encode("ascii"))
