"""
Message builder.

A Message holds the top-level headers and the parts (body and
attachments). Build it with attach()/set_body(), then serialize it with
write_to()/as_bytes() or hand it to a submission adapter.
"""

import io
from typing import BinaryIO, Dict, Optional, TYPE_CHECKING

from .interface import BodyType, Header, HeaderInput, Part, PartKey
from .parts import PartStore
from .serializer import write_message

if TYPE_CHECKING:
    from .interface import SubmissionAdapter


class Message:
    """An email message: headers plus named parts."""

    def __init__(self, header: Optional[HeaderInput] = None):
        self.header = Header(header)
        self._store = PartStore()

    def attach(self, name: str, data: bytes, headers: Optional[HeaderInput] = None) -> None:
        """Attach a file; empty data removes a previously attached file of that name."""
        self._store.attach(name, data, headers)

    def set_body(
        self,
        data: bytes,
        body_type: BodyType = BodyType.AUTO,
        headers: Optional[HeaderInput] = None
    ) -> None:
        """Set the message text. See PartStore.set_body."""
        self._store.set_body(data, body_type, headers)

    def has(self, name: PartKey) -> bool:
        return self._store.has(name)

    @property
    def parts(self) -> Dict[PartKey, Part]:
        return self._store.snapshot()

    def write_to(self, out: BinaryIO) -> int:
        """
        Write the RFC 5322 representation of the message.

        Works on a snapshot of the headers and parts.

        Returns:
            Number of bytes written
        """
        return write_message(out, self.header.copy(), self._store.snapshot())

    def as_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf)
        return buf.getvalue()

    async def send(self, adapter: "SubmissionAdapter") -> str:
        """Deliver through a connected adapter. Returns the Message-Id."""
        return await adapter.send_message(self)
