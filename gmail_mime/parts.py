"""
Part storage for a message: the body slots and named attachments.

Decides Content-Type, Content-Transfer-Encoding and Content-Disposition for
every part as it is attached.
"""

import logging
import mimetypes
from email.utils import encode_rfc2231
from pathlib import PurePosixPath
from typing import Dict, Optional

from .config import QUOTED_PRINTABLE, BASE64, TRANSFER_ENCODINGS
from .interface import (
    BodyType, Header, HeaderInput, Part, PartKey,
    InvalidPartName, UnsupportedBodyContentType, UnsupportedTransferEncoding,
)
from .sniff import detect_content_type

logger = logging.getLogger(__name__)

# Characters that force a quoted filename parameter (RFC 2045 tspecials + space)
TSPECIALS = set('()<>@,;:\\"/[]?= \t')


def _base_name(name: str) -> str:
    return PurePosixPath(name.replace("\\", "/")).name


def normalize_part_name(name: str) -> str:
    """
    Reduce an attachment name to its base component.

    Raises:
        InvalidPartName: If the name is empty, a bare separator, or walks
            the directory tree ("." / ".." components)
    """
    path = PurePosixPath(name.replace("\\", "/"))
    if any(component in (".", "..") for component in name.replace("\\", "/").split("/")):
        raise InvalidPartName(f"bad file name: {name!r}")

    base = path.name
    if base in ("", ".", ".."):
        raise InvalidPartName(f"bad file name: {name!r}")
    return base


def content_disposition(filename: str) -> str:
    """
    Build an attachment disposition for a filename.

    Examples:
        >>> content_disposition('report.pdf')
        'attachment; filename=report.pdf'
        >>> content_disposition('my report.pdf')
        'attachment; filename="my report.pdf"'
    """
    if not filename.isascii():
        return f"attachment; filename*={encode_rfc2231(filename, 'utf-8')}"
    if any(ch in TSPECIALS for ch in filename):
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f"attachment; filename={filename}"


class PartStore:
    """
    Named parts of a message.

    Attachments are keyed by their base filename, bodies by a BodyType
    member, so a body can never collide with a file.
    """

    def __init__(self):
        self._parts: Optional[Dict[PartKey, Part]] = None

    def _resolve_content_type(self, key: PartKey, data: bytes, header: Header) -> str:
        content_type = header.get("Content-Type")
        if content_type:
            return content_type

        if key is BodyType.HTML:
            sniffed = detect_content_type(data) or ""
            content_type = "text/html" if sniffed.startswith("text") else sniffed
        elif isinstance(key, str):
            content_type, _ = mimetypes.guess_type(key)

        if not content_type:
            content_type = detect_content_type(data)

        if content_type:
            header.set("Content-Type", content_type)
        return content_type or ""

    def _resolve_transfer_encoding(self, content_type: str, header: Header) -> str:
        coding = header.get("Content-Transfer-Encoding")
        if coding:
            if coding.lower() not in TRANSFER_ENCODINGS:
                raise UnsupportedTransferEncoding(f"unsupported transfer encoding: {coding}")
            coding = coding.lower()
        else:
            coding = QUOTED_PRINTABLE if content_type.startswith("text") else BASE64
        header.set("Content-Transfer-Encoding", coding)
        return coding

    def _attach(self, key: PartKey, data: bytes, headers: Optional[HeaderInput]) -> None:
        header = Header(headers)
        data = bytes(data)

        content_type = self._resolve_content_type(key, data, header)
        if isinstance(key, BodyType) and not content_type.startswith("text"):
            raise UnsupportedBodyContentType(f"unsupported body content type: {content_type or 'unknown'}")

        coding = self._resolve_transfer_encoding(content_type, header)

        if isinstance(key, str) and "Content-Disposition" not in header:
            header.set("Content-Disposition", content_disposition(key))

        if self._parts is None:
            self._parts = {}
        self._parts[key] = Part(header=header, data=data)
        logger.debug(f"Attached {key!r}: {content_type or 'untyped'}, {coding}, {len(data)} bytes")

    def _remove(self, key: PartKey) -> None:
        if self._parts is not None and self._parts.pop(key, None) is not None:
            logger.debug(f"Removed part {key!r}")

    def attach(self, name: str, data: bytes, headers: Optional[HeaderInput] = None) -> None:
        """
        Attach a file to the message.

        Passing empty data deletes the file with the same name if it was
        previously added.

        Args:
            name: Attachment filename; directory components are stripped
            data: Raw file content
            headers: Explicit part headers (Content-Type,
                     Content-Transfer-Encoding, Content-Disposition)

        Raises:
            InvalidPartName: If the name is path-like
            UnsupportedTransferEncoding: If an explicit encoding is not
                quoted-printable or base64
        """
        if not data:
            self._remove(_base_name(name))
            return
        self._attach(normalize_part_name(name), data, headers)

    def set_body(
        self,
        data: bytes,
        body_type: BodyType = BodyType.AUTO,
        headers: Optional[HeaderInput] = None
    ) -> None:
        """
        Set the text of the letter.

        Text or HTML is detected automatically for AUTO. To send both an HTML
        body and a plain text version for legacy clients, call once with
        HTML and once with TEXT. Empty data removes the body.

        Raises:
            UnsupportedBodyContentType: If the data is not text
        """
        if not data:
            self._remove(body_type)
            return
        self._attach(body_type, data, headers)

    def has(self, name: PartKey) -> bool:
        """True if a part with that name (or body slot) exists."""
        if self._parts is None:
            return False
        if isinstance(name, str):
            name = _base_name(name)
        return name in self._parts

    def get(self, name: PartKey) -> Optional[Part]:
        if self._parts is None:
            return None
        if isinstance(name, str):
            name = _base_name(name)
        return self._parts.get(name)

    def snapshot(self) -> Dict[PartKey, Part]:
        """Insertion-ordered copy of the parts."""
        return dict(self._parts or {})

    def __len__(self) -> int:
        return len(self._parts or {})
