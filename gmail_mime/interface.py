"""
Mail Composition Interface

Core types shared by the message builder, the serializer and the
submission adapters. Adapters implement SubmissionAdapter to deliver a
serialized message through Gmail or another provider that accepts raw MIME.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING
from dataclasses import dataclass, field
from enum import Enum

if TYPE_CHECKING:
    from .message import Message


# =============================================================================
# ERRORS
# =============================================================================

class MimeError(Exception):
    """Base class for message composition and submission errors."""


class InvalidPartName(MimeError, ValueError):
    """Part name is empty or path-like."""


class UnsupportedBodyContentType(MimeError, ValueError):
    """Non-text content was set as the message body."""


class UnsupportedTransferEncoding(MimeError, ValueError):
    """Transfer encoding other than quoted-printable or base64."""


class EmptyMessage(MimeError):
    """Serialization attempted on a message without parts."""


class EncodingWriteFailure(MimeError, OSError):
    """Underlying stream failed while writing encoded output."""


class SubmissionFailure(MimeError):
    """Provider rejected or failed to deliver the message."""


# =============================================================================
# MODEL
# =============================================================================

class BodyType(Enum):
    """Which body slot a SetBody call fills."""
    AUTO = "auto"
    HTML = "html"
    TEXT = "text"


PartKey = Union[str, BodyType]
HeaderInput = Union["Header", Mapping[str, Union[str, Iterable[str]]]]


class Header:
    """
    Ordered header fields.

    Each field name maps to a list of values; names keep the case they were
    first stored with but are matched case-insensitively.
    """

    def __init__(self, fields: Optional[HeaderInput] = None):
        self._fields: Dict[str, List[str]] = {}
        if fields is None:
            return
        for name, values in fields.items():
            if isinstance(values, str):
                self.add(name, values)
            else:
                for value in values:
                    self.add(name, value)

    def _key(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key in self._fields:
            if key.lower() == lowered:
                return key
        return None

    def get(self, name: str, default: str = "") -> str:
        """First value of a field, or default."""
        key = self._key(name)
        if key is None or not self._fields[key]:
            return default
        return self._fields[key][0]

    def values(self, name: str) -> List[str]:
        key = self._key(name)
        if key is None:
            return []
        return list(self._fields[key])

    def set(self, name: str, value: str) -> None:
        """Replace all values of a field, keeping its position."""
        key = self._key(name)
        if key is None:
            key = name
        self._fields[key] = [value]

    def add(self, name: str, value: str) -> None:
        key = self._key(name)
        if key is None:
            self._fields[name] = [value]
        else:
            self._fields[key].append(value)

    def delete(self, name: str) -> None:
        key = self._key(name)
        if key is not None:
            del self._fields[key]

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for key, values in self._fields.items():
            yield key, list(values)

    def copy(self) -> "Header":
        return Header(dict(self.items()))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Header):
            return NotImplemented
        return list(self.items()) == list(other.items())

    def __repr__(self) -> str:
        return f"Header({self._fields!r})"


@dataclass
class Address:
    """Email address with optional display name."""
    email: str
    name: Optional[str] = None

    def __str__(self):
        from .address import format_address
        return format_address(self)


@dataclass
class Part:
    """A named body or attachment: its MIME headers and raw payload."""
    header: Header
    data: bytes

    @property
    def content_type(self) -> str:
        return self.header.get("Content-Type")

    @property
    def transfer_encoding(self) -> str:
        return self.header.get("Content-Transfer-Encoding")


@dataclass(frozen=True)
class AccessToken:
    """OAuth access token handed to a submission adapter."""
    token: str

    def __repr__(self):
        return "AccessToken(token='***')"


@dataclass
class SubmissionAccount:
    """A named submission account configuration."""
    name: str
    adapter: str
    config: Dict[str, Any] = field(default_factory=dict)


# =============================================================================
# ADAPTERS
# =============================================================================

class SubmissionAdapter(ABC):
    """Base class for submission adapters."""

    adapter_type: str = "base"

    def __init__(self, account: SubmissionAccount):
        self.account = account
        self._client = None

    @abstractmethod
    async def connect(self, credential: AccessToken) -> bool:
        """Establish connection to the mail service."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the mail service."""
        pass

    @abstractmethod
    async def send_raw(self, raw: bytes) -> str:
        """
        Deliver a serialized RFC 5322 message.

        Returns:
            The provider's Message-Id header for the sent message, or ""
            if the provider did not report one.

        Raises:
            SubmissionFailure: If the provider rejects the message
        """
        pass

    async def send_message(self, message: "Message") -> str:
        """Serialize a message and deliver it. Serialization errors abort the send."""
        raw = message.as_bytes()
        return await self.send_raw(raw)
