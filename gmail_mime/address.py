"""
Address formatting for To/Cc/Bcc/From headers.

No address syntax validation is performed: whatever the caller supplies is
rendered as-is, only display names get quoted or encoded.
"""

from email.charset import Charset, QP
from email.header import Header as EncodedHeader
from typing import Iterable, List, Optional

from .config import CRLF, MAX_LINE_LENGTH
from .interface import Address

# UTF-8 with Q encoding for encoded words (base64 is the stdlib default)
UTF8_Q = Charset("utf-8")
UTF8_Q.header_encoding = QP


def _is_printable(text: str) -> bool:
    """True if every character is visible ASCII or space/tab."""
    return all(ch in " \t" or "!" <= ch <= "~" for ch in text)


def encode_header_value(value: str, header_name: Optional[str] = None) -> str:
    """
    Encode a header value as RFC 2047 encoded words when needed.

    Printable ASCII is returned unchanged. Anything else becomes one or more
    Q-encoded words joined by CRLF continuations, which the folding engine
    writes through verbatim.

    Examples:
        >>> encode_header_value('Hello')
        'Hello'
        >>> encode_header_value('Café')
        '=?utf-8?q?Caf=C3=A9?='
    """
    if _is_printable(value):
        return value
    return EncodedHeader(value, UTF8_Q, maxlinelen=MAX_LINE_LENGTH, header_name=header_name).encode(linesep=CRLF)


def _quote(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_address(address: Address, include_name: bool = True) -> str:
    """
    Format a single address.

    Examples:
        >>> format_address(Address('a@x', 'A'))
        '"A" <a@x>'
        >>> format_address(Address('a@x'))
        '<a@x>'
        >>> format_address(Address('a@x', 'A'), include_name=False)
        'a@x'
    """
    if not include_name:
        return address.email

    mailbox = f"<{address.email}>"
    if not address.name:
        return mailbox

    if _is_printable(address.name):
        return f"{_quote(address.name)} {mailbox}"
    return f"{encode_header_value(address.name)} {mailbox}"


def format_address_list(addresses: Iterable[Address], include_name: bool = True) -> str:
    """
    Render addresses as a single comma-joined header value.

    Args:
        addresses: Addresses in rendering order
        include_name: Render display names, or bare mailboxes only

    Returns:
        Comma-separated string (no trailing separator)
    """
    return ",".join(format_address(a, include_name) for a in addresses)


class AddressList(list):
    """Ordered list of Address values."""

    def addresses(self) -> List[str]:
        """Bare mailbox of every entry."""
        return [a.email for a in self]

    def render(self, include_name: bool = True) -> str:
        return format_address_list(self, include_name)
