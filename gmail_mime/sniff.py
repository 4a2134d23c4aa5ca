"""
Content sniffing.

Guesses a MIME type from the leading bytes of a payload when neither an
explicit header nor the file extension gives one. Detection is done by
libmagic through python-magic.
"""

from typing import Optional

import magic

from .config import SNIFF_LENGTH

# Text types are labelled UTF-8: composed bodies are always UTF-8 encoded
TEXT_CHARSET = "utf-8"


def detect_content_type(data: bytes) -> Optional[str]:
    """
    Detect the MIME type of a payload from its first SNIFF_LENGTH bytes.

    Returns:
        A MIME type such as "image/png" or "text/plain; charset=utf-8",
        or None for an empty payload
    """
    if not data:
        return None

    content_type = magic.from_buffer(bytes(data[:SNIFF_LENGTH]), mime=True)
    if content_type.startswith("text/"):
        return f"{content_type}; charset={TEXT_CHARSET}"
    return content_type
