"""
Header line folding.

Writes MIME header fields, inserting CRLF + space continuations so lines
stay within MAX_LINE_LENGTH where the value allows it. Existing line breaks
inside a value (e.g. pre-encoded multi-line subjects) are written through
verbatim, and a value with nowhere to break is written whole rather than
split mid-token.
"""

from typing import BinaryIO, Sequence, Tuple

from .config import MAX_LINE_LENGTH, CONTINUATION_LENGTH, CRLF, FOLD
from .interface import Header, EncodingWriteFailure


def _write(out: BinaryIO, text: str) -> int:
    data = text.encode("utf-8")
    try:
        out.write(data)
    except OSError as e:
        raise EncodingWriteFailure(f"header write failed: {e}") from e
    return len(data)


def _tail_length(text: str) -> int:
    """Length of text after its last newline."""
    return len(text) - text.rfind("\n") - 1


def _split_line(value: str, budget: int) -> Tuple[str, str]:
    """
    Choose where to break a value that does not fit in budget columns.

    Returns:
        (text to write, rest of the value)
    """
    # A newline before the limit: write the line through it
    newline = value.find("\n")
    if newline != -1 and newline < budget:
        return value[:newline + 1], value[newline + 1:]

    # Never break at index 0: that would leave a whitespace-only line
    space = value.rfind(" ", 1, budget)
    if space != -1:
        return value[:space] + FOLD, value[space + 1:]

    # No clean break within the limit, take the first space or newline after it
    for i in range(max(budget, 1), len(value)):
        if value[i] == " ":
            return value[:i] + FOLD, value[i + 1:]
        if value[i] == "\n":
            return value[:i + 1], value[i + 1:]

    return value, ""


def write_header(out: BinaryIO, name: str, values: Sequence[str]) -> int:
    """
    Write one header field, folding long values.

    Multiple values are joined with ", ".

    Returns:
        Number of bytes written
    """
    written = _write(out, name)
    if not values:
        return written + _write(out, ":" + CRLF)
    written += _write(out, ": ")

    remaining = MAX_LINE_LENGTH - len(name) - len(": ")

    for i, value in enumerate(values):
        # Line already full: break before the value
        if remaining < 1:
            written += _write(out, FOLD if i == 0 else "," + FOLD)
            remaining = CONTINUATION_LENGTH
        elif i != 0:
            written += _write(out, ", ")
            remaining -= 2

        while value and len(value) > remaining:
            line, value = _split_line(value, max(remaining, 0))
            written += _write(out, line)
            remaining = CONTINUATION_LENGTH

        written += _write(out, value)
        if "\n" in value:
            remaining = CONTINUATION_LENGTH - _tail_length(value)
        else:
            remaining -= len(value)

    return written + _write(out, CRLF)


def write_headers(out: BinaryIO, header: Header) -> int:
    """Write a header block followed by the blank separator line."""
    written = 0
    for name, values in header.items():
        written += write_header(out, name, values)
    return written + _write(out, CRLF)
