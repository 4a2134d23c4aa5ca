import io

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00"


class BrokenStream:
    """Binary stream that fails after accepting `limit` bytes."""

    def __init__(self, limit: int = 0):
        self.limit = limit
        self.buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        if self.buffer.tell() + len(data) > self.limit:
            raise OSError("disk full")
        return self.buffer.write(data)
