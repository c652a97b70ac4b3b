# midi/stream.py
from midi.errors import TruncatedStream


class ByteCursor:
    """Forward-only reader over an in-memory buffer. Short reads are fatal."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes):
        self._data = memoryview(bytes(data))
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def exhausted(self) -> bool:
        return self.remaining == 0

    def read(self, n: int) -> bytes:
        if n < 0:
            raise ValueError("read size must be non-negative")
        if n > self.remaining:
            raise TruncatedStream(n, self.remaining)
        start = self._pos
        self._pos += n
        return bytes(self._data[start:self._pos])

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_u16(self) -> int:
        return int.from_bytes(self.read(2), "big")

    def read_u32(self) -> int:
        return int.from_bytes(self.read(4), "big")
