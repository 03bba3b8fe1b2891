import io
import struct
from typing import Any

from .util import guid_to_UUID


class ShortReadError(EOFError):
    """Some, but not all, of the requested bytes were available."""
    pass


class BinaryReader:
    def __init__(self, buf: bytes):
        self.fh = io.BytesIO(buf)

    def tell(self) -> int:
        return self.fh.tell()

    def remaining(self) -> int:
        pos = self.fh.tell()
        end = self.fh.seek(0, io.SEEK_END)
        self.fh.seek(pos)
        return end - pos

    def _read(self, fmt_len: str | int) -> Any:
        length = fmt_len if isinstance(fmt_len, int) else struct.calcsize(fmt_len)
        if length == 0:
            return b''
        # Lengths come straight from the log, don't trust them with an allocation.
        buf = self.fh.read(min(length, self.remaining()))

        if len(buf) == 0:
            raise EOFError(f"Hit EOF after 0/{length} bytes")
        elif len(buf) < length:
            raise ShortReadError(f"Hit EOF after {len(buf)}/{length} bytes")

        if isinstance(fmt_len, str):
            data = struct.unpack_from(fmt_len, buf)
            buf = data[0] if len(data) == 1 else data
        return buf

    def read(self, size: int) -> bytes:
        return self._read(size)

    def read_u8(self) -> int:
        return self._read("<B")

    def read_u16(self) -> int:
        return self._read("<H")

    def read_u32(self) -> int:
        return self._read("<L")

    def read_u64(self) -> int:
        return self._read("<Q")

    def read_guid(self):
        return guid_to_UUID(self._read(16))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.fh.close()
