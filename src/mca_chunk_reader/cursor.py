"""Bounds-checked big-endian reader over an in-memory buffer."""

import struct

from .errors import InvalidEncoding, UnexpectedEnd

_UBYTE = struct.Struct('>B')
_BYTE = struct.Struct('>b')
_USHORT = struct.Struct('>H')
_SHORT = struct.Struct('>h')
_INT = struct.Struct('>i')
_LONG = struct.Struct('>q')
_FLOAT = struct.Struct('>f')
_DOUBLE = struct.Struct('>d')


class ByteCursor:
    """Read NBT primitives sequentially.

    Every read either returns the full value and advances ``pos`` by its
    width, or raises :class:`UnexpectedEnd`. The cursor must not be reused
    after a failed read.
    """

    def __init__(self, data: bytes):
        self.data = memoryview(data)
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def _need(self, n: int) -> None:
        if n > len(self.data) - self.pos:
            raise UnexpectedEnd(
                f'Needed {n} bytes, {len(self.data) - self.pos} left',
                position=self.pos,
            )

    def _unpack(self, fmt: struct.Struct):
        self._need(fmt.size)
        value = fmt.unpack_from(self.data, self.pos)[0]
        self.pos += fmt.size
        return value

    def read(self, n: int) -> memoryview:
        self._need(n)
        r = self.data[self.pos:self.pos + n]
        self.pos += n
        return r

    def read_ubyte(self) -> int:
        return self._unpack(_UBYTE)

    def read_byte(self) -> int:
        return self._unpack(_BYTE)

    def read_ushort(self) -> int:
        return self._unpack(_USHORT)

    def read_short(self) -> int:
        return self._unpack(_SHORT)

    def read_int(self) -> int:
        return self._unpack(_INT)

    def read_long(self) -> int:
        return self._unpack(_LONG)

    def read_float(self) -> float:
        return self._unpack(_FLOAT)

    def read_double(self) -> float:
        return self._unpack(_DOUBLE)

    def read_string(self) -> str:
        start = self.pos
        length = self.read_ushort()
        raw = self.read(length)
        try:
            return str(raw, 'utf-8')
        except UnicodeDecodeError as exc:
            raise InvalidEncoding(f'String is not valid UTF-8: {exc.reason}', position=start) from exc

    def read_array(self, code: str, count: int) -> list:
        """Read ``count`` big-endian values of one struct type code."""
        fmt = struct.Struct(f'>{count}{code}')
        self._need(fmt.size)
        values = list(fmt.unpack_from(self.data, self.pos))
        self.pos += fmt.size
        return values
