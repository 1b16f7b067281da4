"""NBT and region file writer used to build test fixtures."""

import io
import struct
import zlib

from mca_chunk_reader.tags import Tag, TagPayload, TagType


class NBTWriter:
    """Write NBT binary data sequentially."""

    def __init__(self):
        self.buf = io.BytesIO()

    def write(self, data: bytes) -> None:
        self.buf.write(data)

    def write_ubyte(self, v: int) -> None:
        self.write(struct.pack('>B', v))

    def write_string(self, s: str) -> None:
        encoded = s.encode('utf-8')
        self.write(struct.pack('>H', len(encoded)))
        self.write(encoded)

    def write_payload(self, payload: TagPayload) -> None:
        t = payload.type
        scalar = {TagType.BYTE: '>b', TagType.SHORT: '>h', TagType.INT: '>i',
                  TagType.LONG: '>q', TagType.FLOAT: '>f', TagType.DOUBLE: '>d'}
        arrays = {TagType.BYTE_ARRAY: 'b', TagType.INT_ARRAY: 'i', TagType.LONG_ARRAY: 'q'}
        if t in scalar:
            self.write(struct.pack(scalar[t], payload.value))
        elif t in arrays:
            self.write(struct.pack('>i', len(payload.value)))
            self.write(struct.pack(f'>{len(payload.value)}{arrays[t]}', *payload.value))
        elif t == TagType.STRING:
            self.write_string(payload.value)
        elif t == TagType.LIST:
            self.write_ubyte(payload.element_type)
            self.write(struct.pack('>i', len(payload.value)))
            for item in payload.value:
                self.write_payload(item)
        elif t == TagType.COMPOUND:
            for tag in payload.value:
                self.write_tag(tag)
            self.write_ubyte(0)
        else:
            raise ValueError(f'Cannot write tag type {t}')

    def write_tag(self, tag: Tag) -> None:
        self.write_ubyte(tag.payload.type)
        self.write_string(tag.name)
        self.write_payload(tag.payload)

    def get_bytes(self) -> bytes:
        return self.buf.getvalue()


def encode(tag: Tag) -> bytes:
    writer = NBTWriter()
    writer.write_tag(tag)
    return writer.get_bytes()


def chunk_record(data: bytes, scheme: int = 2, compress=zlib.compress) -> bytes:
    payload = compress(data) if compress else data
    return struct.pack('>IB', len(payload) + 1, scheme) + payload


def region_bytes(records: list, *, absent: tuple = ()) -> bytes:
    """Lay out chunk records one per sector starting at sector 2.

    Table indices listed in ``absent`` get a zero entry and no record.
    """
    table = bytearray(4096)
    body = bytearray()
    index = 0
    for record in records:
        while index in absent:
            index += 1
        sector = 2 + len(body) // 4096
        count = -(-len(record) // 4096)
        table[index * 4:index * 4 + 4] = sector.to_bytes(3, 'big') + bytes([count])
        body += record.ljust(count * 4096, b'\0')
        index += 1
    return bytes(table) + bytes(4096) + bytes(body)


def nested_compounds(depth: int) -> bytes:
    """Root compound holding ``depth`` levels of compounds named ``a``."""
    return b"\x0a\x00\x00" + b"\x0a\x00\x01a" * depth + b"\x00" * (depth + 1)
