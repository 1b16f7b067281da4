"""Anvil region file access: location table, chunk records, decompression.

Layout (big-endian throughout)::

    [0, 4096)      1024 location entries: 3-byte sector offset, 1-byte sector count
    [4096, 8192)   1024 timestamps (unused here)
    offset * 4096  4-byte length L, 1-byte compression scheme, L - 1 payload bytes
"""

import enum
import gzip
import logging
import struct
import zlib
from typing import BinaryIO, Iterator

from .errors import (
    DecompressionFailed, NBTError, Truncated, UnsupportedCompression,
)
from .nbt import parse_document
from .tags import Tag

logger = logging.getLogger(__name__)

SECTOR_SIZE = 4096
LOCATION_ENTRIES = 1024
REGION_WIDTH = 32

_RECORD_HEADER = struct.Struct('>IB')


class Compression(enum.IntEnum):
    GZIP = 1
    ZLIB = 2
    NONE = 3


class AbsentChunkPolicy(enum.Enum):
    # STOP ends the scan at the first absent entry; SKIP steps over it.
    STOP = 'stop'
    SKIP = 'skip'


def location_offset(entry: bytes) -> int | None:
    """Byte offset for one 4-byte location entry, or None if absent."""
    b0, b1, b2, b3 = entry
    if b3 == 0:
        return None
    return (b0 << 16 | b1 << 8 | b2) * SECTOR_SIZE


def chunk_coords(index: int) -> tuple[int, int]:
    """Region-local (x, z) of a location table index."""
    return index % REGION_WIDTH, index // REGION_WIDTH


def iter_locations(header: bytes,
                   policy: AbsentChunkPolicy = AbsentChunkPolicy.STOP) -> Iterator[tuple[int, int]]:
    """Yield ``(table_index, byte_offset)`` for present chunks in table order."""
    table_size = LOCATION_ENTRIES * 4
    if len(header) < table_size:
        raise Truncated(f'Location table needs {table_size} bytes, got {len(header)}')
    for i in range(LOCATION_ENTRIES):
        offset = location_offset(header[i * 4:i * 4 + 4])
        if offset is None:
            if policy is AbsentChunkPolicy.STOP:
                return
            continue
        yield i, offset


def locate_chunks(header: bytes, policy: AbsentChunkPolicy = AbsentChunkPolicy.STOP) -> list[int]:
    """Decode the location table into chunk byte offsets, in table order."""
    return [offset for _, offset in iter_locations(header, policy)]


def decompress(scheme: int, payload: bytes, *, offset: int | None = None) -> bytes:
    try:
        if scheme == Compression.ZLIB:
            return zlib.decompress(payload)
        elif scheme == Compression.GZIP:
            return gzip.decompress(payload)
        elif scheme == Compression.NONE:
            return bytes(payload)
    except (zlib.error, gzip.BadGzipFile, EOFError) as exc:
        raise DecompressionFailed(f'Malformed compressed stream: {exc}', offset=offset) from exc
    raise UnsupportedCompression(scheme, offset=offset)


def read_chunk(f: BinaryIO, offset: int, accepted=(Compression.ZLIB,)) -> bytes:
    """Read and decompress the chunk record at ``offset``.

    Leaves the file position after the record.
    """
    f.seek(offset)
    head = f.read(_RECORD_HEADER.size)
    if len(head) < _RECORD_HEADER.size:
        raise Truncated(f'Chunk header needs {_RECORD_HEADER.size} bytes, got {len(head)}', offset=offset)
    length, scheme = _RECORD_HEADER.unpack(head)
    if scheme not in accepted:
        raise UnsupportedCompression(scheme, offset=offset)
    if length < 1:
        raise Truncated(f'Chunk length {length} leaves no room for the scheme byte', offset=offset)
    payload = f.read(length - 1)
    if len(payload) < length - 1:
        raise Truncated(f'Chunk declares {length - 1} payload bytes, only {len(payload)} available',
                        offset=offset)
    logger.debug('Chunk at %d: %d bytes, scheme %d', offset, length, scheme)
    return decompress(scheme, payload, offset=offset)


def decode_chunk(data: bytes) -> Tag | None:
    """Parse a decompressed chunk buffer. Safe to call from worker threads or processes."""
    return parse_document(data)


class RegionFile:
    """An open ``.mca`` file.

    Usage::

        with RegionFile('r.0.0.mca') as region:
            for index, offset, chunk in region.iter_chunks():
                ...
    """

    def __init__(self, path, policy: AbsentChunkPolicy = AbsentChunkPolicy.STOP,
                 accepted=(Compression.ZLIB,)):
        self.path = path
        self.policy = policy
        self.accepted = tuple(accepted)
        self.file = None
        self.locations = []

    def __enter__(self):
        self.file = open(self.path, 'rb')
        try:
            header = self.file.read(LOCATION_ENTRIES * 4)
            self.locations = list(iter_locations(header, self.policy))
        except BaseException:
            self.file.close()
            raise
        logger.info('%s: %d chunks located', self.path, len(self.locations))
        return self

    @property
    def offsets(self) -> list[int]:
        return [offset for _, offset in self.locations]

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.file.close()
        self.file = None

    def read_chunk(self, offset: int) -> bytes:
        return read_chunk(self.file, offset, self.accepted)

    def chunk(self, offset: int) -> Tag | None:
        return decode_chunk(self.read_chunk(offset))

    def iter_chunks(self, *, skip_errors: bool = True) -> Iterator[tuple[int, int, Tag | None]]:
        """Yield ``(table_index, offset, root)`` for every located chunk.

        With ``skip_errors`` a chunk that fails to decode is logged and
        skipped; otherwise the error propagates.
        """
        parsed = 0
        for i, offset in self.locations:
            try:
                root = self.chunk(offset)
            except NBTError as exc:
                if not skip_errors:
                    raise
                logger.warning('Could not parse chunk %d: %s', i, exc)
                continue
            parsed += 1
            yield i, offset, root
        logger.info('%d/%d chunks parsed successfully', parsed, len(self.locations))
