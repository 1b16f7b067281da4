"""In-memory NBT tag tree and its strict accessor API.

A decoded document is a :class:`Tag` whose payload is a
:class:`TagPayload`. Compound payloads hold a list of named tags in
stream order; List payloads hold bare payloads sharing one element type.

Traversal is built from two primitives only::

    sections = root.payload.get('sections').as_list()
    palette = sections[0].get('block_states').get('palette').as_list()
    name = palette[0].get('Name').as_string()

Both raise (:class:`MissingField`, :class:`TypeMismatch`) instead of
returning defaults.
"""

import math
import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .errors import MissingField, TypeMismatch

_F32 = struct.Struct('>f')


def _float32_str(value: float) -> str:
    """Shortest text that reads back as the same 32-bit float."""
    if not math.isfinite(value):
        return str(value)
    for digits in range(1, 10):
        text = f'{value:.{digits}g}'
        try:
            if _F32.unpack(_F32.pack(float(text)))[0] == value:
                return text
        except OverflowError:
            continue
    return repr(value)


class TagType(IntEnum):
    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12


@dataclass(frozen=True)
class TagPayload:
    type: TagType
    value: object
    # Only meaningful for LIST; END for every other type.
    element_type: TagType = field(default=TagType.END)

    def _expect(self, expected: TagType):
        if self.type != expected:
            raise TypeMismatch(expected, TagType(self.type))
        return self.value

    def get(self, name: str) -> 'TagPayload':
        """Return the payload of the first Compound member called ``name``."""
        for tag in self._expect(TagType.COMPOUND):
            if tag.name == name:
                return tag.payload
        raise MissingField(name)

    def as_byte(self) -> int:
        return self._expect(TagType.BYTE)

    def as_short(self) -> int:
        return self._expect(TagType.SHORT)

    def as_int(self) -> int:
        return self._expect(TagType.INT)

    def as_long(self) -> int:
        return self._expect(TagType.LONG)

    def as_float(self) -> float:
        return self._expect(TagType.FLOAT)

    def as_double(self) -> float:
        return self._expect(TagType.DOUBLE)

    def as_byte_array(self) -> list[int]:
        return self._expect(TagType.BYTE_ARRAY)

    def as_string(self) -> str:
        return self._expect(TagType.STRING)

    def as_list(self) -> list['TagPayload']:
        return self._expect(TagType.LIST)

    def as_compound(self) -> list['Tag']:
        return self._expect(TagType.COMPOUND)

    def as_int_array(self) -> list[int]:
        return self._expect(TagType.INT_ARRAY)

    def as_long_array(self) -> list[int]:
        return self._expect(TagType.LONG_ARRAY)

    def __str__(self) -> str:
        if self.type == TagType.FLOAT:
            return _float32_str(self.value)
        if self.type == TagType.STRING:
            return f'"{self.value}"'
        if self.type == TagType.LIST:
            return '[ ' + ', '.join(str(v) for v in self.value) + ' ]'
        if self.type == TagType.COMPOUND:
            return '{ ' + ', '.join(str(t) for t in self.value) + ' }'
        return str(self.value)


@dataclass(frozen=True)
class Tag:
    name: str
    payload: TagPayload

    def __str__(self) -> str:
        if not self.name:
            return str(self.payload)
        return f'"{self.name}": {self.payload}'
