"""NBT decoder.

The wire format is a type code byte, a 16-bit length-prefixed UTF-8 name
and a payload. Names appear only on the root tag and on Compound members;
List elements are bare payloads of the list's single element type.

Compound and List nesting is walked with an explicit stack rather than
Python recursion, so nesting depth is bounded only by ``MAX_DEPTH``.
"""

import logging

from .cursor import ByteCursor
from .errors import DecodeError, InvalidLength, NestingTooDeep, UnknownTagType
from .tags import Tag, TagPayload, TagType

logger = logging.getLogger(__name__)

# Same limit as the game's own NBT reader.
MAX_DEPTH = 512

_ARRAY_CODES = {
    TagType.BYTE_ARRAY: 'b',
    TagType.INT_ARRAY: 'i',
    TagType.LONG_ARRAY: 'q',
}

_CONTAINERS = (TagType.LIST, TagType.COMPOUND)


class _Container:
    """A List or Compound whose members are still being read."""

    __slots__ = ('type', 'key', 'element_type', 'remaining', 'items')

    def __init__(self, tag_type, key, element_type=TagType.END, remaining=0):
        self.type = tag_type
        self.key = key
        self.element_type = element_type
        self.remaining = remaining
        self.items = []

    def add(self, key, payload: TagPayload) -> None:
        if self.type == TagType.COMPOUND:
            self.items.append(Tag(key, payload))
        else:
            self.items.append(payload)

    def payload(self) -> TagPayload:
        if self.type == TagType.LIST:
            return TagPayload(TagType.LIST, self.items, self.element_type)
        return TagPayload(TagType.COMPOUND, self.items)


class NBTDecoder:
    """Decode NBT payloads from a :class:`ByteCursor`.

    ``path`` holds the names and list indices leading to the payload being
    decoded; it is attached to any :class:`DecodeError` for diagnostics.
    """

    def __init__(self, cursor: ByteCursor, max_depth: int = MAX_DEPTH):
        self.cursor = cursor
        self.max_depth = max_depth
        self.path = []

    def read_type(self) -> TagType:
        start = self.cursor.pos
        code = self.cursor.read_ubyte()
        try:
            return TagType(code)
        except ValueError:
            raise UnknownTagType(code, position=start) from None

    def read_count(self) -> int:
        start = self.cursor.pos
        count = self.cursor.read_int()
        if count < 0:
            raise InvalidLength(f'Negative length {count}', position=start)
        return count

    def read_scalar(self, tag_type: TagType) -> TagPayload:
        c = self.cursor
        if tag_type == TagType.BYTE:
            return TagPayload(TagType.BYTE, c.read_byte())
        elif tag_type == TagType.SHORT:
            return TagPayload(TagType.SHORT, c.read_short())
        elif tag_type == TagType.INT:
            return TagPayload(TagType.INT, c.read_int())
        elif tag_type == TagType.LONG:
            return TagPayload(TagType.LONG, c.read_long())
        elif tag_type == TagType.FLOAT:
            return TagPayload(TagType.FLOAT, c.read_float())
        elif tag_type == TagType.DOUBLE:
            return TagPayload(TagType.DOUBLE, c.read_double())
        elif tag_type in _ARRAY_CODES:
            count = self.read_count()
            return TagPayload(tag_type, c.read_array(_ARRAY_CODES[tag_type], count))
        elif tag_type == TagType.STRING:
            return TagPayload(TagType.STRING, c.read_string())
        else:
            raise UnknownTagType(int(tag_type), position=c.pos)

    def open_container(self, tag_type: TagType, key=None) -> _Container:
        if len(self.path) > self.max_depth:
            raise NestingTooDeep(f'Nesting deeper than {self.max_depth} levels', position=self.cursor.pos)
        if tag_type == TagType.LIST:
            element_type = self.read_type()
            return _Container(tag_type, key, element_type, self.read_count())
        return _Container(tag_type, key)

    def read_payload(self, tag_type: TagType) -> TagPayload:
        if tag_type not in _CONTAINERS:
            return self.read_scalar(tag_type)

        stack = [self.open_container(tag_type)]
        while True:
            frame = stack[-1]
            if frame.type == TagType.LIST:
                done = frame.remaining == 0
                if not done:
                    child_type = frame.element_type
                    key = len(frame.items)
                    frame.remaining -= 1
            else:
                child_type = self.read_type()
                done = child_type == TagType.END
                if not done:
                    key = self.cursor.read_string()

            if done:
                stack.pop()
                if not stack:
                    return frame.payload()
                self.path.pop()
                stack[-1].add(frame.key, frame.payload())
                continue

            self.path.append(key)
            if child_type in _CONTAINERS:
                stack.append(self.open_container(child_type, key))
            else:
                frame.add(key, self.read_scalar(child_type))
                self.path.pop()

    def read_document(self) -> Tag | None:
        root_type = self.read_type()
        if root_type == TagType.END:
            return None
        name = self.cursor.read_string()
        return Tag(name, self.read_payload(root_type))


def parse_payload(cursor: ByteCursor, type_code: int) -> TagPayload:
    """Decode one payload of ``type_code`` at the cursor position."""
    decoder = NBTDecoder(cursor)
    try:
        try:
            tag_type = TagType(type_code)
        except ValueError:
            raise UnknownTagType(type_code, position=cursor.pos) from None
        return decoder.read_payload(tag_type)
    except DecodeError as exc:
        raise exc.located(cursor.pos, decoder.path)


def parse_document(data: bytes) -> Tag | None:
    """Decode a complete NBT document.

    Returns ``None`` when the document is a lone End tag.
    """
    cursor = ByteCursor(data)
    decoder = NBTDecoder(cursor)
    try:
        root = decoder.read_document()
    except DecodeError as exc:
        raise exc.located(cursor.pos, decoder.path)
    if cursor.remaining:
        logger.debug('Ignoring %d trailing bytes after NBT root', cursor.remaining)
    return root
