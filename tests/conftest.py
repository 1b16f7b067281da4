import pytest

from mca_chunk_reader.tags import Tag, TagPayload, TagType


def compound(*members):
    return TagPayload(TagType.COMPOUND, list(members))


def string(value):
    return TagPayload(TagType.STRING, value)


def block(name):
    return compound(Tag('Name', string(name)))


def section(y, *names):
    palette = TagPayload(TagType.LIST, [block(n) for n in names], TagType.COMPOUND)
    return compound(
        Tag('Y', TagPayload(TagType.BYTE, y)),
        Tag('block_states', compound(
            Tag('palette', palette),
            Tag('data', TagPayload(TagType.LONG_ARRAY, [0x1111, -1])),
        )),
    )


@pytest.fixture
def chunk_tag():
    sections = TagPayload(TagType.LIST, [
        section(-4, 'minecraft:bedrock', 'minecraft:deepslate'),
        section(-3, 'minecraft:air'),
    ], TagType.COMPOUND)
    return Tag('', compound(
        Tag('DataVersion', TagPayload(TagType.INT, 3465)),
        Tag('xPos', TagPayload(TagType.INT, 0)),
        Tag('Status', string('minecraft:full')),
        Tag('sections', sections),
    ))
