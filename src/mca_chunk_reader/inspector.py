"""Walk the block palettes of decoded world chunks.

Chunk NBT layout (1.18+)::

    Root("") -> sections: List[Compound]
      section -> block_states: Compound
        block_states -> palette: List[Compound]
          palette entry -> Name: String, Properties: Compound (optional)

Every step uses the strict accessors, so a chunk that lacks any of these
members raises MissingField/TypeMismatch rather than yielding nothing.
"""

from dataclasses import dataclass
from typing import Iterator

from .region import AbsentChunkPolicy, Compression, RegionFile
from .tags import Tag


def _section_palette(section) -> list[str]:
    palette = section.get('block_states').get('palette').as_list()
    return [block.get('Name').as_string() for block in palette]


def iter_palette_names(chunk: Tag) -> Iterator[list[str]]:
    """Yield the palette block names of each section, bottom to top."""
    for section in chunk.payload.get('sections').as_list():
        yield _section_palette(section)


@dataclass
class RegionSummary:
    chunk_count: int
    parsed_count: int = 0
    first_offset: int | None = None
    chunk_index: int | None = None
    chunk: Tag | None = None


def inspect_region(path, *, chunk: int = 0,
                   policy: AbsentChunkPolicy = AbsentChunkPolicy.STOP,
                   accepted=(Compression.ZLIB,)) -> RegionSummary:
    """Decode every chunk of a region and keep one of them.

    ``chunk`` selects, by position among the successfully parsed chunks,
    which decoded chunk to keep. Its palettes are walked separately with
    :func:`iter_palette_names`, so a chunk with an unexpected layout does
    not prevent the summary from being reported.
    """
    with RegionFile(path, policy=policy, accepted=accepted) as region:
        summary = RegionSummary(chunk_count=len(region.locations))
        if region.locations:
            summary.first_offset = region.locations[0][1]
        for i, _, root in region.iter_chunks():
            if summary.parsed_count == chunk:
                summary.chunk_index, summary.chunk = i, root
            summary.parsed_count += 1
    return summary
