"""CLI entry point: python -m mca_chunk_reader <region.mca>"""

import logging
import sys
from argparse import ArgumentParser

from .errors import AccessError, NBTError
from .inspector import inspect_region, iter_palette_names
from .region import AbsentChunkPolicy, Compression


def get_parser():
    parser = ArgumentParser(
        prog='mca_chunk_reader',
        description='Decode the chunks of a Minecraft Anvil region file and list block palettes.',
    )
    parser.add_argument('path', help='region file (.mca)')
    parser.add_argument(
        '--skip-absent', action='store_true',
        help='keep scanning the location table past absent chunks',
    )
    parser.add_argument(
        '--accept', action='append', choices=[c.name.lower() for c in Compression],
        help='accepted compression scheme (repeatable, default: zlib)',
    )
    parser.add_argument('--chunk', type=int, default=0, help='which parsed chunk to inspect')
    parser.add_argument('--dump', action='store_true', help='print the full tag tree')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def main(argv=None) -> int:
    args = get_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    policy = AbsentChunkPolicy.SKIP if args.skip_absent else AbsentChunkPolicy.STOP
    accepted = tuple(Compression[name.upper()] for name in args.accept or ['zlib'])

    try:
        summary = inspect_region(args.path, chunk=args.chunk, policy=policy, accepted=accepted)
    except (OSError, NBTError) as exc:
        print(f'Error: {exc}', file=sys.stderr)
        return 1

    print(f'Chunks: {summary.chunk_count}')
    if summary.first_offset is not None:
        print(f'Chunk offset 0: {summary.first_offset}')
    print(f'{summary.parsed_count}/{summary.chunk_count} chunks parsed successfully')

    if summary.chunk is None:
        return 0
    if args.dump:
        print(summary.chunk)
    try:
        for palette in iter_palette_names(summary.chunk):
            print()
            print('New palette:')
            for name in palette:
                print(f'Found: {name}')
    except AccessError as exc:
        print(f'Error: chunk {summary.chunk_index}: {exc}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
