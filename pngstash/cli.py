#!/usr/bin/env python3
'''
Hide messages into PNG files using chunks of a custom type.

 $ pngstash encode image.png ruSt 'meet me at midnight'
 $ pngstash decode image.png ruSt
 meet me at midnight
 $ pngstash remove image.png ruSt
 $ pngstash print image.png

The chunk type should be an ancillary (first letter lowercase) one, so that
decoders not knowing it simply skip over it.
'''
import logging
import os
import sys

from .exceptions import PNGStashException
from .images.png import PNGFile, PNGChunk
from .images.png.chunk_type import ChunkType


logger = logging.getLogger(__name__)


def usage(progname):
    print(f'''usage: {progname} encode <png file> <chunk type> <message> [<output file>]
       {progname} decode <png file> <chunk type>
       {progname} remove <png file> <chunk type> [<output file>]
       {progname} print <png file>''', file=sys.stderr)
    sys.exit(1)


def read_png(path):
    logger.debug('reading \'%s\'' % path)
    with open(path, 'rb') as f:
        return PNGFile(f.read())


def write_png(png, path):
    data = png.serialize()
    logger.debug('writing %d bytes to \'%s\'' % (len(data), path))
    with open(path, 'wb') as f:
        f.write(data)


def do_encode(png_path, chunk_type, message, output_path=None):
    chunk_type = ChunkType.from_string(chunk_type)

    if not chunk_type.is_valid():
        logger.warning(f'chunk type {chunk_type} has the reserved bit set, decoders could refuse the file')
    if chunk_type.is_critical():
        logger.warning(f'chunk type {chunk_type} is critical, decoders not knowing it will refuse the file')

    png = read_png(png_path)
    png.append(PNGChunk.new(chunk_type, message.encode('utf-8')))

    write_png(png, output_path or png_path)


def do_decode(png_path, chunk_type):
    png = read_png(png_path)

    chunk = png.find_by_type(ChunkType.from_string(chunk_type))

    if chunk is None:
        logger.error(f'no chunk of type {chunk_type} in \'{png_path}\'')
        return 1

    print(chunk.data_as_text())


def do_remove(png_path, chunk_type, output_path=None):
    png = read_png(png_path)

    chunk = png.remove_by_type(ChunkType.from_string(chunk_type))
    logger.info(f'removed chunk {chunk}')

    write_png(png, output_path or png_path)


def do_print(png_path):
    print(read_png(png_path), end='')


# command name -> (function, minimum number of arguments, maximum number of arguments)
COMMANDS = {
    'encode': (do_encode, 3, 4),
    'decode': (do_decode, 2, 2),
    'remove': (do_remove, 2, 3),
    'print':  (do_print, 1, 1),
}


def main(argv=None):
    argv = sys.argv if argv is None else argv

    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)

    progname = os.path.basename(argv[0])

    if len(argv) < 2 or argv[1] not in COMMANDS:
        usage(progname)

    command, n_min, n_max = COMMANDS[argv[1]]
    args = argv[2:]

    if not n_min <= len(args) <= n_max:
        usage(progname)

    try:
        return command(*args) or 0
    except (PNGStashException, OSError) as e:
        logger.error(f'{argv[1]} failed: {e}')
        return 1


if __name__ == '__main__':
    sys.exit(main())
