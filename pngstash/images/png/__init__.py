'''
# Portable Network Graphics

Format created to replace patent-emcumbered GIF files.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html>.

A PNG file is an 8 bytes signature followed by a sequence of chunks; since
decoders are required to ignore the ancillary chunks they don't know, a chunk
with a made-up type is a perfect place where to stash a message without
altering the image.

Here only the chunk level of the format is described: the content of the
chunks is left as raw bytes and no ordering is enforced between them.
'''
import logging

from ...core import Chunk
from ... import fields
from ...meta import Endianess
from ...properties import ChunkPhase, Dependency
from ...common import crc
from ...exceptions import ChunkNotPresentException, TextDecodeException
from .chunk_type import ChunkType


logger = logging.getLogger(__name__)


PNG_SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


def get_type_code(chunk_type):
    '''Normalize the key used to search chunks to its raw bytes, None if it can't be one.'''
    if isinstance(chunk_type, ChunkType):
        return chunk_type.raw

    if isinstance(chunk_type, str):
        return chunk_type.encode('utf-8')

    if isinstance(chunk_type, (bytes, bytearray, memoryview)):
        return bytes(chunk_type)

    return None


class ChunkTypeField(fields.Field):
    '''The 4 letters code of a chunk, its value is a ChunkType instance.

    It's possible to set the value using a string or raw bytes, that are
    validated in the process.'''

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.value)

    def _set_value(self, value) -> None:
        if value is not None and not isinstance(value, ChunkType):
            value = ChunkType.from_string(value) if isinstance(value, str) else ChunkType.from_bytes(value)

        self._value = value

    def _get_size(self):
        return 4

    def _get_raw(self):
        if self.value is None:
            raise ValueError(f"the field '{self.name}' has no chunk type set")

        return self.value.raw

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        self.value = ChunkType.from_bytes(stream.read_exactly(self.size))
        self._phase = ChunkPhase.DONE


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=PNG_SIGNATURE, is_magic=True)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk
    '''
    length = fields.StructField('I', endianess=Endianess.BIG_ENDIAN)  # big endian
    type   = ChunkTypeField()
    data   = fields.StringField(Dependency('.length'))
    crc    = crc.CRCField(['type', 'data'], endianess=Endianess.BIG_ENDIAN)  # network byte order

    @classmethod
    def new(cls, chunk_type, data):
        '''Build a chunk from scratch, length and CRC are calculated from the arguments.'''
        chunk = cls()
        chunk.type = chunk_type
        chunk.data = data
        chunk._update_value()
        chunk.relayout()

        return chunk

    def _update_value(self):
        # the length always follows the payload
        self.length.value = len(self.data.value)
        super()._update_value()

    @classmethod
    def parse(cls, data):
        return cls(data)

    def serialize(self):
        return self.pack()

    @property
    def chunk_type(self):
        return self.type.value

    def data_as_text(self):
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise TextDecodeException(self.chunk_type) from e

    def __str__(self):
        try:
            content = repr(self.data_as_text())
        except TextDecodeException:
            data = self.data.value
            content = data[:16].hex() + ('...' if len(data) > 16 else '')

        return '%s (%d bytes): %s' % (self.chunk_type, self.length.value, content)


class PNGFile(Chunk):
    '''The container: the signature followed by all the chunks until the end of the data.'''
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk())

    @classmethod
    def parse(cls, data):
        return cls(data)

    @classmethod
    def from_chunks(cls, chunks):
        png = cls()

        for chunk in chunks:
            png.append(chunk)

        return png

    def serialize(self):
        return self.pack()

    def __iter__(self):
        return iter(self.chunks)

    def __str__(self):
        msg = 'PNG file with %d chunks\n' % len(self.chunks)
        for idx, chunk in enumerate(self.chunks):
            msg += f'[{idx:02d}] {chunk}\n'

        return msg

    def append(self, chunk):
        self.chunks.append(chunk)

    def _index_by_type(self, chunk_type):
        code = get_type_code(chunk_type)

        if code is None:
            return None

        for idx, chunk in enumerate(self.chunks):
            if chunk.chunk_type.raw == code:
                return idx

        return None

    def find_by_type(self, chunk_type):
        '''Return the first chunk with the given type or None.'''
        idx = self._index_by_type(chunk_type)

        return self.chunks[idx] if idx is not None else None

    def remove_by_type(self, chunk_type):
        '''Remove and return the first chunk with the given type.'''
        idx = self._index_by_type(chunk_type)

        if idx is None:
            raise ChunkNotPresentException(chunk_type)

        chunk = self.chunks.pop(idx)
        logger.debug('removed chunk #%d %r', idx, chunk)

        return chunk
