'''
The chunk type is a 4-byte code restricted to the uppercase and lowercase
ASCII letters: decoders must not treat the codes as characters, but the
case of each letter is meaningful since the bit 5 (value 0x20) of each byte
is used to convey chunk properties

 1. ancillary bit: 0 (uppercase) means critical, 1 (lowercase) ancillary
 2. private bit: 0 (uppercase) means public, 1 (lowercase) private
 3. reserved bit: must be 0 (uppercase) in files conforming to this version of PNG
 4. safe-to-copy bit: 0 (uppercase) means unsafe to copy, 1 (lowercase) safe to copy

See <http://www.libpng.org/pub/png/spec/1.2/PNG-Structure.html#Chunk-naming-conventions>.
'''
from bitstring import Bits

from ...exceptions import AsciiException, InvalidLengthException


# index of the property bit from the most significant one, i.e. 0x20
PROPERTY_BIT = 2


def is_ascii_letter(byte):
    return 0x41 <= byte <= 0x5a or 0x61 <= byte <= 0x7a


class ChunkType(object):
    __slots__ = ('_raw', '_bits')

    def __init__(self, raw):
        raw = bytes(raw)

        if len(raw) != 4:
            raise InvalidLengthException(raw)

        if not all(is_ascii_letter(_) for _ in raw):
            raise AsciiException(raw)

        object.__setattr__(self, '_raw', raw)
        object.__setattr__(self, '_bits', Bits(raw))

    @classmethod
    def from_bytes(cls, raw):
        return cls(raw)

    @classmethod
    def from_string(cls, value):
        raw = value.encode('utf-8')
        if len(raw) != 4:
            raise InvalidLengthException(value)

        return cls(raw)

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __reduce__(self):
        return (self.__class__, (self._raw,))

    def __eq__(self, other):
        return isinstance(other, ChunkType) and self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def __bytes__(self):
        return self._raw

    def __str__(self):
        return self._raw.decode('ascii')

    def __repr__(self):
        return f'<{self.__class__.__name__}({self!s})>'

    @property
    def raw(self):
        return self._raw

    def _property_bit(self, index):
        return self._bits[index * 8 + PROPERTY_BIT]

    def is_critical(self):
        return not self._property_bit(0)

    def is_public(self):
        return not self._property_bit(1)

    def is_reserved_bit_valid(self):
        return not self._property_bit(2)

    def is_safe_to_copy(self):
        return self._property_bit(3)

    def is_valid(self):
        return all(is_ascii_letter(_) for _ in self._raw) and self.is_reserved_bit_valid()
