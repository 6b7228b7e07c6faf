'''
We are implementing fields to handle CRC calculation.
'''

from .. import fields
from ..exceptions import IncorrectCRCException

from zlib import crc32


class CRCField(fields.StructField):
    """standard CRC methods with pre and post conditioning, as defined by ISO 3309 [ISO-3309]
    or ITU-T V.42 [ITU-V42]. The CRC polynomial employed is

      x^32+x^26+x^23+x^22+x^16+x^12+x^11+x^10+x^8+x^7+x^5+x^4+x^2+x+1

    The 32-bit CRC register is initialized to all 1's, and then the data from each byte is processed
    from the least significant bit (1) to the most significant bit (128). After all the data bytes are processed,
    the CRC register is inverted (its ones complement is taken). This value is transmitted (stored in the file)
    MSB first.

    This is the CRC-32/ISO-HDLC parametrization, the same of zlib: the check value
    for b'123456789' is 0xcbf43926.

    See <https://www.w3.org/TR/PNG-Structure.html#CRC-algorithm>.

    The fields covered are indicated by name and are siblings of this one; since
    the CRC is calculated over their raw representation they must precede it.
    When unpacking, the value read is verified against the calculated one.
    """

    def __init__(self, fields, *args, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.fields = fields

    def __repr__(self):
        return '<%s(0x%08x)>' % (self.__class__.__name__, self.value)

    def calculate(self):
        value = b''
        for field_name in self.fields:
            field = getattr(self.father, field_name)
            value += field.raw

        return crc32(value)

    def _update_value(self):
        self.value = self.calculate()

    def unpack(self, stream):
        super().unpack(stream)

        expected = self.calculate()

        if self.value != expected:
            self.logger.debug('CRC mismatch: read 0x%08x, calculated 0x%08x', self.value, expected)
            raise IncorrectCRCException(expected, self.value)
