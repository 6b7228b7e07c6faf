import pytest

from pngstash.common.crc import CRCField
from pngstash.core import Chunk
from pngstash.exceptions import IncompleteSliceException, IncorrectCRCException
from pngstash.fields import StructField, StringField
from pngstash.meta import Endianess, Meta
from pngstash.properties import ChunkPhase, Dependency


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert isinstance(dummy._meta, Meta)
    assert dummy.get_ordered_fields_name() == ['a', 'b', 'c']

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.offset == 0x00
    assert dummy.a.father is dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10
    assert dummy.b.offset == 0x04

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'
    assert dummy.c.offset == 0x14

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_instances_do_not_share_fields():
    class Dummy(Chunk):
        a = StructField('I')

    first, second = Dummy(), Dummy()
    first.a.value = 0xcafe

    assert first.a is not second.a
    assert second.a.value == 0


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Chunk):
        field_a = StringField(0x10)
        field_b = StructField("I")

    class Son(Father):
        field_c = StringField(0x08)

    field_b_value = b'\x01\x02\x03\x04'
    field_c_value = b'ABCDEFGH'
    son = Son(b'A' * 16 + field_b_value + field_c_value)

    assert [_ for _, __ in son.get_fields()] == [
        'field_a', 'field_b', 'field_c',
    ]

    assert son.field_b.value == 0x04030201
    assert son.field_c.value == field_c_value


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'), default=b'kebab')

    example = Example()

    assert list(example.data.get_dependencies().keys()) == ['length']

    assert example.sz.father is example
    assert example.sz.value == 5
    assert example.data.value == b'kebab'
    assert example.pack() == b'\x05\x00\x00\x00kebab'

    # changing the data changes the length and the layout
    example.data = b'kebabs'

    assert example.sz.value == 6
    assert example.size == 10
    assert example.pack() == b'\x06\x00\x00\x00kebabs'


def test_offset_dependencies():
    class TLV(Chunk):
        type   = StructField('I')
        length = StructField('I')
        data   = StringField(Dependency('.length'))
        extra  = StructField('I')

    contents = (
        b'\x01\x00\x00\x00'
        b'\x0f\x00\x00\x00'
        b'\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41'
        b'\x0a\x0b\x0c\x0d'
    )
    tlv = TLV(contents)

    assert tlv._phase == ChunkPhase.DONE
    assert tlv.layout == {
        'type': (0x00, 4),
        'length': (0x04, 4),
        'data': (0x08, 0x0f),
        'extra': (0x08 + 0x0f, 4),
    }
    assert tlv.data.value == b'\x41' * 0x0f
    assert tlv.extra.value == 0x0d0c0b0a
    assert tlv.pack() == contents

    # now try to change the data field's size and verify that
    # the offset for extra is recalculated and the size field
    # also is updated accordingly
    tlv.data.value = b'\x42\x42\x42'
    packed = tlv.pack()

    assert tlv.length.value == 0x03
    assert tlv.extra.offset == 0x04 + 0x04 + 0x03
    assert packed == (
        b'\x01\x00\x00\x00'
        b'\x03\x00\x00\x00'
        b'\x42\x42\x42'
        b'\x0a\x0b\x0c\x0d'
    )


def test_proxy_like_format():
    """Check that a format with sub-chunks relayouts them correctly."""

    class Proxy(Chunk):
        off = StructField('I')
        sz = StructField('I')

    class Experiment(Chunk):
        proxy_a = Proxy()
        proxy_b = Proxy()

        contents = StringField(0x100)

    experiment = Experiment()

    assert experiment.layout == {
        'proxy_a': (0, 8),
        'proxy_b': (8, 8),
        'contents': (16, 256),
    }
    assert experiment.proxy_b.sz.offset == 12

    assert experiment.size == 0x100 + 2 * (4 + 4)
    assert len(experiment.raw) == experiment.size
    assert experiment.raw == b'\x00' * experiment.size


def test_equality():
    class Dummy(Chunk):
        a = StructField('I')
        b = StringField(0x02)

    assert Dummy(b'\x01\x00\x00\x00AB') == Dummy(b'\x01\x00\x00\x00AB')
    assert Dummy(b'\x01\x00\x00\x00AB') != Dummy(b'\x01\x00\x00\x00AC')


def test_unpack_error_chain():
    class Inner(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'))

    class Outer(Chunk):
        magic = StructField('H')
        inner = Inner()

    with pytest.raises(IncompleteSliceException) as exc_info:
        Outer(b'\x00\x00' + b'\x05\x00\x00\x00' + b'ab')

    assert exc_info.value.chain == ['inner', 'data']
    assert exc_info.value.needed == 5
    assert exc_info.value.available == 2
    assert 'inner.data' in str(exc_info.value)


def test_crc_field():
    """The CRC is the CRC-32/ISO-HDLC: check it with the standard check value."""
    class Check(Chunk):
        payload = StringField(9)
        crc = CRCField(['payload'], endianess=Endianess.BIG_ENDIAN)

    check = Check(b'123456789' + b'\xcb\xf4\x39\x26')

    assert check.crc.value == 0xcbf43926
    assert check.crc.calculate() == 0xcbf43926

    with pytest.raises(IncorrectCRCException) as exc_info:
        Check(b'123456780' + b'\xcb\xf4\x39\x26')

    assert exc_info.value.found == 0xcbf43926
    assert exc_info.value.chain == ['crc']


def test_crc_field_updated_when_packing():
    class Check(Chunk):
        payload = StringField(9)
        crc = CRCField(['payload'], endianess=Endianess.BIG_ENDIAN)

    check = Check()
    check.payload = b'123456789'

    assert check.pack() == b'123456789' + b'\xcb\xf4\x39\x26'


def test_dependency_from_root():
    """Without the leading dot the path is resolved starting from the root chunk."""
    class Header(Chunk):
        sz = StructField('B')

    class Record(Chunk):
        header = Header()
        payload = StringField(Dependency('header.sz'))

    record = Record(b'\x03xyz')

    assert record.payload.value == b'xyz'

    record.payload = b'hello'

    assert record.header.sz.value == 5
    assert record.pack() == b'\x05hello'
