"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct
from typing import Dict

from .meta import FieldBase, Endianess, ENDIANESS_TO_STRUCT
from .properties import Dependency, ChunkPhase, PropertyDescriptor
from .streams import Stream
from .exceptions import PNGStashException, SignatureMismatchException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.value == other.value

    def get_dependencies(self) -> Dict[str, Dependency]:
        """Return the dictionary containing as key the attribute with a Dependency"""
        instance_dict = self.__dict__
        return {_k: _v for _k, _v in instance_dict.items() if isinstance(_v, Dependency)}

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.logger.debug("relayouting %s", self.__class__.__name__)
        old_phase = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset

        self._phase = old_phase

        return self.size

    def _update_value(self):
        '''This is used to update the binary value before packing'''
        pass

    def pack(self, stream=None, relayout=True):
        '''Write the raw representation at the field's offset.

        With relayout=True the field is considered the root of the packing:
        values that depend on other fields are refreshed and the offsets recalculated.
        '''
        if relayout:
            self._update_value()
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        self._phase = ChunkPhase.PACKING
        stream.seek(self.offset)
        stream.write(self.raw)
        self._phase = ChunkPhase.DONE

        return stream.getvalue()

    def unpack(self, stream):
        raise NotImplementedError(f'you need to implement {self.__class__.__name__}.unpack()')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def get_format(self):
        return '%s%s' % (ENDIANESS_TO_STRUCT[self.endianess], self.format)

    def _set_value(self, value) -> None:
        try:
            struct.pack(self.get_format(), value)
        except struct.error as e:
            raise ValueError(f"value {value!r} doesn't fit format '{self.get_format()}'") from e

        self._value = value

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        raw = stream.read_exactly(self.size)
        self.value = struct.unpack(self.get_format(), raw)[0]
        self._phase = ChunkPhase.DONE


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be fixed or a Dependency on another field: in the latter
    case setting a new value rewrites the field the length depends on.
    With is_magic=True the content read must be equal to the default.
    """

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and kw.get('default') is None:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'\x00' * (self.length or 0)

    def _get_size(self):
        return self.length

    def _set_value(self, value) -> None:
        """The StringField has the size as a parameter and we must follow that indication
        unless it's a Dependency, in that case we are going to write back the value where necessary."""
        value = bytes(value)
        length = len(value)
        if 'length' not in self.get_dependencies() and length != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = value
        self.length = length

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        if self.is_magic:
            raw = stream.read(self.size)
            if raw != self.default:
                self.logger.debug("the magic doesn't correspond: %r", raw)
                raise SignatureMismatchException(raw)
        else:
            raw = stream.read_exactly(self.size)

        self.value = raw
        self._phase = ChunkPhase.DONE


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    The elements are created from the prototype passed as "field_cls" and
    are unpacked one after the other until the stream is exhausted.

    This class behaves like a list in python for what concerns reading,
    modifications must pass from append() and pop() so that the hierarchy
    is kept.
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls

        if kw.get('default') is None:
            kw['default'] = []

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return list(self.default)

    def _set_value(self, value):
        value = list(value)
        for element in value:
            element.father = self

        self._value = value

    def clear(self):
        self.value.clear()

    def _get_raw(self):
        return b''.join([element.raw for element in self.value])

    def _get_size(self):
        size = 0
        for element in self.value:
            size += element.size

        return size

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def _update_value(self):
        for element in self.value:
            element._update_value()

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def append(self, element):
        element.father = self
        self.value.append(element)

    def pop(self, index):
        element = self.value.pop(index)
        element.father = None

        return element

    def pack(self, stream=None, relayout=True):
        if relayout:
            self._update_value()
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        self._phase = ChunkPhase.PACKING
        for element in self.value:
            element.pack(stream=stream, relayout=False)
        self._phase = ChunkPhase.DONE

        return stream.getvalue()

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        self.clear()

        while not stream.at_eof():
            element = self.instance_element()
            self.logger.debug('unpacking element #%d at offset %d' % (len(self), stream.tell()))

            try:
                element.unpack(stream)
            except PNGStashException as e:
                e.chain.insert(0, str(len(self)))
                raise

            self.append(element)

        self._phase = ChunkPhase.DONE
