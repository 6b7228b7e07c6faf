import io
import logging

from .exceptions import IncompleteSliceException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around in-memory binary data to
    uniform its properties: mainly we need to read exactly the
    amount of bytes a field asks for and to know when the data is over.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.history = []

        init_method_name = 'init_%s' % obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' cannot be used as a stream' % obj.__class__.__name__)

        self.obj = obj
        init_method()

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __del__(self):
        obj = self.__dict__.get('obj')
        if obj is not None:
            obj.close()

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_memoryview(self):
        self.obj = io.BytesIO(self.obj.tobytes())

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def read_exactly(self, size):
        '''Read "size" bytes or fail: a short read means truncated data.'''
        data = self.obj.read(size)
        if len(data) != size:
            logger.debug('short read at offset %d: wanted %d bytes, got %d', self.obj.tell(), size, len(data))
            raise IncompleteSliceException(size, len(data))

        return data

    def at_eof(self):
        self.save()
        is_eof = len(self.obj.read(1)) == 0
        self.restore()

        return is_eof

    def write(self, data):
        return self.obj.write(data)

    # TODO: create contextmanager
    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)
