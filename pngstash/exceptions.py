class PNGStashException(Exception):
    '''Base class to extend in order to throw exception in pngstash.

    It takes as optional argument the chain of the layers that
    caused the exception: each layer crossed while unpacking prepends
    its name so that the caller knows where the data went wrong.
    '''
    description = 'pngstash error'

    def __init__(self, *args, chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(*args)

    def __str__(self):
        msg = super().__str__() or self.description
        if self.chain:
            msg = "%s (at '%s')" % (msg, '.'.join(self.chain))
        return msg


class ChunkTypeException(PNGStashException):
    pass


class AsciiException(ChunkTypeException):
    description = 'all bytes must be ascii a-z or A-Z'

    def __init__(self, value, chain=None):
        self.value = value
        super().__init__(f'{self.description}, got {value!r}', chain=chain)


class InvalidLengthException(ChunkTypeException):
    description = 'chunk type must be exactly 4 bytes'

    def __init__(self, value, chain=None):
        self.value = value
        super().__init__(f'{self.description}, got {value!r}', chain=chain)


class UnpackException(PNGStashException):
    pass


class IncompleteSliceException(UnpackException):
    '''The stream ended before the field was complete.'''

    def __init__(self, needed, available, chain=None):
        self.needed = needed
        self.available = available
        super().__init__(f'not enough bytes: needed {needed}, available {available}', chain=chain)


class IncorrectCRCException(UnpackException):

    def __init__(self, expected, found, chain=None):
        self.expected = expected
        self.found = found
        super().__init__(f'CRC is 0x{found:08x} but data and type give 0x{expected:08x}', chain=chain)


class SignatureMismatchException(UnpackException):
    '''The magic at the start of the stream is not the one the format expects.'''

    def __init__(self, found, chain=None):
        self.found = found
        super().__init__(f'signature mismatch, found {found!r}', chain=chain)


class ChunkNotPresentException(PNGStashException):

    def __init__(self, chunk_type, chain=None):
        self.chunk_type = chunk_type
        super().__init__(f'chunk type {chunk_type!r} does not exist in file', chain=chain)


class TextDecodeException(PNGStashException):
    '''The payload is binary data and not UTF-8 text.'''

    def __init__(self, chunk_type, chain=None):
        self.chunk_type = chunk_type
        super().__init__(f'data of chunk {chunk_type!s} is not valid UTF-8', chain=chain)
