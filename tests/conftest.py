import io
import struct

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo


SECRET_MESSAGE = b'This is where your secret message will be!'
SECRET_CRC = 2882656334


@pytest.fixture
def testing_chunk_bytes():
    """The serialized RuSt chunk of known CRC."""
    return (
        struct.pack('>I', len(SECRET_MESSAGE))
        + b'RuSt'
        + SECRET_MESSAGE
        + struct.pack('>I', SECRET_CRC)
    )


def _make_png(size=(4, 4), color='red', text=None):
    image = Image.new('RGB', size, color)
    info = None
    if text:
        info = PngInfo()
        for key, value in text.items():
            info.add_text(key, value)

    buffer = io.BytesIO()
    image.save(buffer, format='PNG', pnginfo=info)

    return buffer.getvalue()


@pytest.fixture
def make_png():
    """Factory of real PNG files as written by Pillow."""
    return _make_png


@pytest.fixture
def png_data():
    """A real PNG file as written by Pillow."""
    return _make_png()


@pytest.fixture
def png_path(tmp_path, png_data):
    path = tmp_path / 'image.png'
    path.write_bytes(png_data)

    return path
