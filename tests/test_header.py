import io

import pytest

from pidconvert.kernel.errors import (
    FormatError,
    InvalidGeometryError,
    InvalidSignatureError,
    TruncatedError,
)
from pidconvert.pid.header import PIXEL_DATA_OFFSET, PidFlags, read_header

from pidgen import make_pid


def test_read_header_flags():
    flags = PidFlags.TRANSPARENCY | PidFlags.INVERT | PidFlags.PALETTE
    stream = io.BytesIO(make_pid(3, 2, bytes(6), flags=flags))
    header = read_header(stream)
    assert (header.width, header.height, header.pixel_count) == (3, 2, 6)
    assert header.transparent and header.invert and header.embedded_palette
    assert not (header.mirror or header.compressed)
    assert stream.tell() == PIXEL_DATA_OFFSET == 32


def test_bad_signature():
    with pytest.raises(InvalidSignatureError) as exc_info:
        read_header(io.BytesIO(make_pid(1, 1, b'\0', signature=11)))
    assert exc_info.value.signature == 11


@pytest.mark.parametrize('width,height', [(0, 5), (5, 0), (-1, 5), (1 << 16, (1 << 14) + 1)])
def test_bad_geometry(width, height):
    with pytest.raises(InvalidGeometryError):
        read_header(io.BytesIO(make_pid(width, height, b'')))


def test_largest_geometry_accepted():
    header = read_header(io.BytesIO(make_pid(1 << 15, 1 << 15, b'')))
    assert header.pixel_count == 1 << 30


def test_truncated_header():
    with pytest.raises(TruncatedError) as exc_info:
        read_header(io.BytesIO(make_pid(1, 1, b'')[:20]))
    assert isinstance(exc_info.value, FormatError)
    assert exc_info.value.given == 20
