import io

import pytest

from pidconvert.codex.rle import decode_compressed, decode_pixels, decode_raw
from pidconvert.kernel.errors import DecodeError

from pidgen import ExplodingReader, encode_compressed, encode_raw, gradient


def test_compressed_zero_run_consumes_control_only():
    stream = io.BytesIO(bytes([200, 9, 9]))
    assert decode_compressed(stream, 72) == bytes(72)
    assert stream.tell() == 1


def test_compressed_literal_run():
    stream = io.BytesIO(bytes([5, 1, 2, 3, 4, 5, 99]))
    assert decode_compressed(stream, 5) == bytes([1, 2, 3, 4, 5])
    assert stream.tell() == 6


def test_compressed_boundary_128_is_literal():
    data = bytes(range(1, 129))
    stream = io.BytesIO(bytes([128]) + data)
    assert decode_compressed(stream, 128) == data


def test_compressed_129_is_single_zero():
    stream = io.BytesIO(bytes([129, 3, 7, 8, 9]))
    assert decode_compressed(stream, 4) == bytes([0, 7, 8, 9])


def test_raw_run():
    stream = io.BytesIO(bytes([250, 7]))
    assert decode_raw(stream, 58) == bytes([7]) * 58
    assert stream.tell() == 2


def test_raw_single_value():
    stream = io.BytesIO(bytes([100, 42]))
    assert decode_raw(stream, 1) == bytes([100])
    assert stream.tell() == 1


def test_raw_boundary():
    # 192 is a plain index, 193 starts a run of one
    stream = io.BytesIO(bytes([192, 193, 5]))
    assert decode_raw(stream, 2) == bytes([192, 5])


def test_runs_are_clipped_to_image_size():
    assert decode_compressed(io.BytesIO(bytes([255])), 10) == bytes(10)
    assert decode_raw(io.BytesIO(bytes([255, 3])), 10) == bytes([3]) * 10


@pytest.mark.parametrize('decoder', [decode_compressed, decode_raw])
def test_exhausted_stream_fails(decoder):
    with pytest.raises(DecodeError) as exc_info:
        decoder(io.BytesIO(bytes([1, 2, 3])), 16)
    assert exc_info.value.expected == 16
    assert exc_info.value.given < 16


def test_compressed_missing_literal_fails():
    with pytest.raises(DecodeError):
        decode_compressed(io.BytesIO(bytes([4, 1, 2])), 4)


def test_raw_missing_run_value_fails():
    with pytest.raises(DecodeError):
        decode_raw(io.BytesIO(bytes([1, 200])), 8)


def test_read_failure_is_decode_error():
    stream = ExplodingReader(bytes([1]) * 64, limit=10)
    with pytest.raises(DecodeError):
        decode_raw(stream, 64)


@pytest.mark.parametrize('compressed', [True, False])
def test_synthetic_round_trip(compressed):
    pixels = gradient(37, 11) + bytes(300) + bytes([255]) * 140 + bytes([193]) * 3
    encode = encode_compressed if compressed else encode_raw
    stream = io.BytesIO(encode(pixels))
    assert decode_pixels(stream, len(pixels), compressed) == pixels
    assert stream.read() == b''
