from functools import partial

import deal

from pidconvert.kernel.errors import DecodeError
from pidconvert.kernel.stream import Stream

ZERO_RUN_BASE = 128
BYTE_RUN_BASE = 192
ZERO_FILL = 0


def validate_size(out: bytearray, size: int) -> bytes:
    if len(out) != size:
        raise DecodeError(size, len(out))
    return bytes(out)


@deal.chain(
    deal.pre(lambda _: _.size >= 0),
    deal.raises(DecodeError),
    deal.ensure(lambda _: len(_.result) == _.size),
)
def decode_compressed(stream: Stream, size: int) -> bytes:
    """Decode `size` indices of the compressed scheme.

    control > 128: run of (control - 128) zeros, no value byte follows
    control <= 128: (control) literal indices follow
    """
    read = partial(stream.read, 1)
    out = bytearray()
    try:
        while len(out) < size:
            control = read()
            if not control:
                break
            code = control[0]
            if code > ZERO_RUN_BASE:
                count = min(code - ZERO_RUN_BASE, size - len(out))
                out += bytes([ZERO_FILL]) * count
                continue
            for _ in range(min(code, size - len(out))):
                value = read()
                if not value:
                    raise DecodeError(size, len(out))
                out += value
    except (OSError, ValueError) as exc:
        raise DecodeError(size, len(out)) from exc
    return validate_size(out, size)


@deal.chain(
    deal.pre(lambda _: _.size >= 0),
    deal.raises(DecodeError),
    deal.ensure(lambda _: len(_.result) == _.size),
)
def decode_raw(stream: Stream, size: int) -> bytes:
    """Decode `size` indices of the uncompressed scheme.

    control > 192: run of (control - 192) copies of the next byte
    control <= 192: the control byte is itself a single index
    """
    read = partial(stream.read, 1)
    out = bytearray()
    try:
        while len(out) < size:
            control = read()
            if not control:
                break
            code = control[0]
            if code <= BYTE_RUN_BASE:
                out += control
                continue
            value = read()
            if not value:
                break
            out += value * min(code - BYTE_RUN_BASE, size - len(out))
    except (OSError, ValueError) as exc:
        raise DecodeError(size, len(out)) from exc
    return validate_size(out, size)


def decode_pixels(stream: Stream, size: int, compressed: bool) -> bytes:
    decoder = decode_compressed if compressed else decode_raw
    return decoder(stream, size)
