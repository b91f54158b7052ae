from enum import IntFlag
from struct import Struct
from typing import NamedTuple

import deal

from pidconvert.kernel.errors import InvalidGeometryError, InvalidSignatureError
from pidconvert.kernel.stream import Stream
from pidconvert.kernel.structured import StructuredTuple

PID_SIGNATURE = 10
MAX_PIXELS = 1 << 30


class PidFlags(IntFlag):
    TRANSPARENCY = 0x01
    MIRROR = 0x08
    INVERT = 0x10
    COMPRESSION = 0x20
    PALETTE = 0x80


class PidHeader(NamedTuple):
    signature: int
    flags: int
    width: int
    height: int
    reserved: bytes = bytes(16)

    def has(self, flag: PidFlags) -> bool:
        return bool(self.flags & flag)

    @property
    def transparent(self) -> bool:
        return self.has(PidFlags.TRANSPARENCY)

    @property
    def mirror(self) -> bool:
        return self.has(PidFlags.MIRROR)

    @property
    def invert(self) -> bool:
        return self.has(PidFlags.INVERT)

    @property
    def compressed(self) -> bool:
        return self.has(PidFlags.COMPRESSION)

    @property
    def embedded_palette(self) -> bool:
        return self.has(PidFlags.PALETTE)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


PID_HEADER = StructuredTuple(
    ('signature', 'flags', 'width', 'height', 'reserved'),
    Struct('<4i16s'),
    PidHeader,
)

PIXEL_DATA_OFFSET = PID_HEADER.size


@deal.ensure(lambda _: not _.result or 0 < _.width * _.height <= MAX_PIXELS)
def valid_geometry(width: int, height: int) -> bool:
    return width > 0 and height > 0 and width * height <= MAX_PIXELS


def validate_header(header: PidHeader) -> PidHeader:
    if header.signature != PID_SIGNATURE:
        raise InvalidSignatureError(header.signature)
    if not valid_geometry(header.width, header.height):
        raise InvalidGeometryError(header.width, header.height)
    return header


def read_header(stream: Stream) -> PidHeader:
    """Read and validate the 32 byte header at the current position."""
    return validate_header(PID_HEADER.unpack(stream, 'PID header'))
