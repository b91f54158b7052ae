from struct import Struct
from typing import NamedTuple

from pidconvert.kernel.errors import EncodeError
from pidconvert.kernel.settings import ConvertSetting, default
from pidconvert.kernel.stream import Stream, rewind, write_all
from pidconvert.kernel.structured import StructuredTuple
from pidconvert.pid.palette import PALETTE_SIZE, Palette, bgr_bytes, blacken_transparent

MAX_DIMENSION = 0xFFFF
TOP_LEFT_ORIGIN = 0x20


class TargaHeader(NamedTuple):
    width: int
    height: int
    id_length: int = 0
    colormap_type: int = 1  # palette present
    image_type: int = 1  # colormapped, uncompressed
    colormap_start: int = 0
    colormap_length: int = PALETTE_SIZE
    colormap_bits: int = 24
    x_origin: int = 0
    y_origin: int = 0
    pixel_depth: int = 8
    descriptor: int = TOP_LEFT_ORIGIN


TGA_HEADER = StructuredTuple(
    (
        'id_length',
        'colormap_type',
        'image_type',
        'colormap_start',
        'colormap_length',
        'colormap_bits',
        'x_origin',
        'y_origin',
        'width',
        'height',
        'pixel_depth',
        'descriptor',
    ),
    Struct('<3BHHB4H2B'),
    TargaHeader,
)


def encode_tga(
    stream: Stream,
    pixels: bytes,
    width: int,
    height: int,
    palette: Palette,
    transparent: bool,
    setting: ConvertSetting = default,
) -> int:
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise EncodeError('TGA', f'{width}x{height} exceeds {MAX_DIMENSION} pixels')

    palette = blacken_transparent(palette, transparent)
    header = TGA_HEADER.pack(TargaHeader(width, height))
    colormap = bgr_bytes(palette)

    write_all(stream, header, 'TGA')
    write_all(stream, colormap, 'TGA')
    # descriptor marks top-left origin, rows go in natural order
    for offset in range(0, width * height, width):
        write_all(stream, pixels[offset : offset + width], 'TGA')

    rewind(stream, 'TGA')
    setting.logger.debug(f'TGA: OK (8bpp paletted, {width}x{height})')
    return len(header) + len(colormap) + width * height
