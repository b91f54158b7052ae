from struct import Struct
from typing import NamedTuple

import deal
import numpy as np

from pidconvert.graphics.transform import as_matrix
from pidconvert.kernel.errors import EncodeError
from pidconvert.kernel.settings import ConvertSetting, default
from pidconvert.kernel.stream import Stream, rewind, write_all
from pidconvert.kernel.structured import StructuredTuple
from pidconvert.pid.palette import Palette, blacken_transparent, to_array

BITS_PER_PIXEL = 24
ROW_ALIGN = 4


class BitmapFileHeader(NamedTuple):
    file_size: int
    data_offset: int
    signature: bytes = b'BM'
    reserved1: int = 0
    reserved2: int = 0


class BitmapInfoHeader(NamedTuple):
    width: int
    height: int
    image_size: int
    header_size: int = 40
    planes: int = 1
    bits_per_pixel: int = BITS_PER_PIXEL
    compression: int = 0  # BI_RGB
    x_pels_per_meter: int = 0
    y_pels_per_meter: int = 0
    colors_used: int = 0
    colors_important: int = 0


BMP_FILE_HEADER = StructuredTuple(
    ('signature', 'file_size', 'reserved1', 'reserved2', 'data_offset'),
    Struct('<2sIHHI'),
    BitmapFileHeader,
)

BMP_INFO_HEADER = StructuredTuple(
    (
        'header_size',
        'width',
        'height',
        'planes',
        'bits_per_pixel',
        'compression',
        'image_size',
        'x_pels_per_meter',
        'y_pels_per_meter',
        'colors_used',
        'colors_important',
    ),
    Struct('<IiiHHIIiiII'),
    BitmapInfoHeader,
)

DATA_OFFSET = BMP_FILE_HEADER.size + BMP_INFO_HEADER.size
MAX_FILE_SIZE = 0xFFFFFFFF


@deal.chain(
    deal.pre(lambda _: _.width > 0),
    deal.ensure(lambda _: _.result % ROW_ALIGN == 0),
    deal.ensure(lambda _: 3 * _.width <= _.result < 3 * _.width + ROW_ALIGN),
)
def row_stride(width: int) -> int:
    """Size of a BGR row padded to 4 bytes."""
    return (width * 3 + 3) & ~3


def bgr_rows(pixels: bytes, width: int, height: int, palette: Palette) -> np.ndarray:
    colors = to_array(palette)[:, 2::-1]
    rows = np.zeros((height, row_stride(width)), dtype=np.uint8)
    rows[:, : 3 * width] = colors[as_matrix(pixels, width, height)].reshape(height, 3 * width)
    return rows


def encode_bmp(
    stream: Stream,
    pixels: bytes,
    width: int,
    height: int,
    palette: Palette,
    transparent: bool,
    setting: ConvertSetting = default,
) -> int:
    palette = blacken_transparent(palette, transparent)
    image_size = row_stride(width) * height
    file_size = DATA_OFFSET + image_size
    if file_size > MAX_FILE_SIZE:
        raise EncodeError('BMP', f'{width}x{height} exceeds {MAX_FILE_SIZE} bytes')

    write_all(stream, BMP_FILE_HEADER.pack(BitmapFileHeader(file_size, DATA_OFFSET)), 'BMP')
    write_all(
        stream,
        BMP_INFO_HEADER.pack(BitmapInfoHeader(width, height, image_size)),
        'BMP',
    )
    # positive height means bottom-up rows
    for row in bgr_rows(pixels, width, height, palette)[::-1]:
        write_all(stream, row.tobytes(), 'BMP')

    rewind(stream, 'BMP')
    setting.logger.debug(f'BMP: OK (24bpp, {width}x{height}, file_size={file_size})')
    return file_size
