import zlib
from struct import Struct
from typing import NamedTuple

import numpy as np

from pidconvert.graphics.transform import as_matrix
from pidconvert.kernel.settings import ConvertSetting, PNGMode, default
from pidconvert.kernel.stream import Stream, rewind, write_all
from pidconvert.kernel.structured import StructuredTuple
from pidconvert.pid.palette import (
    OPAQUE,
    PALETTE_SIZE,
    TRANSPARENT,
    Palette,
    rgb_bytes,
    to_array,
)

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
BIT_DEPTH = 8
FILTER_NONE = 0

UINT32BE = Struct('>I')

COLOR_TYPES = {
    PNGMode.PNG_8: 3,  # indexed
    PNGMode.PNG_24: 2,  # true-color
    PNGMode.PNG_32: 6,  # true-color with alpha
}


class ChunkHeader(NamedTuple):
    size: int
    etag: bytes


class ImageHeader(NamedTuple):
    width: int
    height: int
    color_type: int
    bit_depth: int = BIT_DEPTH
    compression: int = 0
    filter_method: int = 0
    interlace: int = 0


PNG_CHUNK_HEADER = StructuredTuple(('size', 'etag'), Struct('>I4s'), ChunkHeader)

IHDR = StructuredTuple(
    (
        'width',
        'height',
        'bit_depth',
        'color_type',
        'compression',
        'filter_method',
        'interlace',
    ),
    Struct('>2I5B'),
    ImageHeader,
)


def mktag(tag: str, data: bytes) -> bytes:
    """Create chunk bytes, CRC covers tag and data."""
    etag = tag.encode('ascii')
    header = PNG_CHUNK_HEADER.pack(ChunkHeader(len(data), etag))
    return header + data + UINT32BE.pack(zlib.crc32(etag + data) & 0xFFFFFFFF)


def channel_table(palette: Palette, mode: PNGMode, transparent: bool) -> np.ndarray:
    table = to_array(palette).copy()
    table[:, 3] = OPAQUE
    if transparent:
        table[0, 3] = TRANSPARENT
    if mode == PNGMode.PNG_24:
        return table[:, :3]
    return table


def scanlines(
    pixels: bytes, width: int, height: int, palette: Palette, mode: PNGMode, transparent: bool
) -> bytes:
    """Filtered scanline stream, each row prefixed with filter type 0."""
    matrix = as_matrix(pixels, width, height)
    if mode != PNGMode.PNG_8:
        matrix = channel_table(palette, mode, transparent)[matrix].reshape(height, -1)
    filters = np.full((height, 1), FILTER_NONE, dtype=np.uint8)
    return np.concatenate([filters, matrix], axis=1).tobytes()


# alpha per palette entry, only entry 0 is see-through
TRANSPARENCY_TABLE = bytes([TRANSPARENT]) + bytes([OPAQUE]) * (PALETTE_SIZE - 1)


def build_png(
    pixels: bytes,
    width: int,
    height: int,
    palette: Palette,
    transparent: bool,
    mode: PNGMode,
) -> bytes:
    chunks = [mktag('IHDR', IHDR.pack(ImageHeader(width, height, COLOR_TYPES[mode])))]
    if mode == PNGMode.PNG_8:
        chunks.append(mktag('PLTE', rgb_bytes(palette)))
        if transparent:
            chunks.append(mktag('tRNS', TRANSPARENCY_TABLE))
    raw = scanlines(pixels, width, height, palette, mode, transparent)
    chunks.append(mktag('IDAT', zlib.compress(raw, zlib.Z_DEFAULT_COMPRESSION)))
    chunks.append(mktag('IEND', b''))
    return PNG_SIGNATURE + b''.join(chunks)


def encode_png(
    stream: Stream,
    pixels: bytes,
    width: int,
    height: int,
    palette: Palette,
    transparent: bool,
    setting: ConvertSetting = default,
) -> int:
    mode = PNGMode(setting.png_mode)
    data = build_png(pixels, width, height, palette, transparent, mode)
    write_all(stream, data, 'PNG')
    rewind(stream, 'PNG')
    setting.logger.debug(f'PNG: OK ({int(mode)}bpp, {width}x{height})')
    return len(data)
