from typing import NamedTuple

from pidconvert.codex.rle import decode_pixels
from pidconvert.graphics.transform import transform
from pidconvert.kernel.settings import ConvertSetting, default
from pidconvert.kernel.stream import Stream

from .header import PidHeader, read_header
from .palette import Palette, resolve_palette


class DecodedImage(NamedTuple):
    header: PidHeader
    palette: Palette
    pixels: bytes

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def transparent(self) -> bool:
        return self.header.transparent


def decode_pid(stream: Stream, setting: ConvertSetting = default) -> DecodedImage:
    """Decode whole PID image from stream positioned at its start."""
    logger = setting.logger

    header = read_header(stream)
    logger.debug(
        f'PID: header OK (W={header.width} H={header.height} flags=0x{header.flags:02x})'
    )

    palette = resolve_palette(stream, header.embedded_palette, header.transparent)
    logger.debug(f'PID: using {"embedded" if header.embedded_palette else "default"} palette')

    scheme = 'compressed' if header.compressed else 'raw'
    pixels = decode_pixels(stream, header.pixel_count, header.compressed)
    logger.debug(f'PID: {scheme} decompression OK ({len(pixels)} pixels)')

    if header.mirror or header.invert:
        pixels = transform(
            pixels, header.width, header.height, mirror=header.mirror, invert=header.invert
        )
        logger.debug(f'PID: mirror={header.mirror} invert={header.invert} applied')

    return DecodedImage(header, palette, pixels)
