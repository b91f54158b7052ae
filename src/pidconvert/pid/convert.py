from typing import Mapping, Optional, Protocol

from pidconvert.export.bmp import encode_bmp
from pidconvert.export.png import encode_png
from pidconvert.export.tga import encode_tga
from pidconvert.kernel.errors import PidError, UnsupportedFormatError
from pidconvert.kernel.settings import ConvertSetting, default
from pidconvert.kernel.stream import Stream
from pidconvert.pid.palette import Palette

from .decode import decode_pid


class Encoder(Protocol):
    def __call__(
        self,
        stream: Stream,
        pixels: bytes,
        width: int,
        height: int,
        palette: Palette,
        transparent: bool,
        setting: ConvertSetting = ...,
    ) -> int:
        ...


ENCODERS: Mapping[str, Encoder] = {
    'BMP': encode_bmp,
    'TGA8': encode_tga,
    'TGA': encode_tga,
    'PNG': encode_png,
}


def get_encoder(format_id: Optional[str]) -> Encoder:
    try:
        return ENCODERS[format_id]  # type: ignore
    except KeyError as exc:
        raise UnsupportedFormatError(format_id) from exc


def convert_stream(
    src: Stream, dst: Stream, format_id: str, setting: ConvertSetting = default
) -> int:
    """Convert PID from src into target format written to dst.

    Nothing is written to dst unless the source was decoded completely.
    Returns number of bytes written, raises PidError subclasses on failure.
    """
    encoder = get_encoder(format_id)
    image = decode_pid(src, setting)
    setting.logger.debug(f'PID: target {format_id}')
    return encoder(
        dst,
        image.pixels,
        image.width,
        image.height,
        image.palette,
        image.transparent,
        setting,
    )


def convert(
    src: Stream,
    dst: Stream,
    format_id: str,
    setting: Optional[ConvertSetting] = None,
) -> bool:
    """Host facing conversion, never raises.

    Destination content is undefined when False is returned.
    """
    # capture configuration once, later changes do not affect this call
    setting = setting or default
    try:
        convert_stream(src, dst, format_id, setting)
    except PidError as exc:
        setting.logger.warning(f'PID: conversion to {format_id} failed: {exc}')
        return False
    except Exception:
        setting.logger.exception(f'PID: unexpected failure converting to {format_id}')
        return False
    setting.logger.debug('PID: success')
    return True
