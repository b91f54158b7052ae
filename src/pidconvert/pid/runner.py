import glob
import io
import logging
import os
from typing import Iterable, List, Optional, Set

import typer

from pidconvert.graphics.image import convert_to_pil_image
from pidconvert.kernel.settings import (
    DEFAULT_CONFIG_PATH,
    ConvertSetting,
    load_setting,
    parse_png_mode,
    save_setting,
)
from pidconvert.kernel.stream import Stream, StreamView, stream_size
from pidconvert.utils.funcutils import flatten

from .convert import ENCODERS, convert
from .decode import decode_pid
from .formats import EXTENSIONS, PLUGIN_INFO, get_file_convert

app = typer.Typer()

logger = logging.getLogger('pidconvert')


def get_files(globs: Iterable[str]) -> Set[str]:
    return set(flatten(glob.iglob(fname) for fname in globs))


def get_setting(config: str, depth: Optional[int] = None) -> ConvertSetting:
    try:
        setting = load_setting(config)(logger=logger)
        if depth is not None:
            setting = setting(png_mode=parse_png_mode(depth))
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return setting


def open_region(stream: Stream, offset: int, size: Optional[int]) -> Stream:
    if not offset and size is None:
        return stream
    available = stream_size(stream)
    if not 0 <= offset <= available:
        raise typer.BadParameter(f'offset {offset} outside file of {available} bytes')
    if size is None:
        size = available - offset
    return StreamView(stream, size, offset=offset)


@app.command('convert')
def convert_files(
    files: List[str] = typer.Argument(..., help='Files to read from'),
    format_id: str = typer.Option('PNG', '--format', '-f', help='Target format: BMP, TGA8, PNG'),
    depth: Optional[int] = typer.Option(None, '--depth', help='PNG bit depth (8, 24, 32)'),
    target_dir: str = typer.Option('out', '--target', '-t', help='Target directory'),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, '--config', help='Configuration file'),
    offset: int = typer.Option(0, '--offset', help='Start of PID data inside file'),
    size: Optional[int] = typer.Option(None, '--size', help='Size of PID data inside file'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Trace conversion steps'),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    format_id = format_id.upper()
    if format_id not in ENCODERS:
        raise typer.BadParameter(f'unsupported format: {format_id}')
    setting = get_setting(config, depth)

    failed = []
    for filename in sorted(get_files(files)):
        basename = os.path.basename(filename)
        print(f'Converting file: {basename}')
        with open(filename, 'rb') as src, io.BytesIO() as dst:
            if not convert(open_region(src, offset, size), dst, format_id, setting):
                failed.append(basename)
                continue
            stem, _ = os.path.splitext(basename)
            os.makedirs(target_dir, exist_ok=True)
            output = os.path.join(target_dir, f'{stem}.{EXTENSIONS[format_id]}')
            with open(output, 'wb') as out:
                out.write(dst.getvalue())

    if failed:
        print(f'Failed to convert: {", ".join(failed)}')
        raise typer.Exit(code=1)


@app.command('formats')
def list_formats(
    filename: str = typer.Argument(..., help='File name to check'),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, '--config', help='Configuration file'),
) -> None:
    targets = get_file_convert(filename, get_setting(config))
    if not targets:
        print(f'Not a PID file: {filename}')
        raise typer.Exit(code=1)
    for target in targets:
        print(f'{target.format_id}\t{target.ext}\t{target.display}')


@app.command('config')
def configure(
    depth: Optional[int] = typer.Option(None, '--depth', help='PNG bit depth (8, 24, 32)'),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, '--config', help='Configuration file'),
) -> None:
    setting = get_setting(config, depth)
    if depth is not None:
        save_setting(setting, config)
    print(f'png_mode: {int(setting.png_mode)}')


@app.command('show')
def show(
    filename: str = typer.Argument(..., help='File to preview'),
    offset: int = typer.Option(0, '--offset', help='Start of PID data inside file'),
    size: Optional[int] = typer.Option(None, '--size', help='Size of PID data inside file'),
) -> None:
    with open(filename, 'rb') as src:
        image = decode_pid(open_region(src, offset, size))
    convert_to_pil_image(image).show()


@app.command('info')
def info(
    config: str = typer.Option(DEFAULT_CONFIG_PATH, '--config', help='Configuration file'),
) -> None:
    print(f'{PLUGIN_INFO.name} v{PLUGIN_INFO.version}')
    print(f'Created by {PLUGIN_INFO.author}.')
    print(PLUGIN_INFO.comment)
    print(f'PNG output: {int(get_setting(config).png_mode)}bpp')


if __name__ == '__main__':
    app()
