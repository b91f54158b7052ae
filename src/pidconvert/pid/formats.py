import os
from typing import List, NamedTuple

from pidconvert.kernel.settings import ConvertSetting, default


class PluginInfo(NamedTuple):
    name: str
    version: str
    author: str
    comment: str


class FormatDescriptor(NamedTuple):
    display: str
    ext: str
    format_id: str


PLUGIN_INFO = PluginInfo(
    name='Gruntz (1999) .PID converter',
    version='0.82',
    author='Paweł C. (PaweX3)',
    comment='Converts .PID graphic filez to BMP/TGA/PNG',
)

PID_EXTENSION = '.pid'

# display name, extension and id of each target, in listing order
TARGETS = (
    ('BMP - Windows Bitmap (24bpp)', 'bmp', 'BMP'),
    ('TGA - Targa (8bpp Colormap)', 'tga', 'TGA8'),
    ('PNG - Portable Network Graphics ({depth}bpp)', 'png', 'PNG'),
)

EXTENSIONS = {'TGA': 'tga', **{format_id: ext for _, ext, format_id in TARGETS}}


def is_file_compatible(filename: str) -> bool:
    return os.path.basename(filename).lower().endswith(PID_EXTENSION)


def get_file_convert(
    filename: str, setting: ConvertSetting = default
) -> List[FormatDescriptor]:
    """List conversion targets for filename, empty for non PID files."""
    if not is_file_compatible(filename):
        return []
    depth = int(setting.png_mode)
    return [
        FormatDescriptor(display.format(depth=depth), ext, format_id)
        for display, ext, format_id in TARGETS
    ]
