import logging
import os
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, TypeVar

import yaml

DEFAULT_CONFIG_PATH = os.path.join(os.path.expanduser('~'), '.pidconvert.yaml')

_SettingT = TypeVar('_SettingT', bound='_DefaultOverride')


class PNGMode(IntEnum):
    PNG_8 = 8  # paletted
    PNG_24 = 24  # true-color
    PNG_32 = 32  # true-color with alpha


@dataclass(frozen=True)
class _DefaultOverride(object):
    def __call__(self: _SettingT, **kwargs: Any) -> _SettingT:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class ConvertSetting(_DefaultOverride):
    """Setting for a single conversion

    png_mode: PNGMode (default PNG_8) -
        bit depth of PNG output, captured when the conversion starts.

    logger: destination of conversion trace messages
    """

    png_mode: PNGMode = PNGMode.PNG_8
    logger: logging.Logger = logging.root


default = ConvertSetting()


def parse_png_mode(depth: Any) -> PNGMode:
    try:
        return PNGMode(int(depth))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f'Unsupported PNG depth: {depth} (expected one of 8, 24, 32)'
        ) from exc


def load_setting(path: str = DEFAULT_CONFIG_PATH, base: ConvertSetting = default) -> ConvertSetting:
    """Read persisted configuration, missing file yields `base`."""
    if not os.path.exists(path):
        return base
    with open(path, 'r') as config_in:
        config = yaml.safe_load(config_in) or {}
    if not isinstance(config, dict) or 'png_mode' not in config:
        return base
    return base(png_mode=parse_png_mode(config['png_mode']))


def save_setting(setting: ConvertSetting, path: str = DEFAULT_CONFIG_PATH) -> None:
    with open(path, 'w') as config_out:
        yaml.dump({'png_mode': int(setting.png_mode)}, config_out)
