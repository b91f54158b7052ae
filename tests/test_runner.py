import os

from typer.testing import CliRunner

from pidconvert.pid.header import PidFlags
from pidconvert.runner import app

from pidgen import encode_compressed, gradient, make_pid

runner = CliRunner()


def write_pid(path, width=4, height=2):
    pixels = gradient(width, height)
    with open(path, 'wb') as out:
        out.write(make_pid(width, height, encode_compressed(pixels), flags=PidFlags.COMPRESSION))


def test_convert_command(tmp_path):
    write_pid(tmp_path / 'FRAME.PID')
    target = tmp_path / 'out'
    config = tmp_path / 'config.yaml'
    result = runner.invoke(
        app,
        [
            'pid', 'convert', str(tmp_path / '*.PID'),
            '--format', 'bmp', '--target', str(target), '--config', str(config),
        ],
    )
    assert result.exit_code == 0, result.output
    assert os.path.getsize(target / 'FRAME.bmp') == 54 + 12 * 2


def test_convert_command_reports_failures(tmp_path):
    with open(tmp_path / 'BROKEN.PID', 'wb') as out:
        out.write(b'\0' * 40)
    target = tmp_path / 'out'
    result = runner.invoke(
        app,
        ['pid', 'convert', str(tmp_path / 'BROKEN.PID'), '--target', str(target),
         '--config', str(tmp_path / 'config.yaml')],
    )
    assert result.exit_code == 1
    assert 'BROKEN.PID' in result.output
    assert not (target / 'BROKEN.png').exists()


def test_convert_embedded_region(tmp_path):
    pid = make_pid(2, 2, bytes([1, 2, 3, 4]))
    with open(tmp_path / 'ARCHIVE.REZ', 'wb') as out:
        out.write(bytes(16) + pid + bytes(16))
    result = runner.invoke(
        app,
        ['pid', 'convert', str(tmp_path / 'ARCHIVE.REZ'), '-f', 'TGA8',
         '--offset', '16', '--size', str(len(pid)),
         '--target', str(tmp_path), '--config', str(tmp_path / 'config.yaml')],
    )
    assert result.exit_code == 0, result.output
    assert os.path.getsize(tmp_path / 'ARCHIVE.tga') == 18 + 768 + 4


def test_config_and_formats(tmp_path):
    config = str(tmp_path / 'config.yaml')
    result = runner.invoke(app, ['pid', 'config', '--depth', '32', '--config', config])
    assert result.exit_code == 0, result.output
    assert 'png_mode: 32' in result.output

    result = runner.invoke(app, ['pid', 'formats', 'X.PID', '--config', config])
    assert result.exit_code == 0, result.output
    assert 'PNG - Portable Network Graphics (32bpp)' in result.output


def test_formats_rejects_other_files(tmp_path):
    result = runner.invoke(
        app, ['pid', 'formats', 'X.WAV', '--config', str(tmp_path / 'c.yaml')]
    )
    assert result.exit_code == 1


def test_info(tmp_path):
    result = runner.invoke(app, ['pid', 'info', '--config', str(tmp_path / 'c.yaml')])
    assert result.exit_code == 0
    assert 'Gruntz (1999) .PID converter v0.82' in result.output
    assert 'PNG output: 8bpp' in result.output


def test_convert_rejects_offset_past_end(tmp_path):
    write_pid(tmp_path / 'FRAME.PID')
    target = tmp_path / 'out'
    result = runner.invoke(
        app,
        ['pid', 'convert', str(tmp_path / 'FRAME.PID'), '--offset', '4096',
         '--target', str(target), '--config', str(tmp_path / 'config.yaml')],
    )
    assert result.exit_code == 2
    assert not target.exists()
