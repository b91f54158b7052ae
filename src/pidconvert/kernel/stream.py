import io
from typing import IO, Optional, Union

from .errors import EncodeError, TruncatedError

Stream = Union[IO[bytes], 'StreamView']


class StreamView:
    """Window over a region of a larger stream.

    Position 0 of the view is `offset` in the underlying stream (current
    position when omitted), so a file stored inside an archive can be read
    as if it was standalone.
    """

    def __init__(self, stream: Stream, size: int, offset: Optional[int] = None):
        self._stream = stream
        self._start = stream.tell() if offset is None else offset
        self._size = size
        self._pos = 0

    def __len__(self):
        return self._size

    def seek(self, pos: int, whence=io.SEEK_SET) -> int:
        if whence == io.SEEK_CUR:
            pos += self._pos
        elif whence == io.SEEK_END:
            pos += self._size
        if pos < 0:
            raise OSError(f'negative seek position {pos}')
        self._pos = pos
        return self._pos

    def tell(self) -> int:
        return self._pos

    def read(self, size: Optional[int] = None) -> bytes:
        self._stream.seek(self._start + self._pos, io.SEEK_SET)
        if size is not None and size >= 0:
            size = max(0, min(self._size - self._pos, size))
        else:
            size = max(0, self._size - self._pos)
        res = self._stream.read(size)
        self._pos += len(res)
        return res


def stream_size(stream: Stream) -> int:
    """Total size of stream, cursor is left where it was."""
    pos = stream.tell()
    size = stream.seek(0, io.SEEK_END)
    stream.seek(pos, io.SEEK_SET)
    return size


def read_exact(stream: Stream, size: int, what: str) -> bytes:
    try:
        data = stream.read(size)
    except (OSError, ValueError) as exc:
        raise TruncatedError(what, size, 0) from exc
    if len(data) != size:
        raise TruncatedError(what, size, len(data))
    return data


def write_all(stream: Stream, data: bytes, target: str) -> int:
    try:
        written = stream.write(data)
    except (OSError, ValueError) as exc:
        raise EncodeError(target, f'write failed: {exc}') from exc
    # raw streams may report None for a write that would block
    if written != len(data):
        raise EncodeError(target, f'short write: {written} of {len(data)} bytes')
    return written


def rewind(stream: Stream, target: str) -> None:
    try:
        stream.seek(0, io.SEEK_SET)
    except (OSError, ValueError) as exc:
        raise EncodeError(target, f'seek to start failed: {exc}') from exc
