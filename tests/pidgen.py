import io
import itertools
import struct
from typing import Iterator, Optional, Sequence, Tuple

PID_HEADER = struct.Struct('<4i16s')


def make_pid(
    width: int,
    height: int,
    data: bytes,
    flags: int = 0,
    palette: Optional[Sequence[Tuple[int, int, int]]] = None,
    signature: int = 10,
) -> bytes:
    header = PID_HEADER.pack(signature, flags, width, height, bytes(16))
    footer = bytes(itertools.chain.from_iterable(palette)) if palette else b''
    return header + data + footer


def runs(pixels: bytes) -> Iterator[Tuple[int, int]]:
    for value, group in itertools.groupby(pixels):
        yield value, len(list(group))


def encode_raw(pixels: bytes) -> bytes:
    with io.BytesIO() as stream:
        for value, count in runs(pixels):
            while count:
                part = min(count, 255 - 192)
                if part == 1 and value <= 192:
                    stream.write(bytes([value]))
                else:
                    stream.write(bytes([192 + part, value]))
                count -= part
        return stream.getvalue()


def encode_compressed(pixels: bytes) -> bytes:
    with io.BytesIO() as stream:
        literal = bytearray()

        def flush() -> None:
            while literal:
                part = literal[:128]
                stream.write(bytes([len(part)]) + part)
                del literal[:128]

        for value, count in runs(pixels):
            if value != 0:
                literal += bytes([value]) * count
                continue
            flush()
            while count:
                part = min(count, 255 - 128)
                stream.write(bytes([128 + part]))
                count -= part
        flush()
        return stream.getvalue()


def gradient(width: int, height: int) -> bytes:
    return bytes((x * 7 + y * 13) % 256 for y in range(height) for x in range(width))


def read_png_chunks(data: bytes) -> Iterator[Tuple[bytes, bytes, int]]:
    with io.BytesIO(data[8:]) as stream:
        while True:
            header = stream.read(8)
            if not header:
                return
            size, tag = struct.unpack('>I4s', header)
            payload = stream.read(size)
            (crc,) = struct.unpack('>I', stream.read(4))
            yield tag, payload, crc


class FailingWriter(io.BytesIO):
    """Accepts `limit` bytes, then reports short writes."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit

    def write(self, data) -> int:
        room = max(0, self.limit - self.tell())
        return super().write(bytes(data)[:room])


class ExplodingReader(io.BytesIO):
    """Raises OSError once the cursor passes `limit`."""

    def __init__(self, data: bytes, limit: int) -> None:
        super().__init__(data)
        self.limit = limit

    def read(self, size=-1) -> bytes:
        if self.tell() >= self.limit:
            raise OSError('device not ready')
        return super().read(size)


class RecordingWriter(io.BytesIO):
    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def write(self, data) -> int:
        self.writes += 1
        return super().write(data)
