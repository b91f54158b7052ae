import deal
import numpy as np


def as_matrix(pixels: bytes, width: int, height: int) -> np.ndarray:
    return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width)


@deal.chain(
    deal.pre(lambda _: _.width > 0 and _.height > 0),
    deal.pre(lambda _: len(_.pixels) == _.width * _.height),
    deal.ensure(lambda _: len(_.result) == len(_.pixels)),
)
def transform(
    pixels: bytes, width: int, height: int, mirror: bool = False, invert: bool = False
) -> bytes:
    """Remap index buffer so destination (x, y) reads source
    (width - 1 - x if mirror else x, height - 1 - y if invert else y).

    Returns new buffer, input is never modified.
    """
    if not (mirror or invert):
        return pixels
    matrix = as_matrix(pixels, width, height)
    if invert:
        matrix = matrix[::-1, :]
    if mirror:
        matrix = matrix[:, ::-1]
    return matrix.tobytes()
