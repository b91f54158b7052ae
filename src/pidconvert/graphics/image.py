from PIL import Image

from pidconvert.pid.decode import DecodedImage
from pidconvert.pid.palette import rgb_bytes


def convert_to_pil_image(image: DecodedImage) -> Image.Image:
    """Paletted PIL image of decoded PID, index 0 marked transparent if flagged."""
    im = Image.frombytes('P', (image.width, image.height), image.pixels)
    im.putpalette(rgb_bytes(image.palette))
    if image.transparent:
        im.info['transparency'] = 0
    return im
