"""Decoding and encoding between image files and RGBA pixel buffers."""

import base64
import io
import mimetypes

import numpy as np
from PIL import Image, UnidentifiedImageError

from upscaler.core.buffer import PixelBuffer
from upscaler.core.errors import DecodeError


def is_image_mime(mime):
    """Return True if the MIME type names image content (image/*)."""
    return bool(mime) and mime.startswith("image/")


def guess_mime(path):
    """Guess a MIME type from a file name, or None if unknown."""
    mime, _ = mimetypes.guess_type(str(path))
    return mime


def decode_image(data):
    """
    Decode PNG/JPEG/WEBP (or any format Pillow reads) into an RGBA buffer.

    Args:
        data: Encoded image bytes

    Returns:
        PixelBuffer: Decoded image converted to RGBA

    Raises:
        DecodeError: If Pillow cannot read the bytes
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img = img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e

    return PixelBuffer.from_array(np.asarray(img, dtype=np.uint8))


def encode_png(buffer):
    """Encode a PixelBuffer as lossless PNG bytes."""
    img = Image.fromarray(np.array(buffer.pixels()))
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


def to_data_url(png_bytes):
    """Wrap PNG bytes in a data: URL."""
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


def output_filename(scale):
    """Download name for an image enhanced at the given scale."""
    return f"enhanced-{scale}x.png"
