import os
import sys

repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(repo_root, "src"))

import base64
import io

import numpy as np
import pytest
from PIL import Image

from upscaler.core.buffer import PixelBuffer
from upscaler.core.errors import DecodeError, InvalidDimensions
from upscaler.core.image_io import (
    decode_image,
    encode_png,
    guess_mime,
    is_image_mime,
    output_filename,
    to_data_url,
)


def test_is_image_mime():
    assert is_image_mime("image/png")
    assert is_image_mime("image/webp")
    assert not is_image_mime("text/plain")
    assert not is_image_mime("application/pdf")
    assert not is_image_mime(None)
    assert not is_image_mime("")


def test_guess_mime():
    assert guess_mime("photo.jpg") == "image/jpeg"
    assert guess_mime("photo.PNG") == "image/png"


def test_output_filename():
    assert output_filename(2) == "enhanced-2x.png"
    assert output_filename(4) == "enhanced-4x.png"


def test_png_preserves_pixels():
    pixels = np.random.default_rng(0).integers(0, 256, (3, 5, 4), dtype=np.uint8)
    buffer = PixelBuffer.from_array(pixels)
    decoded = decode_image(encode_png(buffer))
    assert decoded == buffer


def test_decode_rgb_gets_opaque_alpha():
    out = io.BytesIO()
    Image.new("RGB", (2, 3), (10, 20, 30)).save(out, format="JPEG", quality=100)
    decoded = decode_image(out.getvalue())
    assert decoded.dimensions == (2, 3)
    assert (decoded.pixels()[..., 3] == 255).all()


def test_decode_garbage():
    with pytest.raises(DecodeError):
        decode_image(b"definitely not an image")


def test_to_data_url():
    url = to_data_url(b"\x89PNG")
    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == b"\x89PNG"


def test_pixel_buffer_validates_length():
    with pytest.raises(InvalidDimensions):
        PixelBuffer(bytes(7), 1, 2)


def test_pixel_buffer_view_is_read_only():
    buffer = PixelBuffer(bytes(2 * 2 * 4), 2, 2)
    view = buffer.pixels()
    assert view.shape == (2, 2, 4)
    with pytest.raises(ValueError):
        view[0, 0, 0] = 1


def test_pixel_buffer_from_array_rejects_rgb():
    with pytest.raises(InvalidDimensions):
        PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))
