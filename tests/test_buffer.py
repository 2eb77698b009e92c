import os
import sys

repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(repo_root, "src"))

import threading

import numpy as np
import pytest

from upscaler.core.buffer import PixelBuffer, as_pixels, row_bands, run_bands
from upscaler.core.errors import InvalidDimensions
from upscaler.core.resampler import resample, resample_array
from upscaler.core.sharpener import Sharpener, sharpen


def test_wide_integer_array_rejected_instead_of_wrapped():
    img = np.full((3, 3, 4), 256, dtype=np.int64)
    with pytest.raises(InvalidDimensions):
        sharpen(img, 3, 3)
    with pytest.raises(InvalidDimensions):
        resample(img, 3, 3, 2)


def test_float_array_rejected():
    with pytest.raises(InvalidDimensions):
        as_pixels(np.zeros((2, 2, 4), dtype=np.float32), 2, 2)


def test_uint8_array_accepted():
    img = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(3, 2, 4)
    assert as_pixels(img, 2, 3).tolist() == img.tolist()


@pytest.mark.parametrize("shape", [(0, 3, 4), (3, 0, 4), (3, 3, 3), (3, 3), (1, 3, 3, 4)])
def test_array_entry_points_check_shape(shape):
    img = np.zeros(shape, dtype=np.uint8)
    with pytest.raises(InvalidDimensions):
        resample_array(img, 2)
    with pytest.raises(InvalidDimensions):
        Sharpener().sharpen_array(img)
    with pytest.raises(InvalidDimensions):
        PixelBuffer.from_array(img)


def test_array_entry_points_check_dtype():
    img = np.zeros((4, 4, 4), dtype=np.int16)
    with pytest.raises(InvalidDimensions):
        resample_array(img, 2)
    with pytest.raises(InvalidDimensions):
        Sharpener().sharpen_array(img)


def test_pixel_buffer_copies_mutable_data():
    raw = bytearray(2 * 2 * 4)
    buffer = PixelBuffer(raw, 2, 2)
    raw[0] = 99

    assert isinstance(buffer.data, bytes)
    assert buffer.data[0] == 0
    assert hash(buffer) == hash(PixelBuffer(bytes(16), 2, 2))
    assert PixelBuffer(memoryview(bytes(16)), 2, 2) == buffer


def test_row_bands_cover_range():
    assert row_bands(1, 11, 3) == [(1, 5), (5, 8), (8, 11)]
    assert row_bands(0, 2, 8) == [(0, 1), (1, 2)]
    assert row_bands(0, 5, 1) == [(0, 5)]


def test_run_bands_reraises_worker_error():
    seen = []
    lock = threading.Lock()

    def fill(start, stop):
        with lock:
            seen.append((start, stop))
        if start == 4:
            raise RuntimeError("band failed")

    with pytest.raises(RuntimeError, match="band failed"):
        run_bands(fill, row_bands(0, 8, 4), 4)
    # The pool joins every band before the error surfaces
    assert sorted(seen) == [(0, 2), (2, 4), (4, 6), (6, 8)]


def test_run_bands_inline_error():
    def fill(start, stop):
        raise ValueError("inline")

    with pytest.raises(ValueError, match="inline"):
        run_bands(fill, [(0, 3)], 1)
