"""Bilinear upscaling of RGBA images by an integer factor."""

import numpy as np

from upscaler.core.buffer import as_pixels, check_pixels, row_bands, run_bands, validate_scale


def _axis_taps(size, scale):
    """
    Source taps and integer weights along one axis.

    Destination index d maps to source coordinate d / scale. Returns the lower tap
    floor(d / scale), the upper tap clamped to the last index, and the weight of the
    upper tap in units of 1/scale.
    """
    dst = np.arange(size * scale)
    lower = dst // scale
    upper = np.minimum(lower + 1, size - 1)
    weight = dst % scale
    return lower, upper, weight


def resample_array(pixels, scale, workers=1):
    """
    Upscale an (H, W, 4) uint8 array to (H * scale, W * scale, 4).

    All four channels are interpolated the same way. Sampling never leaves the
    source image: taps past the last row or column reuse the edge pixel.

    Args:
        pixels: Source image
        scale: Integer scale factor in [2, 4]
        workers: Number of threads splitting the output rows

    Returns:
        np.ndarray: Newly allocated upscaled image
    """
    scale = validate_scale(scale)
    height, width = check_pixels(pixels).shape[:2]
    src = pixels.astype(np.int32)
    out = np.empty((height * scale, width * scale, pixels.shape[2]), dtype=np.uint8)

    x0, x1, wx = _axis_taps(width, scale)
    y0, y1, wy = _axis_taps(height, scale)
    wx = wx[None, :, None]
    denom = scale * scale

    def fill_rows(start, stop):
        fy = wy[start:stop, None, None]
        top = src[y0[start:stop]]
        bottom = src[y1[start:stop]]

        # Horizontal pass on the two source rows, then blend vertically
        top = top[:, x0] * (scale - wx) + top[:, x1] * wx
        bottom = bottom[:, x0] * (scale - wx) + bottom[:, x1] * wx
        total = top * (scale - fy) + bottom * fy

        out[start:stop] = (total + denom // 2) // denom

    run_bands(fill_rows, row_bands(0, height * scale, workers), workers)
    return out


def resample(src, width, height, scale, workers=1):
    """
    Upscale a flat RGBA buffer.

    Args:
        src: bytes-like RGBA buffer of length width * height * 4
        width: Source width in pixels
        height: Source height in pixels
        scale: Integer scale factor in [2, 4]
        workers: Number of threads splitting the output rows

    Returns:
        bytes: RGBA buffer of size (width * scale) x (height * scale)

    Raises:
        InvalidDimensions: If the buffer length does not match the dimensions
        InvalidScale: If scale is not an integer in [2, 4]
    """
    scale = validate_scale(scale)
    pixels = as_pixels(src, width, height)
    return resample_array(pixels, scale, workers=workers).tobytes()
