"""RGBA pixel buffers and the checks shared by every stage."""

import numbers
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from upscaler.core.errors import InvalidDimensions, InvalidScale

CHANNELS = 4
MIN_SCALE = 2
MAX_SCALE = 4


def as_pixels(src, width, height):
    """
    View a flat RGBA buffer as an (height, width, 4) uint8 array.

    Args:
        src: bytes-like object or uint8 numpy array
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        np.ndarray: Read-only view, no copy is made when avoidable

    Raises:
        InvalidDimensions: If a dimension is not positive or the length mismatches
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Dimensions must be positive, got {width}x{height}")

    if isinstance(src, np.ndarray):
        # Casting would wrap values outside [0, 255]
        if src.dtype != np.uint8:
            raise InvalidDimensions(f"Pixel arrays must be uint8, got {src.dtype}")
        flat = np.ascontiguousarray(src).reshape(-1)
    else:
        flat = np.frombuffer(src, dtype=np.uint8)

    expected = width * height * CHANNELS
    if flat.size != expected:
        raise InvalidDimensions(
            f"Buffer holds {flat.size} bytes, expected {expected} for {width}x{height} RGBA"
        )

    pixels = flat.reshape(height, width, CHANNELS)
    pixels.flags.writeable = False
    return pixels


def check_pixels(pixels):
    """Raise InvalidDimensions unless pixels is a non-empty (H, W, 4) uint8 array."""
    if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
        raise InvalidDimensions(f"Expected an (H, W, 4) array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise InvalidDimensions(f"Pixel arrays must be uint8, got {pixels.dtype}")
    height, width = pixels.shape[:2]
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Dimensions must be positive, got {width}x{height}")
    return pixels


def validate_scale(scale):
    """Return scale as an int, or raise InvalidScale if it is not an integer in [2, 4]."""
    if isinstance(scale, bool) or not isinstance(scale, numbers.Integral):
        raise InvalidScale(f"Scale must be an integer, got {scale!r}")
    if not MIN_SCALE <= scale <= MAX_SCALE:
        raise InvalidScale(f"Scale must be between {MIN_SCALE} and {MAX_SCALE}, got {scale}")
    return int(scale)


def row_bands(start, stop, workers):
    """Split rows [start, stop) into at most `workers` contiguous (start, stop) bands."""
    total = stop - start
    count = max(1, min(workers, total))
    step, extra = divmod(total, count)

    bands = []
    for i in range(count):
        size = step + (1 if i < extra else 0)
        bands.append((start, start + size))
        start += size
    return bands


def run_bands(func, bands, workers):
    """
    Call func(band_start, band_stop) for each band, in parallel when workers > 1.

    Each call must write only its own rows of the output. Returns once every band
    has finished; the first worker exception is re-raised.
    """
    if workers <= 1 or len(bands) <= 1:
        for band_start, band_stop in bands:
            func(band_start, band_stop)
        return

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(func, band_start, band_stop) for band_start, band_stop in bands]
        for future in futures:
            future.result()


@dataclass(frozen=True)
class PixelBuffer:
    """An RGBA image: row-major bytes, top-left origin, 4 bytes per pixel."""

    data: bytes
    width: int
    height: int

    def __post_init__(self):
        # bytearray/memoryview input would leave the buffer mutable and unhashable
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        as_pixels(self.data, self.width, self.height)

    @classmethod
    def from_array(cls, pixels):
        """Build a buffer from an (height, width, 4) uint8 array."""
        check_pixels(pixels)
        height, width = pixels.shape[:2]
        return cls(np.ascontiguousarray(pixels).tobytes(), width, height)

    @property
    def dimensions(self):
        return self.width, self.height

    def pixels(self):
        """Read-only (height, width, 4) view of the buffer."""
        return as_pixels(self.data, self.width, self.height)
