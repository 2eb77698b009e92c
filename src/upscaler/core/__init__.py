"""Core image upscaling and sharpening classes."""

from upscaler.core.buffer import PixelBuffer
from upscaler.core.enhancer import Enhancer, enhance
from upscaler.core.errors import (
    BufferTooSmall,
    DecodeError,
    EnhanceError,
    InvalidDimensions,
    InvalidScale,
)
from upscaler.core.resampler import resample, resample_array
from upscaler.core.sharpener import Sharpener, sharpen

__all__ = [
    "PixelBuffer",
    "Enhancer",
    "enhance",
    "resample",
    "resample_array",
    "Sharpener",
    "sharpen",
    "EnhanceError",
    "InvalidDimensions",
    "InvalidScale",
    "BufferTooSmall",
    "DecodeError",
]
