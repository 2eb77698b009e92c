"""Image upscaling and sharpening tools.

This package provides tools for:
- Bilinear upscaling of RGBA images by an integer factor (2x to 4x)
- Edge sharpening with a fixed 3x3 convolution kernel
- Batch enhancement of image folders driven by config.toml
"""

__version__ = "0.1.0"
