"""Errors raised by the enhancement pipeline."""


class EnhanceError(ValueError):
    """Base class for all enhancement errors."""


class InvalidDimensions(EnhanceError):
    """Buffer length does not match width * height * 4, or a dimension is not positive."""


class InvalidScale(EnhanceError):
    """Scale factor is not an integer in the supported range."""


class BufferTooSmall(InvalidDimensions):
    """Image is too small for the 3x3 sharpening kernel."""


class DecodeError(EnhanceError):
    """Image bytes could not be decoded."""
