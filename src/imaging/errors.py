"""
Imaging errors.
"""


class ImageError(RuntimeError):
    """Base class for image conversion and encoding failures."""


class UnsupportedFormatError(ImageError):
    """Output extension is not one of the supported encoders."""


class ImageWriteError(ImageError):
    """OpenCV could not encode or write the image."""
