"""
Image processing for captured frames (OpenCV).
"""

from .errors import ImageError, ImageWriteError, UnsupportedFormatError
from .transform import OUTPUT_SIZE, convert_color, frame_to_image, prepare_image, resize_image
from .writer import SUPPORTED_EXTENSIONS, has_supported_ext, resolve_output_path, write_image

__all__ = [
    "ImageError",
    "ImageWriteError",
    "UnsupportedFormatError",
    "OUTPUT_SIZE",
    "convert_color",
    "frame_to_image",
    "prepare_image",
    "resize_image",
    "SUPPORTED_EXTENSIONS",
    "has_supported_ext",
    "resolve_output_path",
    "write_image",
]
