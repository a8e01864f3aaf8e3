"""
Output path handling and image encoding.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

import cv2
import numpy as np

from .errors import ImageWriteError, UnsupportedFormatError

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg")


def has_supported_ext(path: str) -> bool:
    """True if `path` ends in .png, .jpg or .jpeg (case-insensitive)."""
    ext = os.path.splitext(path)[1].lower()
    return ext in SUPPORTED_EXTENSIONS


def resolve_output_path(path: str) -> str:
    """
    Resolve `path` against the working directory.

    Raises:
        OSError: If the working directory cannot be determined.
    """
    if not path:
        raise OSError("empty output path")
    return os.path.abspath(os.path.expanduser(path))


def _encode_params(ext: str, jpeg_quality: Optional[int], png_compression: Optional[int]) -> List[int]:
    if ext in (".jpg", ".jpeg") and jpeg_quality is not None:
        return [cv2.IMWRITE_JPEG_QUALITY, int(jpeg_quality)]
    if ext == ".png" and png_compression is not None:
        return [cv2.IMWRITE_PNG_COMPRESSION, int(png_compression)]
    return []


def write_image(
    path: str,
    image: np.ndarray,
    jpeg_quality: Optional[int] = None,
    png_compression: Optional[int] = None,
) -> None:
    """
    Encode `image` with the codec implied by the extension and write it.

    Raises:
        UnsupportedFormatError: Extension outside SUPPORTED_EXTENSIONS.
        ImageWriteError: OpenCV failed to encode or write.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"unsupported output extension {ext or '(none)'!r}; use .png/.jpg/.jpeg"
        )

    params = _encode_params(ext, jpeg_quality, png_compression)
    try:
        ok = cv2.imwrite(path, image, params)
    except cv2.error as e:
        raise ImageWriteError(f"failed to write image: {e}") from e
    if not ok:
        raise ImageWriteError(f"failed to write image: {path}")

    logging.debug(f"Wrote {image.shape[1]}x{image.shape[0]} image to {path}")
