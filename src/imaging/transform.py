"""
Frame -> image conversion: wrap raw bytes, resize, convert channel order.
"""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from models.frame import FrameBuffer
from .errors import ImageError

# Fixed output geometry; the source aspect ratio is not preserved.
OUTPUT_SIZE: Tuple[int, int] = (640, 480)


def frame_to_image(frame: FrameBuffer) -> np.ndarray:
    """Wrap a captured RGB frame as an (h, w, 3) uint8 array."""
    try:
        return frame.to_array()
    except ValueError as e:
        raise ImageError(f"image creation failed: {e}") from e


def resize_image(image: np.ndarray, size: Tuple[int, int] = OUTPUT_SIZE) -> np.ndarray:
    """Resize to exactly `size` (width, height) with linear interpolation."""
    return cv2.resize(image, size, interpolation=cv2.INTER_LINEAR)


def convert_color(image: np.ndarray, grayscale: bool = False) -> np.ndarray:
    """RGB -> BGR for OpenCV encoders, or RGB -> single-channel gray."""
    code = cv2.COLOR_RGB2GRAY if grayscale else cv2.COLOR_RGB2BGR
    return cv2.cvtColor(image, code)


def prepare_image(frame: FrameBuffer, grayscale: bool = False) -> np.ndarray:
    """Turn a captured frame into the 640x480 image that gets written."""
    image = frame_to_image(frame)
    resized = resize_image(image, OUTPUT_SIZE)
    return convert_color(resized, grayscale=grayscale)
