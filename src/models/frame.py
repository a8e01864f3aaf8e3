"""
FrameBuffer model for a single captured frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class FrameBuffer:
    """
    Raw pixels of one captured frame.

    Attributes:
        data: Packed pixel bytes, row-major, RGB order.
        width: Frame width in pixels.
        height: Frame height in pixels.
        channels: Bytes per pixel (always 3 for RGB888).
    """
    data: bytes
    width: int
    height: int
    channels: int = 3

    @property
    def expected_size(self) -> int:
        return self.width * self.height * self.channels

    @property
    def nbytes(self) -> int:
        """Number of bytes actually captured."""
        return len(self.data)

    @property
    def is_complete(self) -> bool:
        return self.nbytes == self.expected_size

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    def to_array(self) -> np.ndarray:
        """
        Wrap the bytes as an (height, width, channels) uint8 array.

        Raises:
            ValueError: If the buffer length does not match the geometry.
        """
        if not self.is_complete:
            raise ValueError(
                f"frame buffer holds {self.nbytes} bytes, expected {self.expected_size} "
                f"for {self.width}x{self.height}x{self.channels}"
            )
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, self.channels)
