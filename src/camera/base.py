"""
Camera interfaces.

We support multiple capture backends:
- Picamera2/libcamera (CSI camera on Raspberry Pi) [default]
- OpenCV VideoCapture (USB cameras)

Every backend exposes the same single-shot lifecycle:
    open() -> start() -> frame_width()/frame_height() -> capture() -> close()

Failures are reported by raising CameraError with an ErrorKind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Tuple

from models.frame import FrameBuffer


class ErrorKind(str, Enum):
    OPEN_FAILED = "open"
    START_FAILED = "start"
    INVALID_GEOMETRY = "geometry"
    CAPTURE_FAILED = "capture"
    ALLOCATION_FAILED = "allocation"
    LIST_FAILED = "list"


_OPERATION_NAMES = {
    ErrorKind.OPEN_FAILED: "camera open",
    ErrorKind.START_FAILED: "camera start",
    ErrorKind.INVALID_GEOMETRY: "invalid frame size",
    ErrorKind.CAPTURE_FAILED: "capture",
    ErrorKind.ALLOCATION_FAILED: "buffer allocation",
    ErrorKind.LIST_FAILED: "list cameras",
}


class CameraError(RuntimeError):
    """
    Raised by camera backends when an operation fails.

    Attributes:
        kind: Which step failed.
        detail: Human-readable reason.
        code: Raw status code from the underlying library, if it gave one.
    """

    def __init__(self, kind: ErrorKind, detail: str = "", code: Optional[int] = None):
        self.kind = kind
        self.detail = detail
        self.code = code
        super().__init__(self._format())

    @property
    def operation(self) -> str:
        return _OPERATION_NAMES[self.kind]

    def _format(self) -> str:
        if self.kind == ErrorKind.INVALID_GEOMETRY:
            return f"{self.operation}: {self.detail}"
        message = f"{self.operation} failed"
        if self.detail:
            message += f": {self.detail}"
        if self.code is not None:
            message += f" (code {self.code})"
        return message


class Camera(ABC):
    """
    Abstract base class for a single camera session.

    The instance is the handle: it is created unopened, acquires the device in
    open() and releases it in close(). Use it as a context manager so the
    device is released on every exit path:

        with create_camera(cfg) as cam:
            cam.start()
            frame = cam.capture(cam.frame_width(), cam.frame_height())
    """

    BYTES_PER_PIXEL = 3

    def __init__(self) -> None:
        self._is_open = False
        self._is_started = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def frame_size(self) -> Tuple[int, int]:
        """Negotiated (width, height); non-positive values mean unknown."""
        return self.frame_width(), self.frame_height()

    @abstractmethod
    def open(self) -> None:
        """
        Acquire exclusive access to the camera.

        Raises:
            CameraError: OPEN_FAILED if no camera could be acquired.
        """

    @abstractmethod
    def start(self) -> None:
        """
        Configure an RGB888 stream and start it. No-op if already started.

        Raises:
            CameraError: START_FAILED on configuration or start errors.
        """

    @abstractmethod
    def frame_width(self) -> int:
        """Negotiated frame width after start(), -1 before."""

    @abstractmethod
    def frame_height(self) -> int:
        """Negotiated frame height after start(), -1 before."""

    @abstractmethod
    def capture(self, width: int, height: int) -> FrameBuffer:
        """
        Block until one frame is available and copy it into a buffer of at
        most width * height * 3 bytes.

        Raises:
            CameraError: INVALID_GEOMETRY, ALLOCATION_FAILED or CAPTURE_FAILED.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the camera. Safe to call multiple times."""

    def _check_geometry(self, width: int, height: int) -> int:
        if width <= 0 or height <= 0:
            raise CameraError(ErrorKind.INVALID_GEOMETRY, f"{width}x{height}")
        return width * height * self.BYTES_PER_PIXEL

    def __enter__(self) -> "Camera":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
