"""
OpenCV camera backend.

Supports:
- USB webcams (device_id as int, e.g. 0)
- RTSP/IP cameras and video files (device_id as str)

OpenCV delivers BGR frames; they are converted to RGB so every backend hands
the same pixel order to the imaging layer.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

import cv2

from models.frame import FrameBuffer
from ..base import Camera, CameraError, ErrorKind


def list_opencv_cameras(max_probe: int = 10) -> List[str]:
    """Probe device indices 0..max_probe-1 and describe the ones that open."""
    cameras = []
    for index in range(max_probe):
        try:
            cap = cv2.VideoCapture(index)
        except cv2.error as e:
            raise CameraError(ErrorKind.LIST_FAILED, str(e)) from e
        try:
            if cap.isOpened():
                cameras.append(f"{index}: {cap.getBackendName()}".strip())
        finally:
            cap.release()
    return cameras


class OpenCVCamera(Camera):
    """
    OpenCV-based capture for USB webcams and stream URLs.

    start() grabs one warm-up frame so the negotiated geometry is known
    before capture() is called.
    """

    def __init__(
        self,
        device_id: Union[int, str] = 0,
        resolution: Optional[Tuple[int, int]] = None,
    ) -> None:
        super().__init__()
        self.device_id = device_id
        self.resolution = resolution

        self._cap: Optional[cv2.VideoCapture] = None
        self._size: Optional[Tuple[int, int]] = None

    def open(self) -> None:
        if self._is_open:
            return

        self._cap = cv2.VideoCapture(self.device_id)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise CameraError(ErrorKind.OPEN_FAILED, f"cannot open device {self.device_id}")

        self._is_open = True
        logging.info(f"Camera opened (backend=opencv, id={self.device_id})")

    def start(self) -> None:
        if self._is_started:
            return
        if not self._is_open or self._cap is None:
            raise CameraError(ErrorKind.START_FAILED, "camera is not open")

        # Only set properties for USB cameras (integers), not IP streams
        if isinstance(self.device_id, int) and self.resolution:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])

        ret, frame = self._cap.read()
        if not ret or frame is None:
            raise CameraError(ErrorKind.START_FAILED, "no frame from device")
        if frame.ndim != 3 or frame.shape[2] != 3:
            raise CameraError(ErrorKind.START_FAILED, f"unsupported frame shape {frame.shape}")

        self._size = (int(frame.shape[1]), int(frame.shape[0]))
        self._is_started = True
        logging.info(f"Camera started (size={self._size[0]}x{self._size[1]})")

    def frame_width(self) -> int:
        if not self._is_started or self._size is None:
            return -1
        return self._size[0]

    def frame_height(self) -> int:
        if not self._is_started or self._size is None:
            return -1
        return self._size[1]

    def capture(self, width: int, height: int) -> FrameBuffer:
        buffer_size = self._check_geometry(width, height)
        if not self._is_started or self._cap is None:
            raise CameraError(ErrorKind.CAPTURE_FAILED, "camera is not started")

        ret, frame_bgr = self._cap.read()
        if not ret or frame_bgr is None:
            raise CameraError(ErrorKind.CAPTURE_FAILED, "failed to read frame")

        try:
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            data = frame_rgb.tobytes()[:buffer_size]
        except MemoryError as e:
            raise CameraError(ErrorKind.ALLOCATION_FAILED, f"{buffer_size} bytes") from e

        return FrameBuffer(data=data, width=width, height=height)

    def close(self) -> None:
        cap, self._cap = self._cap, None
        self._is_started = False
        self._is_open = False
        self._size = None
        if cap is None:
            return
        try:
            cap.release()
        except cv2.error as e:
            logging.warning(f"Error releasing VideoCapture: {e}")
        logging.info("Camera released")
