"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from camera.base import Camera, CameraError, ErrorKind  # noqa: E402
from models.frame import FrameBuffer  # noqa: E402


class FakeCamera(Camera):
    """
    Scripted camera for orchestration tests.

    Records every call in `calls` so tests can assert ordering and release.
    """

    def __init__(
        self,
        width: int = 1920,
        height: int = 1080,
        fail_open: bool = False,
        fail_start: bool = False,
        fail_capture: bool = False,
        short_frame: bool = False,
    ):
        super().__init__()
        self.width = width
        self.height = height
        self.fail_open = fail_open
        self.fail_start = fail_start
        self.fail_capture = fail_capture
        self.short_frame = short_frame
        self.calls = []

    def open(self) -> None:
        self.calls.append("open")
        if self.fail_open:
            raise CameraError(ErrorKind.OPEN_FAILED, "no cameras found")
        self._is_open = True

    def start(self) -> None:
        self.calls.append("start")
        if self.fail_start:
            raise CameraError(ErrorKind.START_FAILED, "device busy", code=-9)
        self._is_started = True

    def frame_width(self) -> int:
        return self.width if self._is_started else -1

    def frame_height(self) -> int:
        return self.height if self._is_started else -1

    def capture(self, width: int, height: int) -> FrameBuffer:
        self.calls.append("capture")
        size = self._check_geometry(width, height)
        if self.fail_capture:
            raise CameraError(ErrorKind.CAPTURE_FAILED, "timeout")
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        frame[..., 0] = 255  # pure red in RGB
        data = frame.tobytes()[:size]
        if self.short_frame:
            data = data[: size // 2]
        return FrameBuffer(data=data, width=width, height=height)

    def close(self) -> None:
        self.calls.append("close")
        self._is_open = False
        self._is_started = False


@pytest.fixture
def fake_camera():
    return FakeCamera()


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "picamera2"
  camera_num: null
  device_id: 0
  capture_timeout: 5.0

output:
  path: "screenshot.png"
  grayscale: false
  jpeg_quality: 95

log_path: null
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [1280, 720],
            "capture_timeout": 5.0,
            "max_probe": 4,
        },
        "output": {
            "path": "shot.jpg",
            "grayscale": False,
            "jpeg_quality": 90,
            "png_compression": 3,
        },
        "log_path": None,
        "log_level": "INFO",
    }
