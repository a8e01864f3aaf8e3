"""
Picamera2 camera backend (Raspberry Pi CSI camera via libcamera).

Only works on Raspberry Pi OS with Picamera2 installed:
  sudo apt install -y python3-picamera2
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from models.frame import FrameBuffer
from ..base import Camera, CameraError, ErrorKind

PIXEL_FORMAT = "RGB888"


def _import_picamera2() -> Any:
    try:
        from picamera2 import Picamera2  # type: ignore
    except ImportError as e:
        raise ImportError(
            "Picamera2 is not available. This backend only works on Raspberry Pi OS. "
            "Install with `sudo apt install -y python3-picamera2` or use backend 'opencv'."
        ) from e
    return Picamera2


@dataclass(frozen=True)
class Picamera2Config:
    camera_num: Optional[int] = None
    resolution: Optional[Tuple[int, int]] = None
    capture_timeout: Optional[float] = 5.0


def list_picamera2_cameras() -> List[str]:
    """Return the libcamera id of every camera, in enumeration order."""
    try:
        Picamera2 = _import_picamera2()
        infos = Picamera2.global_camera_info()
    except Exception as e:
        raise CameraError(ErrorKind.LIST_FAILED, str(e)) from e

    cameras = []
    for info in infos or []:
        camera_id = str(info.get("Id", "")).strip()
        if camera_id:
            cameras.append(camera_id)
    return cameras


class Picamera2Camera(Camera):
    """Single-shot still capture from the first (or configured) libcamera device."""

    def __init__(self, cfg: Picamera2Config):
        super().__init__()
        self.cfg = cfg
        self._picam2: Any = None
        self._size: Optional[Tuple[int, int]] = None

    def open(self) -> None:
        if self._is_open:
            return

        try:
            Picamera2 = _import_picamera2()
        except ImportError as e:
            raise CameraError(ErrorKind.OPEN_FAILED, str(e)) from e

        try:
            infos = Picamera2.global_camera_info()
        except Exception as e:
            raise CameraError(ErrorKind.OPEN_FAILED, f"cannot start camera manager: {e}") from e
        if not infos:
            raise CameraError(ErrorKind.OPEN_FAILED, "no cameras found")

        camera_num = self.cfg.camera_num
        if camera_num is None:
            camera_num = infos[0].get("Num", 0)

        try:
            self._picam2 = Picamera2(camera_num=camera_num)
        except Exception as e:
            raise CameraError(ErrorKind.OPEN_FAILED, f"acquire failed: {e}") from e

        self._is_open = True
        logging.info(f"Camera opened (backend=picamera2, num={camera_num})")

    def start(self) -> None:
        if self._is_started:
            return
        if not self._is_open or self._picam2 is None:
            raise CameraError(ErrorKind.START_FAILED, "camera is not open")

        main = {"format": PIXEL_FORMAT}
        if self.cfg.resolution:
            main["size"] = tuple(self.cfg.resolution)

        try:
            still_config = self._picam2.create_still_configuration(main=main)
        except Exception as e:
            raise CameraError(ErrorKind.START_FAILED, f"no valid configuration: {e}") from e
        if not still_config or "main" not in still_config:
            raise CameraError(ErrorKind.START_FAILED, "no valid configuration")

        try:
            self._picam2.configure(still_config)
        except Exception as e:
            raise CameraError(ErrorKind.START_FAILED, f"configure failed: {e}") from e

        stream = self._picam2.camera_config["main"]
        if stream.get("format") != PIXEL_FORMAT:
            raise CameraError(ErrorKind.START_FAILED, f"{PIXEL_FORMAT} not available")

        try:
            self._picam2.start()
        except Exception as e:
            raise CameraError(ErrorKind.START_FAILED, str(e)) from e

        self._size = (int(stream["size"][0]), int(stream["size"][1]))
        self._is_started = True
        logging.info(f"Camera started (size={self._size[0]}x{self._size[1]}, format={PIXEL_FORMAT})")

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
        if not self._is_started:
            raise CameraError(ErrorKind.CAPTURE_FAILED, "camera is not started")

        try:
            job = self._picam2.capture_array("main", wait=False)
            frame_rgb = job.get_result(timeout=self.cfg.capture_timeout)
        except (TimeoutError, concurrent.futures.TimeoutError) as e:
            raise CameraError(ErrorKind.CAPTURE_FAILED, "timeout") from e
        except Exception as e:
            raise CameraError(ErrorKind.CAPTURE_FAILED, str(e)) from e

        if frame_rgb is None:
            raise CameraError(ErrorKind.CAPTURE_FAILED, "request not complete")

        try:
            data = frame_rgb.tobytes()[:buffer_size]
        except MemoryError as e:
            raise CameraError(ErrorKind.ALLOCATION_FAILED, f"{buffer_size} bytes") from e

        return FrameBuffer(data=data, width=width, height=height)

    def close(self) -> None:
        picam2, self._picam2 = self._picam2, None
        was_started = self._is_started
        self._is_started = False
        self._is_open = False
        self._size = None
        if picam2 is None:
            return

        # Release never raises.
        if was_started:
            try:
                picam2.stop()
            except Exception as e:
                logging.warning(f"Error stopping Picamera2: {e}")
        try:
            picam2.close()
        except Exception as e:
            logging.warning(f"Error closing Picamera2: {e}")
        logging.info("Camera released")
