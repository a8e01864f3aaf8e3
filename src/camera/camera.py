"""
Camera factory + enumeration.

This is the single entrypoint the rest of the project should use to create a
camera or list the available ones.
"""

from __future__ import annotations

from typing import List

from models.config import CameraConfig
from .base import Camera
from .backends.opencv import OpenCVCamera, list_opencv_cameras
from .backends.picamera2 import Picamera2Camera, Picamera2Config, list_picamera2_cameras

BACKENDS = ("picamera2", "opencv")


def create_camera(camera_cfg: CameraConfig) -> Camera:
    """Build an unopened camera for the configured backend."""
    resolution = tuple(camera_cfg.resolution) if camera_cfg.resolution else None

    if camera_cfg.backend == "opencv":
        return OpenCVCamera(device_id=camera_cfg.device_id, resolution=resolution)

    if camera_cfg.backend != "picamera2":
        raise ValueError(f"Unknown camera backend: {camera_cfg.backend}")

    return Picamera2Camera(
        Picamera2Config(
            camera_num=camera_cfg.camera_num,
            resolution=resolution,
            capture_timeout=camera_cfg.capture_timeout,
        )
    )


def list_cameras(camera_cfg: CameraConfig) -> List[str]:
    """
    Describe every available camera, one trimmed non-empty string each.

    Returns an empty list when no camera is present.

    Raises:
        CameraError: LIST_FAILED when enumeration itself fails.
    """
    if camera_cfg.backend == "opencv":
        return list_opencv_cameras(camera_cfg.max_probe)
    if camera_cfg.backend != "picamera2":
        raise ValueError(f"Unknown camera backend: {camera_cfg.backend}")
    return list_picamera2_cameras()
