"""
Single-shot capture orchestration.

take_snapshot() drives one camera through open -> start -> capture, turns the
frame into a 640x480 image and writes it. run_list() prints the available
cameras. Both are sequential and make no retries: the first failure raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from camera.base import Camera, CameraError, ErrorKind
from camera.camera import list_cameras
from imaging.errors import UnsupportedFormatError
from imaging.transform import OUTPUT_SIZE, prepare_image
from imaging.writer import has_supported_ext, write_image
from models.config import CameraConfig

NO_CAMERAS_MESSAGE = "No cameras found"


@dataclass(frozen=True)
class SnapshotResult:
    output_path: str
    source_size: Tuple[int, int]
    output_size: Tuple[int, int]
    captured_bytes: int


def run_list(camera_cfg: CameraConfig) -> int:
    """
    Print one camera descriptor per line, or NO_CAMERAS_MESSAGE.

    Returns:
        Process exit code: 0 on success (including zero cameras), 1 on failure.
    """
    try:
        cameras = list_cameras(camera_cfg)
    except CameraError as e:
        logging.error(str(e))
        return 1

    if not cameras:
        print(NO_CAMERAS_MESSAGE)
        return 0

    for descriptor in cameras:
        print(descriptor)
    return 0


def take_snapshot(
    camera: Camera,
    output_path: str,
    grayscale: bool = False,
    jpeg_quality: Optional[int] = None,
    png_compression: Optional[int] = None,
) -> SnapshotResult:
    """
    Capture one frame from an unopened `camera` and write it to `output_path`.

    The extension is checked before the camera is opened. Once opened, the
    camera is released whether or not the capture succeeds.

    Raises:
        UnsupportedFormatError: Extension is not .png/.jpg/.jpeg.
        CameraError: Any camera step failed.
        ImageError: Conversion or writing failed.
    """
    if not has_supported_ext(output_path):
        raise UnsupportedFormatError("unsupported output extension; use .png/.jpg/.jpeg")

    with camera:
        camera.start()

        width = camera.frame_width()
        height = camera.frame_height()
        if width <= 0 or height <= 0:
            raise CameraError(ErrorKind.INVALID_GEOMETRY, f"{width}x{height}")

        frame = camera.capture(width, height)
        logging.info(f"Captured {frame.nbytes} bytes ({width}x{height})")

        image = prepare_image(frame, grayscale=grayscale)
        write_image(output_path, image, jpeg_quality=jpeg_quality, png_compression=png_compression)

    return SnapshotResult(
        output_path=output_path,
        source_size=(width, height),
        output_size=OUTPUT_SIZE,
        captured_bytes=frame.nbytes,
    )
