"""
Camera package.

Canonical imports:
- `from camera.camera import create_camera, list_cameras`
- `from camera.base import Camera, CameraError, ErrorKind`
- `from camera.backends.picamera2 import Picamera2Camera` (CSI, libcamera)
- `from camera.backends.opencv import OpenCVCamera` (USB)
"""
