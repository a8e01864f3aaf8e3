"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


DEFAULT_OUTPUT_PATH = "screenshot.png"
DEFAULT_CAPTURE_TIMEOUT = 5.0


@dataclass
class CameraConfig:
    """Camera configuration."""
    backend: str = "picamera2"
    camera_num: Optional[int] = None
    device_id: Union[int, str] = 0
    resolution: Optional[List[int]] = None
    capture_timeout: Optional[float] = DEFAULT_CAPTURE_TIMEOUT
    max_probe: int = 10

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "picamera2"),
            camera_num=d.get("camera_num"),
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution"),
            capture_timeout=d.get("capture_timeout", DEFAULT_CAPTURE_TIMEOUT),
            max_probe=d.get("max_probe", 10),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "camera_num": self.camera_num,
            "device_id": self.device_id,
            "resolution": self.resolution,
            "capture_timeout": self.capture_timeout,
            "max_probe": self.max_probe,
        }


@dataclass
class OutputConfig:
    """Output image configuration."""
    path: str = DEFAULT_OUTPUT_PATH
    grayscale: bool = False
    jpeg_quality: Optional[int] = None
    png_compression: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OutputConfig":
        return cls(
            path=d.get("path", DEFAULT_OUTPUT_PATH),
            grayscale=d.get("grayscale", False),
            jpeg_quality=d.get("jpeg_quality"),
            png_compression=d.get("png_compression"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "grayscale": self.grayscale,
            "jpeg_quality": self.jpeg_quality,
            "png_compression": self.png_compression,
        }


@dataclass
class Config:
    """
    Root configuration object.

    Typed view over the merged YAML dict; missing sections fall back to
    defaults.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create from the merged config dictionary."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera") or {}),
            output=OutputConfig.from_dict(d.get("output") or {}),
            log_path=d.get("log_path"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": self.camera.to_dict(),
            "output": self.output.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
