"""
Typed models for the camshot application.

Use the from_dict adapters to convert from the loaded YAML dicts.
"""

from .frame import FrameBuffer
from .config import (
    Config,
    CameraConfig,
    OutputConfig,
)

__all__ = [
    # Frame
    "FrameBuffer",
    # Config
    "Config",
    "CameraConfig",
    "OutputConfig",
]
