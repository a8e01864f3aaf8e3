"""
camshot: capture a single frame from the default camera and save it.

Opens the first camera, captures one frame, resizes it to 640x480, converts it
for OpenCV and writes it as PNG or JPEG. With -list, prints the available
cameras instead.

Usage:
    python src/main.py -o shot.jpg
    python src/main.py -list

Arguments:
    -o: Output image path (.png, .jpg, .jpeg)
    -list: List available cameras and exit
    --config: Path to configuration file
"""

import os
import sys
import argparse
import logging
import yaml
from typing import Any, Dict, List, Optional, Tuple

from camera.base import CameraError
from camera.camera import BACKENDS, create_camera
from imaging.errors import ImageError
from imaging.writer import SUPPORTED_EXTENSIONS, has_supported_ext, resolve_output_path
from models.config import Config
from ops.logging import setup_logging
from runtime.snapshot import run_list, take_snapshot

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"{path}: top level must be a mapping")
    return data


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)

    Missing files are skipped, so running without any config yields {}.
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            base_cfg = _read_yaml(base_path)

        local_overrides_path = os.path.join(config_dir, "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            local_cfg = _read_yaml(local_overrides_path)

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not one of the files above
        explicit = os.path.abspath(config_path)
        if os.path.exists(config_path) and explicit not in (
            os.path.abspath(base_path),
            os.path.abspath(local_overrides_path),
        ):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    All sections are optional; only the keys that are present are checked.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(config, dict):
        return False, "configuration must be a mapping"

    camera = config.get('camera') or {}
    if not isinstance(camera, dict):
        return False, "camera must be a mapping"

    backend = camera.get('backend', 'picamera2')
    if backend not in BACKENDS:
        return False, f"camera.backend must be one of: {', '.join(BACKENDS)}"

    if camera.get('camera_num') is not None:
        num = camera['camera_num']
        if not isinstance(num, int) or isinstance(num, bool) or num < 0:
            return False, "camera.camera_num must be a non-negative integer"

    if 'device_id' in camera:
        if not isinstance(camera['device_id'], (int, str)) or isinstance(camera['device_id'], bool):
            return False, "camera.device_id must be an integer (index) or string (URL)"
        if isinstance(camera['device_id'], int) and camera['device_id'] < 0:
            return False, "camera.device_id integer must be non-negative"

    if camera.get('resolution') is not None:
        res = camera['resolution']
        if not isinstance(res, list) or len(res) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in res):
            return False, "camera.resolution values must be positive integers"

    if camera.get('capture_timeout') is not None:
        timeout = camera['capture_timeout']
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            return False, "camera.capture_timeout must be a positive number or null"

    if 'max_probe' in camera:
        mp = camera['max_probe']
        if not isinstance(mp, int) or isinstance(mp, bool) or mp <= 0:
            return False, "camera.max_probe must be a positive integer"

    output = config.get('output') or {}
    if not isinstance(output, dict):
        return False, "output must be a mapping"

    if 'path' in output:
        if not isinstance(output['path'], str) or not output['path']:
            return False, "output.path must be a non-empty string"

    if 'grayscale' in output and not isinstance(output['grayscale'], bool):
        return False, "output.grayscale must be true or false"

    if output.get('jpeg_quality') is not None:
        q = output['jpeg_quality']
        if not isinstance(q, int) or isinstance(q, bool) or not (0 <= q <= 100):
            return False, "output.jpeg_quality must be an integer between 0 and 100"

    if output.get('png_compression') is not None:
        c = output['png_compression']
        if not isinstance(c, int) or isinstance(c, bool) or not (0 <= c <= 9):
            return False, "output.png_compression must be an integer between 0 and 9"

    if config.get('log_path') is not None and not isinstance(config['log_path'], str):
        return False, "log_path must be a string"

    if 'log_level' in config and config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='camshot',
        description='Capture one frame from the default camera and save it as an image',
    )
    parser.add_argument('-o', '--output', type=str, default=None,
                        help=f"output image path ({', '.join(SUPPORTED_EXTENSIONS)}); "
                             "default: screenshot.png")
    parser.add_argument('-list', '--list', dest='list', action='store_true',
                        help='list available cameras and exit')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--backend', choices=BACKENDS, default=None,
                        help='camera backend (overrides config)')
    parser.add_argument('--gray', action='store_true',
                        help='write a single-channel grayscale image')
    parser.add_argument('--log-level', choices=VALID_LOG_LEVELS, default=None,
                        help='logging level (overrides config)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application function. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.backend:
        config['camera'] = dict(config.get('camera') or {}, backend=args.backend)
    if args.log_level:
        config['log_level'] = args.log_level

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    cfg = Config.from_dict(config)
    try:
        setup_logging(cfg.log_path, cfg.log_level)
    except OSError as e:
        logging.error(f"Failed to set up logging: {e}")
        return 1

    if args.list:
        return run_list(cfg.camera)

    try:
        output_path = resolve_output_path(args.output or cfg.output.path)
    except OSError as e:
        logging.error(f"output path error: {e}")
        return 1

    if not has_supported_ext(output_path):
        logging.error("unsupported output extension; use .png/.jpg/.jpeg")
        return 1

    try:
        camera = create_camera(cfg.camera)
        result = take_snapshot(
            camera,
            output_path,
            grayscale=args.gray or cfg.output.grayscale,
            jpeg_quality=cfg.output.jpeg_quality,
            png_compression=cfg.output.png_compression,
        )
    except (CameraError, ImageError) as e:
        logging.error(str(e))
        return 1

    print(f"Saved screenshot: {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
