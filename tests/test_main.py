"""
End-to-end tests for the command-line entry point with a fake camera.
"""

import os
import sys
import types
from unittest.mock import MagicMock, patch

import cv2
import numpy as np
import pytest

import main
from conftest import FakeCamera


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run with an empty working directory so no config files are picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCapture:
    def test_saves_jpeg_and_prints_path(self, workdir, capsys):
        cam = FakeCamera(width=1920, height=1080)
        with patch("main.create_camera", return_value=cam), patch("main.setup_logging"):
            rc = main.main(["-o", "shot.jpg"])

        expected = str(workdir / "shot.jpg")
        assert rc == 0
        assert capsys.readouterr().out == f"Saved screenshot: {expected}\n"
        assert cv2.imread(expected).shape == (480, 640, 3)
        assert cam.calls[-1] == "close"

    def test_default_output_path(self, workdir, capsys):
        with patch("main.create_camera", return_value=FakeCamera(width=64, height=48)), \
                patch("main.setup_logging"):
            rc = main.main([])

        assert rc == 0
        assert os.path.exists(workdir / "screenshot.png")
        assert "screenshot.png" in capsys.readouterr().out

    def test_output_path_from_config(self, workdir, capsys):
        (workdir / "config").mkdir()
        (workdir / "config" / "config.yaml").write_text("output:\n  path: from_config.jpeg\n")
        with patch("main.create_camera", return_value=FakeCamera(width=64, height=48)), \
                patch("main.setup_logging"):
            rc = main.main([])

        assert rc == 0
        assert os.path.exists(workdir / "from_config.jpeg")

    @pytest.mark.parametrize("name", ["shot.ppm", "shot.bmp", "shot"])
    def test_unsupported_extension_never_creates_camera(self, workdir, capsys, name):
        with patch("main.create_camera") as create, patch("main.setup_logging"):
            rc = main.main(["-o", name])

        assert rc == 1
        create.assert_not_called()
        assert not os.path.exists(workdir / name)
        assert capsys.readouterr().out == ""

    def test_start_failure_exits_1_and_releases(self, workdir, capsys):
        cam = FakeCamera(fail_start=True)
        with patch("main.create_camera", return_value=cam), patch("main.setup_logging"):
            rc = main.main(["-o", "shot.png"])

        assert rc == 1
        assert cam.calls == ["open", "start", "close"]
        assert not os.path.exists(workdir / "shot.png")
        assert capsys.readouterr().out == ""

    def test_invalid_geometry_exits_1(self, workdir):
        cam = FakeCamera(width=0, height=0)
        with patch("main.create_camera", return_value=cam), patch("main.setup_logging"):
            rc = main.main(["-o", "shot.png"])

        assert rc == 1
        assert "capture" not in cam.calls

    def test_gray_flag(self, workdir):
        with patch("main.create_camera", return_value=FakeCamera(width=64, height=48)), \
                patch("main.setup_logging"):
            rc = main.main(["-o", "gray.png", "--gray"])

        assert rc == 0
        assert cv2.imread(str(workdir / "gray.png"), cv2.IMREAD_UNCHANGED).ndim == 2

    def test_backend_flag_overrides_config(self, workdir):
        with patch("main.create_camera", return_value=FakeCamera(width=64, height=48)) as create, \
                patch("main.setup_logging"):
            main.main(["-o", "shot.png", "--backend", "opencv"])

        camera_cfg = create.call_args[0][0]
        assert camera_cfg.backend == "opencv"

    def test_invalid_config_exits_1(self, workdir):
        (workdir / "config").mkdir()
        (workdir / "config" / "config.yaml").write_text("camera:\n  backend: v4l2\n")
        with patch("main.create_camera") as create:
            rc = main.main(["-o", "shot.png"])

        assert rc == 1
        create.assert_not_called()

    def test_unusable_log_path_exits_1(self, workdir):
        (workdir / "not-a-dir").write_text("")
        (workdir / "config").mkdir()
        (workdir / "config" / "config.yaml").write_text("log_path: not-a-dir/camshot.log\n")
        with patch("main.create_camera") as create:
            rc = main.main(["-o", "shot.png"])

        assert rc == 1
        create.assert_not_called()

    def test_picamera2_stop_error_still_saves(self, workdir, capsys, monkeypatch):
        instance = MagicMock(name="Picamera2()")
        instance.create_still_configuration.return_value = {"main": {"format": "RGB888"}}
        instance.camera_config = {"main": {"format": "RGB888", "size": (64, 48)}}
        instance.capture_array.return_value.get_result.return_value = np.zeros((48, 64, 3), dtype=np.uint8)
        instance.stop.side_effect = RuntimeError("stop failed")
        picamera2_cls = MagicMock(name="Picamera2", return_value=instance)
        picamera2_cls.global_camera_info.return_value = [{"Id": "imx708", "Num": 0}]
        module = types.ModuleType("picamera2")
        module.Picamera2 = picamera2_cls
        monkeypatch.setitem(sys.modules, "picamera2", module)

        with patch("main.setup_logging"):
            rc = main.main(["-o", "shot.png", "--backend", "picamera2"])

        expected = str(workdir / "shot.png")
        assert rc == 0
        assert capsys.readouterr().out == f"Saved screenshot: {expected}\n"
        assert os.path.exists(expected)
        instance.close.assert_called_once()


class TestList:
    def test_list_no_cameras(self, workdir, capsys):
        with patch("runtime.snapshot.list_cameras", return_value=[]), patch("main.setup_logging"):
            rc = main.main(["-list"])

        assert rc == 0
        assert capsys.readouterr().out == "No cameras found\n"

    def test_list_ignores_output_flag(self, workdir, capsys):
        with patch("runtime.snapshot.list_cameras", return_value=["cam0", "cam1"]), \
                patch("main.create_camera") as create, patch("main.setup_logging"):
            rc = main.main(["-list", "-o", "shot.ppm"])

        assert rc == 0
        create.assert_not_called()
        assert capsys.readouterr().out == "cam0\ncam1\n"

    def test_double_dash_list(self, workdir, capsys):
        with patch("runtime.snapshot.list_cameras", return_value=["cam0"]), patch("main.setup_logging"):
            rc = main.main(["--list"])

        assert rc == 0
        assert capsys.readouterr().out == "cam0\n"


class TestHelp:
    def test_help_lists_only_supported_extensions(self, capsys):
        with pytest.raises(SystemExit):
            main.main(["--help"])

        out = capsys.readouterr().out
        assert ".png" in out and ".jpg" in out and ".jpeg" in out
        assert ".ppm" not in out
