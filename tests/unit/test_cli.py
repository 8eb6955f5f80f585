"""Tests for the snapsim command line."""

from __future__ import annotations

import base64
import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner
from PIL import Image

from snapsim import __version__
from snapsim.cli import main
from snapsim.snapshot import Snapshot

ImageFile = Callable[[str, Image.Image], Path]


def _solid(color: tuple[int, int, int], size: tuple[int, int] = (32, 32)) -> Image.Image:
    return Image.new("RGB", size, color)


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(main, ["-h"])
        assert result.exit_code == 0
        for name in ("compare", "factor", "info", "render", "capture"):
            assert name in result.output


class TestCompareExitCodes:
    def test_identical_exit_0(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        b = image_file("b.png", _solid((0, 0, 0)))
        result = CliRunner().invoke(main, ["compare", str(a), str(b)])
        assert result.exit_code == 0
        assert "match (similarity 1.0000)" in result.output

    def test_scaled_copy_exit_0(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((10, 200, 30), (640, 360)))
        b = image_file("b.png", _solid((10, 200, 30), (1280, 720)))
        result = CliRunner().invoke(main, ["compare", str(a), str(b)])
        assert result.exit_code == 0

    def test_differs_exit_1(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        b = image_file("b.png", _solid((255, 255, 255)))
        result = CliRunner().invoke(main, ["compare", str(a), str(b)])
        assert result.exit_code == 1
        assert "diff: similarity 0.0000 < 1.0000" in result.output

    def test_missing_file_exit_2(self, tmp_path: Path, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        result = CliRunner().invoke(main, ["compare", str(a), str(tmp_path / "missing.png")])
        assert result.exit_code == 2
        assert "error:" in result.output

    def test_invalid_image_exit_2(self, tmp_path: Path, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        bad = tmp_path / "bad.png"
        bad.write_text("not an image")
        result = CliRunner().invoke(main, ["compare", str(a), str(bad)])
        assert result.exit_code == 2
        assert "not a decodable image" in result.output

    def test_base64_argument(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        encoded = Snapshot.parse(str(a)).to_base64
        result = CliRunner().invoke(main, ["compare", str(a), encoded])
        assert result.exit_code == 0

    def test_wrapped_base64_argument(self, image_file: ImageFile) -> None:
        a = image_file("a.bmp", _solid((0, 0, 0), (64, 64)))
        wrapped = base64.encodebytes(a.read_bytes()).decode()
        result = CliRunner().invoke(main, ["compare", str(a), wrapped])
        assert result.exit_code == 0

    def test_unusable_path_exit_2(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        result = CliRunner().invoke(main, ["compare", str(a), "b\x00.png"])
        assert result.exit_code == 2
        assert result.output.startswith("error:")


class TestCompareOptions:
    def test_threshold(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        b = image_file("b.png", _solid((255, 255, 255)))
        result = CliRunner().invoke(main, ["compare", "--threshold", "0.0", str(a), str(b)])
        assert result.exit_code == 0

    def test_threshold_out_of_range(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        result = CliRunner().invoke(main, ["compare", "--threshold", "1.5", str(a), str(a)])
        assert result.exit_code == 2

    def test_json(self, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0), (5120, 1440)))
        b = image_file("b.png", _solid((0, 0, 0), (3840, 1080)))
        result = CliRunner().invoke(main, ["compare", "--json", str(a), str(b)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["similarity"] == 1.0
        assert data["matches"] is True
        assert data["left_factor"] == 160
        assert data["right_factor"] == 120
        assert data["left_compared"] == {"width": 32, "height": 9}
        assert data["scaled_versions"] is True
        assert data["diff_image"] is None

    def test_diff_output(self, tmp_path: Path, image_file: ImageFile) -> None:
        a = image_file("a.png", _solid((0, 0, 0)))
        b = image_file("b.png", _solid((255, 255, 255)))
        diff = tmp_path / "diff.png"
        result = CliRunner().invoke(main, ["compare", "--diff-output", str(diff), str(a), str(b)])
        assert result.exit_code == 1
        assert diff.exists()


class TestFactor:
    def test_json(self) -> None:
        result = CliRunner().invoke(main, ["factor", "400", "140", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "size": {"width": 400, "height": 140},
            "factor": 10,
            "scaled": {"width": 40, "height": 14},
            "reduced_area": 560,
        }

    def test_plain(self) -> None:
        result = CliRunner().invoke(main, ["factor", "5120", "1440", "--min-dimension", "32"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "size:         5120 x 1440"
        assert lines[1] == "factor:       80"
        assert lines[2] == "scaled:       64 x 18"

    def test_min_dimension_from_env(self) -> None:
        result = CliRunner().invoke(
            main, ["factor", "400", "140", "--json"], env={"SNAPSIM_MIN_DIMENSION": "0"}
        )
        data = json.loads(result.output)
        assert data["factor"] == 0
        assert data["scaled"] is None

    def test_negative_rejected(self) -> None:
        result = CliRunner().invoke(main, ["factor", "400", "140", "--min-dimension", "-1"])
        assert result.exit_code == 2


class TestInfo:
    def test_json(self, image_file: ImageFile) -> None:
        path = image_file("shot.png", _solid((1, 2, 3), (400, 140)))
        result = CliRunner().invoke(main, ["info", str(path), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["mime_type"] == "image/png"
        assert data["size"] == {"width": 400, "height": 140}
        assert data["aspect_ratio"] == pytest.approx(2.8571, abs=1e-4)
        assert data["factor"] == 10
        assert data["scaled"] == {"width": 40, "height": 14}
        assert data["label"].endswith("(400 x 140)")

    def test_non_ascii_path(self, image_file: ImageFile) -> None:
        path = image_file("größe.png", _solid((0, 0, 0), (6, 3)))
        result = CliRunner().invoke(main, ["info", str(path)])
        assert result.exit_code == 0
        assert "6 x 3" in result.output

    def test_invalid_image(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.bin"
        bad.write_bytes(b"\x00" * 10)
        result = CliRunner().invoke(main, ["info", str(bad)])
        assert result.exit_code == 0
        assert "Invalid Image" in result.output
        assert "image/unknown" in result.output


class TestRender:
    def test_img_tag(self, image_file: ImageFile) -> None:
        path = image_file("shot.png", _solid((0, 0, 0), (2, 1)))
        result = CliRunner().invoke(main, ["render", str(path)])
        assert result.exit_code == 0
        assert result.output.startswith('<img src="data:image/png;base64,')


class TestCapture:
    def test_saves_jpeg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "snapsim.snapshot.ImageGrab.grab",
            lambda bbox: Image.new("RGB", (bbox[2] - bbox[0], bbox[3] - bbox[1])),
        )
        target = tmp_path / "screen"
        result = CliRunner().invoke(main, ["capture", "0", "0", "4", "3", str(target)])
        assert result.exit_code == 0
        assert result.output.strip() == str(target) + ".jpg"
        assert Snapshot.parse(str(target) + ".jpg").mime_type == "image/jpeg"

    def test_grab_failure_exit_2(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(bbox: tuple[int, int, int, int]) -> Image.Image:
            raise OSError("X connection failed")

        monkeypatch.setattr("snapsim.snapshot.ImageGrab.grab", broken)
        result = CliRunner().invoke(main, ["capture", "0", "0", "4", "3"])
        assert result.exit_code == 2
        assert "screen capture failed" in result.output
