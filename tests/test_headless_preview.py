"""Headless-safe checks for the preview loop under the dummy video driver."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

import main


class HeadlessPreviewTests(unittest.TestCase):
    def setUp(self) -> None:
        self._old_video_driver = os.environ.get("SDL_VIDEODRIVER")
        os.environ["SDL_VIDEODRIVER"] = "dummy"

    def tearDown(self) -> None:
        if self._old_video_driver is None:
            os.environ.pop("SDL_VIDEODRIVER", None)
        else:
            os.environ["SDL_VIDEODRIVER"] = self._old_video_driver

    def test_preview_runs_fixed_number_of_frames(self) -> None:
        with tempfile.TemporaryDirectory() as image_dir:
            exit_code = main.run(["--frames", "3", "--minutes-per-frame", "30", "--images", image_dir])
        self.assertEqual(exit_code, 0)

    def test_preview_with_overlay_preset_and_missing_images(self) -> None:
        with tempfile.TemporaryDirectory() as image_dir:
            exit_code = main.run(["--frames", "2", "--keyword", "Cave", "--images", image_dir])
        self.assertEqual(exit_code, 0)

    def test_invalid_config_exits_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as directory:
            missing = Path(directory) / "nope.json"
            self.assertEqual(main.run(["--config", str(missing), "--frames", "1"]), 2)


if __name__ == "__main__":
    unittest.main()
