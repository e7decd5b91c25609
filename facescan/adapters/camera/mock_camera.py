"""Mock camera: serves images from a directory (MOCK_CAMERA_DIR) or given frames."""
import os
import random
from pathlib import Path

import cv2

from facescan.adapters.camera.base import CameraAdapter
from facescan.orchestrator.errors import CameraUnavailable

class MockCamera(CameraAdapter):
    def __init__(self, status_store, frames_dir: str | Path | None = None, frames=None):
        self.status = status_store
        self.frames_dir = Path(frames_dir or os.getenv("MOCK_CAMERA_DIR", "data/mock_camera"))
        self._frames = list(frames) if frames is not None else None
        self.opened = False
        self.open_calls = 0
        self.release_calls = 0

    def open(self):
        self.open_calls += 1
        if self._frames is None:
            paths = sorted(self.frames_dir.glob("*.jpg")) + sorted(self.frames_dir.glob("*.png"))
            self._frames = [f for f in (cv2.imread(str(p)) for p in paths) if f is not None]
        if not self._frames:
            self.status.log(f"mock_camera: no frames in {self.frames_dir}", level="warning")
            raise CameraUnavailable("mock camera has no frames")
        self.opened = True

    def read_frame(self):
        if not self.opened:
            return None
        return random.choice(self._frames)

    def release(self):
        self.release_calls += 1
        self.opened = False
