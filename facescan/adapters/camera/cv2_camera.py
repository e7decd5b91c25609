"""
OpenCV webcam adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.
"""
import os

import cv2

from facescan.adapters.camera.base import CameraAdapter
from facescan.orchestrator.errors import CameraUnavailable

class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None

    def open(self):
        if self._cap is not None and self._cap.isOpened():
            return
        self._cap = cv2.VideoCapture(self._index)
        if not self._cap.isOpened():
            self._cap = None
            self.status.log(f"cv2_camera: failed to open device {self._index}", level="warning")
            raise CameraUnavailable(f"camera {self._index} not available")
        self.status.log(f"cv2_camera: opened device {self._index}")

    def read_frame(self):
        if self._cap is None:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed", level="warning")
            return None
        return frame

    def release(self):
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.status.log(f"cv2_camera: released device {self._index}")
