from abc import ABC, abstractmethod

import cv2
import numpy as np

from facescan.adapters.images import to_data_uri
from facescan.orchestrator.errors import CaptureFailed

class CameraAdapter(ABC):
    @abstractmethod
    def open(self) -> None:
        """Acquire the device. Raises CameraUnavailable when unsupported or denied."""
        ...

    @abstractmethod
    def read_frame(self) -> np.ndarray | None:
        """Grab one BGR frame, or None on failure."""
        ...

    @abstractmethod
    def release(self) -> None:
        ...


def encode_still(frame: np.ndarray, mirror: bool = True) -> str:
    """Encode one frame as a PNG data URI, mirrored like the live preview."""
    if mirror:
        frame = cv2.flip(frame, 1)
    ok, buf = cv2.imencode(".png", frame)
    if not ok:
        raise CaptureFailed("png encode failed")
    return to_data_uri(bytes(buf), "image/png")
