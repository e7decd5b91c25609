"""
Capture session: one camera acquisition, at most one still out.

    with CaptureSession(camera, status) as cap:
        if cap.state is CaptureState.READY:
            image = cap.capture()

pending -> ready | denied, then closed. The camera is released exactly once
whichever way the session ends.
"""
from enum import Enum

from facescan.adapters.camera.base import encode_still
from facescan.orchestrator.errors import CameraUnavailable, CaptureFailed


class CaptureState(str, Enum):
    PENDING = "pending"
    DENIED = "denied"
    READY = "ready"
    CLOSED = "closed"


class CaptureSession:
    def __init__(self, camera, status_store, mirror: bool = True):
        self.camera = camera
        self.status = status_store
        self.mirror = mirror
        self.state = CaptureState.PENDING
        self._requested = False
        self._released = False

    def open(self) -> CaptureState:
        if self._requested:
            return self.state
        self._requested = True
        try:
            self.camera.open()
        except CameraUnavailable as e:
            self.status.log(f"capture: camera access denied: {e}", level="warning")
            self.state = CaptureState.DENIED
            return self.state
        self.state = CaptureState.READY
        self.status.log("capture: ready")
        return self.state

    def capture(self) -> str:
        if self.state is not CaptureState.READY:
            raise CameraUnavailable(f"cannot capture while {self.state.value}")
        try:
            frame = self.camera.read_frame()
            if frame is None:
                raise CaptureFailed("no frame from camera")
            image = encode_still(frame, mirror=self.mirror)
        finally:
            self.close()
        self.status.log("capture: still captured")
        return image

    def cancel(self) -> None:
        self.status.log("capture: cancelled")
        self.close()

    def close(self):
        if not self._released:
            self._released = True
            # pending sessions never touched the device
            if self._requested:
                self.camera.release()
        self.state = CaptureState.CLOSED

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
        return False
