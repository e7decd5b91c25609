import cv2
import numpy as np
import pytest

from facescan.adapters.camera.base import encode_still
from facescan.adapters.camera.mock_camera import MockCamera
from facescan.adapters.camera.session import CaptureSession, CaptureState
from facescan.adapters.images import parse_data_uri
from facescan.orchestrator.errors import CameraUnavailable, CaptureFailed


def _frame():
    # 1 row, 3 columns: blue, green, red (BGR)
    return np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255]]], dtype=np.uint8)


def _decode(uri):
    mime, raw = parse_data_uri(uri)
    assert mime == "image/png"
    return cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), cv2.IMREAD_COLOR)


def test_encode_still_mirrors_horizontally():
    img = _decode(encode_still(_frame()))
    assert img.tolist() == _frame()[:, ::-1].tolist()


def test_encode_still_without_mirror():
    img = _decode(encode_still(_frame(), mirror=False))
    assert img.tolist() == _frame().tolist()


def test_capture_yields_one_mirrored_still_and_releases(status):
    camera = MockCamera(status, frames=[_frame()])
    with CaptureSession(camera, status) as session:
        assert session.state is CaptureState.READY
        image = session.capture()
        assert session.state is CaptureState.CLOSED

    assert _decode(image).tolist() == _frame()[:, ::-1].tolist()
    assert camera.release_calls == 1


def test_cancel_releases_without_image(status):
    camera = MockCamera(status, frames=[_frame()])
    with CaptureSession(camera, status) as session:
        assert session.cancel() is None
    assert camera.release_calls == 1
    assert session.state is CaptureState.CLOSED


def test_exit_without_capture_releases(status):
    camera = MockCamera(status, frames=[_frame()])
    with pytest.raises(KeyError):
        with CaptureSession(camera, status):
            raise KeyError("unmounted")
    assert camera.release_calls == 1


def test_denied_when_camera_unavailable(status, tmp_path):
    camera = MockCamera(status, frames_dir=tmp_path)
    with CaptureSession(camera, status) as session:
        assert session.state is CaptureState.DENIED
        with pytest.raises(CameraUnavailable):
            session.capture()
    assert camera.release_calls == 1


def test_permission_requested_once(status):
    camera = MockCamera(status, frames=[_frame()])
    session = CaptureSession(camera, status)
    assert session.state is CaptureState.PENDING
    session.open()
    session.open()
    assert camera.open_calls == 1
    session.close()
    session.close()
    assert camera.release_calls == 1


def test_pending_session_never_touches_camera(status):
    camera = MockCamera(status, frames=[_frame()])
    session = CaptureSession(camera, status)
    session.close()
    assert camera.open_calls == 0
    assert camera.release_calls == 0


def test_failed_frame_still_releases(status):
    camera = MockCamera(status, frames=[_frame()])
    session = CaptureSession(camera, status)
    session.open()
    camera.opened = False  # read_frame now returns None
    with pytest.raises(CaptureFailed):
        session.capture()
    assert camera.release_calls == 1


def test_mock_camera_reads_directory(status, tmp_path):
    cv2.imwrite(str(tmp_path / "face.png"), _frame())
    camera = MockCamera(status, frames_dir=tmp_path)
    with CaptureSession(camera, status) as session:
        assert session.state is CaptureState.READY
        assert session.capture().startswith("data:image/png;base64,")
