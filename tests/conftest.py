import pytest

from facescan.adapters.images import to_data_uri
from facescan.adapters.scorer.mock_scorer import MockScorer
from facescan.orchestrator.contracts import EmergencyInfo, Patient
from facescan.orchestrator.matcher import MatchPolicy
from facescan.services.status_store import StatusStore

PROBE = to_data_uri(b"probe-photo", "image/png")


def face(tag: str) -> str:
    return to_data_uri(f"face-{tag}".encode(), "image/jpeg")


def patient(pid: str, with_face: bool = True, **kwargs) -> Patient:
    return Patient(
        id=pid,
        name=f"Patient {pid}",
        face_image=face(pid) if with_face else None,
        emergency=EmergencyInfo(**kwargs),
    )


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def scorer(status):
    return MockScorer(status)


@pytest.fixture
def policy(scorer, status):
    return MatchPolicy(scorer, status)
