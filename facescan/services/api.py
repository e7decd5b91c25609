import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from facescan.adapters.camera.session import CaptureSession
from facescan.adapters.images import is_usable_reference, parse_data_uri
from facescan.orchestrator import errors
from facescan.orchestrator.errors import Busy, FaceScanError, InvalidImage, InvalidTransition
from facescan.orchestrator.matcher import MatchPolicy
from facescan.orchestrator.state_machine import OutcomeKind, ScanOutcome, ScanWorkflow
from facescan.services.models import (
    CaptureRequest, OutcomeOut, PatientOut, PatientsResponse, PatientSummary,
    RecognizeRequest, RecognizeResponse, ScanResponse, StatusResponse,
)
from facescan.services.roster import Roster
from facescan.services.status_store import StatusStore

load_dotenv(dotenv_path=".env", override=False)

app = FastAPI(title="facescan")

status = StatusStore()

# Scorer adapter: controlled by SCORER_ADAPTER env var
# Values: claude | kimi | mock  (default: claude)
_scorer_adapter = os.getenv("SCORER_ADAPTER", "claude").lower()

if _scorer_adapter == "claude":
    from facescan.adapters.scorer.claude_scorer import ClaudeScorer
    scorer = ClaudeScorer(status)
elif _scorer_adapter == "kimi":
    from facescan.adapters.scorer.kimi_scorer import KimiScorer
    scorer = KimiScorer(status)
else:
    from facescan.adapters.scorer.mock_scorer import MockScorer
    scorer = MockScorer(status)

status.log(f"scorer adapter: {type(scorer).__name__} ready={scorer.ready}")

# Camera adapter for server-side capture: cv2 | mock  (default: cv2)
_camera_adapter = os.getenv("CAMERA_ADAPTER", "cv2").lower()
if _camera_adapter == "mock":
    from facescan.adapters.camera.mock_camera import MockCamera
    camera = MockCamera(status)
else:
    from facescan.adapters.camera.cv2_camera import CV2Camera
    camera = CV2Camera(status)
status.log(f"camera adapter: {type(camera).__name__}")

roster = Roster(status, path=Path(os.getenv("ROSTER_PATH", "data/roster.json")))
roster.load()

policy = MatchPolicy(scorer, status)
workflow = ScanWorkflow(policy, roster, status)


def _outcome_out(outcome: ScanOutcome | None) -> OutcomeOut | None:
    if outcome is None:
        return None
    patient = PatientOut.from_patient(outcome.patient) if outcome.kind is OutcomeKind.MATCHED else None
    return OutcomeOut(
        kind=outcome.kind.value,
        title=outcome.title,
        description=outcome.description,
        patient=patient,
        score=outcome.score,
    )


def _scan_response(http_status: int = 200, error: FaceScanError | None = None, error_code: str | None = None):
    state = workflow.state
    body = ScanResponse(
        ok=error is None and error_code is None,
        step=state.step.value,
        outcome=_outcome_out(state.outcome),
        error_code=error_code or (error.code if error else None),
        error=str(error) if error else None,
    )
    return JSONResponse(status_code=http_status, content=body.model_dump())


def _http_status_for(e: FaceScanError) -> int:
    if isinstance(e, (Busy, InvalidTransition)):
        return 409
    if isinstance(e, InvalidImage):
        return 400
    return 503


@app.get("/health")
def health():
    """Check readiness of the scorer, camera and roster."""
    checks = {
        "api": True,
        "scorer_adapter": type(scorer).__name__,
        "scorer_ready": scorer.ready,
        "camera_adapter": type(camera).__name__,
        "roster_size": len(roster),
    }
    checks["all_ok"] = checks["api"] and checks["scorer_ready"]
    return checks


@app.get("/status", response_model=StatusResponse)
def get_status():
    state = workflow.state
    return StatusResponse(
        busy=status.busy,
        step=state.step.value,
        outcome=_outcome_out(state.outcome),
        roster_size=len(roster),
        logs=status.logs,
    )


@app.get("/patients", response_model=PatientsResponse)
def list_patients():
    patients = roster.snapshot()
    return PatientsResponse(
        count=len(patients),
        patients=[
            PatientSummary(id=p.id, name=p.name, has_face_image=is_usable_reference(p.face_image))
            for p in patients
        ],
    )


@app.post("/patients/reload", response_model=PatientsResponse)
def reload_patients():
    """Re-read the roster file; a broken file keeps the current roster."""
    if not roster.load():
        body = list_patients().model_copy(update={"ok": False, "error_code": errors.ERR_ROSTER_INVALID})
        return JSONResponse(status_code=422, content=body.model_dump())
    return list_patients()


@app.post("/scan/start", response_model=ScanResponse)
def scan_start():
    if len(roster) == 0:
        status.log("SCAN_START rejected: no patients registered")
        return _scan_response(409, error_code=errors.ERR_NO_PATIENTS)
    try:
        workflow.start()
    except FaceScanError as e:
        return _scan_response(_http_status_for(e), error=e)
    return _scan_response()


@app.post("/scan/capture", response_model=ScanResponse)
def scan_capture(req: CaptureRequest):
    """Browser captured a still: run the match and return the result step."""
    try:
        parse_data_uri(req.image)
    except InvalidImage as e:
        status.log(f"SCAN_CAPTURE bad image: {e}")
        return _scan_response(400, error=e)
    try:
        workflow.submit(req.image)
    except FaceScanError as e:
        return _scan_response(_http_status_for(e), error=e)
    return _scan_response()


@app.post("/scan/capture_from_camera", response_model=ScanResponse)
def scan_capture_from_camera():
    """Capture with the server's own camera instead of the browser's."""
    try:
        workflow.submit_from(CaptureSession(camera, status))
    except FaceScanError as e:
        status.log(f"SCAN_CAMERA failed: {type(e).__name__}: {e}")
        return _scan_response(_http_status_for(e), error=e)
    return _scan_response()


@app.post("/scan/cancel", response_model=ScanResponse)
def scan_cancel():
    try:
        workflow.cancel()
    except FaceScanError as e:
        return _scan_response(_http_status_for(e), error=e)
    return _scan_response()


@app.post("/scan/reset", response_model=ScanResponse)
def scan_reset():
    try:
        workflow.reset()
    except FaceScanError as e:
        return _scan_response(_http_status_for(e), error=e)
    return _scan_response()


@app.post("/recognize", response_model=RecognizeResponse)
def recognize(req: RecognizeRequest):
    """Stateless match: no workflow state, scan errors propagate as HTTP errors."""
    try:
        parse_data_uri(req.image)
    except InvalidImage as e:
        return JSONResponse(status_code=400, content={"ok": False, "error_code": e.code, "error": str(e)})

    candidates = [p.to_patient() for p in req.patients] if req.patients is not None else roster.snapshot()
    verdict = policy.select(req.image, candidates)
    return RecognizeResponse(
        match_found=verdict.matched,
        patient=PatientOut.from_patient(verdict.patient) if verdict.matched else None,
        score=verdict.score,
        stage=verdict.stage,
    )
