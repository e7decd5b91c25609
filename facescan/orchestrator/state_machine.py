"""
Scan workflow: initial -> capturing -> processing -> result -> initial.

`transition()` is the whole table; ScanWorkflow only feeds it triggers and
runs the match policy while in `processing`. There is no way to cancel a
scan once it is processing.
"""
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from facescan.adapters.camera.session import CaptureState
from facescan.orchestrator.contracts import Patient, Verdict
from facescan.orchestrator.errors import Busy, CameraUnavailable, CaptureFailed, InvalidTransition

UNKNOWN_SCAN_ERROR = "An unknown error occurred during face scan."


class ScanStep(str, Enum):
    INITIAL = "initial"
    CAPTURING = "capturing"
    PROCESSING = "processing"
    RESULT = "result"


class Trigger(str, Enum):
    START = "start"
    CAPTURED = "captured"
    CANCEL = "cancel"
    RESOLVED = "resolved"
    RESET = "reset"


class OutcomeKind(str, Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    ERROR = "error"


@dataclass(frozen=True)
class ScanOutcome:
    kind: OutcomeKind
    patient: Optional[Patient] = None
    score: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "ScanOutcome":
        if verdict.matched:
            return cls(OutcomeKind.MATCHED, patient=verdict.patient, score=verdict.score)
        return cls(OutcomeKind.NO_MATCH)

    @classmethod
    def from_exception(cls, e: BaseException) -> "ScanOutcome":
        return cls(OutcomeKind.ERROR, error=str(e) or UNKNOWN_SCAN_ERROR)

    @property
    def title(self) -> str:
        if self.kind is OutcomeKind.MATCHED:
            return "Patient Identified"
        if self.kind is OutcomeKind.NO_MATCH:
            return "No Match"
        return "Scan Error"

    @property
    def description(self) -> str:
        if self.kind is OutcomeKind.MATCHED:
            return f"{self.patient.name} recognized."
        if self.kind is OutcomeKind.NO_MATCH:
            return "The scanned face did not match any registered patient records."
        return self.error


@dataclass(frozen=True)
class ScanState:
    step: ScanStep = ScanStep.INITIAL
    captured_image: Optional[str] = None
    outcome: Optional[ScanOutcome] = None


INITIAL = ScanState()


def transition(state: ScanState, trigger: Trigger, image: Optional[str] = None,
               outcome: Optional[ScanOutcome] = None) -> ScanState:
    step = state.step
    if step is ScanStep.INITIAL and trigger is Trigger.START:
        return ScanState(ScanStep.CAPTURING)
    if step is ScanStep.CAPTURING and trigger is Trigger.CAPTURED:
        if not image:
            raise InvalidTransition("captured trigger needs an image")
        return ScanState(ScanStep.PROCESSING, captured_image=image)
    if step is ScanStep.CAPTURING and trigger is Trigger.CANCEL:
        return INITIAL
    if step is ScanStep.PROCESSING and trigger is Trigger.RESOLVED:
        if outcome is None:
            raise InvalidTransition("resolved trigger needs an outcome")
        return ScanState(ScanStep.RESULT, captured_image=state.captured_image, outcome=outcome)
    if step is ScanStep.RESULT and trigger is Trigger.RESET:
        return INITIAL
    raise InvalidTransition(f"cannot {trigger.value} while {step.value}")


class ScanWorkflow:
    def __init__(self, policy, roster, status_store):
        self.policy = policy
        self.roster = roster
        self.status = status_store
        self.state = INITIAL
        self._lock = threading.Lock()

    def _apply(self, trigger: Trigger, **kwargs) -> ScanState:
        # caller holds self._lock
        if self.state.step is ScanStep.PROCESSING and trigger is not Trigger.RESOLVED:
            raise Busy("scan in progress")
        new = transition(self.state, trigger, **kwargs)
        self.status.log(f"scan: {self.state.step.value} --{trigger.value}--> {new.step.value}")
        self.state = new
        return new

    def _fire(self, trigger: Trigger, **kwargs) -> ScanState:
        with self._lock:
            return self._apply(trigger, **kwargs)

    def start(self) -> ScanState:
        return self._fire(Trigger.START)

    def cancel(self) -> ScanState:
        return self._fire(Trigger.CANCEL)

    def reset(self) -> ScanState:
        return self._fire(Trigger.RESET)

    def submit(self, image: str) -> ScanState:
        """Captured image in, terminal result state out (blocks on the scorer)."""
        self._fire(Trigger.CAPTURED, image=image)
        return self._process(image)

    def submit_from(self, session) -> ScanState:
        """Capture with a CaptureSession, then process as submit() does.

        The step check, the camera session and the move to `processing` all
        happen under the workflow lock, so only one session holds the camera.
        A denied camera or a failed capture returns the scan to `initial`.
        """
        with self._lock:
            if self.state.step is ScanStep.PROCESSING:
                raise Busy("scan in progress")
            if self.state.step is not ScanStep.CAPTURING:
                raise InvalidTransition(f"cannot capture while {self.state.step.value}")
            with session:
                if session.state is not CaptureState.READY:
                    self._apply(Trigger.CANCEL)
                    raise CameraUnavailable("camera access denied or unavailable")
                try:
                    image = session.capture()
                except CaptureFailed:
                    self._apply(Trigger.CANCEL)
                    raise
            self._apply(Trigger.CAPTURED, image=image)
        return self._process(image)

    def _process(self, image: str) -> ScanState:
        self.status.set_busy(True)
        t0 = time.time()
        try:
            verdict = self.policy.select(image, self.roster.snapshot())
            outcome = ScanOutcome.from_verdict(verdict)
        except Exception as e:
            self.status.log(f"scan: error {type(e).__name__}: {e}", level="error")
            outcome = ScanOutcome.from_exception(e)
        finally:
            self.status.set_busy(False)

        dt = int((time.time() - t0) * 1000)
        self.status.log(f"scan: {outcome.kind.value} dt={dt}ms")
        return self._fire(Trigger.RESOLVED, outcome=outcome)
