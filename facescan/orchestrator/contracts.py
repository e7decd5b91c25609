from dataclasses import dataclass, field
from typing import Optional, Literal

MatchStage = Literal["high_confidence", "confirmed"]

# A score at or above this wins immediately, no further candidates are scored
HIGH_CONFIDENCE_THRESHOLD = 95.0
# Best score must reach this before the confirmatory check is attempted
MIN_CONFIDENCE_THRESHOLD = 75.0

@dataclass(frozen=True)
class EmergencyInfo:
    blood_type: Optional[str] = None
    allergies: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()
    conditions: tuple[str, ...] = ()
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None

@dataclass(frozen=True)
class Patient:
    id: str
    name: str
    face_image: Optional[str] = None   # data URI or http(s) URL
    emergency: EmergencyInfo = field(default_factory=EmergencyInfo)

@dataclass(frozen=True)
class Verdict:
    patient: Optional[Patient] = None
    score: Optional[float] = None
    stage: Optional[MatchStage] = None

    @property
    def matched(self) -> bool:
        return self.patient is not None

    @classmethod
    def no_match(cls) -> "Verdict":
        return cls()

    @classmethod
    def match(cls, patient: Patient, score: float, stage: MatchStage) -> "Verdict":
        return cls(patient=patient, score=score, stage=stage)
