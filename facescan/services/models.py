from pydantic import BaseModel, Field
from typing import Literal, Optional

from facescan.orchestrator.contracts import EmergencyInfo, Patient

class EmergencyInfoModel(BaseModel):
    blood_type: Optional[str] = None
    allergies: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None

class PatientIn(BaseModel):
    id: str
    name: str
    face_image: Optional[str] = None  # data URI or http(s) URL
    emergency: EmergencyInfoModel = Field(default_factory=EmergencyInfoModel)

    def to_patient(self) -> Patient:
        e = self.emergency
        return Patient(
            id=self.id,
            name=self.name,
            face_image=self.face_image,
            emergency=EmergencyInfo(
                blood_type=e.blood_type,
                allergies=tuple(e.allergies),
                medications=tuple(e.medications),
                conditions=tuple(e.conditions),
                contact_name=e.contact_name,
                contact_phone=e.contact_phone,
                notes=e.notes,
            ),
        )

    @classmethod
    def from_patient(cls, p: Patient) -> "PatientIn":
        e = p.emergency
        return cls(
            id=p.id,
            name=p.name,
            face_image=p.face_image,
            emergency=EmergencyInfoModel(
                blood_type=e.blood_type,
                allergies=list(e.allergies),
                medications=list(e.medications),
                conditions=list(e.conditions),
                contact_name=e.contact_name,
                contact_phone=e.contact_phone,
                notes=e.notes,
            ),
        )

# Matched result: emergency data only, never the stored face photo
class PatientOut(BaseModel):
    id: str
    name: str
    emergency: EmergencyInfoModel

    @classmethod
    def from_patient(cls, p: Patient) -> "PatientOut":
        return cls(id=p.id, name=p.name, emergency=PatientIn.from_patient(p).emergency)

class PatientSummary(BaseModel):
    id: str
    name: str
    has_face_image: bool

class PatientsResponse(BaseModel):
    count: int
    patients: list[PatientSummary]
    ok: bool = True
    error_code: Optional[str] = None

class CaptureRequest(BaseModel):
    image: str  # data:image/png;base64,...

class RecognizeRequest(BaseModel):
    image: str
    # Optional explicit candidates; the loaded roster is used when omitted
    patients: Optional[list[PatientIn]] = None

class RecognizeResponse(BaseModel):
    match_found: bool
    patient: Optional[PatientOut] = None
    score: Optional[float] = None
    stage: Optional[Literal["high_confidence", "confirmed"]] = None

class OutcomeOut(BaseModel):
    kind: Literal["matched", "no_match", "error"]
    title: str
    description: str
    patient: Optional[PatientOut] = None
    score: Optional[float] = None

class ScanResponse(BaseModel):
    ok: bool
    step: Literal["initial", "capturing", "processing", "result"]
    outcome: Optional[OutcomeOut] = None
    error_code: Optional[str] = None
    error: Optional[str] = None

class StatusResponse(BaseModel):
    busy: bool
    step: Literal["initial", "capturing", "processing", "result"]
    outcome: Optional[OutcomeOut] = None
    roster_size: int
    logs: list[str]
