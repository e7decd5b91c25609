"""
Roster provider: the registered patients the scan compares against.

Backed by a JSON file (a list of patient objects, see PatientIn). The policy
only ever sees an immutable snapshot taken at the start of a scan.
"""
import json
import threading
from pathlib import Path
from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from facescan.orchestrator.contracts import Patient
from facescan.services.models import PatientIn

_PATIENT_LIST = TypeAdapter(list[PatientIn])


class Roster:
    def __init__(self, status_store, path: Optional[Path] = None, patients: Iterable[Patient] = ()):
        self.status = status_store
        self.path = Path(path) if path else None
        self._patients: tuple[Patient, ...] = tuple(patients)
        self._lock = threading.Lock()

    def snapshot(self) -> tuple[Patient, ...]:
        with self._lock:
            return self._patients

    def replace(self, patients: Iterable[Patient]):
        with self._lock:
            self._patients = tuple(patients)
        self.status.log(f"roster: {len(self._patients)} patients")

    def get(self, patient_id: str) -> Optional[Patient]:
        return next((p for p in self.snapshot() if p.id == patient_id), None)

    def __len__(self) -> int:
        return len(self.snapshot())

    def load(self) -> bool:
        """(Re)load from `path`. A missing file means an empty roster.

        An unreadable or invalid file is logged and the current roster kept;
        returns False in that case.
        """
        if self.path is None or not self.path.exists():
            self.status.log(f"roster: {self.path} not found, starting empty", level="warning")
            self.replace(())
            return True
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            patients = [p.to_patient() for p in _PATIENT_LIST.validate_python(raw)]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            self.status.log(f"roster: cannot load {self.path}: {e}", level="error")
            return False
        self.replace(patients)
        return True

    def save(self):
        if self.path is None:
            raise ValueError("roster has no path")
        data = [PatientIn.from_patient(p).model_dump() for p in self.snapshot()]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
