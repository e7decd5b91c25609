"""
Match-selection policy: which registered patient (if any) is in the probe photo.

Two stages over an external scorer:
  1. score every candidate in order; a score >= high threshold wins at once
  2. otherwise the best score, if >= min threshold, must pass one strict
     yes/no confirmation

Calls are strictly sequential. Per-candidate failures are logged and skipped;
a failed confirmation counts as "no".
"""
from typing import Iterable, Optional

from facescan.adapters.images import is_usable_reference
from facescan.orchestrator.contracts import (
    HIGH_CONFIDENCE_THRESHOLD, MIN_CONFIDENCE_THRESHOLD, Patient, Verdict,
)


class MatchPolicy:
    def __init__(self, scorer, status_store,
                 high_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
                 min_threshold: float = MIN_CONFIDENCE_THRESHOLD):
        self.scorer = scorer
        self.status = status_store
        self.high_threshold = high_threshold
        self.min_threshold = min_threshold

    def select(self, probe: str, candidates: Iterable[Patient]) -> Verdict:
        candidates = list(candidates)
        if not candidates:
            self.status.log("matcher: no registered patients, no match")
            return Verdict.no_match()

        best: Optional[Patient] = None
        best_score = -1.0

        for patient in candidates:
            if not is_usable_reference(patient.face_image):
                self.status.log(f"matcher: skip {patient.id} (no usable face image)")
                continue

            self.status.log(f"matcher: comparing against {patient.name} ({patient.id})")
            try:
                score = self.scorer.score(probe, patient.face_image)
            except Exception as e:
                self.status.log(f"matcher: error scoring {patient.id}: {type(e).__name__}: {e}", level="error")
                continue

            self.status.log(f"matcher: {patient.id} score={score:.1f}")
            if score >= self.high_threshold:
                self.status.log(f"matcher: high-confidence match {patient.name} ({patient.id})")
                return Verdict.match(patient, score, "high_confidence")

            # strict > keeps the earliest candidate on ties
            if score > best_score:
                best, best_score = patient, score

        if best is None or best_score < self.min_threshold:
            self.status.log("matcher: no candidate reached the minimum threshold, no match")
            return Verdict.no_match()

        self.status.log(f"matcher: confirming best candidate {best.id} score={best_score:.1f}")
        try:
            confirmed = self.scorer.confirm(probe, best.face_image)
        except Exception as e:
            self.status.log(f"matcher: confirmation failed for {best.id}: {type(e).__name__}: {e}", level="error")
            confirmed = False

        if confirmed:
            self.status.log(f"matcher: confirmed match {best.name} ({best.id})")
            return Verdict.match(best, best_score, "confirmed")

        self.status.log(f"matcher: {best.id} not confirmed, no match")
        return Verdict.no_match()
