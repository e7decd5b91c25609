"""
Build a roster JSON from a directory of face photos.

Usage:
  python -m facescan.scripts.seed_roster photos/ data/roster.json

Each photo is named <id>__<Name_With_Underscores>.jpg (or .png), e.g.
P001__Jane_Doe.jpg. The photo is embedded as a data URI. Emergency details
of patients already in the output file are kept.
"""
import argparse
import sys
from pathlib import Path

from facescan.adapters.images import to_data_uri
from facescan.orchestrator.contracts import EmergencyInfo, Patient
from facescan.services.roster import Roster
from facescan.services.status_store import StatusStore

MIME = {".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png"}


def patient_from_photo(path: Path, existing: Patient | None = None) -> Patient:
    pid, _, raw_name = path.stem.partition("__")
    name = raw_name.replace("_", " ").strip() or pid
    emergency = existing.emergency if existing else EmergencyInfo()
    image = to_data_uri(path.read_bytes(), MIME[path.suffix.lower()])
    return Patient(id=pid, name=name, face_image=image, emergency=emergency)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("photos", type=Path)
    parser.add_argument("output", type=Path, nargs="?", default=Path("data/roster.json"))
    args = parser.parse_args(argv)

    if not args.photos.is_dir():
        print(f"[ERROR] {args.photos} is not a directory")
        return 1

    status = StatusStore()
    roster = Roster(status, path=args.output)
    if not roster.load():
        print(f"[ERROR] {args.output} is not a valid roster, not overwriting it")
        return 1

    photos = sorted(p for p in args.photos.iterdir() if p.suffix.lower() in MIME)
    by_id = {p.id: p for p in roster.snapshot()}
    for photo in photos:
        patient = patient_from_photo(photo, by_id.get(photo.stem.partition("__")[0]))
        by_id[patient.id] = patient
        print(f"  +  {patient.id}  {patient.name}  <- {photo.name}")

    roster.replace(by_id.values())
    roster.save()
    print(f"\n{len(roster)} patients written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
