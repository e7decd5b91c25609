import re

from facescan.orchestrator.errors import ScorerError

SCORE_PROMPT = (
    "You are a highly accurate face recognition system.\n\n"
    "Image 1 is a newly captured webcam photo.\n"
    "Image 2 is a photo from a patient registration record.\n\n"
    "Analyze the facial features in both images carefully and estimate how "
    "likely it is that they show the same person.\n\n"
    "Reply with ONLY one integer from 0 to 100, nothing else:\n"
    "0 = certainly different people, 100 = certainly the same person."
)

CONFIRM_PROMPT = (
    "You are verifying a patient identity before medical records are disclosed. "
    "A wrong answer exposes a stranger's medical data, so be strict.\n\n"
    "Image 1 is a newly captured webcam photo.\n"
    "Image 2 is a photo from a patient registration record.\n\n"
    "Compare stable facial features (eye spacing, nose, jaw line, ears) and "
    "ignore lighting, expression, glasses and mirroring.\n\n"
    "Are these two images of the same person? Reply with ONLY one word:\n"
    "yes\n"
    "no"
)

_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


def parse_score(raw: str) -> float:
    m = _NUMBER_RE.search(raw or "")
    if m is None:
        raise ScorerError(f"no score in reply: {raw!r}")
    score = float(m.group(0))
    if not 0.0 <= score <= 100.0:
        raise ScorerError(f"score out of range: {score}")
    return score


def parse_yes_no(raw: str) -> bool:
    word = (raw or "").strip().strip(".!").lower()
    if word.startswith("yes"):
        return True
    if word.startswith("no"):
        return False
    raise ScorerError(f"expected yes/no, got {raw!r}")
