"""
Data-URI helpers shared by the camera and scorer adapters.

Probe and reference images travel as 'data:<mime>;base64,<payload>' strings
(what the browser's canvas.toDataURL() produces). Reference images may also
be plain http(s) URLs, which the scorers pass through untouched.
"""
import base64
import binascii
import re

from facescan.orchestrator.errors import InvalidImage

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def to_data_uri(image_bytes: bytes, mime: str = "image/png") -> str:
    b64 = base64.standard_b64encode(image_bytes).decode("ascii")
    return f"data:{mime};base64,{b64}"


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """Return (mime, raw bytes) or raise InvalidImage."""
    m = _DATA_URI_RE.match(uri or "")
    if m is None:
        raise InvalidImage("expected 'data:<mime>;base64,<data>'")
    mime = m.group("mime").lower()
    if not mime.startswith("image/"):
        raise InvalidImage(f"not an image mime type: {mime}")
    try:
        raw = base64.b64decode(m.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImage(f"base64 decode failed: {e}") from e
    if not raw:
        raise InvalidImage("empty image payload")
    return mime, raw


def is_url(ref: str) -> bool:
    return ref.startswith("http://") or ref.startswith("https://")


def is_usable_reference(ref: str | None) -> bool:
    if not ref:
        return False
    if is_url(ref):
        return True
    try:
        parse_data_uri(ref)
    except InvalidImage:
        return False
    return True
