# Error codes returned in response bodies (ok=false, error_code=...)
ERR_BUSY = "BUSY"
ERR_INVALID_TRANSITION = "INVALID_TRANSITION"
ERR_INVALID_IMAGE = "INVALID_IMAGE"
ERR_NO_PATIENTS = "NO_PATIENTS"
ERR_CAMERA_UNAVAILABLE = "CAMERA_UNAVAILABLE"
ERR_CAPTURE_FAILED = "CAPTURE_FAILED"
ERR_SCAN_FAILED = "SCAN_FAILED"
ERR_ROSTER_INVALID = "ROSTER_INVALID"
ERR_UNKNOWN = "UNKNOWN"


class FaceScanError(Exception):
    code = ERR_UNKNOWN


class ScorerError(FaceScanError):
    """External scorer failed: transport, HTTP, missing key or unusable reply."""


class InvalidImage(FaceScanError):
    code = ERR_INVALID_IMAGE


class CameraUnavailable(FaceScanError):
    """Camera unsupported or access denied."""
    code = ERR_CAMERA_UNAVAILABLE


class CaptureFailed(FaceScanError):
    code = ERR_CAPTURE_FAILED


class InvalidTransition(FaceScanError):
    code = ERR_INVALID_TRANSITION


class Busy(FaceScanError):
    code = ERR_BUSY
