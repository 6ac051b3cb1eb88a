"""
Typed failures raised by the neck-mobility pipeline.

Calculators raise these directly. The capture analyzer turns the recoverable
ones (missing landmarks, shoulder compensation, degenerate geometry) into
CaptureResult values so callers can request a re-capture.
"""

from typing import Iterable, Optional


class NeckRangeError(Exception):
    """Base class for all NeckRange failures."""


class MissingLandmarkError(NeckRangeError):
    """A required keypoint is absent or below the visibility threshold."""

    def __init__(self, message: str, landmarks: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.landmarks = tuple(landmarks or ())


class DegenerateGeometryError(NeckRangeError):
    """Anchors are vertically coincident and the tilt angle is undefined."""


class ShoulderTiltExceededError(NeckRangeError):
    """Shoulders tilted beyond the accepted compensation threshold."""

    def __init__(self, angle: float, threshold: float, message: Optional[str] = None):
        super().__init__(
            message or f"Shoulder tilt {angle:.1f}° exceeds the {threshold:.1f}° threshold"
        )
        self.angle = angle
        self.threshold = threshold


class IncompleteMeasurementSetError(NeckRangeError):
    """compute_diagnosis() was called before all three captures were recorded."""

    def __init__(self, missing: Iterable):
        self.missing = tuple(missing)
        names = ', '.join(getattr(m, 'value', str(m)) for m in self.missing)
        super().__init__(f"Missing measurements for: {names}")
