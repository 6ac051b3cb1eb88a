"""
DiagnosisSession - assembles the three capture measurements into a diagnosis.

A session accumulates one Measurement per CaptureType (re-capture replaces),
and once NEUTRAL, RIGHT_TILT and LEFT_TILT are all present computes the
neutral-relative lateral-flexion angles, classifies them and generates
recommendations.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .angle_calculator import calculate_lateral_flexion_angle
from .classifier import (
    AsymmetryLevel,
    FlexibilityLevel,
    asymmetry_diff,
    evaluate_asymmetry,
    evaluate_flexibility,
)
from .errors import IncompleteMeasurementSetError
from .landmarks import CaptureType, LandmarkSet
from .messages import DEFAULT_LANGUAGE, get_message
from .recommendations import generate_recommendations

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Measurement:
    """One successfully analyzed capture."""
    capture_type: CaptureType
    landmarks: LandmarkSet
    neck_tilt_angle: float
    shoulder_tilt_angle: float

    def to_dict(self) -> Dict:
        return {
            'capture_type': self.capture_type.value,
            'neck_tilt_angle': self.neck_tilt_angle,
            'shoulder_tilt_angle': self.shoulder_tilt_angle,
            'landmark_source': self.landmarks.source.value,
        }


@dataclass(frozen=True)
class DiagnosisResult:
    """Final neck-mobility diagnosis; read-only."""
    neutral_angle: float
    right_flexion_angle: float
    left_flexion_angle: float
    right_flexibility_level: FlexibilityLevel
    left_flexibility_level: FlexibilityLevel
    asymmetry_level: AsymmetryLevel
    asymmetry_diff: float
    recommendations: Tuple[str, ...]
    right_shoulder_tilt_angle: Optional[float] = None
    left_shoulder_tilt_angle: Optional[float] = None

    def to_dict(self) -> Dict:
        return {
            'neutral_angle': self.neutral_angle,
            'right_flexion_angle': self.right_flexion_angle,
            'left_flexion_angle': self.left_flexion_angle,
            'right_flexibility_level': self.right_flexibility_level.value,
            'left_flexibility_level': self.left_flexibility_level.value,
            'asymmetry_level': self.asymmetry_level.value,
            'asymmetry_diff': self.asymmetry_diff,
            'recommendations': list(self.recommendations),
            'right_shoulder_tilt_angle': self.right_shoulder_tilt_angle,
            'left_shoulder_tilt_angle': self.left_shoulder_tilt_angle,
        }


class SessionState(Enum):
    EMPTY = 'empty'
    PARTIAL = 'partial'
    COMPLETE = 'complete'


class DiagnosisSession:
    """
    Measurement flow state for one person.

    Owned by a single flow; not safe for concurrent use.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        # Fail fast on an unsupported language
        get_message('maintain_mobility', language)
        self.language = language
        self._measurements: Dict[CaptureType, Measurement] = {}
        self._result: Optional[DiagnosisResult] = None

    @property
    def state(self) -> SessionState:
        if not self._measurements:
            return SessionState.EMPTY
        if len(self._measurements) == len(CaptureType):
            return SessionState.COMPLETE
        return SessionState.PARTIAL

    @property
    def measurements(self) -> Dict[CaptureType, Measurement]:
        """Copy of the recorded measurements."""
        return dict(self._measurements)

    @property
    def missing_capture_types(self) -> List[CaptureType]:
        return [ct for ct in CaptureType if ct not in self._measurements]

    def get_measurement(self, capture_type: CaptureType) -> Optional[Measurement]:
        return self._measurements.get(capture_type)

    def record_measurement(self, capture_type: CaptureType, measurement: Measurement) -> SessionState:
        """
        Record (or replace) the measurement of one capture type.

        Returns:
            The session state after recording

        Raises:
            ValueError: If the measurement belongs to a different capture type
        """
        if measurement.capture_type is not capture_type:
            raise ValueError(
                f"Measurement is for {measurement.capture_type.value}, "
                f"cannot record it as {capture_type.value}"
            )

        replaced = capture_type in self._measurements
        self._measurements[capture_type] = measurement
        self._result = None

        logger.info(
            f"{'Replaced' if replaced else 'Recorded'} {capture_type.value} measurement: "
            f"neck={measurement.neck_tilt_angle:.1f}°, shoulder={measurement.shoulder_tilt_angle:.1f}° "
            f"({len(self._measurements)}/{len(CaptureType)})"
        )
        return self.state

    def discard_measurement(self, capture_type: CaptureType) -> SessionState:
        """Drop one capture (e.g. when the user cancels it) and return the new state."""
        if self._measurements.pop(capture_type, None) is not None:
            self._result = None
            logger.info(f"Discarded {capture_type.value} measurement")
        return self.state

    def reset(self) -> None:
        """Discard all measurements and any computed diagnosis."""
        self._measurements.clear()
        self._result = None
        logger.info("Diagnosis session reset")

    def compute_diagnosis(self) -> DiagnosisResult:
        """
        Compute the diagnosis from the three recorded measurements.

        Returns:
            DiagnosisResult (the same object until the measurement set changes)

        Raises:
            IncompleteMeasurementSetError: If any capture type is missing
        """
        missing = self.missing_capture_types
        if missing:
            raise IncompleteMeasurementSetError(missing)

        if self._result is not None:
            return self._result

        neutral = self._measurements[CaptureType.NEUTRAL]
        right = self._measurements[CaptureType.RIGHT_TILT]
        left = self._measurements[CaptureType.LEFT_TILT]

        right_angle = calculate_lateral_flexion_angle(neutral.neck_tilt_angle, right.neck_tilt_angle)
        left_angle = calculate_lateral_flexion_angle(neutral.neck_tilt_angle, left.neck_tilt_angle)

        right_level = evaluate_flexibility(right_angle)
        left_level = evaluate_flexibility(left_angle)
        diff = asymmetry_diff(right_angle, left_angle)
        asymmetry = evaluate_asymmetry(diff)

        recommendations = generate_recommendations(
            right_level,
            left_level,
            asymmetry,
            right_angle,
            left_angle,
            language=self.language
        )

        self._result = DiagnosisResult(
            neutral_angle=neutral.neck_tilt_angle,
            right_flexion_angle=right_angle,
            left_flexion_angle=left_angle,
            right_flexibility_level=right_level,
            left_flexibility_level=left_level,
            asymmetry_level=asymmetry,
            asymmetry_diff=diff,
            recommendations=tuple(recommendations),
            right_shoulder_tilt_angle=right.shoulder_tilt_angle,
            left_shoulder_tilt_angle=left.shoulder_tilt_angle,
        )

        logger.info(
            f"✅ Diagnosis: right={right_angle:.1f}° ({right_level.value}), "
            f"left={left_angle:.1f}° ({left_level.value}), "
            f"asymmetry={diff:.1f}° ({asymmetry.value})"
        )
        return self._result
