"""
NeckRangeAnalyzer - per-capture analysis pipeline.

Turns the landmarks detected on one still capture into a Measurement:
optional median aggregation, shoulder visibility check, shoulder-tilt
computation (rejected beyond the compensation threshold on tilt captures) and
neck-tilt computation. Recoverable failures come back as CaptureResult values
so the caller can ask for a re-capture of that pose.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Union

from .angle_calculator import calculate_neck_tilt_angle, calculate_shoulder_angle
from .errors import (
    DegenerateGeometryError,
    MissingLandmarkError,
    NeckRangeError,
    ShoulderTiltExceededError,
)
from .landmarks import CaptureType, LandmarkSet, POSE_LANDMARKS
from .messages import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, get_message
from .session import Measurement
from .stabilizer import DEFAULT_STABILIZATION_FACTOR, median_landmarks
from .validation import (
    SHOULDER_ANGLE_THRESHOLD,
    validate_landmarks_visibility,
    validate_shoulder_level,
)

logger = logging.getLogger(__name__)

REQUIRED_LANDMARKS = [POSE_LANDMARKS['left_shoulder'], POSE_LANDMARKS['right_shoulder']]


class CaptureStatus(Enum):
    OK = 'ok'
    NO_POSE = 'no_pose'
    MISSING_LANDMARK = 'missing_landmark'
    SHOULDER_TILT_EXCEEDED = 'shoulder_tilt_exceeded'
    DEGENERATE_GEOMETRY = 'degenerate_geometry'


@dataclass(frozen=True)
class CaptureResult:
    """Outcome of analyzing one capture."""
    capture_type: CaptureType
    status: CaptureStatus
    message: str
    measurement: Optional[Measurement] = None
    shoulder_tilt_angle: Optional[float] = None
    error: Optional[NeckRangeError] = None

    @property
    def is_valid(self) -> bool:
        return self.status is CaptureStatus.OK

    def raise_for_status(self) -> Measurement:
        """Return the measurement, or raise the typed failure."""
        if self.error is not None:
            raise self.error
        if self.measurement is None:
            raise MissingLandmarkError(self.message)
        return self.measurement

    def to_dict(self) -> Dict:
        return {
            'capture_type': self.capture_type.value,
            'status': self.status.value,
            'message': self.message,
            'shoulder_tilt_angle': self.shoulder_tilt_angle,
            'measurement': self.measurement.to_dict() if self.measurement else None,
        }


class NeckRangeAnalyzer:
    """
    Analyzes single captures of the neck-mobility protocol.

    Thresholds default to the clinical protocol values and can be overridden
    from NeckRangeConfig.
    """

    def __init__(
        self,
        shoulder_tilt_threshold: float = SHOULDER_ANGLE_THRESHOLD,
        visibility_threshold: float = 0.5,
        stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
        language: str = DEFAULT_LANGUAGE
    ):
        """
        Initialize NeckRangeAnalyzer.

        Args:
            shoulder_tilt_threshold: Maximum accepted |shoulder tilt| on tilt captures (degrees)
            visibility_threshold: Minimum visibility for required keypoints (0.0-1.0)
            stabilization_factor: Bilateral blend factor for the shoulder anchors (0.0-1.0)
            language: Message language

        Raises:
            ValueError: If a threshold is out of range or the language is not supported
        """
        if shoulder_tilt_threshold <= 0:
            raise ValueError(f"shoulder_tilt_threshold must be positive, got {shoulder_tilt_threshold}")
        if not 0.0 <= visibility_threshold <= 1.0:
            raise ValueError(f"visibility_threshold must be in [0, 1], got {visibility_threshold}")
        if not 0.0 <= stabilization_factor <= 1.0:
            raise ValueError(f"stabilization_factor must be in [0, 1], got {stabilization_factor}")
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language: {language}. "
                f"Supported languages: {list(SUPPORTED_LANGUAGES)}"
            )

        self.shoulder_tilt_threshold = shoulder_tilt_threshold
        self.visibility_threshold = visibility_threshold
        self.stabilization_factor = stabilization_factor
        self.language = language

    @classmethod
    def from_config(cls, config) -> 'NeckRangeAnalyzer':
        return cls(
            shoulder_tilt_threshold=config.shoulder_tilt_threshold,
            visibility_threshold=config.visibility_threshold,
            stabilization_factor=config.stabilization_factor,
            language=config.language,
        )

    def _failure(
        self,
        capture_type: CaptureType,
        error: NeckRangeError,
        shoulder_tilt_angle: Optional[float] = None
    ) -> CaptureResult:
        if isinstance(error, ShoulderTiltExceededError):
            status = CaptureStatus.SHOULDER_TILT_EXCEEDED
            message = get_message('shoulder_tilt_exceeded', self.language, angle=error.angle)
        elif isinstance(error, DegenerateGeometryError):
            status = CaptureStatus.DEGENERATE_GEOMETRY
            message = get_message('degenerate_geometry', self.language)
        else:
            status = CaptureStatus.MISSING_LANDMARK
            names = ', '.join(getattr(error, 'landmarks', ())) or '-'
            message = get_message('missing_landmark', self.language, landmarks=names)

        logger.warning(f"⚠️  {capture_type.value} capture rejected ({status.value}): {error}")
        return CaptureResult(
            capture_type=capture_type,
            status=status,
            message=message,
            shoulder_tilt_angle=shoulder_tilt_angle,
            error=error,
        )

    def _measure_shoulders(self, capture_type: CaptureType, landmarks: LandmarkSet) -> float:
        """Shoulder tilt angle; tilt captures must stay within the threshold."""
        if capture_type is CaptureType.NEUTRAL:
            return calculate_shoulder_angle(
                landmarks, self.stabilization_factor, self.visibility_threshold
            )

        validation = validate_shoulder_level(
            landmarks,
            threshold=self.shoulder_tilt_threshold,
            stabilization_factor=self.stabilization_factor,
            visibility_threshold=self.visibility_threshold,
            language=self.language
        )
        if validation.error is not None:
            raise validation.error
        if not validation.is_valid:
            raise ShoulderTiltExceededError(
                validation.angle, self.shoulder_tilt_threshold, validation.message
            )
        return validation.angle

    def analyze(
        self,
        capture_type: CaptureType,
        samples: Union[LandmarkSet, Sequence[LandmarkSet], None]
    ) -> CaptureResult:
        """
        Analyze one capture.

        Args:
            capture_type: Which pose of the protocol this capture is
            samples: The detected landmarks; several detections of the same
                still are aggregated by median. None means no pose detected.

        Returns:
            CaptureResult with a Measurement when status is OK
        """
        if isinstance(samples, LandmarkSet):
            samples = [samples]

        if not samples:
            logger.warning(f"⚠️  No pose detected for {capture_type.value} capture")
            return CaptureResult(
                capture_type=capture_type,
                status=CaptureStatus.NO_POSE,
                message=get_message('no_pose', self.language),
            )

        landmarks = median_landmarks(list(samples))

        visibility = validate_landmarks_visibility(
            landmarks, REQUIRED_LANDMARKS, self.visibility_threshold, self.language
        )
        if not visibility.is_valid:
            return self._failure(
                capture_type, MissingLandmarkError(visibility.message, visibility.missing)
            )

        try:
            shoulder_angle = self._measure_shoulders(capture_type, landmarks)
        except ShoulderTiltExceededError as e:
            return self._failure(capture_type, e, shoulder_tilt_angle=e.angle)
        except (MissingLandmarkError, DegenerateGeometryError) as e:
            return self._failure(capture_type, e)

        try:
            neck_angle = calculate_neck_tilt_angle(
                landmarks, self.stabilization_factor, self.visibility_threshold
            )
        except MissingLandmarkError as e:
            return self._failure(capture_type, e, shoulder_tilt_angle=shoulder_angle)

        measurement = Measurement(
            capture_type=capture_type,
            landmarks=landmarks,
            neck_tilt_angle=neck_angle,
            shoulder_tilt_angle=shoulder_angle,
        )
        logger.info(
            f"✅ {capture_type.value} capture analyzed: neck={neck_angle:.1f}°, "
            f"shoulder={shoulder_angle:.1f}° ({landmarks.source.value} landmarks)"
        )
        return CaptureResult(
            capture_type=capture_type,
            status=CaptureStatus.OK,
            message=get_message('capture_ok', self.language, angle=neck_angle),
            measurement=measurement,
            shoulder_tilt_angle=shoulder_angle,
        )
