"""
Capture validation: shoulder compensation and landmark visibility checks.

Both checks return result values rather than raising, so the caller can branch
on them and ask for a re-capture.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence

from .angle_calculator import calculate_shoulder_angle
from .errors import DegenerateGeometryError, MissingLandmarkError, NeckRangeError
from .landmarks import LANDMARK_NAMES, LandmarkSet
from .messages import DEFAULT_LANGUAGE, get_message
from .stabilizer import DEFAULT_STABILIZATION_FACTOR

logger = logging.getLogger(__name__)

# Pose detection and camera angle can move the shoulders by about ±5° while
# the neck is tilted, so compensation is only flagged beyond 10°.
SHOULDER_ANGLE_THRESHOLD = 10.0


class ShoulderValidation(NamedTuple):
    is_valid: bool
    angle: Optional[float]
    message: str
    error: Optional[NeckRangeError] = None


class VisibilityValidation(NamedTuple):
    is_valid: bool
    missing: List[str]
    message: str


def validate_shoulder_level(
    landmarks: LandmarkSet,
    threshold: float = SHOULDER_ANGLE_THRESHOLD,
    stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
    visibility_threshold: float = 0.5,
    language: str = DEFAULT_LANGUAGE
) -> ShoulderValidation:
    """
    Check that the shoulders stayed level during a tilt capture.

    Args:
        landmarks: Normalized landmark set
        threshold: Maximum accepted |shoulder tilt| in degrees
        stabilization_factor: Bilateral blend factor
        visibility_threshold: Minimum shoulder visibility
        language: Message language

    Returns:
        ShoulderValidation. `angle` is None when it could not be computed, in
        which case `error` holds the failure.
    """
    try:
        angle = calculate_shoulder_angle(landmarks, stabilization_factor, visibility_threshold)
    except MissingLandmarkError as e:
        return ShoulderValidation(
            is_valid=False,
            angle=None,
            message=get_message('missing_landmark', language, landmarks=', '.join(e.landmarks)),
            error=e
        )
    except DegenerateGeometryError as e:
        return ShoulderValidation(
            is_valid=False,
            angle=None,
            message=get_message('degenerate_geometry', language),
            error=e
        )

    if abs(angle) > threshold:
        logger.warning(f"Shoulder compensation detected: {angle:.1f}° (threshold {threshold:.1f}°)")
        return ShoulderValidation(
            is_valid=False,
            angle=angle,
            message=get_message('shoulder_tilt_exceeded', language, angle=angle)
        )

    return ShoulderValidation(
        is_valid=True,
        angle=angle,
        message=get_message('shoulder_level_ok', language)
    )


def validate_landmarks_visibility(
    landmarks: LandmarkSet,
    required_indices: Sequence[int],
    min_visibility: float = 0.5,
    language: str = DEFAULT_LANGUAGE
) -> VisibilityValidation:
    """
    Check that every required pose landmark is present and visible enough.

    Args:
        landmarks: Normalized landmark set
        required_indices: Pose landmark indices that must be visible
        min_visibility: Minimum visibility score
        language: Message language

    Returns:
        VisibilityValidation listing the names of missing landmarks
    """
    missing = []
    for index in required_indices:
        keypoint = landmarks[index]
        if keypoint is None or (keypoint.visibility is not None and keypoint.visibility < min_visibility):
            missing.append(LANDMARK_NAMES.get(index, str(index)))

    if missing:
        return VisibilityValidation(
            is_valid=False,
            missing=missing,
            message=get_message('missing_landmark', language, landmarks=', '.join(missing))
        )

    return VisibilityValidation(
        is_valid=True,
        missing=[],
        message=get_message('landmarks_visible', language)
    )
