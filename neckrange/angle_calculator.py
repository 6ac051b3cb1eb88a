"""
Angle computation on normalized image coordinates (y grows downward).

- Shoulder tilt: slope of the stabilized shoulder anchors
- Neck tilt: chest reference -> head reference against the vertical
- Lateral flexion: neck tilt of a tilt capture relative to the neutral capture

All angles are in degrees.
"""

import logging
import math
from typing import List, Tuple

import numpy as np

from .anatomical_estimator import AnatomicalAnchor, AnchorSource, estimate_acromions
from .errors import DegenerateGeometryError, MissingLandmarkError
from .landmarks import LandmarkSet, Keypoint, is_visible
from .stabilizer import DEFAULT_STABILIZATION_FACTOR, stabilize_shoulders

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def stabilized_anchors(
    landmarks: LandmarkSet,
    stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
    visibility_threshold: float = 0.5
) -> Tuple[AnatomicalAnchor, AnatomicalAnchor]:
    """
    Estimate both shoulder anchors and apply the bilateral blend.

    When either side cannot be estimated, both anchors fall back to the raw
    shoulders so the pair stays comparable. This is accepted as long as both
    shoulders are visible.

    Raises:
        MissingLandmarkError: If either shoulder is missing or barely visible
    """
    left, right = estimate_acromions(landmarks, visibility_threshold)

    missing = [
        f'{side}_shoulder'
        for side, anchor in (('left', left), ('right', right))
        if anchor.source is AnchorSource.NONE or anchor.visibility < visibility_threshold
    ]
    if missing:
        raise MissingLandmarkError(
            f"Shoulder anchors could not be estimated: {', '.join(missing)}",
            missing
        )

    # Estimated and raw-shoulder anchors sit at different heights; never mix them
    if left.degraded or right.degraded:
        logger.debug("Using raw shoulders for both anchors (ear or elbow not visible)")
        left = _raw_shoulder_anchor(landmarks, 'left')
        right = _raw_shoulder_anchor(landmarks, 'right')

    return stabilize_shoulders(left, right, stabilization_factor)


def _raw_shoulder_anchor(landmarks: LandmarkSet, side: str) -> AnatomicalAnchor:
    shoulder = landmarks.get(f'{side}_shoulder')
    return AnatomicalAnchor(
        shoulder.x, shoulder.y, shoulder.z, shoulder.confidence, AnchorSource.SHOULDER
    )


def chest_reference_point(
    landmarks: LandmarkSet,
    stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
    visibility_threshold: float = 0.5
) -> Point:
    """Midpoint of the stabilized shoulder anchors."""
    left, right = stabilized_anchors(landmarks, stabilization_factor, visibility_threshold)
    return (left.x + right.x) / 2, (left.y + right.y) / 2


def _midpoint(points: List[Keypoint]) -> Point:
    return (
        sum(p.x for p in points) / len(points),
        sum(p.y for p in points) / len(points),
    )


def head_reference_point(landmarks: LandmarkSet, min_visibility: float = 0.5) -> Point:
    """
    Head reference: equal-weight composite of the face sub-points.

    The sub-points are the ear midpoint, eye midpoint, nose and mouth midpoint,
    as provided by the landmark variant. A sub-point is included only when all
    of its keypoints have visibility above min_visibility. Without any usable
    sub-point the nose keypoint is used on its own, provided it reaches
    min_visibility and lies inside the frame.

    Raises:
        MissingLandmarkError: If neither the composite nor the nose is available
    """
    subpoints = []
    for group in landmarks.head_subpoint_groups():
        if all(kp is not None and kp.confidence > min_visibility for kp in group):
            subpoints.append(_midpoint(group))

    if subpoints:
        x = sum(p[0] for p in subpoints) / len(subpoints)
        y = sum(p[1] for p in subpoints) / len(subpoints)
        return x, y

    nose = landmarks.get('nose')
    if not is_visible(nose, min_visibility) or not (0 <= nose.x <= 1 and 0 <= nose.y <= 1):
        raise MissingLandmarkError("Head reference could not be determined", ['nose'])

    logger.debug("Head composite unavailable; falling back to the nose keypoint")
    return nose.x, nose.y


def calculate_shoulder_angle(
    landmarks: LandmarkSet,
    stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
    visibility_threshold: float = 0.5
) -> float:
    """
    Shoulder tilt from horizontal, used to detect compensation.

    Args:
        landmarks: Normalized landmark set
        stabilization_factor: Bilateral blend factor
        visibility_threshold: Minimum visibility of the shoulder keypoints

    Returns:
        Tilt in degrees. Positive when the shoulder on the right side of the
        (unmirrored) image, i.e. the subject's left, sits lower; 0 when level.

    Raises:
        MissingLandmarkError: If a shoulder anchor is unavailable
        DegenerateGeometryError: If the anchors are vertically aligned
    """
    left, right = stabilized_anchors(landmarks, stabilization_factor, visibility_threshold)

    dx = abs(left.x - right.x)
    dy = left.y - right.y

    if dx == 0:
        raise DegenerateGeometryError(
            "Shoulder anchors are vertically aligned; shoulder tilt is undefined"
        )

    degrees = math.degrees(math.atan(dy / dx))
    logger.debug(f"Shoulder angle: dx={dx:.4f}, dy={dy:.4f}, angle={degrees:.2f}°")
    return degrees


def calculate_neck_tilt_angle(
    landmarks: LandmarkSet,
    stabilization_factor: float = DEFAULT_STABILIZATION_FACTOR,
    visibility_threshold: float = 0.5
) -> float:
    """
    Angle between the chest -> head line and the vertical.

    theta = atan2(head.x - chest.x, chest.y - head.y)

    Returns:
        Tilt in degrees. Positive when the head leans toward the right of the
        image (camera's view); 0 when perfectly vertical.

    Raises:
        MissingLandmarkError: If the head or chest reference is unavailable
    """
    chest_x, chest_y = chest_reference_point(landmarks, stabilization_factor, visibility_threshold)
    head_x, head_y = head_reference_point(landmarks, visibility_threshold)

    dx = head_x - chest_x
    dy = chest_y - head_y  # y grows downward

    degrees = math.degrees(math.atan2(dx, dy))
    logger.debug(
        f"Neck tilt: chest=({chest_x:.4f}, {chest_y:.4f}), "
        f"head=({head_x:.4f}, {head_y:.4f}), angle={degrees:.2f}°"
    )
    return degrees


def calculate_lateral_flexion_angle(neutral_angle: float, tilt_angle: float) -> float:
    """Side-bend magnitude relative to the neutral capture: |tilt - neutral|."""
    return abs(tilt_angle - neutral_angle)


def calculate_angle(x1: float, y1: float, x2: float, y2: float) -> float:
    """Direction of the vector (x1, y1) -> (x2, y2) in degrees."""
    return math.degrees(math.atan2(y2 - y1, x2 - x1))


def calculate_distance(point1: Keypoint, point2: Keypoint) -> float:
    """Euclidean distance between two keypoints (x, y, z)."""
    return float(np.linalg.norm(np.array([
        point1.x - point2.x,
        point1.y - point2.y,
        point1.z - point2.z,
    ])))


def calculate_angle_from_three_points(
    point1: Keypoint,
    vertex: Keypoint,
    point2: Keypoint
) -> float:
    """
    Angle at `vertex` formed by point1-vertex-point2 in the image plane.

    Raises:
        DegenerateGeometryError: If either arm of the angle has zero length
    """
    vector1 = np.array([point1.x - vertex.x, point1.y - vertex.y])
    vector2 = np.array([point2.x - vertex.x, point2.y - vertex.y])

    magnitude = np.linalg.norm(vector1) * np.linalg.norm(vector2)
    if magnitude == 0:
        raise DegenerateGeometryError("Angle is undefined for coincident points")

    cos_angle = np.clip(np.dot(vector1, vector2) / magnitude, -1.0, 1.0)
    return math.degrees(math.acos(cos_angle))


def format_angle(degrees: float) -> str:
    """Format an angle's magnitude as degrees, minutes and seconds (e.g. 12°30'15")."""
    absolute = abs(degrees)
    deg = math.floor(absolute)
    min_float = (absolute - deg) * 60
    minutes = math.floor(min_float)
    seconds = round((min_float - minutes) * 60)

    if seconds == 60:
        seconds = 0
        minutes += 1
    if minutes == 60:
        minutes = 0
        deg += 1

    if minutes == 0 and seconds == 0:
        return f"{deg}°"
    elif seconds == 0:
        return f"{deg}°{minutes}'"
    return f"{deg}°{minutes}'{seconds}\""
