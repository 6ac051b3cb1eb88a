"""
Landmark stabilization: bilateral symmetry blend, temporal smoothing and
robust multi-sample aggregation.

All functions are pure. Temporal smoothing takes the previous frame as an
argument; LandmarkSmoother is a caller-owned holder for that frame in
live-preview loops.
"""

import logging
from typing import List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from .landmarks import (
    ExtendedFaceLandmarks,
    Keypoint,
    LandmarkSet,
    is_outlier,
)

logger = logging.getLogger(__name__)

DEFAULT_STABILIZATION_FACTOR = 0.3
DEFAULT_SMOOTHING_ALPHA = 0.7

# Keypoint and AnatomicalAnchor are both NamedTuples with x/y fields
PointT = TypeVar('PointT')


def stabilize_shoulders(
    left: PointT,
    right: PointT,
    factor: float = DEFAULT_STABILIZATION_FACTOR
) -> Tuple[PointT, PointT]:
    """
    Blend both anchors' y toward their average (bilateral symmetry).

    Args:
        left: Left anchor or keypoint
        right: Right anchor or keypoint
        factor: Fraction of the distance to the average to move (0-1)

    Returns:
        (stabilized_left, stabilized_right)
    """
    avg_y = (left.y + right.y) / 2
    stabilized_left = left._replace(y=left.y * (1 - factor) + avg_y * factor)
    stabilized_right = right._replace(y=right.y * (1 - factor) + avg_y * factor)
    return stabilized_left, stabilized_right


def smooth_landmark(
    current: Keypoint,
    previous: Optional[Keypoint],
    alpha: float = 0.5
) -> Keypoint:
    """Exponential moving average of one keypoint; current passes through without a previous value."""
    if previous is None:
        return current

    return Keypoint(
        x=current.x * alpha + previous.x * (1 - alpha),
        y=current.y * alpha + previous.y * (1 - alpha),
        z=current.z * alpha + previous.z * (1 - alpha),
        visibility=current.visibility,
    )


def _smooth_sequence(current, previous, alpha):
    smoothed = []
    for cur, prev in zip(current, previous):
        if cur is None:
            smoothed.append(None)
        else:
            smoothed.append(smooth_landmark(cur, prev, alpha))
    return smoothed


def smooth_landmarks(
    current: LandmarkSet,
    previous: Optional[LandmarkSet],
    alpha: float = DEFAULT_SMOOTHING_ALPHA
) -> LandmarkSet:
    """
    Smooth a whole landmark set against the previous frame.

    Args:
        current: Landmarks of the current frame
        previous: Landmarks of the previous frame, or None
        alpha: Weight of the current frame (0-1)

    Returns:
        Smoothed landmark set of the same variant as `current`
    """
    if previous is None:
        return current

    smoothed = current.with_pose(_smooth_sequence(current.pose, previous.pose, alpha))

    if isinstance(current, ExtendedFaceLandmarks) and isinstance(previous, ExtendedFaceLandmarks) \
            and len(current.face) == len(previous.face):
        smoothed = smoothed.with_face(_smooth_sequence(current.face, previous.face, alpha))

    return smoothed


class LandmarkSmoother:
    """Holds the previous frame for streaming smoothing; owned by the caller."""

    def __init__(self, alpha: float = DEFAULT_SMOOTHING_ALPHA):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self.previous: Optional[LandmarkSet] = None

    @classmethod
    def from_config(cls, config) -> 'LandmarkSmoother':
        return cls(alpha=config.smoothing_alpha)

    def smooth(self, landmarks: Optional[LandmarkSet]) -> Optional[LandmarkSet]:
        """Smooth the next frame. A frame without a pose clears the history."""
        if landmarks is None:
            self.previous = None
            return None
        smoothed = smooth_landmarks(landmarks, self.previous, self.alpha)
        self.previous = smoothed
        return smoothed

    def reset(self) -> None:
        self.previous = None


def _median_keypoint(samples: List[Optional[Keypoint]], reject_outliers: bool) -> Optional[Keypoint]:
    first = samples[0]
    present = [kp for kp in samples if kp is not None]
    if not present:
        return None

    candidates = present
    if reject_outliers:
        inliers = [kp for kp in present if not is_outlier(kp)]
        if inliers:
            candidates = inliers

    coords = np.array([[kp.x, kp.y, kp.z] for kp in candidates], dtype=np.float64)
    x, y, z = np.median(coords, axis=0)
    visibility = first.visibility if first is not None else None
    return Keypoint(x=float(x), y=float(y), z=float(z), visibility=visibility)


def median_landmarks(
    landmark_sets: Sequence[LandmarkSet],
    reject_outliers: bool = True
) -> LandmarkSet:
    """
    Robust per-index, per-axis median over several detections of one pose.

    Args:
        landmark_sets: Independent detections of the same still pose
        reject_outliers: Ignore outlier keypoints of a slot while at least one
            inlier remains for it

    Returns:
        Aggregated landmark set of the first sample's variant, keeping the
        first sample's visibility values

    Raises:
        ValueError: If no landmark sets are given
    """
    if not landmark_sets:
        raise ValueError("Cannot aggregate an empty list of landmark sets")

    first = landmark_sets[0]
    if len(landmark_sets) == 1:
        return first

    pose = [
        _median_keypoint([s[i] for s in landmark_sets], reject_outliers)
        for i in range(len(first))
    ]
    aggregated = first.with_pose(pose)

    if isinstance(first, ExtendedFaceLandmarks):
        faces = [s for s in landmark_sets if isinstance(s, ExtendedFaceLandmarks)
                 and len(s.face) == len(first.face)]
        face = [
            _median_keypoint([s.face[i] for s in faces], reject_outliers=False)
            for i in range(len(first.face))
        ]
        aggregated = aggregated.with_face(face)

    logger.debug(f"Aggregated {len(landmark_sets)} landmark samples by median")
    return aggregated
