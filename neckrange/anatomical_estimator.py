"""
Shoulder anchor (acromion) estimation.

The pose engine only reports the shoulder joint, which sits more medially than
the bony shoulder landmark. The anchor is reconstructed from the ear, shoulder
and elbow of one side.
"""

import logging
from enum import Enum
from typing import NamedTuple

from .landmarks import LandmarkSet, Keypoint, POSE_LANDMARKS, is_visible

logger = logging.getLogger(__name__)

# Fraction of the ear -> shoulder vector used for vertical placement
EAR_TO_SHOULDER_RATIO = 0.7
# Fraction of the horizontal shoulder -> elbow distance pushed outward
LATERAL_CORRECTION_RATIO = 0.15

SIDES = ('left', 'right')


class AnchorSource(Enum):
    ESTIMATED = 'estimated'
    SHOULDER = 'shoulder'
    NONE = 'none'


class AnatomicalAnchor(NamedTuple):
    """Derived shoulder anchor; never more confident than its weakest input."""
    x: float
    y: float
    z: float
    visibility: float
    source: AnchorSource = AnchorSource.ESTIMATED

    @property
    def degraded(self) -> bool:
        return self.source is not AnchorSource.ESTIMATED

    def to_dict(self) -> dict:
        return {
            'x': self.x,
            'y': self.y,
            'z': self.z,
            'visibility': self.visibility,
            'source': self.source.value,
        }


def _outward_sign(landmarks: LandmarkSet, side: str, shoulder: Keypoint) -> float:
    """+1 when outward is +x for this side, -1 when it is -x."""
    other = landmarks.get('right_shoulder' if side == 'left' else 'left_shoulder')
    if other is not None and other.x != shoulder.x:
        return 1.0 if shoulder.x > other.x else -1.0
    # Unmirrored image: the subject's left shoulder appears on the right
    return 1.0 if side == 'left' else -1.0


def estimate_acromion(
    landmarks: LandmarkSet,
    side: str,
    visibility_threshold: float = 0.5
) -> AnatomicalAnchor:
    """
    Estimate the shoulder anchor for one side.

    Args:
        landmarks: Normalized landmark set
        side: 'left' or 'right' (the subject's side)
        visibility_threshold: Keypoints below this visibility count as missing

    Returns:
        AnatomicalAnchor. When the ear, shoulder or elbow is missing the raw
        shoulder is returned with source SHOULDER, or a zero point with source
        NONE if the shoulder slot is empty. Check `degraded` before trusting it.

    Raises:
        ValueError: If side is not 'left' or 'right'
    """
    if side not in SIDES:
        raise ValueError(f"Unsupported side: {side}. Supported sides: {list(SIDES)}")

    ear = landmarks[POSE_LANDMARKS[f'{side}_ear']]
    shoulder = landmarks[POSE_LANDMARKS[f'{side}_shoulder']]
    elbow = landmarks[POSE_LANDMARKS[f'{side}_elbow']]

    if not all(is_visible(kp, visibility_threshold) for kp in (ear, shoulder, elbow)):
        if shoulder is None:
            logger.debug(f"No {side} shoulder detected; anchor unavailable")
            return AnatomicalAnchor(0.0, 0.0, 0.0, 0.0, AnchorSource.NONE)
        logger.debug(f"Falling back to raw {side} shoulder for anchor estimation")
        return AnatomicalAnchor(
            shoulder.x, shoulder.y, shoulder.z, shoulder.confidence, AnchorSource.SHOULDER
        )

    x = ear.x + (shoulder.x - ear.x) * EAR_TO_SHOULDER_RATIO
    y = ear.y + (shoulder.y - ear.y) * EAR_TO_SHOULDER_RATIO
    z = ear.z + (shoulder.z - ear.z) * EAR_TO_SHOULDER_RATIO

    lateral = abs(shoulder.x - elbow.x) * LATERAL_CORRECTION_RATIO
    x += lateral * _outward_sign(landmarks, side, shoulder)

    anchor = AnatomicalAnchor(
        x=x,
        y=y,
        z=z,
        visibility=min(ear.confidence, shoulder.confidence),
    )
    logger.debug(f"Estimated {side} acromion: x={anchor.x:.4f}, y={anchor.y:.4f}")
    return anchor


def estimate_acromions(landmarks: LandmarkSet, visibility_threshold: float = 0.5):
    """Estimate both anchors; returns (left, right)."""
    return (
        estimate_acromion(landmarks, 'left', visibility_threshold),
        estimate_acromion(landmarks, 'right', visibility_threshold),
    )
