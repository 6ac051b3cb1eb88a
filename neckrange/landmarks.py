"""
Landmark data model and input normalization.

The pose engine delivers a fixed 33-slot keypoint list in the MediaPipe Pose
index scheme. normalize_landmarks() turns whatever the engine handed over
(MediaPipe landmark objects, dicts, Keypoints) into one of two immutable
variants:

- BasicLandmarks: pose keypoints only
- ExtendedFaceLandmarks: pose keypoints plus a dense face mesh

The variant decides which points make up the head reference, so angle
computation never has to inspect what kind of input it was given.
"""

from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

NUM_POSE_LANDMARKS = 33
MIN_FACE_MESH_LANDMARKS = 468

# MediaPipe Pose landmark indices (all 33 slots).
# Shoulders (11, 12) are the shoulder joints, not the acromion.
POSE_LANDMARKS: Dict[str, int] = {
    'nose': 0,
    'left_eye_inner': 1,
    'left_eye': 2,
    'left_eye_outer': 3,
    'right_eye_inner': 4,
    'right_eye': 5,
    'right_eye_outer': 6,
    'left_ear': 7,
    'right_ear': 8,
    'mouth_left': 9,
    'mouth_right': 10,
    'left_shoulder': 11,
    'right_shoulder': 12,
    'left_elbow': 13,
    'right_elbow': 14,
    'left_wrist': 15,
    'right_wrist': 16,
    'left_pinky': 17,
    'right_pinky': 18,
    'left_index': 19,
    'right_index': 20,
    'left_thumb': 21,
    'right_thumb': 22,
    'left_hip': 23,
    'right_hip': 24,
    'left_knee': 25,
    'right_knee': 26,
    'left_ankle': 27,
    'right_ankle': 28,
    'left_heel': 29,
    'right_heel': 30,
    'left_foot_index': 31,
    'right_foot_index': 32,
}

LANDMARK_NAMES: Dict[int, str] = {idx: name for name, idx in POSE_LANDMARKS.items()}

# Head composite sub-points: ear midpoint, eye midpoint, nose, mouth midpoint
POSE_HEAD_GROUPS: Tuple[Tuple[int, ...], ...] = (
    (POSE_LANDMARKS['left_ear'], POSE_LANDMARKS['right_ear']),
    (POSE_LANDMARKS['left_eye'], POSE_LANDMARKS['right_eye']),
    (POSE_LANDMARKS['nose'],),
    (POSE_LANDMARKS['mouth_left'], POSE_LANDMARKS['mouth_right']),
)

# Same sub-points on the face mesh topology. The mesh has no ears, so the
# cheek contour points next to the tragus stand in for them.
FACE_MESH_HEAD_GROUPS: Tuple[Tuple[int, ...], ...] = (
    (234, 454),
    (33, 263),
    (1,),
    (61, 291),
)


class CaptureType(Enum):
    """The three still captures that make up one measurement flow."""
    NEUTRAL = 'neutral'
    RIGHT_TILT = 'right'
    LEFT_TILT = 'left'


class LandmarkSource(Enum):
    BASIC = 'basic'
    EXTENDED_FACE = 'extended_face'


class Keypoint(NamedTuple):
    """A single detected point in normalized image coordinates (y grows downward)."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None

    @property
    def confidence(self) -> float:
        """Visibility with a missing score treated as fully visible."""
        return 1.0 if self.visibility is None else self.visibility

    def to_dict(self) -> Dict[str, Optional[float]]:
        return self._asdict()


def is_visible(keypoint: Optional[Keypoint], threshold: float = 0.5) -> bool:
    """True when the keypoint exists and its confidence reaches the threshold."""
    return keypoint is not None and keypoint.confidence >= threshold


def is_outlier(keypoint: Keypoint, min_visibility: float = 0.5) -> bool:
    """
    Check whether a keypoint should be ignored by outlier-aware aggregation.

    A keypoint is an outlier when its visibility is below min_visibility or
    its coordinates fall outside the [0, 1] image range.
    """
    if keypoint.visibility is not None and keypoint.visibility < min_visibility:
        return True
    if keypoint.x < 0 or keypoint.x > 1 or keypoint.y < 0 or keypoint.y > 1:
        return True
    return False


def to_keypoint(raw: Any) -> Optional[Keypoint]:
    """
    Convert one engine landmark into a Keypoint.

    Accepts Keypoints, dicts with x/y/z/visibility keys, or objects exposing
    those attributes (MediaPipe NormalizedLandmark). None stays None.
    """
    if raw is None or isinstance(raw, Keypoint):
        return raw

    if isinstance(raw, dict):
        x, y = raw.get('x'), raw.get('y')
        z = raw.get('z', 0.0)
        visibility = raw.get('visibility')
    else:
        x, y = getattr(raw, 'x', None), getattr(raw, 'y', None)
        z = getattr(raw, 'z', 0.0)
        visibility = getattr(raw, 'visibility', None)

    if x is None or y is None:
        return None

    return Keypoint(
        x=float(x),
        y=float(y),
        z=float(z) if z is not None else 0.0,
        visibility=float(visibility) if visibility is not None else None,
    )


class LandmarkSet:
    """
    Immutable, fixed-length (33) pose keypoint sequence.

    Slots are never reordered; an undetected point is a None slot.
    Use normalize_landmarks() to build one from engine output.
    """

    source = LandmarkSource.BASIC

    def __init__(self, pose: Sequence[Optional[Keypoint]]):
        if len(pose) != NUM_POSE_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_POSE_LANDMARKS} pose landmarks, got {len(pose)}"
            )
        self._pose: Tuple[Optional[Keypoint], ...] = tuple(pose)

    @property
    def pose(self) -> Tuple[Optional[Keypoint], ...]:
        return self._pose

    def __len__(self) -> int:
        return len(self._pose)

    def __getitem__(self, index: int) -> Optional[Keypoint]:
        return self._pose[index]

    def __iter__(self):
        return iter(self._pose)

    def get(self, name: str) -> Optional[Keypoint]:
        """Get a pose keypoint by name (e.g. 'left_shoulder')."""
        return self._pose[POSE_LANDMARKS[name]]

    def head_subpoint_groups(self) -> List[List[Optional[Keypoint]]]:
        """Keypoint groups whose midpoints make up the head composite."""
        return [[self._pose[i] for i in group] for group in POSE_HEAD_GROUPS]

    def with_pose(self, pose: Sequence[Optional[Keypoint]]) -> 'LandmarkSet':
        """Return a set of the same variant with the pose keypoints replaced."""
        return type(self)(pose)

    def to_list(self) -> List[Optional[Dict[str, Optional[float]]]]:
        return [kp.to_dict() if kp is not None else None for kp in self._pose]

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._pose == other._pose

    def __hash__(self) -> int:
        return hash(self._pose)

    def __repr__(self) -> str:
        detected = sum(1 for kp in self._pose if kp is not None)
        return f"{type(self).__name__}(detected={detected}/{NUM_POSE_LANDMARKS})"


class BasicLandmarks(LandmarkSet):
    """Pose-only keypoints; the head composite comes from the pose face points."""

    source = LandmarkSource.BASIC


class ExtendedFaceLandmarks(LandmarkSet):
    """Pose keypoints plus a dense face mesh used for the head composite."""

    source = LandmarkSource.EXTENDED_FACE

    def __init__(self, pose: Sequence[Optional[Keypoint]], face: Sequence[Keypoint]):
        super().__init__(pose)
        if len(face) < MIN_FACE_MESH_LANDMARKS:
            raise ValueError(
                f"Face mesh needs at least {MIN_FACE_MESH_LANDMARKS} points, got {len(face)}"
            )
        self._face: Tuple[Keypoint, ...] = tuple(face)

    @property
    def face(self) -> Tuple[Keypoint, ...]:
        return self._face

    def head_subpoint_groups(self) -> List[List[Optional[Keypoint]]]:
        return [[self._face[i] for i in group] for group in FACE_MESH_HEAD_GROUPS]

    def with_pose(self, pose: Sequence[Optional[Keypoint]]) -> 'ExtendedFaceLandmarks':
        return ExtendedFaceLandmarks(pose, self._face)

    def with_face(self, face: Sequence[Keypoint]) -> 'ExtendedFaceLandmarks':
        return ExtendedFaceLandmarks(self._pose, face)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ExtendedFaceLandmarks):
            return NotImplemented
        return self._pose == other._pose and self._face == other._face

    def __hash__(self) -> int:
        return hash((self._pose, self._face))


def normalize_landmarks(
    pose_landmarks: Sequence[Any],
    face_landmarks: Optional[Sequence[Any]] = None
) -> LandmarkSet:
    """
    Normalize raw engine output into a LandmarkSet variant.

    Args:
        pose_landmarks: Up to 33 pose landmarks in MediaPipe index order
        face_landmarks: Optional face mesh landmarks (at least 468 points)

    Returns:
        ExtendedFaceLandmarks when a usable face mesh is supplied,
        BasicLandmarks otherwise

    Raises:
        ValueError: If more than 33 pose landmarks are supplied
    """
    if pose_landmarks is None:
        raise ValueError("Cannot normalize a missing pose; signal 'no pose' with None upstream")

    if len(pose_landmarks) > NUM_POSE_LANDMARKS:
        raise ValueError(
            f"Expected at most {NUM_POSE_LANDMARKS} pose landmarks, got {len(pose_landmarks)}"
        )

    pose = [to_keypoint(raw) for raw in pose_landmarks]
    pose.extend([None] * (NUM_POSE_LANDMARKS - len(pose)))

    if face_landmarks is not None and len(face_landmarks) >= MIN_FACE_MESH_LANDMARKS:
        face = [to_keypoint(raw) for raw in face_landmarks]
        if all(kp is not None for kp in face):
            # Face mesh points carry no usable visibility score (the engine reports 0.0)
            return ExtendedFaceLandmarks(pose, [kp._replace(visibility=None) for kp in face])

    return BasicLandmarks(pose)
