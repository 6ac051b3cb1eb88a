"""
NeckRange - lateral neck flexion measurement from still captures.

This package contains:
- Landmark normalization (BasicLandmarks / ExtendedFaceLandmarks)
- Anatomical shoulder-anchor estimation and stabilization
- Shoulder / neck tilt angle calculation
- Flexibility and asymmetry classification with recommendations
- NeckRangeAnalyzer and DiagnosisSession for the three-capture protocol

PoseDetector (MediaPipe) lives in neckrange.pose_detector and is imported
explicitly so that the geometry pipeline does not require the pose engine.
"""

from .analyzer import CaptureResult, CaptureStatus, NeckRangeAnalyzer
from .anatomical_estimator import AnatomicalAnchor, AnchorSource, estimate_acromion, estimate_acromions
from .angle_calculator import (
    calculate_lateral_flexion_angle,
    calculate_neck_tilt_angle,
    calculate_shoulder_angle,
    format_angle,
)
from .classifier import AsymmetryLevel, FlexibilityLevel, evaluate_asymmetry, evaluate_flexibility
from .config import NeckRangeConfig
from .errors import (
    DegenerateGeometryError,
    IncompleteMeasurementSetError,
    MissingLandmarkError,
    NeckRangeError,
    ShoulderTiltExceededError,
)
from .landmarks import (
    BasicLandmarks,
    CaptureType,
    ExtendedFaceLandmarks,
    Keypoint,
    LandmarkSet,
    LandmarkSource,
    normalize_landmarks,
)
from .logging_config import setup_logging
from .recommendations import generate_recommendations
from .session import DiagnosisResult, DiagnosisSession, Measurement, SessionState
from .stabilizer import LandmarkSmoother, median_landmarks, smooth_landmarks, stabilize_shoulders

__version__ = "1.0.0"
__all__ = [
    'NeckRangeAnalyzer',
    'CaptureResult',
    'CaptureStatus',
    'DiagnosisSession',
    'DiagnosisResult',
    'Measurement',
    'SessionState',
    'CaptureType',
    'Keypoint',
    'LandmarkSet',
    'BasicLandmarks',
    'ExtendedFaceLandmarks',
    'LandmarkSource',
    'normalize_landmarks',
    'AnatomicalAnchor',
    'AnchorSource',
    'estimate_acromion',
    'estimate_acromions',
    'stabilize_shoulders',
    'smooth_landmarks',
    'LandmarkSmoother',
    'median_landmarks',
    'calculate_shoulder_angle',
    'calculate_neck_tilt_angle',
    'calculate_lateral_flexion_angle',
    'format_angle',
    'FlexibilityLevel',
    'AsymmetryLevel',
    'evaluate_flexibility',
    'evaluate_asymmetry',
    'generate_recommendations',
    'NeckRangeConfig',
    'setup_logging',
    'NeckRangeError',
    'MissingLandmarkError',
    'DegenerateGeometryError',
    'ShoulderTiltExceededError',
    'IncompleteMeasurementSetError',
]
