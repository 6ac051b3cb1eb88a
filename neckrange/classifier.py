"""
Threshold classification of lateral-flexion angles.

The boundaries below are part of the diagnostic contract; keep the comparison
operators exactly as written.
"""

import math
from enum import Enum

from .messages import DEFAULT_LANGUAGE, get_message

STIFF_BELOW = 30.0
SOMEWHAT_STIFF_BELOW = 40.0
NORMAL_UP_TO = 50.0

ASYMMETRY_NORMAL_BELOW = 5.0
ASYMMETRY_MILD_BELOW = 10.0
ASYMMETRY_MODERATE_BELOW = 15.0


class FlexibilityLevel(Enum):
    STIFF = 'stiff'                     # < 30°
    SOMEWHAT_STIFF = 'somewhat_stiff'   # 30° - 40°
    NORMAL = 'normal'                   # 40° - 50°
    FLEXIBLE = 'flexible'               # > 50°


class AsymmetryLevel(Enum):
    NORMAL = 'normal'                   # < 5°
    MILD = 'mild'                       # 5° - 10°
    MODERATE = 'moderate'               # 10° - 15°
    SIGNIFICANT = 'significant'         # >= 15°


def _require_number(value: float, name: str) -> float:
    if math.isnan(value):
        raise ValueError(f"{name} must be a number, got NaN")
    return value


def evaluate_flexibility(angle: float) -> FlexibilityLevel:
    """
    Classify one side's lateral-flexion angle.

    Args:
        angle: Lateral-flexion angle in degrees (sign is ignored)

    Returns:
        FlexibilityLevel
    """
    abs_angle = abs(_require_number(angle, 'angle'))

    if abs_angle < STIFF_BELOW:
        return FlexibilityLevel.STIFF
    elif abs_angle < SOMEWHAT_STIFF_BELOW:
        return FlexibilityLevel.SOMEWHAT_STIFF
    elif abs_angle <= NORMAL_UP_TO:
        return FlexibilityLevel.NORMAL
    else:
        return FlexibilityLevel.FLEXIBLE


def asymmetry_diff(right_angle: float, left_angle: float) -> float:
    """Absolute difference between the right and left flexion angles."""
    return abs(right_angle - left_angle)


def evaluate_asymmetry(diff: float) -> AsymmetryLevel:
    """
    Classify the left/right flexion difference.

    Args:
        diff: |right flexion - left flexion| in degrees

    Returns:
        AsymmetryLevel
    """
    diff = abs(_require_number(diff, 'diff'))

    if diff < ASYMMETRY_NORMAL_BELOW:
        return AsymmetryLevel.NORMAL
    elif diff < ASYMMETRY_MILD_BELOW:
        return AsymmetryLevel.MILD
    elif diff < ASYMMETRY_MODERATE_BELOW:
        return AsymmetryLevel.MODERATE
    else:
        return AsymmetryLevel.SIGNIFICANT


_FLEXIBILITY_LABEL_KEYS = {
    FlexibilityLevel.STIFF: 'flexibility_stiff',
    FlexibilityLevel.SOMEWHAT_STIFF: 'flexibility_somewhat_stiff',
    FlexibilityLevel.NORMAL: 'flexibility_normal',
    FlexibilityLevel.FLEXIBLE: 'flexibility_flexible',
}

_ASYMMETRY_LABEL_KEYS = {
    AsymmetryLevel.NORMAL: 'asymmetry_normal',
    AsymmetryLevel.MILD: 'asymmetry_mild',
    AsymmetryLevel.MODERATE: 'asymmetry_moderate_label',
    AsymmetryLevel.SIGNIFICANT: 'asymmetry_significant_label',
}


def get_flexibility_label(level: FlexibilityLevel, language: str = DEFAULT_LANGUAGE) -> str:
    return get_message(_FLEXIBILITY_LABEL_KEYS[level], language)


def get_asymmetry_label(level: AsymmetryLevel, language: str = DEFAULT_LANGUAGE) -> str:
    return get_message(_ASYMMETRY_LABEL_KEYS[level], language)
