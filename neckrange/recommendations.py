"""
Rule-based recommendation generation from classification results.
"""

from typing import List

from .classifier import AsymmetryLevel, FlexibilityLevel
from .messages import DEFAULT_LANGUAGE, get_message


def stiffer_side(right_angle: float, left_angle: float) -> str:
    """The side with the smaller flexion angle ('right' or 'left')."""
    return 'right' if right_angle < left_angle else 'left'


def generate_recommendations(
    right_level: FlexibilityLevel,
    left_level: FlexibilityLevel,
    asymmetry_level: AsymmetryLevel,
    right_angle: float,
    left_angle: float,
    language: str = DEFAULT_LANGUAGE
) -> List[str]:
    """
    Generate ordered advisory messages for a diagnosis.

    Rules are evaluated in priority order:
    1. Significant asymmetry: stiffer side + professional evaluation
    2. Moderate asymmetry: stiffer side + targeted stretching
    3. Either side stiff: mobility restriction
    4. Either side somewhat stiff: habitual stretching
    5. Neither side flexible: hourly desk breaks
    6. Nothing above fired: maintain current mobility

    Args:
        right_level: Right-side flexibility level
        left_level: Left-side flexibility level
        asymmetry_level: Left/right asymmetry level
        right_angle: Right lateral-flexion angle in degrees
        left_angle: Left lateral-flexion angle in degrees
        language: Message language ('en' or 'ja')

    Returns:
        List of recommendation strings (never empty)
    """
    recommendations = []
    levels = (right_level, left_level)

    # Asymmetry
    if asymmetry_level in (AsymmetryLevel.SIGNIFICANT, AsymmetryLevel.MODERATE):
        side = get_message(f'side_{stiffer_side(right_angle, left_angle)}', language)
        key = ('asymmetry_significant' if asymmetry_level is AsymmetryLevel.SIGNIFICANT
               else 'asymmetry_moderate')
        recommendations.append(get_message(key, language, side=side))

    # Overall flexibility
    if FlexibilityLevel.STIFF in levels:
        recommendations.append(get_message('mobility_restricted', language))
    elif FlexibilityLevel.SOMEWHAT_STIFF in levels:
        recommendations.append(get_message('habitual_stretching', language))

    # Posture
    if FlexibilityLevel.FLEXIBLE not in levels:
        recommendations.append(get_message('desk_breaks', language))

    if not recommendations:
        recommendations.append(get_message('maintain_mobility', language))

    return recommendations
