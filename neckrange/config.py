"""
Configuration loaded from the environment (and an optional .env file).
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .messages import SUPPORTED_LANGUAGES

ENV_PREFIX = 'NECKRANGE_'


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class NeckRangeConfig:
    """Detection, stabilization and reporting settings."""
    pose_model_path: Optional[str] = None
    face_model_path: Optional[str] = None
    min_detection_confidence: float = 0.7
    min_presence_confidence: float = 0.7
    visibility_threshold: float = 0.5
    shoulder_tilt_threshold: float = 10.0
    stabilization_factor: float = 0.3
    smoothing_alpha: float = 0.7
    language: str = 'en'
    log_level: str = 'INFO'

    def __post_init__(self):
        for name in ('min_detection_confidence', 'min_presence_confidence',
                     'visibility_threshold', 'stabilization_factor'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}")
        if self.shoulder_tilt_threshold <= 0:
            raise ValueError(
                f"shoulder_tilt_threshold must be positive, got {self.shoulder_tilt_threshold}"
            )
        if self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unsupported language: {self.language}. "
                f"Supported languages: {list(SUPPORTED_LANGUAGES)}"
            )

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None
    ) -> 'NeckRangeConfig':
        """
        Build a configuration from NECKRANGE_* variables.

        Args:
            env: Mapping to read instead of os.environ (no .env loading then)
            dotenv_path: Explicit .env file; defaults to the nearest .env

        Returns:
            NeckRangeConfig

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ

        defaults = cls()
        return cls(
            pose_model_path=env.get(ENV_PREFIX + 'POSE_MODEL_PATH') or None,
            face_model_path=env.get(ENV_PREFIX + 'FACE_MODEL_PATH') or None,
            min_detection_confidence=_get_float(
                env, 'MIN_DETECTION_CONFIDENCE', defaults.min_detection_confidence),
            min_presence_confidence=_get_float(
                env, 'MIN_PRESENCE_CONFIDENCE', defaults.min_presence_confidence),
            visibility_threshold=_get_float(
                env, 'VISIBILITY_THRESHOLD', defaults.visibility_threshold),
            shoulder_tilt_threshold=_get_float(
                env, 'SHOULDER_TILT_THRESHOLD', defaults.shoulder_tilt_threshold),
            stabilization_factor=_get_float(
                env, 'STABILIZATION_FACTOR', defaults.stabilization_factor),
            smoothing_alpha=_get_float(env, 'SMOOTHING_ALPHA', defaults.smoothing_alpha),
            language=env.get(ENV_PREFIX + 'LANGUAGE', defaults.language),
            log_level=env.get(ENV_PREFIX + 'LOG_LEVEL', defaults.log_level).upper(),
        )
