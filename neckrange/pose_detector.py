"""
PoseDetector - MediaPipe pose engine adapter.

Runs the MediaPipe Tasks PoseLandmarker (and, when a face model is configured,
the FaceLandmarker) on still images and hands the result over as a normalized
LandmarkSet. This is the only module that talks to the pose engine.
"""

import logging
import os
from typing import List, Optional, Sequence

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision
from PIL import Image, ImageOps

from .landmarks import LandmarkSet, normalize_landmarks

logger = logging.getLogger(__name__)

# Long side limit for captures; phone photos are downscaled before detection
MAX_IMAGE_SIDE = 1280


def load_image(image_path: str, max_side: int = MAX_IMAGE_SIDE) -> np.ndarray:
    """
    Load a still capture as a BGR array, honouring EXIF orientation.

    Images whose long side exceeds max_side are downscaled, keeping the aspect
    ratio. Smaller images are returned at their original size.

    Args:
        image_path: Path to a JPEG/PNG capture
        max_side: Maximum length in pixels of the longer side

    Returns:
        Image as numpy array (BGR, like OpenCV frames)

    Raises:
        ValueError: If the file does not exist or cannot be decoded
    """
    if not os.path.exists(image_path):
        raise ValueError(f"Image file not found: {image_path}")

    try:
        with Image.open(image_path) as img:
            img = ImageOps.exif_transpose(img).convert('RGB')
            img.thumbnail((max_side, max_side))
            rgb = np.asarray(img)
    except OSError as e:
        raise ValueError(f"Cannot open image file: {image_path}") from e

    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


class PoseDetector:
    """
    Detects pose (and optionally face mesh) landmarks on still images.

    Use as a context manager or call close() to release the MediaPipe tasks.
    """

    def __init__(
        self,
        pose_model_path: str,
        face_model_path: Optional[str] = None,
        min_detection_confidence: float = 0.7,
        min_presence_confidence: float = 0.7
    ):
        """
        Initialize PoseDetector.

        Args:
            pose_model_path: Path to a pose_landmarker .task model
            face_model_path: Optional path to a face_landmarker .task model;
                enables the face-mesh head reference
            min_detection_confidence: Minimum pose detection confidence
            min_presence_confidence: Minimum pose presence confidence

        Raises:
            ValueError: If a model file does not exist
        """
        if not pose_model_path or not os.path.exists(pose_model_path):
            raise ValueError(
                f"Pose model not found: {pose_model_path}. Download pose_landmarker_heavy.task from "
                "https://developers.google.com/mediapipe/solutions/vision/pose_landmarker#models"
            )
        if face_model_path and not os.path.exists(face_model_path):
            raise ValueError(f"Face model not found: {face_model_path}")

        self.pose_model_path = pose_model_path
        self.face_model_path = face_model_path

        pose_options = vision.PoseLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=pose_model_path),
            running_mode=vision.RunningMode.IMAGE,  # Each capture is independent
            num_poses=1,
            min_pose_detection_confidence=min_detection_confidence,
            min_pose_presence_confidence=min_presence_confidence,
            output_segmentation_masks=False
        )
        self.pose_landmarker = vision.PoseLandmarker.create_from_options(pose_options)
        logger.info(f"MediaPipe pose model loaded: {os.path.basename(pose_model_path)}")

        self.face_landmarker = None
        if face_model_path:
            face_options = vision.FaceLandmarkerOptions(
                base_options=mp_python.BaseOptions(model_asset_path=face_model_path),
                running_mode=vision.RunningMode.IMAGE,
                num_faces=1,
                min_face_detection_confidence=min_detection_confidence,
                min_face_presence_confidence=min_presence_confidence
            )
            self.face_landmarker = vision.FaceLandmarker.create_from_options(face_options)
            logger.info(f"MediaPipe face model loaded: {os.path.basename(face_model_path)}")

    @classmethod
    def from_config(cls, config) -> 'PoseDetector':
        return cls(
            pose_model_path=config.pose_model_path,
            face_model_path=config.face_model_path,
            min_detection_confidence=config.min_detection_confidence,
            min_presence_confidence=config.min_presence_confidence,
        )

    def detect(self, frame: np.ndarray) -> Optional[LandmarkSet]:
        """
        Detect landmarks on one still image.

        Args:
            frame: Image as numpy array (BGR format from OpenCV / load_image)

        Returns:
            Normalized LandmarkSet, or None when no pose is detected
        """
        rgb = np.ascontiguousarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)

        result = self.pose_landmarker.detect(mp_image)
        if not result.pose_landmarks:
            logger.info("No pose landmarks detected in image")
            return None

        face = None
        if self.face_landmarker is not None:
            face_result = self.face_landmarker.detect(mp_image)
            if face_result.face_landmarks:
                face = face_result.face_landmarks[0]
            else:
                logger.info("No face mesh detected; using pose face points")

        landmarks = normalize_landmarks(result.pose_landmarks[0], face)
        logger.debug(f"Detected {landmarks!r} ({landmarks.source.value})")
        return landmarks

    def detect_many(self, frames: Sequence[np.ndarray]) -> List[LandmarkSet]:
        """Detect landmarks on a burst of stills of the same pose, skipping misses."""
        detections = [self.detect(frame) for frame in frames]
        return [d for d in detections if d is not None]

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self.pose_landmarker is not None:
            self.pose_landmarker.close()
            self.pose_landmarker = None
        if self.face_landmarker is not None:
            self.face_landmarker.close()
            self.face_landmarker = None

    def __enter__(self) -> 'PoseDetector':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
