import unittest

from neckrange.errors import DegenerateGeometryError, MissingLandmarkError
from neckrange.landmarks import Keypoint, POSE_LANDMARKS
from neckrange.validation import validate_landmarks_visibility, validate_shoulder_level
from tests.landmark_factory import make_landmarks

SHOULDERS = [POSE_LANDMARKS['left_shoulder'], POSE_LANDMARKS['right_shoulder']]


class TestValidateShoulderLevel(unittest.TestCase):
    """Shoulder compensation check"""

    def test_level(self):
        validation = validate_shoulder_level(make_landmarks())
        self.assertTrue(validation.is_valid)
        self.assertEqual(validation.angle, 0.0)
        self.assertIsNone(validation.error)

    def test_small_tilt_is_accepted(self):
        validation = validate_shoulder_level(make_landmarks(left_shoulder_drop=0.02))
        self.assertTrue(validation.is_valid)
        self.assertLess(validation.angle, 3.0)

    def test_compensation(self):
        with self.assertLogs('neckrange.validation', level='WARNING'):
            validation = validate_shoulder_level(make_landmarks(left_shoulder_drop=0.15))
        self.assertFalse(validation.is_valid)
        self.assertGreater(validation.angle, 10.0)
        self.assertIn(f"{validation.angle:.1f}°", validation.message)

    def test_missing_shoulder(self):
        validation = validate_shoulder_level(make_landmarks(overrides={'left_shoulder': None}))
        self.assertFalse(validation.is_valid)
        self.assertIsNone(validation.angle)
        self.assertIsInstance(validation.error, MissingLandmarkError)

    def test_degenerate(self):
        landmarks = make_landmarks(overrides={
            'left_ear': None,
            'right_ear': None,
            'left_shoulder': Keypoint(0.5, 0.45, 0.0, 0.9),
            'right_shoulder': Keypoint(0.5, 0.55, 0.0, 0.9),
        })
        validation = validate_shoulder_level(landmarks)
        self.assertFalse(validation.is_valid)
        self.assertIsInstance(validation.error, DegenerateGeometryError)


class TestValidateLandmarksVisibility(unittest.TestCase):
    """Required landmark visibility check"""

    def test_all_visible(self):
        validation = validate_landmarks_visibility(make_landmarks(), SHOULDERS)
        self.assertTrue(validation.is_valid)
        self.assertEqual(validation.missing, [])

    def test_missing_and_low_visibility(self):
        landmarks = make_landmarks(overrides={
            'left_shoulder': None,
            'right_shoulder': Keypoint(0.35, 0.5, 0.0, 0.2),
        })
        validation = validate_landmarks_visibility(landmarks, SHOULDERS)
        self.assertFalse(validation.is_valid)
        self.assertEqual(validation.missing, ['left_shoulder', 'right_shoulder'])

    def test_missing_visibility_counts_as_visible(self):
        landmarks = make_landmarks(visibility=None)
        self.assertTrue(validate_landmarks_visibility(landmarks, SHOULDERS, 0.9).is_valid)


if __name__ == '__main__':
    unittest.main(verbosity=2)
