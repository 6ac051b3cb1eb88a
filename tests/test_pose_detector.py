import os
import tempfile
import unittest
from types import SimpleNamespace
from unittest import mock

import numpy as np
import pytest

pytest.importorskip("mediapipe")
pytest.importorskip("cv2")

from PIL import Image  # noqa: E402

from neckrange.config import NeckRangeConfig  # noqa: E402
from neckrange.landmarks import BasicLandmarks, ExtendedFaceLandmarks  # noqa: E402
from neckrange.pose_detector import MAX_IMAGE_SIDE, PoseDetector, load_image  # noqa: E402
from tests.landmark_factory import make_face_mesh, make_pose  # noqa: E402


def engine_landmarks(keypoints):
    return [SimpleNamespace(x=kp.x, y=kp.y, z=kp.z, visibility=kp.visibility) for kp in keypoints]


class TestLoadImage(unittest.TestCase):
    """Still image loading"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def test_returns_bgr(self):
        path = os.path.join(self.tmp.name, 'red.png')
        Image.new('RGB', (4, 2), (255, 0, 0)).save(path)

        frame = load_image(path)
        self.assertEqual(frame.shape, (2, 4, 3))
        self.assertEqual(frame[0, 0].tolist(), [0, 0, 255])

    def test_exif_orientation(self):
        path = os.path.join(self.tmp.name, 'rotated.jpg')
        img = Image.new('RGB', (4, 2), (0, 128, 0))
        exif = img.getexif()
        exif[0x0112] = 6  # Rotate 90 CW on display
        img.save(path, exif=exif)

        self.assertEqual(load_image(path).shape, (4, 2, 3))

    def test_large_image_is_downscaled(self):
        path = os.path.join(self.tmp.name, 'large.png')
        Image.new('RGB', (3000, 1000), (0, 0, 255)).save(path)

        frame = load_image(path)
        self.assertEqual(frame.shape[1], MAX_IMAGE_SIDE)
        self.assertEqual(max(frame.shape[:2]), 1280)
        self.assertAlmostEqual(frame.shape[0], 1000 * 1280 / 3000, delta=1)
        self.assertEqual(frame[0, 0].tolist(), [255, 0, 0])

    def test_downscale_after_exif_rotation(self):
        path = os.path.join(self.tmp.name, 'portrait.jpg')
        img = Image.new('RGB', (2000, 500), (0, 128, 0))
        exif = img.getexif()
        exif[0x0112] = 6
        img.save(path, exif=exif)

        self.assertEqual(load_image(path).shape, (1280, 320, 3))

    def test_custom_max_side(self):
        path = os.path.join(self.tmp.name, 'square.png')
        Image.new('RGB', (800, 800), (255, 0, 0)).save(path)

        self.assertEqual(load_image(path, max_side=256).shape, (256, 256, 3))
        self.assertEqual(load_image(path).shape, (800, 800, 3))

    def test_missing_file(self):
        with self.assertRaises(ValueError):
            load_image(os.path.join(self.tmp.name, 'missing.jpg'))

    def test_not_an_image(self):
        path = os.path.join(self.tmp.name, 'notes.jpg')
        with open(path, 'w') as f:
            f.write('not an image')
        with self.assertRaises(ValueError):
            load_image(path)


class TestPoseDetector(unittest.TestCase):
    """MediaPipe adapter with the tasks mocked out"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.pose_model = os.path.join(self.tmp.name, 'pose_landmarker.task')
        self.face_model = os.path.join(self.tmp.name, 'face_landmarker.task')
        for path in (self.pose_model, self.face_model):
            with open(path, 'wb') as f:
                f.write(b'model')

        vision_patcher = mock.patch('neckrange.pose_detector.vision')
        mp_patcher = mock.patch('neckrange.pose_detector.mp')
        self.vision = vision_patcher.start()
        mp_patcher.start()
        self.addCleanup(vision_patcher.stop)
        self.addCleanup(mp_patcher.stop)

        self.pose_task = mock.MagicMock()
        self.face_task = mock.MagicMock()
        self.vision.PoseLandmarker.create_from_options.return_value = self.pose_task
        self.vision.FaceLandmarker.create_from_options.return_value = self.face_task

        self.frame = np.zeros((48, 64, 3), dtype=np.uint8)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_model(self):
        with self.assertRaises(ValueError):
            PoseDetector(os.path.join(self.tmp.name, 'missing.task'))
        with self.assertRaises(ValueError):
            PoseDetector(None)
        with self.assertRaises(ValueError):
            PoseDetector(self.pose_model, face_model_path=os.path.join(self.tmp.name, 'missing.task'))

    def test_detect_basic(self):
        self.pose_task.detect.return_value = SimpleNamespace(pose_landmarks=[engine_landmarks(make_pose())])

        detector = PoseDetector(self.pose_model)
        landmarks = detector.detect(self.frame)

        self.assertIsInstance(landmarks, BasicLandmarks)
        self.assertEqual(landmarks, BasicLandmarks(make_pose()))
        self.vision.FaceLandmarker.create_from_options.assert_not_called()

    def test_detect_no_pose(self):
        self.pose_task.detect.return_value = SimpleNamespace(pose_landmarks=[])
        self.assertIsNone(PoseDetector(self.pose_model).detect(self.frame))

    def test_detect_with_face_mesh(self):
        self.pose_task.detect.return_value = SimpleNamespace(pose_landmarks=[engine_landmarks(make_pose())])
        self.face_task.detect.return_value = SimpleNamespace(face_landmarks=[engine_landmarks(make_face_mesh())])

        landmarks = PoseDetector(self.pose_model, self.face_model).detect(self.frame)
        self.assertIsInstance(landmarks, ExtendedFaceLandmarks)

    def test_face_miss_falls_back_to_basic(self):
        self.pose_task.detect.return_value = SimpleNamespace(pose_landmarks=[engine_landmarks(make_pose())])
        self.face_task.detect.return_value = SimpleNamespace(face_landmarks=[])

        landmarks = PoseDetector(self.pose_model, self.face_model).detect(self.frame)
        self.assertIsInstance(landmarks, BasicLandmarks)

    def test_detect_many_skips_misses(self):
        hit = SimpleNamespace(pose_landmarks=[engine_landmarks(make_pose())])
        miss = SimpleNamespace(pose_landmarks=[])
        self.pose_task.detect.side_effect = [hit, miss, hit]

        detections = PoseDetector(self.pose_model).detect_many([self.frame] * 3)
        self.assertEqual(len(detections), 2)

    def test_context_manager_closes_tasks(self):
        with PoseDetector(self.pose_model, self.face_model) as detector:
            self.assertIs(detector.pose_landmarker, self.pose_task)

        self.pose_task.close.assert_called_once()
        self.face_task.close.assert_called_once()
        self.assertIsNone(detector.pose_landmarker)
        detector.close()

    def test_from_config(self):
        config = NeckRangeConfig(pose_model_path=self.pose_model, min_detection_confidence=0.6)
        detector = PoseDetector.from_config(config)
        self.assertEqual(detector.pose_model_path, self.pose_model)
        self.assertIsNone(detector.face_landmarker)
        _, kwargs = self.vision.PoseLandmarkerOptions.call_args
        self.assertEqual(kwargs['min_pose_detection_confidence'], 0.6)
        self.assertEqual(kwargs['num_poses'], 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
