import unittest

from neckrange.classifier import (
    AsymmetryLevel,
    FlexibilityLevel,
    asymmetry_diff,
    evaluate_asymmetry,
    evaluate_flexibility,
    get_asymmetry_label,
    get_flexibility_label,
)


class TestEvaluateFlexibility(unittest.TestCase):
    """Flexibility boundaries"""

    def test_boundaries(self):
        cases = [
            (0.0, FlexibilityLevel.STIFF),
            (29.999, FlexibilityLevel.STIFF),
            (30.0, FlexibilityLevel.SOMEWHAT_STIFF),
            (39.999, FlexibilityLevel.SOMEWHAT_STIFF),
            (40.0, FlexibilityLevel.NORMAL),
            (50.0, FlexibilityLevel.NORMAL),
            (50.001, FlexibilityLevel.FLEXIBLE),
            (90.0, FlexibilityLevel.FLEXIBLE),
        ]
        for angle, expected in cases:
            with self.subTest(angle=angle):
                self.assertIs(evaluate_flexibility(angle), expected)

    def test_sign_is_ignored(self):
        self.assertIs(evaluate_flexibility(-45.0), FlexibilityLevel.NORMAL)

    def test_nan_is_rejected(self):
        with self.assertRaises(ValueError):
            evaluate_flexibility(float('nan'))


class TestEvaluateAsymmetry(unittest.TestCase):
    """Asymmetry boundaries"""

    def test_boundaries(self):
        cases = [
            (0.0, AsymmetryLevel.NORMAL),
            (4.999, AsymmetryLevel.NORMAL),
            (5.0, AsymmetryLevel.MILD),
            (9.999, AsymmetryLevel.MILD),
            (10.0, AsymmetryLevel.MODERATE),
            (14.999, AsymmetryLevel.MODERATE),
            (15.0, AsymmetryLevel.SIGNIFICANT),
            (40.0, AsymmetryLevel.SIGNIFICANT),
        ]
        for diff, expected in cases:
            with self.subTest(diff=diff):
                self.assertIs(evaluate_asymmetry(diff), expected)

    def test_diff(self):
        self.assertEqual(asymmetry_diff(45.0, 28.0), 17.0)
        self.assertEqual(asymmetry_diff(28.0, 45.0), 17.0)

    def test_nan_is_rejected(self):
        with self.assertRaises(ValueError):
            evaluate_asymmetry(float('nan'))


class TestLabels(unittest.TestCase):

    def test_labels(self):
        self.assertEqual(get_flexibility_label(FlexibilityLevel.SOMEWHAT_STIFF), 'Somewhat stiff')
        self.assertEqual(get_flexibility_label(FlexibilityLevel.FLEXIBLE, 'ja'), '柔軟')
        self.assertEqual(get_asymmetry_label(AsymmetryLevel.MODERATE), 'Moderate asymmetry')
        self.assertEqual(get_asymmetry_label(AsymmetryLevel.NORMAL, 'ja'), '正常')

    def test_unsupported_language(self):
        with self.assertRaises(ValueError):
            get_flexibility_label(FlexibilityLevel.STIFF, 'fr')


if __name__ == '__main__':
    unittest.main(verbosity=2)
