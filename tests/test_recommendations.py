import unittest

from neckrange.classifier import AsymmetryLevel, FlexibilityLevel
from neckrange.messages import get_message
from neckrange.recommendations import generate_recommendations, stiffer_side

STIFF = FlexibilityLevel.STIFF
SOMEWHAT_STIFF = FlexibilityLevel.SOMEWHAT_STIFF
NORMAL = FlexibilityLevel.NORMAL
FLEXIBLE = FlexibilityLevel.FLEXIBLE


class TestRecommendations(unittest.TestCase):
    """Rule order and content of generated recommendations"""

    def test_stiffer_side(self):
        self.assertEqual(stiffer_side(20.0, 40.0), 'right')
        self.assertEqual(stiffer_side(40.0, 20.0), 'left')
        self.assertEqual(stiffer_side(30.0, 30.0), 'left')

    def test_significant_asymmetry_comes_first(self):
        recs = generate_recommendations(NORMAL, STIFF, AsymmetryLevel.SIGNIFICANT, 45.0, 28.0)
        self.assertEqual(recs, [
            get_message('asymmetry_significant', side='left'),
            get_message('mobility_restricted'),
            get_message('desk_breaks'),
        ])

    def test_moderate_asymmetry(self):
        recs = generate_recommendations(SOMEWHAT_STIFF, FLEXIBLE, AsymmetryLevel.MODERATE, 38.0, 51.0)
        self.assertEqual(recs, [
            get_message('asymmetry_moderate', side='right'),
            get_message('habitual_stretching'),
        ])

    def test_mild_asymmetry_has_no_side_advice(self):
        recs = generate_recommendations(NORMAL, NORMAL, AsymmetryLevel.MILD, 42.0, 48.0)
        self.assertEqual(recs, [get_message('desk_breaks')])

    def test_stiff_takes_precedence_over_somewhat_stiff(self):
        recs = generate_recommendations(STIFF, SOMEWHAT_STIFF, AsymmetryLevel.MILD, 25.0, 32.0)
        self.assertIn(get_message('mobility_restricted'), recs)
        self.assertNotIn(get_message('habitual_stretching'), recs)

    def test_flexible_on_both_sides(self):
        recs = generate_recommendations(FLEXIBLE, FLEXIBLE, AsymmetryLevel.NORMAL, 55.0, 56.0)
        self.assertEqual(recs, [get_message('maintain_mobility')])

    def test_one_flexible_side_skips_desk_breaks(self):
        recs = generate_recommendations(NORMAL, FLEXIBLE, AsymmetryLevel.MILD, 45.0, 52.0)
        self.assertEqual(recs, [get_message('maintain_mobility')])

    def test_japanese_messages(self):
        recs = generate_recommendations(
            NORMAL, STIFF, AsymmetryLevel.SIGNIFICANT, 45.0, 28.0, language='ja'
        )
        self.assertEqual(recs[0], '左側の首の柔軟性が低下しています。専門家の診断をお勧めします。')


if __name__ == '__main__':
    unittest.main(verbosity=2)
