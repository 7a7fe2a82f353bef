from django.test import SimpleTestCase

from academics.services import metrics
from portal.exceptions import ValidationError


class GradeScaleTests(SimpleTestCase):
    def test_boundaries_are_inclusive_lower_bounds(self):
        cases = [
            (100.0, 'A+', 10),
            (90.0, 'A+', 10),
            (89.999, 'A', 9),
            (80.0, 'A', 9),
            (70.0, 'B+', 8),
            (69.99, 'B', 7),
            (50.0, 'C', 6),
            (40.0, 'D', 5),
            (39.999, 'F', 0),
            (0.0, 'F', 0),
        ]
        for pct, letter, points in cases:
            with self.subTest(pct=pct):
                self.assertEqual(metrics.grade_for(pct), metrics.Grade(letter, points))

    def test_percentage_is_not_rounded(self):
        self.assertAlmostEqual(metrics.percentage(2, 3), 66.6666666, places=5)
        self.assertEqual(metrics.percentage(45, 50), 90.0)
        self.assertEqual(metrics.percentage(0, 10), 0.0)

    def test_percentage_rejects_bad_scores(self):
        with self.assertRaises(ValidationError) as ctx:
            metrics.percentage(5, 0)
        self.assertEqual(ctx.exception.field, 'max_score')
        with self.assertRaises(ValidationError) as ctx:
            metrics.percentage(11, 10)
        self.assertEqual(ctx.exception.field, 'raw_score')
        with self.assertRaises(ValidationError):
            metrics.percentage(-1, 10)


class GpaTests(SimpleTestCase):
    def test_credit_weighted(self):
        self.assertEqual(metrics.weighted_gpa([(3, 9), (1, 5)]), 8.0)

    def test_empty_is_zero(self):
        self.assertEqual(metrics.weighted_gpa([]), 0.0)


class AttendancePercentageTests(SimpleTestCase):
    def test_late_counts_as_attended(self):
        statuses = ['present'] * 6 + ['late'] * 2 + ['absent'] * 2
        self.assertEqual(metrics.attendance_percentage(statuses), 80.0)

    def test_excused_is_not_attended(self):
        self.assertEqual(metrics.attendance_percentage(['present', 'excused']), 50.0)

    def test_no_records(self):
        self.assertEqual(metrics.attendance_percentage([]), 0.0)
