"""
Unit tests for dataset statistics, insights and match summaries
"""
import unittest

from coursematch.data import sample_dataset
from coursematch.models import Course, Dataset, Lecturer, Matched, PeriodResult, Room, StudentRequest, Unmatched
from coursematch.scheduling.evaluation import (
    analyze_dataset, compute_statistics, match_summary, missing_lecturers_by_period, summary,
)
from coursematch.scheduling.matcher import perform_matching


class TestStatistics(unittest.TestCase):

    def setUp(self):
        self.stats = compute_statistics(sample_dataset())

    def test_totals(self):
        self.assertEqual(self.stats.total_students, 8)
        self.assertEqual(self.stats.total_requests, 8)
        self.assertEqual(self.stats.total_courses, 8)
        self.assertEqual(self.stats.total_lecturers, 5)
        self.assertEqual(self.stats.total_rooms, 5)
        self.assertEqual(self.stats.periods_in_use, ["A", "B", "C", "D"])

    def test_aggregates(self):
        self.assertEqual(self.stats.requests_per_period, {"A": 2, "B": 2, "C": 2, "D": 2})
        self.assertEqual(self.stats.courses_per_lecturer, {"L1": 2, "L2": 2, "L3": 2, "L4": 1, "L5": 1})
        self.assertEqual(self.stats.requests_per_course["C1"], 4)
        self.assertEqual(self.stats.requests_per_course["C4"], 1)
        self.assertEqual(self.stats.room_utilization, {"R1": 8, "R2": 3, "R3": 3, "R4": 4, "R5": 1})

    def test_repeated_student_counted_once(self):
        ds = Dataset(requests=[
            StudentRequest("SR1", "S1", "Alex", "A", ()),
            StudentRequest("SR2", "S1", "Alex", "B", ()),
        ])
        self.assertEqual(compute_statistics(ds).total_students, 1)


class TestInsights(unittest.TestCase):

    def test_sample_insights(self):
        analysis = analyze_dataset(sample_dataset())
        self.assertEqual(analysis.insights, [
            "Most popular courses: MATH101 (4 requests), PHYS200 (4 requests), PSYCH101 (4 requests).",
            "Highest demand periods: A (2 requests), B (2 requests).",
            "Lecturers with most courses: Dr. Sarah Johnson (2 courses), Prof. Michael Chen (2 courses).",
        ])
        self.assertTrue(analysis.validation.valid)

    def test_idle_rooms_conflicts_and_recommendation(self):
        ds = Dataset(
            [Lecturer("L1", "Dr. One", 1, ("B",)), Lecturer("L2", "Dr. Two", 1, ("A",))],
            [Room("R1", "Broom Closet", 5, ("A",)), Room("R2", "Hall", 100, ("A",))],
            [Course("C1", "X1", "One", "L1", 50), Course("C2", "X2", "Two", "L2", 50)],
            [StudentRequest("SR1", "S1", "Alex", "A", ("C1", "C2"))],
        )
        insights = analyze_dataset(ds).insights
        self.assertIn("Some rooms have no suitable courses: Broom Closet.", insights)
        self.assertIn("Potential scheduling conflicts in periods: A (1 missing lecturers).", insights)
        self.assertTrue(insights[-1].startswith("Recommendation:"))

    def test_missing_lecturers_counts_unknown_ids(self):
        ds = Dataset(
            [Lecturer("L1", "Dr. One", 1, ("A",))],
            [Room("R1", "Hall", 100, ("A",))],
            [Course("C1", "X1", "One", "L9", 50)],
            [StudentRequest("SR1", "S1", "Alex", "A", ("C1",))],
        )
        self.assertEqual(missing_lecturers_by_period(ds), {"A": 1})

    def test_reuses_given_validation(self):
        ds = sample_dataset()
        sentinel = analyze_dataset(ds).validation
        self.assertIs(analyze_dataset(ds, sentinel).validation, sentinel)

    def test_empty_dataset_has_no_insights(self):
        self.assertEqual(analyze_dataset(Dataset()).insights, [])


class TestMatchSummary(unittest.TestCase):

    def test_counts(self):
        res = PeriodResult(period="A")
        res.assignments = {
            "1": Matched("1", "S1", "A", "C1", 1),
            "2": Matched("2", "S2", "B", "C2", 2),
            "3": Matched("3", "S3", "C", "C2", 4),
            "4": Unmatched("4", "S4", "D"),
        }
        ms = match_summary({"A": res})
        self.assertEqual(ms.total_students, 4)
        self.assertEqual(ms.satisfied_students, 3)
        self.assertAlmostEqual(ms.satisfaction_rate, 75.0)
        self.assertEqual(ms.preference_counts, {1: 1, 2: 1, 3: 0})
        self.assertEqual(ms.other_preference_count, 1)
        self.assertEqual(ms.unassigned_count, 1)

    def test_empty(self):
        ms = match_summary({})
        self.assertEqual(ms.total_students, 0)
        self.assertEqual(ms.satisfaction_rate, 0.0)

    def test_text_report(self):
        ds = sample_dataset()
        text = summary(ds, perform_matching(ds))
        self.assertIn("Satisfied: 8/8 (100.0%)", text)
        self.assertIn("Dataset valid: True", text)
        self.assertIn("Valid (coverage): True", text)
        self.assertIn("#1: 8  #2: 0  #3: 0  other: 0", text)


if __name__ == '__main__':
    unittest.main()
