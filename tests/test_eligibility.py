"""
Unit tests for lecturer availability and room suitability
"""
import unittest

from coursematch.models import Course, Dataset, Lecturer, Room
from coursematch.scheduling.eligibility import lecturer_available, room_fits, suitable_rooms


def _dataset():
    lecturers = [Lecturer("L1", "Dr. One", 2, ("A", "B"))]
    rooms = [
        Room("R1", "Big Hall", 100, ("B",)),
        Room("R2", "Small Room", 20, ("A", "B")),
        Room("R3", "Medium Room", 50, ("A",)),
        Room("R4", "Other Hall", 120, ("A",)),
    ]
    courses = [
        Course("C1", "MATH1", "Calculus", "L1", 40),
        Course("C2", "GHOST1", "Nobody Teaches", "L9", 10),
    ]
    return Dataset(lecturers, rooms, courses, [])


class TestLecturerAvailable(unittest.TestCase):

    def setUp(self):
        self.ds = _dataset()
        self.course = self.ds.course("C1")

    def test_available_with_headroom(self):
        self.assertTrue(lecturer_available(self.ds, self.course, "A", {}))
        self.assertTrue(lecturer_available(self.ds, self.course, "A", {"L1": 1}))

    def test_at_max_load(self):
        self.assertFalse(lecturer_available(self.ds, self.course, "A", {"L1": 2}))

    def test_running_course_ignores_load(self):
        self.assertTrue(lecturer_available(self.ds, self.course, "A", {"L1": 2}, already_running=True))
        self.assertFalse(lecturer_available(self.ds, self.course, "C", {}, already_running=True))

    def test_period_not_available(self):
        self.assertFalse(lecturer_available(self.ds, self.course, "C", {}))

    def test_missing_lecturer(self):
        self.assertFalse(lecturer_available(self.ds, self.ds.course("C2"), "A", {}))


class TestSuitableRooms(unittest.TestCase):

    def setUp(self):
        self.ds = _dataset()

    def test_store_order_is_kept(self):
        rooms = suitable_rooms(self.ds, self.ds.course("C1"), "A")
        self.assertEqual([r.id for r in rooms], ["R3", "R4"])

    def test_capacity_and_period_both_required(self):
        course = self.ds.course("C1")
        self.assertTrue(room_fits(self.ds.room("R1"), course, "B"))
        self.assertFalse(room_fits(self.ds.room("R1"), course, "A"))
        self.assertFalse(room_fits(self.ds.room("R2"), course, "A"))

    def test_no_rooms_in_unused_period(self):
        self.assertEqual(suitable_rooms(self.ds, self.ds.course("C1"), "Z"), [])


if __name__ == '__main__':
    unittest.main()
