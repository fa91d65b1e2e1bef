"""Synthetic dataset generation for demos and load testing."""
import random
from typing import Sequence

import numpy as np
from faker import Faker

from .models import Course, Dataset, Lecturer, Room, StudentRequest

SEED_DEFAULT = 42
DEFAULT_PERIODS = ("A", "B", "C", "D", "E", "F")

DEPARTMENTS = ["CS", "MATH", "PHYS", "CHEM", "BIO", "ECON", "ENG", "HIST", "PSYCH"]
BUILDINGS = ["Science Hall", "Tech Center", "Main Building", "North Wing", "Library Annex"]
ROOM_SIZES = [25, 30, 40, 60, 120, 200]
COURSE_SIZES = [25, 30, 40, 80, 120, 150]
TITLES = ["Dr.", "Prof."]


def _some_periods(rnd: random.Random, periods: Sequence[str]) -> tuple:
    k = rnd.randint(1, len(periods))
    chosen = set(rnd.sample(list(periods), k))
    return tuple(p for p in periods if p in chosen)


def generate_dataset(
    n_lecturers: int = 5,
    n_rooms: int = 5,
    n_courses: int = 8,
    n_requests: int = 40,
    periods: Sequence[str] = DEFAULT_PERIODS,
    choices_per_request: int = 3,
    seed: int = SEED_DEFAULT,
) -> Dataset:
    """Build a reproducible random dataset; the same seed gives the same data.

    Course demand follows a Zipf-like popularity so a few courses are
    heavily requested, as in real enrollment data.
    """
    if min(n_lecturers, n_rooms, n_courses) < 1 or not periods:
        raise ValueError("need at least one lecturer, room, course and period")
    rnd = random.Random(seed)
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(seed)

    lecturers = [
        Lecturer(
            id=f"L{i}",
            name=f"{rnd.choice(TITLES)} {fake.name()}",
            max_courses_per_period=rnd.choice([1, 2]),
            available_periods=_some_periods(rnd, periods),
        )
        for i in range(1, n_lecturers + 1)
    ]

    rooms = []
    for i in range(1, n_rooms + 1):
        rooms.append(Room(
            id=f"R{i}",
            name=f"{rnd.choice(BUILDINGS)} {rnd.randint(100, 499)}",
            capacity=rnd.choice(ROOM_SIZES),
            available_periods=_some_periods(rnd, periods),
        ))

    courses = []
    codes = set()
    for i in range(1, n_courses + 1):
        dept = rnd.choice(DEPARTMENTS)
        code = f"{dept}{rnd.randrange(100, 400)}"
        if code in codes:
            code = f"{dept}{500 + i}"
        codes.add(code)
        courses.append(Course(
            id=f"C{i}",
            code=code,
            name=f"{dept} {fake.catch_phrase()}",
            lecturer_id=lecturers[(i - 1) % n_lecturers].id,
            required_room_capacity=rnd.choice(COURSE_SIZES),
        ))

    popularity = rng.zipf(a=1.4, size=n_courses).astype(float)
    popularity = popularity / popularity.sum()
    course_ids = [c.id for c in courses]
    k = max(0, min(choices_per_request, n_courses))

    requests = []
    for i in range(1, n_requests + 1):
        chosen = rng.choice(course_ids, size=k, replace=False, p=popularity) if k else []
        requests.append(StudentRequest(
            id=f"SR{i}",
            student_id=f"S{i}",
            student_name=fake.name(),
            period=rnd.choice(list(periods)),
            course_choices=tuple(str(c) for c in chosen),
        ))

    return Dataset(lecturers, rooms, courses, requests)
