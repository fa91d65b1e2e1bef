import logging
from collections import Counter
from typing import Dict, List, Optional

from ..models import (
    ERROR, WARNING, Dataset, PeriodResult, ValidationIssue, ValidationResult,
)

logger = logging.getLogger(__name__)

MIN_RECOMMENDED_CHOICES = 3


# ---------------------------------------------------------------------
# Dataset validation
# ---------------------------------------------------------------------
def validate_dataset(dataset: Dataset) -> ValidationResult:
    """Check the dataset for consistency without changing it.

    Every check runs regardless of earlier failures and nothing here
    raises: malformed fields are reported as issues. The dataset is valid
    iff no errors were found; warnings never affect validity.
    """
    result = ValidationResult()
    _check_not_empty(dataset, result)
    _check_structure(dataset, result)
    _check_course_lecturers(dataset, result)
    _check_course_rooms(dataset, result)
    _check_requests(dataset, result)
    _check_availability(dataset, result)
    logger.info("Validation finished: %d errors, %d warnings",
                len(result.errors), len(result.warnings))
    return result


def _add(result: ValidationResult, kind, subject_id, message, severity, category):
    issue = ValidationIssue(kind, str(subject_id), message, severity, category)
    if severity == ERROR:
        result.errors.append(issue)
    else:
        result.warnings.append(issue)


def _check_not_empty(dataset: Dataset, result: ValidationResult):
    for label, records in (
        ("lecturers", dataset.lecturers),
        ("rooms", dataset.rooms),
        ("courses", dataset.courses),
        ("requests", dataset.requests),
    ):
        if not records:
            what = "student requests" if label == "requests" else label
            _add(result, "system", f"no-{label}", f"No {what} defined in the dataset.",
                 ERROR, "structural")


def _present(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _as_tuple(value) -> Optional[tuple]:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(value, key=str))
    return None


def _periods(entity) -> tuple:
    return _as_tuple(entity.available_periods) or ()


def _lookup(find, key):
    try:
        return find(key)
    except TypeError:
        return None


def _check_structure(dataset: Dataset, result: ValidationResult):
    required = {
        "lecturer": (dataset.lecturers, ("id", "name")),
        "room": (dataset.rooms, ("id", "name")),
        "course": (dataset.courses, ("id", "code", "name", "lecturer_id")),
        "request": (dataset.requests, ("id", "student_id", "student_name", "period")),
    }
    numeric = {
        "lecturer": ("max_courses_per_period",),
        "room": ("capacity",),
        "course": ("required_room_capacity",),
        "request": (),
    }
    for kind, (records, fields) in required.items():
        ids = []
        for index, rec in enumerate(records):
            subject = rec.id if _present(rec.id) else f"{kind}-{index + 1}"
            for name in fields:
                if not _present(getattr(rec, name)):
                    _add(result, kind, subject,
                         f"The {kind} at position {index + 1} is missing a value for '{name}'.",
                         ERROR, "structural")
            for name in numeric[kind]:
                value = getattr(rec, name)
                if not _positive_int(value):
                    _add(result, kind, subject,
                         f"The {kind} {subject} has an invalid '{name}' ({value!r}); a positive integer is required.",
                         ERROR, "structural")
            if _present(rec.id):
                ids.append(rec.id)
        for dup_id, count in Counter(ids).items():
            if count > 1:
                _add(result, kind, dup_id, f"The {kind} id {dup_id} is used by {count} records.",
                     ERROR, "structural")

    for lecturer in dataset.lecturers:
        if _as_tuple(lecturer.available_periods) is None:
            _add(result, "lecturer", lecturer.id,
                 f"Lecturer {lecturer.name} has a malformed list of available periods.",
                 ERROR, "structural")
        elif not lecturer.available_periods:
            _add(result, "lecturer", lecturer.id,
                 f"Lecturer {lecturer.name} is not available in any period.",
                 WARNING, "structural")
    for room in dataset.rooms:
        if _as_tuple(room.available_periods) is None:
            _add(result, "room", room.id,
                 f"Room {room.name} has a malformed list of available periods.",
                 ERROR, "structural")
        elif not room.available_periods:
            _add(result, "room", room.id, f"Room {room.name} is not available in any period.",
                 WARNING, "structural")


def _check_course_lecturers(dataset: Dataset, result: ValidationResult):
    for course in dataset.courses:
        if not _present(course.lecturer_id):
            continue  # reported as structural
        if _lookup(dataset.lecturer, course.lecturer_id) is None:
            _add(result, "course", course.id,
                 f"Course {course.code} ({course.name}) references non-existent lecturer ID: {course.lecturer_id}.",
                 ERROR, "referential")


def _check_course_rooms(dataset: Dataset, result: ValidationResult):
    capacities = [room.capacity for room in dataset.rooms if _positive_int(room.capacity)]
    for course in dataset.courses:
        need = course.required_room_capacity
        if not _positive_int(need):
            continue  # reported as structural
        if not any(cap >= need for cap in capacities):
            _add(result, "course", course.id,
                 f"Course {course.code} requires room capacity of {need}, but no suitable rooms exist.",
                 ERROR, "feasibility")


def _has_duplicates(items: tuple) -> bool:
    try:
        return len(set(items)) != len(items)
    except TypeError:
        return any(items[i] == items[j] for i in range(len(items)) for j in range(i + 1, len(items)))


def _check_requests(dataset: Dataset, result: ValidationResult):
    for req in dataset.requests:
        choices = _as_tuple(req.course_choices)
        if choices is None:
            _add(result, "request", req.id,
                 f"Student request for {req.student_name} has a malformed list of course choices.",
                 ERROR, "structural")
            choices = ()

        for course_id in choices:
            if _lookup(dataset.course, course_id) is None:
                _add(result, "request", req.id,
                     f"Student request for {req.student_name} references non-existent course ID: {course_id}.",
                     ERROR, "referential")

        if not choices:
            _add(result, "request", req.id,
                 f"Student {req.student_name} has no course choices for period {req.period}.",
                 ERROR, "quality")
        elif len(choices) < MIN_RECOMMENDED_CHOICES:
            _add(result, "request", req.id,
                 f"Student {req.student_name} has fewer than {MIN_RECOMMENDED_CHOICES} course choices "
                 f"({len(choices)}) for period {req.period}.",
                 WARNING, "quality")

        if _has_duplicates(choices):
            _add(result, "request", req.id,
                 f"Student {req.student_name} has duplicate course choices for period {req.period}.",
                 WARNING, "quality")


def _requested_periods(dataset: Dataset) -> List[str]:
    return sorted({req.period for req in dataset.requests if _present(req.period)})


def _check_availability(dataset: Dataset, result: ValidationResult):
    periods = _requested_periods(dataset)
    for lecturer in dataset.lecturers:
        available = _periods(lecturer)
        taught = {c.id for c in dataset.courses if c.lecturer_id == lecturer.id and _present(c.id)}
        for period in periods:
            if period in available:
                continue
            demanded = any(
                req.period == period and any(cid in taught for cid in (_as_tuple(req.course_choices) or ())
                                             if isinstance(cid, str))
                for req in dataset.requests
            )
            if demanded:
                _add(result, "lecturer", lecturer.id,
                     f"Lecturer {lecturer.name} is not available in period {period}, "
                     f"but teaches courses requested during this period.",
                     WARNING, "availability")
    for room in dataset.rooms:
        available = _periods(room)
        for period in periods:
            if period not in available:
                _add(result, "room", room.id, f"Room {room.name} is not available in period {period}.",
                     WARNING, "availability")


# ---------------------------------------------------------------------
# Post-match invariant checks
# ---------------------------------------------------------------------
def load_ok(dataset: Dataset, results: Dict[str, PeriodResult]) -> bool:
    for res in results.values():
        for lecturer_id, load in res.lecturer_assignments.items():
            lecturer = dataset.lecturer(lecturer_id)
            if lecturer is not None and load > lecturer.max_courses_per_period:
                return False
    return True

def capacity_ok(dataset: Dataset, results: Dict[str, PeriodResult]) -> bool:
    for res in results.values():
        for course_id, count in res.course_enrollments.items():
            if count == 0:
                continue
            room = dataset.room(res.room_assignments.get(course_id))
            course = dataset.course(course_id)
            if room is None or course is None:
                return False
            if room.capacity < course.required_room_capacity:
                return False
    return True

def availability_ok(dataset: Dataset, results: Dict[str, PeriodResult]) -> bool:
    for period, res in results.items():
        for course_id, count in res.course_enrollments.items():
            if count == 0:
                continue
            lecturer = dataset.lecturer_for_course(course_id)
            room = dataset.room(res.room_assignments.get(course_id))
            if lecturer is None or period not in lecturer.available_periods:
                return False
            if room is None or period not in room.available_periods:
                return False
    return True

def coverage_ok(dataset: Dataset, results: Dict[str, PeriodResult]) -> bool:
    # one assignment per request, repeated ids included
    seen = Counter(
        (period, a.request_id) for period, res in results.items() for a in res.assignments.values()
    )
    expected = Counter((req.period, req.id) for req in dataset.requests)
    return seen == expected

def check_matching(dataset: Dataset, results: Dict[str, PeriodResult]) -> Dict[str, bool]:
    return {
        "load": load_ok(dataset, results),
        "capacity": capacity_ok(dataset, results),
        "availability": availability_ok(dataset, results),
        "coverage": coverage_ok(dataset, results),
    }
