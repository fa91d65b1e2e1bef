import logging
from typing import Dict

from ..models import Dataset, Matched, PeriodResult, StudentRequest, Unmatched
from .eligibility import lecturer_available, suitable_rooms

logger = logging.getLogger(__name__)

LOAD_MODES = ("course", "student")

def match_period(dataset: Dataset, period: str, requests, load_mode: str = "course") -> PeriodResult:
    """Greedy single pass over one period's requests, in store order.

    Each student takes the first listed course whose lecturer is available
    with load headroom and for which a suitable room exists. The room is
    bound on a course's first enrollment and never revisited.
    """
    if load_mode not in LOAD_MODES:
        raise ValueError("load_mode must be 'course' or 'student'")
    result = PeriodResult(period=period)
    result.course_enrollments = {c.id: 0 for c in dataset.courses}
    result.lecturer_assignments = {l.id: 0 for l in dataset.lecturers}

    for position, req in enumerate(requests, start=1):
        key = req.id
        if key in result.assignments:
            # repeated request id; keep both records under distinct keys
            key = f"{req.id}#{position}"
            while key in result.assignments:
                key += "'"
            logger.warning("Period %s: request id %s repeated, recorded as %s", period, req.id, key)
        result.assignments[key] = _assign(dataset, period, req, result, load_mode)

    placed = sum(1 for a in result.assignments.values() if a.satisfied)
    logger.info("Period %s: %d/%d requests satisfied, %d courses running",
                period, placed, len(result.assignments), len(result.room_assignments))
    return result

def _assign(dataset: Dataset, period: str, req: StudentRequest, result: PeriodResult, load_mode: str):
    for rank, course_id in enumerate(req.course_choices, start=1):
        course = dataset.course(course_id)
        lecturer = dataset.lecturer_for_course(course_id)
        if course is None or lecturer is None:
            logger.debug("%s: skipping unresolved course %s", req.id, course_id)
            continue
        running = load_mode == "course" and result.course_enrollments.get(course_id, 0) > 0
        if not lecturer_available(dataset, course, period, result.lecturer_assignments, running):
            logger.debug("%s: lecturer %s unavailable for %s in %s", req.id, lecturer.id, course_id, period)
            continue
        rooms = suitable_rooms(dataset, course, period)
        if not rooms:
            logger.debug("%s: no room for %s in %s", req.id, course_id, period)
            continue

        result.course_enrollments[course_id] = result.course_enrollments.get(course_id, 0) + 1
        first_enrollment = result.course_enrollments[course_id] == 1
        if first_enrollment or load_mode == "student":
            result.lecturer_assignments[lecturer.id] = result.lecturer_assignments.get(lecturer.id, 0) + 1
        if first_enrollment:
            result.room_assignments[course_id] = rooms[0].id
        return Matched(
            request_id=req.id,
            student_id=req.student_id,
            student_name=req.student_name,
            course_id=course_id,
            preference=rank,
        )
    return Unmatched(request_id=req.id, student_id=req.student_id, student_name=req.student_name)

def perform_matching(dataset: Dataset, load_mode: str = "course") -> Dict[str, PeriodResult]:
    """Match every period independently; returns period -> PeriodResult.

    `load_mode` selects how lecturer load is counted: "course" charges one
    unit per distinct course with at least one student, "student" charges
    one unit per enrolled student.
    """
    if load_mode not in LOAD_MODES:
        raise ValueError("load_mode must be 'course' or 'student'")
    results: Dict[str, PeriodResult] = {}
    for period, requests in dataset.requests_by_period().items():
        results[period] = match_period(dataset, period, requests, load_mode=load_mode)
    return results
