from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

@dataclass(frozen=True)
class Lecturer:
    id: str
    name: str
    max_courses_per_period: int = 1  # distinct courses taught at once
    available_periods: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "maxCoursesPerPeriod": self.max_courses_per_period,
            "availablePeriods": list(self.available_periods),
        }

@dataclass(frozen=True)
class Room:
    id: str
    name: str
    capacity: int
    available_periods: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "capacity": self.capacity,
            "availablePeriods": list(self.available_periods),
        }

@dataclass(frozen=True)
class Course:
    id: str
    code: str
    name: str
    lecturer_id: str
    required_room_capacity: int  # minimum room size

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "lecturerId": self.lecturer_id,
            "requiredRoomCapacity": self.required_room_capacity,
        }

@dataclass(frozen=True)
class StudentRequest:
    id: str
    student_id: str
    student_name: str
    period: str
    # course ids, most preferred first
    course_choices: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "period": self.period,
            "courseChoices": list(self.course_choices),
        }


class Dataset:
    """Read-only entity store: four ordered collections with id lookups.

    Collection order is the insertion order and is significant: the matcher
    processes requests in this order and picks the first suitable room.
    When an id occurs twice the first record wins the lookup.
    """

    def __init__(self, lecturers=(), rooms=(), courses=(), requests=()):
        self.lecturers: Tuple[Lecturer, ...] = tuple(lecturers)
        self.rooms: Tuple[Room, ...] = tuple(rooms)
        self.courses: Tuple[Course, ...] = tuple(courses)
        self.requests: Tuple[StudentRequest, ...] = tuple(requests)
        self._lecturer_by_id = _index(self.lecturers)
        self._room_by_id = _index(self.rooms)
        self._course_by_id = _index(self.courses)

    def lecturer(self, lecturer_id: str) -> Optional[Lecturer]:
        return self._lecturer_by_id.get(lecturer_id)

    def room(self, room_id: str) -> Optional[Room]:
        return self._room_by_id.get(room_id)

    def course(self, course_id: str) -> Optional[Course]:
        return self._course_by_id.get(course_id)

    def lecturer_for_course(self, course_id: str) -> Optional[Lecturer]:
        course = self.course(course_id)
        if course is None:
            return None
        return self.lecturer(course.lecturer_id)

    def periods_in_use(self) -> List[str]:
        return sorted({r.period for r in self.requests})

    def requests_by_period(self) -> Dict[str, List[StudentRequest]]:
        # periods in order of first appearance, requests in store order
        by_period: Dict[str, List[StudentRequest]] = {}
        for req in self.requests:
            by_period.setdefault(req.period, []).append(req)
        return by_period

    def __repr__(self):
        return (
            f"Dataset(lecturers={len(self.lecturers)}, rooms={len(self.rooms)}, "
            f"courses={len(self.courses)}, requests={len(self.requests)})"
        )


def _index(records) -> dict:
    by_id = {}
    for rec in records:
        try:
            by_id.setdefault(rec.id, rec)
        except TypeError:
            # unhashable id; the validator reports it
            continue
    return by_id


# ---------------------------------------------------------------------
# Matching output
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Matched:
    request_id: str
    student_id: str
    student_name: str
    course_id: str
    preference: int  # 1-based rank within course_choices

    satisfied = True


@dataclass(frozen=True)
class Unmatched:
    request_id: str
    student_id: str
    student_name: str

    satisfied = False
    course_id = None
    preference = None


Assignment = Union[Matched, Unmatched]


@dataclass
class PeriodResult:
    period: str
    # request_id -> assignment, in processing order
    assignments: Dict[str, Assignment] = field(default_factory=dict)
    # course_id -> students enrolled
    course_enrollments: Dict[str, int] = field(default_factory=dict)
    # lecturer_id -> load units consumed
    lecturer_assignments: Dict[str, int] = field(default_factory=dict)
    # course_id -> room_id, bound at first enrollment
    room_assignments: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "assignments": {
                rid: {
                    "studentId": a.student_id,
                    "studentName": a.student_name,
                    "courseId": a.course_id,
                    "satisfied": a.satisfied,
                    "preference": a.preference,
                }
                for rid, a in self.assignments.items()
            },
            "courseEnrollments": dict(self.course_enrollments),
            "lecturerAssignments": dict(self.lecturer_assignments),
            "roomAssignments": dict(self.room_assignments),
        }


@dataclass
class MatchSummary:
    total_students: int = 0
    satisfied_students: int = 0
    satisfaction_rate: float = 0.0  # percent
    # ranks 1-3; anything lower is counted in other_preference_count
    preference_counts: Dict[int, int] = field(default_factory=dict)
    other_preference_count: int = 0
    unassigned_count: int = 0


# ---------------------------------------------------------------------
# Validation and analysis output
# ---------------------------------------------------------------------
ERROR = "error"
WARNING = "warning"

@dataclass(frozen=True)
class ValidationIssue:
    kind: str        # lecturer | room | course | request | system
    subject_id: str
    message: str
    severity: str    # error | warning
    category: str    # structural | referential | feasibility | quality | availability

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "id": self.subject_id,
            "message": self.message,
            "severity": self.severity,
            "category": self.category,
        }


@dataclass
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class DataStatistics:
    total_students: int = 0
    total_requests: int = 0
    total_courses: int = 0
    total_lecturers: int = 0
    total_rooms: int = 0
    periods_in_use: List[str] = field(default_factory=list)
    requests_per_period: Dict[str, int] = field(default_factory=dict)
    courses_per_lecturer: Dict[str, int] = field(default_factory=dict)
    requests_per_course: Dict[str, int] = field(default_factory=dict)
    # room_id -> number of courses the room is large enough for
    room_utilization: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "totalRequests": self.total_requests,
            "totalCourses": self.total_courses,
            "totalLecturers": self.total_lecturers,
            "totalRooms": self.total_rooms,
            "periodsInUse": list(self.periods_in_use),
            "requestsPerPeriod": dict(self.requests_per_period),
            "coursesPerLecturer": dict(self.courses_per_lecturer),
            "requestsPerCourse": dict(self.requests_per_course),
            "roomUtilization": dict(self.room_utilization),
        }


@dataclass
class DatasetAnalysis:
    insights: List[str] = field(default_factory=list)
    statistics: DataStatistics = field(default_factory=DataStatistics)
    validation: ValidationResult = field(default_factory=ValidationResult)

    def to_dict(self) -> dict:
        return {
            "insights": list(self.insights),
            "statistics": self.statistics.to_dict(),
            "validation": self.validation.to_dict(),
        }
