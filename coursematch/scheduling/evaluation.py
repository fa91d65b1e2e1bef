from typing import Dict, List, Optional

from ..models import DataStatistics, Dataset, DatasetAnalysis, MatchSummary, PeriodResult, ValidationResult
from .validation import MIN_RECOMMENDED_CHOICES, check_matching, validate_dataset


def _top(counts: Dict[str, int], n: int, descending: bool = True):
    # sorted() is stable, so ties keep their input order
    sign = -1 if descending else 1
    return sorted(counts.items(), key=lambda kv: sign * kv[1])[:n]


def compute_statistics(dataset: Dataset) -> DataStatistics:
    requests = dataset.requests
    periods = dataset.periods_in_use()
    stats = DataStatistics(
        total_students=len({r.student_id for r in requests}),
        total_requests=len(requests),
        total_courses=len(dataset.courses),
        total_lecturers=len(dataset.lecturers),
        total_rooms=len(dataset.rooms),
        periods_in_use=periods,
    )
    stats.requests_per_period = {p: sum(1 for r in requests if r.period == p) for p in periods}
    stats.courses_per_lecturer = {
        l.id: sum(1 for c in dataset.courses if c.lecturer_id == l.id) for l in dataset.lecturers
    }
    stats.requests_per_course = {
        c.id: sum(1 for r in requests if c.id in r.course_choices) for c in dataset.courses
    }
    stats.room_utilization = {
        room.id: sum(1 for c in dataset.courses if c.required_room_capacity <= room.capacity)
        for room in dataset.rooms
    }
    return stats


def missing_lecturers_by_period(dataset: Dataset) -> Dict[str, int]:
    """Per period, how many lecturers of requested courses are not available then."""
    conflicts: Dict[str, int] = {}
    for period in dataset.periods_in_use():
        requested = set()
        for req in dataset.requests:
            if req.period == period:
                requested.update(req.course_choices)
        required = {c.lecturer_id for c in dataset.courses if c.id in requested}
        available = {l.id for l in dataset.lecturers if period in l.available_periods}
        missing = len(required - available)
        if missing:
            conflicts[period] = missing
    return conflicts


def generate_insights(dataset: Dataset, stats: DataStatistics) -> List[str]:
    insights: List[str] = []

    popular = _top(stats.requests_per_course, 3)
    if popular:
        parts = [f"{dataset.course(cid).code} ({count} requests)" for cid, count in popular]
        insights.append(f"Most popular courses: {', '.join(parts)}.")

    busy_periods = _top(stats.requests_per_period, 2)
    if busy_periods:
        parts = [f"{period} ({count} requests)" for period, count in busy_periods]
        insights.append(f"Highest demand periods: {', '.join(parts)}.")

    busy_lecturers = _top(stats.courses_per_lecturer, 2)
    if busy_lecturers:
        parts = [f"{dataset.lecturer(lid).name} ({count} courses)" for lid, count in busy_lecturers]
        insights.append(f"Lecturers with most courses: {', '.join(parts)}.")

    idle = [rid for rid, count in _top(stats.room_utilization, 2, descending=False) if count == 0]
    if idle:
        names = [dataset.room(rid).name for rid in idle]
        insights.append(f"Some rooms have no suitable courses: {', '.join(names)}.")

    conflicts = missing_lecturers_by_period(dataset)
    if conflicts:
        parts = [f"{period} ({count} missing lecturers)" for period, count in conflicts.items()]
        insights.append(f"Potential scheduling conflicts in periods: {', '.join(parts)}.")

    if any(len(r.course_choices) < MIN_RECOMMENDED_CHOICES for r in dataset.requests):
        insights.append(
            "Recommendation: Encourage students to provide at least 3 course preferences "
            "to increase matching flexibility."
        )
    return insights


def analyze_dataset(dataset: Dataset, validation: Optional[ValidationResult] = None) -> DatasetAnalysis:
    stats = compute_statistics(dataset)
    if validation is None:
        validation = validate_dataset(dataset)
    return DatasetAnalysis(
        insights=generate_insights(dataset, stats),
        statistics=stats,
        validation=validation,
    )


def match_summary(results: Dict[str, PeriodResult]) -> MatchSummary:
    out = MatchSummary(preference_counts={1: 0, 2: 0, 3: 0})
    for res in results.values():
        for a in res.assignments.values():
            out.total_students += 1
            if a.satisfied:
                out.satisfied_students += 1
                if a.preference in out.preference_counts:
                    out.preference_counts[a.preference] += 1
                else:
                    out.other_preference_count += 1
            else:
                out.unassigned_count += 1
    if out.total_students:
        out.satisfaction_rate = out.satisfied_students / out.total_students * 100
    return out


def summary(dataset: Dataset, results: Dict[str, PeriodResult],
            validation: Optional[ValidationResult] = None) -> str:
    if validation is None:
        validation = validate_dataset(dataset)
    ms = match_summary(results)
    checks = check_matching(dataset, results)
    ranks = "  ".join(f"#{rank}: {count}" for rank, count in sorted(ms.preference_counts.items()))
    ranks += f"  other: {ms.other_preference_count}"
    lines = [
        f"Lecturers: {len(dataset.lecturers)}  Rooms: {len(dataset.rooms)}  "
        f"Courses: {len(dataset.courses)}  Requests: {len(dataset.requests)}",
        f"Periods in use: {', '.join(results.keys()) or '-'}",
        f"Dataset valid: {validation.valid}  Errors: {len(validation.errors)}  Warnings: {len(validation.warnings)}",
        f"Satisfied: {ms.satisfied_students}/{ms.total_students} ({ms.satisfaction_rate:.1f}%)  "
        f"Unassigned: {ms.unassigned_count}",
        f"By preference: {ranks}",
        f"Valid (load): {checks['load']}  Valid (capacity): {checks['capacity']}  "
        f"Valid (availability): {checks['availability']}  Valid (coverage): {checks['coverage']}",
    ]
    return "\n".join(lines) + "\n"
