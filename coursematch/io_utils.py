import csv
import io
import json
import os
import re
from typing import Dict, IO, List, Optional, Tuple, Union

from .models import Course, Dataset, DatasetAnalysis, Lecturer, PeriodResult, Room, StudentRequest

TextOrPath = Union[str, os.PathLike, IO]

DEFAULT_EXPORT_FILENAME = "course-matcher-data.json"
TABLE_FILES = ("lecturers.csv", "rooms.csv", "courses.csv", "requests.csv")

_LIST_SEP = re.compile(r"[;,\s]+")


def _open_text(src: TextOrPath):
    """Return a text-mode file handle and a flag indicating whether to close it.

    Accepts a filesystem path, a text IO object, or a BytesIO buffer.
    """
    if isinstance(src, (str, os.PathLike)):
        f = open(src, 'r', newline='', encoding='utf-8')
        return f, True
    if isinstance(src, io.BytesIO):
        src.seek(0)
        f = io.TextIOWrapper(src, encoding='utf-8', newline='')
        return f, True
    if hasattr(src, 'read'):
        if hasattr(src, 'seek'):
            src.seek(0)
        return src, False
    raise TypeError("Unsupported input type; expected path or file-like object")


def _source_name(src: TextOrPath) -> str:
    if isinstance(src, (str, os.PathLike)):
        return os.fspath(src)
    return getattr(src, 'name', '<buffer>')


_EXTRA = object()


def _rows(src: TextOrPath, spill: Optional[str] = None):
    """Yield (line_number, row) with keys and values stripped.

    Surplus fields on a row are appended to the `spill` column when it is
    the last header column; otherwise the row is rejected.
    """
    name = _source_name(src)
    f, should_close = _open_text(src)
    try:
        reader = csv.DictReader(f, restkey=_EXTRA)
        for row in reader:
            extra = [v.strip() for v in row.pop(_EXTRA, []) if v and v.strip()]
            clean = {(k or '').strip(): (v or '').strip() for k, v in row.items()}
            if extra:
                header = reader.fieldnames or []
                if spill is None or not header or header[-1].strip() != spill:
                    raise ValueError(f"{name} line {reader.line_num}: too many fields")
                clean[spill] = ";".join([clean.get(spill, '')] + extra)
            if not any(clean.values()):
                continue
            yield reader.line_num, clean
    finally:
        if should_close:
            f.close()


def _field(row: dict, col: str, where: str) -> str:
    if col not in row:
        raise KeyError(f"{where}: missing column '{col}'")
    return row[col]


def _int(row: dict, col: str, where: str) -> int:
    raw = _field(row, col, where)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{where}: '{col}' must be an integer, got {raw!r}") from None


def _split(raw: str) -> Tuple[str, ...]:
    return tuple(p for p in _LIST_SEP.split(raw) if p)


def load_lecturers(src: TextOrPath) -> List[Lecturer]:
    """CSV with id,name,max_courses_per_period,available_periods."""
    name = _source_name(src)
    out = []
    for line, row in _rows(src):
        where = f"{name} line {line}"
        out.append(Lecturer(
            id=_field(row, 'id', where),
            name=_field(row, 'name', where),
            max_courses_per_period=_int(row, 'max_courses_per_period', where),
            available_periods=_split(_field(row, 'available_periods', where)),
        ))
    return out


def load_rooms(src: TextOrPath) -> List[Room]:
    """CSV with id,name,capacity,available_periods."""
    name = _source_name(src)
    out = []
    for line, row in _rows(src):
        where = f"{name} line {line}"
        out.append(Room(
            id=_field(row, 'id', where),
            name=_field(row, 'name', where),
            capacity=_int(row, 'capacity', where),
            available_periods=_split(_field(row, 'available_periods', where)),
        ))
    return out


def load_courses(src: TextOrPath) -> List[Course]:
    """CSV with id,code,name,lecturer_id,required_room_capacity."""
    name = _source_name(src)
    out = []
    for line, row in _rows(src):
        where = f"{name} line {line}"
        out.append(Course(
            id=_field(row, 'id', where),
            code=_field(row, 'code', where),
            name=_field(row, 'name', where),
            lecturer_id=_field(row, 'lecturer_id', where),
            required_room_capacity=_int(row, 'required_room_capacity', where),
        ))
    return out


def load_requests(src: TextOrPath) -> List[StudentRequest]:
    """CSV with id,student_id,student_name,period,course_choices (most preferred first).

    Unquoted comma-separated choices in the last column are accepted.
    """
    name = _source_name(src)
    out = []
    for line, row in _rows(src, spill='course_choices'):
        where = f"{name} line {line}"
        out.append(StudentRequest(
            id=_field(row, 'id', where),
            student_id=_field(row, 'student_id', where),
            student_name=_field(row, 'student_name', where),
            period=_field(row, 'period', where),
            course_choices=_split(row.get('course_choices', '')),
        ))
    return out


def load_dataset_dir(path: str) -> Dataset:
    """Read lecturers.csv, rooms.csv, courses.csv and requests.csv from one directory."""
    missing = [n for n in TABLE_FILES if not os.path.exists(os.path.join(path, n))]
    if missing:
        raise FileNotFoundError(f"{path}: missing {', '.join(missing)}")
    return Dataset(
        lecturers=load_lecturers(os.path.join(path, "lecturers.csv")),
        rooms=load_rooms(os.path.join(path, "rooms.csv")),
        courses=load_courses(os.path.join(path, "courses.csv")),
        requests=load_requests(os.path.join(path, "requests.csv")),
    )


# ---------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------
def write_assignments(f, results: Dict[str, PeriodResult]):
    w = csv.writer(f)
    w.writerow(['period', 'request_id', 'student_id', 'student_name', 'course_id', 'preference', 'satisfied'])
    for period, res in results.items():
        for request_id, a in res.assignments.items():
            w.writerow([period, request_id, a.student_id, a.student_name,
                        a.course_id or '', a.preference or '', a.satisfied])


def write_room_assignments(f, results: Dict[str, PeriodResult]):
    w = csv.writer(f)
    w.writerow(['period', 'course_id', 'room_id', 'enrolled'])
    for period, res in results.items():
        for course_id, room_id in res.room_assignments.items():
            w.writerow([period, course_id, room_id, res.course_enrollments.get(course_id, 0)])


def save_assignments_csv(path: str, results: Dict[str, PeriodResult]):
    with open(path, 'w', newline='') as f:
        write_assignments(f, results)


def save_room_assignments_csv(path: str, results: Dict[str, PeriodResult]):
    with open(path, 'w', newline='') as f:
        write_room_assignments(f, results)


def export_dataset(dataset: Dataset, analysis: DatasetAnalysis) -> dict:
    return {
        "lecturers": [l.to_dict() for l in dataset.lecturers],
        "rooms": [r.to_dict() for r in dataset.rooms],
        "courses": [c.to_dict() for c in dataset.courses],
        "requests": [r.to_dict() for r in dataset.requests],
        "analysis": analysis.to_dict(),
    }


def export_dataset_json(dataset: Dataset, analysis: DatasetAnalysis) -> str:
    return json.dumps(export_dataset(dataset, analysis), indent=2)


def save_dataset_json(path: str, dataset: Dataset, analysis: DatasetAnalysis):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(export_dataset_json(dataset, analysis))
