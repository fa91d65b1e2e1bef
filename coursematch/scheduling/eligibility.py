from typing import Dict, List, Optional

from ..models import Course, Dataset, Lecturer, Room

def lecturer_available(dataset: Dataset, course: Course, period: str,
                       current_load: Dict[str, int], already_running: bool = False) -> bool:
    """True iff the course's lecturer exists, teaches in `period` and has load headroom.

    A course that is already running this period costs no further load, so
    `already_running` skips the headroom check.
    """
    lecturer: Optional[Lecturer] = dataset.lecturer(course.lecturer_id)
    if lecturer is None:
        return False
    if period not in lecturer.available_periods:
        return False
    if already_running:
        return True
    return current_load.get(lecturer.id, 0) < lecturer.max_courses_per_period

def room_fits(room: Room, course: Course, period: str) -> bool:
    return room.capacity >= course.required_room_capacity and period in room.available_periods

def suitable_rooms(dataset: Dataset, course: Course, period: str) -> List[Room]:
    # store order; the first room is the one a course gets bound to
    return [room for room in dataset.rooms if room_fits(room, course, period)]
