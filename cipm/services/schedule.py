"""Weekly instructor schedule grid.

The schedule is a nested map ``{day: {hour: [instructor_id, ...]}}`` over
the fixed :data:`cipm.constants.DAYS` x :data:`cipm.constants.HOURS` grid.
Mutations happen in memory and the whole map is written back on save.
There is no conflict or overlap detection: the same instructor may sit in
any number of cells.
"""
import copy

from cipm.constants import DAYS, DAY_IDS, HOURS, ROLE_INSTRUCTOR

UNKNOWN_INSTRUCTOR = 'Instructor no encontrado'


def empty_schedule():
    return {day: {} for day in DAY_IDS}


def normalize(raw):
    """Return a deep copy of ``raw`` with every cell as a list of ids.

    Older documents stored a single instructor id string per cell; those
    become one-element lists. Keys outside the grid (``lastUpdated``, unknown
    days or hours) and day values that are not maps are dropped.
    """
    schedule = empty_schedule()
    for day in DAY_IDS:
        cells = (raw or {}).get(day)
        if not isinstance(cells, dict):
            continue
        for hour, cell in cells.items():
            if hour not in HOURS:
                continue
            if isinstance(cell, str):
                schedule[day][hour] = [cell] if cell else []
            elif isinstance(cell, (list, tuple)):
                schedule[day][hour] = [i for i in cell if isinstance(i, str)]
    return schedule


def invalid_days(raw):
    """Day keys of ``raw`` that are not on the grid or do not hold a map."""
    return [
        day for day, cells in raw.items()
        if day != 'lastUpdated' and (day not in DAY_IDS or not isinstance(cells, dict))
    ]


def valid_instructors(users):
    """Instructors usable on the grid: role instructor and non-blank id."""
    return [
        u for u in users
        if u.get('role', ROLE_INSTRUCTOR) == ROLE_INSTRUCTOR
        and isinstance(u.get('id'), str) and u['id'].strip()
    ]


def add_instructor(schedule, day, hour, instructor_id, valid_ids):
    """Add ``instructor_id`` to a cell.

    Returns a new schedule; the input is not modified. Unknown instructors
    are ignored and duplicates in the same cell are not added twice.
    """
    if instructor_id not in valid_ids:
        return schedule
    result = copy.deepcopy(schedule)
    cell = result.setdefault(day, {}).get(hour) or []
    if isinstance(cell, str):
        cell = [cell]
    if instructor_id not in cell:
        cell = cell + [instructor_id]
    result[day][hour] = cell
    return result


def remove_instructor(schedule, day, hour, instructor_id):
    """Remove ``instructor_id`` from a cell, returning a new schedule."""
    result = copy.deepcopy(schedule)
    cell = result.get(day, {}).get(hour)
    if not cell:
        return result
    if isinstance(cell, str):
        cell = [cell]
    result[day][hour] = [i for i in cell if i != instructor_id]
    return result


def transform(schedule, instructors):
    """Expand the schedule into the full display grid.

    Every day and hour is present and each cell is
    ``{'instructors': [{'id': ..., 'name': ...}]}``.
    """
    names = {i['id']: i.get('name', '') for i in instructors}
    result = {}
    for day in DAY_IDS:
        result[day] = {}
        for hour in HOURS:
            cell = (schedule or {}).get(day, {}).get(hour)
            if isinstance(cell, list):
                entries = [{'id': i, 'name': names.get(i) or UNKNOWN_INSTRUCTOR} for i in cell]
            elif isinstance(cell, str) and cell in names:
                entries = [{'id': cell, 'name': names[cell]}]
            else:
                entries = []
            result[day][hour] = {'instructors': entries}
    return result


def instructor_slots(schedule, instructor_id):
    """(day, hour) pairs where an instructor is scheduled, in grid order."""
    slots = []
    normalized = normalize(schedule)
    for day in DAY_IDS:
        for hour in HOURS:
            if instructor_id in normalized[day].get(hour, []):
                slots.append((day, hour))
    return slots


def day_labels():
    return [{'id': day_id, 'name': name} for day_id, name in DAYS]
