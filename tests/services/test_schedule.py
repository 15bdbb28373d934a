"""Tests for the weekly instructor schedule grid."""
from __future__ import annotations

from cipm.constants import DAY_IDS, HOURS
from cipm.services import schedule as grid


INSTRUCTORS = [
    {'id': 'ana', 'name': 'Ana López', 'role': 'instructor'},
    {'id': 'carlos', 'name': 'Carlos Ruiz', 'role': 'instructor'},
]


def test_normalize_turns_legacy_strings_into_lists_and_drops_extra_keys():
    raw = {
        'monday': {'8:00 AM': 'ana', '9:00 AM': ['ana', 'carlos'], '10:00 AM': ''},
        'lastUpdated': '2025-04-10',
    }

    schedule = grid.normalize(raw)

    assert set(schedule) == set(DAY_IDS)
    assert schedule['monday'] == {'8:00 AM': ['ana'], '9:00 AM': ['ana', 'carlos'], '10:00 AM': []}
    assert schedule['saturday'] == {}


def test_normalize_handles_missing_document():
    assert grid.normalize(None) == grid.empty_schedule()


def test_add_instructor_returns_new_schedule_without_duplicates():
    original = grid.empty_schedule()

    once = grid.add_instructor(original, 'tuesday', '6:00 PM', 'ana', {'ana', 'carlos'})
    twice = grid.add_instructor(once, 'tuesday', '6:00 PM', 'ana', {'ana', 'carlos'})

    assert original['tuesday'] == {}
    assert once['tuesday']['6:00 PM'] == ['ana']
    assert twice['tuesday']['6:00 PM'] == ['ana']


def test_add_instructor_ignores_unknown_ids():
    original = grid.empty_schedule()

    result = grid.add_instructor(original, 'monday', '8:00 AM', 'ghost', {'ana'})

    assert result == original


def test_add_instructor_upgrades_legacy_string_cell():
    schedule = {'monday': {'8:00 AM': 'ana'}}

    result = grid.add_instructor(schedule, 'monday', '8:00 AM', 'carlos', {'ana', 'carlos'})

    assert result['monday']['8:00 AM'] == ['ana', 'carlos']


def test_remove_instructor_keeps_others_and_tolerates_missing_cells():
    schedule = {'friday': {'5:00 PM': ['ana', 'carlos']}}

    result = grid.remove_instructor(schedule, 'friday', '5:00 PM', 'ana')
    untouched = grid.remove_instructor(schedule, 'friday', '9:00 PM', 'ana')

    assert result['friday']['5:00 PM'] == ['carlos']
    assert schedule['friday']['5:00 PM'] == ['ana', 'carlos']
    assert untouched == schedule


def test_transform_builds_full_grid_with_names():
    schedule = {
        'monday': {'8:00 AM': ['ana', 'ghost'], '9:00 AM': 'ghost', '10:00 AM': 'carlos'},
    }

    view = grid.transform(schedule, INSTRUCTORS)

    assert list(view) == DAY_IDS
    assert all(list(view[day]) == HOURS for day in DAY_IDS)
    assert view['monday']['8:00 AM']['instructors'] == [
        {'id': 'ana', 'name': 'Ana López'},
        {'id': 'ghost', 'name': grid.UNKNOWN_INSTRUCTOR},
    ]
    assert view['monday']['9:00 AM']['instructors'] == []
    assert view['monday']['10:00 AM']['instructors'] == [{'id': 'carlos', 'name': 'Carlos Ruiz'}]
    assert view['saturday']['9:00 PM'] == {'instructors': []}


def test_valid_instructors_filters_blank_ids_and_other_roles():
    users = INSTRUCTORS + [
        {'id': '  ', 'name': 'Blank', 'role': 'instructor'},
        {'id': 'maria', 'name': 'María', 'role': 'agendador'},
    ]

    assert [u['id'] for u in grid.valid_instructors(users)] == ['ana', 'carlos']


def test_instructor_slots_in_grid_order():
    schedule = {
        'wednesday': {'6:00 PM': ['ana']},
        'monday': {'9:00 AM': 'ana', '8:00 AM': ['carlos']},
    }

    assert grid.instructor_slots(schedule, 'ana') == [('monday', '9:00 AM'), ('wednesday', '6:00 PM')]


def test_normalize_skips_malformed_days_and_off_grid_hours():
    raw = {'monday': None, 'tuesday': ['ana'], 'friday': {'99:00 PM': ['ana'], '5:00 PM': ['ana']}}

    schedule = grid.normalize(raw)

    assert schedule['monday'] == {}
    assert schedule['tuesday'] == {}
    assert schedule['friday'] == {'5:00 PM': ['ana']}


def test_invalid_days_reports_unknown_and_non_map_days():
    raw = {'monday': {}, 'tuesday': None, 'sunday': {}, 'lastUpdated': '2025-04-10'}

    assert grid.invalid_days(raw) == ['tuesday', 'sunday']
