from flask import Blueprint, jsonify

from cipm import events
from cipm import firestore_dao as dao
from cipm.constants import HOURS, ROLE_ADMIN, ROLE_INSTRUCTOR
from cipm.decorators import auth_required, role_required
from cipm.forms import ScheduleSlotForm
from cipm.services import schedule as grid
from cipm.utils.http import form_errors, json_body
from cipm.utils.logging import get_logger

log = get_logger('horario')

bp = Blueprint('horario', __name__, url_prefix='/horario')


def _instructors():
    return grid.valid_instructors(dao.get_users_by_role(ROLE_INSTRUCTOR))


def _view(schedule, instructors):
    return {
        'schedule': grid.transform(schedule, instructors),
        'days': grid.day_labels(),
        'hours': HOURS,
        'instructors': [{'id': i['id'], 'name': i.get('name', '')} for i in instructors],
    }


def _save(schedule, instructors):
    dao.update_schedule(schedule)
    view = _view(schedule, instructors)
    events.notify_schedule_updated(view['schedule'])
    return view


@bp.route('/')
@auth_required
def show():
    return jsonify(_view(grid.normalize(dao.get_schedule()), _instructors()))


@bp.route('/instructor/<instructor_id>')
@auth_required
def instructor_slots(instructor_id):
    slots = grid.instructor_slots(dao.get_schedule(), instructor_id)
    return jsonify([{'day': day, 'hour': hour} for day, hour in slots])


@bp.route('/agregar', methods=['POST'])
@role_required(ROLE_ADMIN)
def add():
    form = ScheduleSlotForm()
    if not form.validate_on_submit():
        return form_errors(form)

    instructors = _instructors()
    valid_ids = {i['id'] for i in instructors}
    if form.instructorId.data not in valid_ids:
        log.info('ignoring unknown instructor %s', form.instructorId.data)
    schedule = grid.add_instructor(
        grid.normalize(dao.get_schedule()),
        form.day.data, form.hour.data, form.instructorId.data, valid_ids,
    )
    return jsonify(_save(schedule, instructors))


@bp.route('/quitar', methods=['POST'])
@role_required(ROLE_ADMIN)
def remove():
    form = ScheduleSlotForm()
    if not form.validate_on_submit():
        return form_errors(form)

    schedule = grid.remove_instructor(
        grid.normalize(dao.get_schedule()),
        form.day.data, form.hour.data, form.instructorId.data,
    )
    return jsonify(_save(schedule, _instructors()))


@bp.route('/', methods=['PUT'])
@role_required(ROLE_ADMIN)
def save():
    """Replace the whole grid with ``{"schedule": {day: {hour: [ids]}}}``."""
    raw = json_body().get('schedule')
    if not isinstance(raw, dict):
        return jsonify({'errors': {'schedule': ['Horario inválido.']}}), 400
    bad = grid.invalid_days(raw)
    if bad:
        return jsonify({'errors': {'schedule': [f'Día inválido: {day}' for day in bad]}}), 400
    return jsonify(_save(grid.normalize(raw), _instructors()))
