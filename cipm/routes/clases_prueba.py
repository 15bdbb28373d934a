"""Trial-class bookings for schedulers, instructors and group formation.

Each role keeps its own record set; the list endpoints only return the
records a user is responsible for unless they are an admin (or listed in
``ADMIN_OVERRIDE_UIDS``).
"""
from datetime import datetime, timezone

from flask import Blueprint, jsonify

from cipm import events
from cipm import firestore_dao as dao
from cipm.constants import ROLE_ADMIN, ROLE_AGENDADOR, ROLE_FORMACION
from cipm.decorators import get_current_user, min_role_required, role_required
from cipm.errors import NotFoundError
from cipm.firestore_models import AgendadorClass, FormacionRecord, InstructorClass
from cipm.forms import AgendadorClassForm, FormacionForm, InstructorClassForm
from cipm.services import estadisticas
from cipm.utils.http import form_errors
from cipm.utils.logging import get_logger

log = get_logger('clases_prueba')

bp = Blueprint('clases_prueba', __name__, url_prefix='/clases-prueba')

KINDS = 'any(instructor, agendador, formacion)'


def _visible(kind, records, user):
    if user.sees_all_trial_classes():
        return records
    if kind == 'agendador':
        return [r for r in records if r.get('quienAgendo') == user.id]
    if kind == 'formacion' and user.is_formacion():
        return records
    return [r for r in records if r.get('maestro') == user.id]


def _record_from_form(kind, form, user, existing=None):
    existing = existing or {}
    if kind == 'instructor':
        return InstructorClass(
            nombre_alumno=form.nombreAlumno.data,
            numero=form.numero.data,
            dia=form.dia.data,
            horario=form.horario.data,
            observaciones=form.observaciones.data or '',
            maestro=form.maestro.data,
            nivel=form.nivel.data,
            sub_nivel=form.subNivel.data or '',
            ano_semana=form.anoSemana.data or existing.get('anoSemana') or estadisticas.ano_semana(),
            fecha=form.fecha.data or existing.get('fecha') or datetime.now(timezone.utc).strftime('%Y-%m-%d'),
        )
    if kind == 'agendador':
        return AgendadorClass(
            nombre_alumno=form.nombreAlumno.data,
            numero=form.numero.data or '',
            dia_contacto=form.diaContacto.data,
            mes_contacto=form.mesContacto.data,
            quien_agendo=form.quienAgendo.data or existing.get('quienAgendo') or user.id,
            modalidad=form.modalidad.data or '',
            horario_presencial=form.horarioPresencial.data or '',
            dia_clase_prueba=form.diaClasePrueba.data or '',
            hora_clase_prueba=form.horaClasePrueba.data or '',
            maestro=form.maestro.data or '',
            mayor_edad=form.mayorEdad.data or '',
            nivel=form.nivel.data or '',
            ano_semana=form.anoSemana.data,
            observaciones=form.observaciones.data or '',
        )
    return FormacionRecord(
        status=form.status.data,
        week=form.week.data,
        nombre=form.nombre.data,
        telefono=form.telefono.data,
        modalidad=form.modalidad.data or '',
        horario=form.horario.data,
        observaciones=form.observaciones.data or '',
        fecha=existing.get('fecha'),
        maestro=form.maestro.data,
        nivel=form.nivel.data,
        tipo=form.tipo.data,
    )


FORMS = {
    'instructor': InstructorClassForm,
    'agendador': AgendadorClassForm,
    'formacion': FormacionForm,
}


@bp.route('/prueba')
@min_role_required(ROLE_AGENDADOR)
def legacy_records():
    return jsonify(dao.get_prueba_records())


@bp.route('/formacion/pendientes')
@role_required(ROLE_ADMIN, ROLE_FORMACION)
def pending():
    return jsonify(estadisticas.pendientes(dao.get_trial_classes('formacion')))


@bp.route('/formacion/coincidencias')
@role_required(ROLE_ADMIN, ROLE_FORMACION)
def matches():
    return jsonify(estadisticas.agrupar_coincidencias(dao.get_trial_classes('formacion')))


@bp.route(f'/<{KINDS}:kind>')
@min_role_required(ROLE_AGENDADOR)
def list_records(kind):
    return jsonify(_visible(kind, dao.get_trial_classes(kind), get_current_user()))


@bp.route(f'/<{KINDS}:kind>/<record_id>')
@min_role_required(ROLE_AGENDADOR)
def get_record(kind, record_id):
    record = dao.get_trial_class(kind, record_id)
    if record is None or not _visible(kind, [record], get_current_user()):
        raise NotFoundError(dao.TRIAL_COLLECTIONS[kind], record_id, operation='get_trial_class')
    return jsonify(record)


@bp.route(f'/<{KINDS}:kind>', methods=['POST'])
@min_role_required(ROLE_AGENDADOR)
def create_record(kind):
    current_user = get_current_user()
    form = FORMS[kind]()
    if not form.validate_on_submit():
        return form_errors(form)

    record = _record_from_form(kind, form, current_user)
    data = record.to_dict()
    record_id = dao.create_trial_class(kind, data)
    events.notify_trial_class_changed(kind, 'created', record_id)

    response = {'record': dict(data, id=record_id)}
    if kind == 'agendador':
        # Every booking also lands on the instructor's list
        instructor_record = record.to_instructor_class().to_dict()
        instructor_id = dao.create_trial_class('instructor', instructor_record)
        events.notify_trial_class_changed('instructor', 'created', instructor_id)
        response['instructorRecord'] = dict(instructor_record, id=instructor_id)
        log.info('booking %s created instructor record %s', record_id, instructor_id)
    return jsonify(response), 201


@bp.route(f'/<{KINDS}:kind>/<record_id>', methods=['PUT'])
@min_role_required(ROLE_AGENDADOR)
def update_record(kind, record_id):
    current_user = get_current_user()
    existing = dao.get_trial_class(kind, record_id)
    if existing is None or not _visible(kind, [existing], current_user):
        raise NotFoundError(dao.TRIAL_COLLECTIONS[kind], record_id, operation='update_trial_class')

    form = FORMS[kind]()
    if not form.validate_on_submit():
        return form_errors(form)

    record = _record_from_form(kind, form, current_user, existing)
    record.id = record_id
    data = record.to_dict()
    dao.update_trial_class(kind, record_id, data)
    events.notify_trial_class_changed(kind, 'updated', record_id)
    return jsonify(data)


@bp.route(f'/<{KINDS}:kind>/<record_id>', methods=['DELETE'])
@role_required(ROLE_ADMIN)
def delete_record(kind, record_id):
    dao.delete_trial_class(kind, record_id)
    events.notify_trial_class_changed(kind, 'deleted', record_id)
    return jsonify({'message': 'Registro eliminado.'})
