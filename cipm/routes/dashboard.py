from flask import Blueprint, jsonify

from cipm import firestore_dao as dao
from cipm.constants import ROLE_ADMIN, ROLE_AGENDADOR, ROLE_FORMACION, ROLE_INSTRUCTOR
from cipm.decorators import get_current_user, role_required
from cipm.services import estadisticas

bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


def _user_names():
    return {u['id']: u.get('name', '') for u in dao.get_users()}


@bp.route('/admin')
@role_required(ROLE_ADMIN)
def admin():
    courses = dao.get_courses()
    modules = dao.get_modules()
    contents = dao.get_contents()
    enrollments = dao.get_enrollments()
    return jsonify({
        'cursos': estadisticas.resumen_cursos(courses, modules, enrollments, contents),
        'estudiantes': estadisticas.resumen_estudiantes(dao.get_users(), enrollments, courses),
        'videos': estadisticas.resumen_videos(courses, modules, contents),
    })


@bp.route('/agendador')
@role_required(ROLE_ADMIN, ROLE_AGENDADOR)
def agendador():
    user = get_current_user()
    records = dao.get_trial_classes('agendador')
    if not user.sees_all_trial_classes():
        records = [r for r in records if r.get('quienAgendo') == user.id]

    semana = estadisticas.ano_semana()
    return jsonify({
        'anoSemana': semana,
        'estadisticas': estadisticas.generar_estadisticas(records, _user_names()),
        'total': len(records),
        'semanaActual': len([r for r in records if r.get('anoSemana') == semana]),
    })


@bp.route('/instructor')
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def instructor():
    user = get_current_user()
    sees_all = user.sees_all_trial_classes()

    students = dao.get_trial_classes('instructor')
    calendar = dao.get_trial_classes('agendador')
    if not sees_all:
        students = [s for s in students if s.get('maestro') == user.id]
        calendar = [c for c in calendar if c.get('quienAgendo') == user.id]

    stats = estadisticas.generar_estadisticas(students, _user_names())
    return jsonify({
        'anoSemana': estadisticas.ano_semana(),
        'estadisticas': stats,
        'totalStudents': len(students),
        'mostUsedHour': estadisticas.most_common(stats['porHorario'], 'horario'),
        'mostCommonLevel': estadisticas.most_common(stats['porNivel'], 'nivel'),
        'calendario': calendar,
    })


@bp.route('/formacion')
@role_required(ROLE_ADMIN, ROLE_FORMACION)
def formacion():
    records = dao.get_trial_classes('formacion')
    return jsonify({
        'anoSemana': estadisticas.ano_semana(),
        'estadisticas': estadisticas.generar_estadisticas_cierres(records, _user_names()),
        'pendientes': estadisticas.pendientes(records),
        'coincidencias': estadisticas.agrupar_coincidencias(records),
    })
