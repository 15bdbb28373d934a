from flask import Blueprint, jsonify, request

from cipm import firestore_dao as dao
from cipm.constants import Collections, ROLE_ADMIN, ROLE_INSTRUCTOR
from cipm.decorators import auth_required, get_current_user, role_required
from cipm.errors import NotFoundError
from cipm.firestore_models import Enrollment
from cipm.forms import EnrollmentForm, EnrollmentUpdateForm
from cipm.utils.http import form_errors
from cipm.utils.logging import get_logger

log = get_logger('inscripciones')

bp = Blueprint('inscripciones', __name__, url_prefix='/inscripciones')


@bp.route('/')
@auth_required
def list_enrollments():
    current_user = get_current_user()
    student_id = request.args.get('studentId')
    course_id = request.args.get('courseId')

    # Clients only ever see their own enrollments
    if not (current_user.is_admin() or current_user.is_instructor()):
        student_id = current_user.id

    if student_id:
        enrollments = dao.get_enrollments_by_student(student_id)
        if course_id:
            enrollments = [e for e in enrollments if e.get('courseId') == course_id]
        return jsonify(enrollments)
    if course_id:
        return jsonify(dao.get_enrollments_by_course(course_id))
    return jsonify(dao.get_enrollments())


@bp.route('/', methods=['POST'])
@auth_required
def create_enrollment():
    current_user = get_current_user()
    form = EnrollmentForm()
    if not form.validate_on_submit():
        return form_errors(form)

    student_id = form.studentId.data
    course_id = form.courseId.data
    if student_id != current_user.id and not current_user.is_admin():
        return jsonify({'error': 'No tienes permisos para realizar esta acción.'}), 403
    if dao.get_course(course_id) is None:
        raise NotFoundError(Collections.COURSES, course_id, operation='create_enrollment')
    if dao.find_enrollment(student_id, course_id):
        return jsonify({'error': 'El estudiante ya está inscrito en este curso.'}), 409

    enrollment = Enrollment(student_id=student_id, course_id=course_id)
    data = enrollment.to_dict()
    enrollment.id = dao.create_enrollment(data)
    log.info('student %s enrolled in %s', student_id, course_id)
    return jsonify(dict(data, id=enrollment.id)), 201


@bp.route('/<enrollment_id>', methods=['PUT'])
@auth_required
def update_enrollment(enrollment_id):
    current_user = get_current_user()
    enrollment = dao.get_enrollment(enrollment_id)
    if enrollment is None:
        raise NotFoundError(Collections.ENROLLMENTS, enrollment_id, operation='update_enrollment')
    if enrollment.get('studentId') != current_user.id and not current_user.is_admin():
        return jsonify({'error': 'No tienes permisos para realizar esta acción.'}), 403

    form = EnrollmentUpdateForm()
    if not form.validate_on_submit():
        return form_errors(form)

    data = {}
    if form.progress.data is not None:
        data['progress'] = form.progress.data
    if form.status.data:
        data['status'] = form.status.data
    if form.lastAccess.data:
        data['lastAccess'] = form.lastAccess.data
    if data:
        dao.update_enrollment(enrollment_id, data)
    return jsonify(dict(enrollment, **data))


@bp.route('/<enrollment_id>', methods=['DELETE'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def delete_enrollment(enrollment_id):
    dao.delete_enrollment(enrollment_id)
    return jsonify({'message': 'Inscripción eliminada.'})
