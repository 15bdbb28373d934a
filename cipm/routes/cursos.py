from flask import Blueprint, jsonify

from cipm import firestore_dao as dao
from cipm.constants import Collections, ROLE_ADMIN, ROLE_INSTRUCTOR
from cipm.decorators import auth_required, role_required
from cipm.errors import NotFoundError
from cipm.firestore_models import Course
from cipm.forms import CourseForm
from cipm.utils.http import form_errors

bp = Blueprint('cursos', __name__, url_prefix='/cursos')


def _course_fields(form):
    return {
        'title': form.title.data.strip(),
        'description': form.description.data.strip(),
        'price': form.price.data or 0,
        'duration': form.duration.data,
        'status': form.status.data,
        'type': form.type.data,
    }


@bp.route('/')
@auth_required
def list_courses():
    return jsonify(dao.get_courses())


@bp.route('/<course_id>')
@auth_required
def course_detail(course_id):
    """A course with its modules (by ``order``), each holding its contents."""
    course = dao.get_course(course_id)
    if course is None:
        raise NotFoundError(Collections.COURSES, course_id, operation='get_course')

    modules = dao.get_modules_by_course(course_id)
    for module in modules:
        module['contents'] = dao.get_contents_by_module(module['id'])
    course['modulesDetail'] = modules
    course['totalContents'] = sum(len(m['contents']) for m in modules)
    return jsonify(course)


@bp.route('/', methods=['POST'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def create_course():
    form = CourseForm()
    if not form.validate_on_submit():
        return form_errors(form)

    course = Course(**_course_fields(form))
    course.id = dao.create_course(course.to_dict())
    return jsonify(dict(course.to_dict(), id=course.id)), 201


@bp.route('/<course_id>', methods=['PUT'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def update_course(course_id):
    form = CourseForm()
    if not form.validate_on_submit():
        return form_errors(form)

    data = _course_fields(form)
    dao.update_course(course_id, data)
    return jsonify(dict(data, id=course_id))


@bp.route('/<course_id>', methods=['DELETE'])
@role_required(ROLE_ADMIN)
def delete_course(course_id):
    # Modules, contents and enrollments are left in place
    dao.delete_course(course_id)
    return jsonify({'message': 'Curso eliminado.'})
