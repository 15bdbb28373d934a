from flask import Blueprint, jsonify, request

from cipm import firestore_dao as dao
from cipm.constants import Collections, ROLE_ADMIN, ROLE_INSTRUCTOR
from cipm.decorators import auth_required, role_required
from cipm.errors import NotFoundError
from cipm.firestore_models import Module
from cipm.forms import ModuleForm
from cipm.utils.http import form_errors

bp = Blueprint('modulos', __name__, url_prefix='/modulos')


@bp.route('/')
@auth_required
def list_modules():
    course_id = request.args.get('courseId')
    if course_id:
        return jsonify(dao.get_modules_by_course(course_id))
    return jsonify(dao.get_modules())


@bp.route('/<module_id>')
@auth_required
def get_module(module_id):
    module = dao.get_module(module_id)
    if module is None:
        raise NotFoundError(Collections.MODULES, module_id, operation='get_module')
    module['contents'] = dao.get_contents_by_module(module_id)
    return jsonify(module)


@bp.route('/', methods=['POST'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def create_module():
    form = ModuleForm()
    if not form.validate_on_submit():
        return form_errors(form)
    if dao.get_course(form.courseId.data) is None:
        raise NotFoundError(Collections.COURSES, form.courseId.data, operation='create_module')

    module = Module(
        course_id=form.courseId.data,
        title=form.title.data.strip(),
        description=form.description.data.strip(),
        order=form.order.data,
        status=form.status.data,
    )
    module.id = dao.create_module(module.to_dict())
    return jsonify(dict(module.to_dict(), id=module.id)), 201


@bp.route('/<module_id>', methods=['PUT'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def update_module(module_id):
    form = ModuleForm()
    if not form.validate_on_submit():
        return form_errors(form)

    data = {
        'title': form.title.data.strip(),
        'description': form.description.data.strip(),
        'order': form.order.data,
        'status': form.status.data,
    }
    dao.update_module(module_id, data)
    # A module never moves between courses
    return jsonify(dao.get_module(module_id))


@bp.route('/<module_id>', methods=['DELETE'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def delete_module(module_id):
    dao.delete_module(module_id)
    return jsonify({'message': 'Módulo eliminado.'})
