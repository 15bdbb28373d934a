from flask import Blueprint, jsonify, request
from werkzeug.utils import secure_filename

from cipm import firestore_dao as dao
from cipm.constants import Collections, ROLE_ADMIN, ROLE_INSTRUCTOR
from cipm.decorators import auth_required, role_required
from cipm.errors import NotFoundError
from cipm.firestore_models import Content
from cipm.forms import ContentForm
from cipm.services.storage import delete_file, get_signed_url, upload_content_file
from cipm.utils.http import form_errors

bp = Blueprint('contenidos', __name__, url_prefix='/contenidos')

ALLOWED_EXTENSIONS = {'pdf', 'doc', 'docx', 'ppt', 'pptx', 'mp4', 'webm', 'mov', 'mp3'}


def _content_from_form(form, module):
    return Content(
        course_id=form.courseId.data or module.get('courseId', ''),
        module_id=form.moduleId.data,
        title=form.title.data.strip(),
        type=form.type.data,
        url=form.url.data or None,
        duration=form.duration.data or None,
        description=form.description.data or None,
        questions=form.questions.data,
        order=form.order.data or 0,
    )


def _module_or_404(module_id, operation):
    module = dao.get_module(module_id)
    if module is None:
        raise NotFoundError(Collections.MODULES, module_id, operation=operation)
    return module


@bp.route('/')
@auth_required
def list_contents():
    if request.args.get('moduleId'):
        return jsonify(dao.get_contents_by_module(request.args['moduleId']))
    if request.args.get('courseId'):
        return jsonify(dao.get_contents_by_course(request.args['courseId']))
    return jsonify(dao.get_contents())


@bp.route('/<content_id>')
@auth_required
def get_content(content_id):
    content = dao.get_content(content_id)
    if content is None:
        raise NotFoundError(Collections.CONTENTS, content_id, operation='get_content')
    return jsonify(content)


@bp.route('/', methods=['POST'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def create_content():
    form = ContentForm()
    if not form.validate_on_submit():
        return form_errors(form)

    module = _module_or_404(form.moduleId.data, 'create_content')
    content = _content_from_form(form, module)
    content.id = dao.create_content(content.to_dict())
    return jsonify(dict(content.to_dict(), id=content.id)), 201


@bp.route('/<content_id>', methods=['PUT'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def update_content(content_id):
    form = ContentForm()
    if not form.validate_on_submit():
        return form_errors(form)

    module = _module_or_404(form.moduleId.data, 'update_content')
    data = _content_from_form(form, module).to_dict()
    dao.update_content(content_id, data)
    return jsonify(dict(data, id=content_id))


@bp.route('/<content_id>', methods=['DELETE'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def delete_content(content_id):
    content = dao.get_content(content_id)
    dao.delete_content(content_id)
    if content and content.get('storagePath'):
        delete_file(content['storagePath'])
    return jsonify({'message': 'Contenido eliminado.'})


@bp.route('/<content_id>/archivo', methods=['POST'])
@role_required(ROLE_ADMIN, ROLE_INSTRUCTOR)
def upload_file(content_id):
    """Attach a video or document to an existing content item."""
    content = dao.get_content(content_id)
    if content is None:
        raise NotFoundError(Collections.CONTENTS, content_id, operation='upload_file')

    file = request.files.get('file')
    if file is None or not file.filename:
        return jsonify({'errors': {'file': ['Selecciona un archivo.']}}), 400
    filename = secure_filename(file.filename)
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if ext not in ALLOWED_EXTENSIONS:
        return jsonify({'errors': {'file': ['Tipo de archivo no permitido.']}}), 400

    path = upload_content_file(
        content.get('courseId', ''), content.get('moduleId', ''),
        file.stream, filename, file.mimetype,
    )
    if content.get('storagePath'):
        delete_file(content['storagePath'])
    dao.update_content(content_id, {'storagePath': path})
    return jsonify({'id': content_id, 'storagePath': path, 'url': get_signed_url(path)})


@bp.route('/<content_id>/url')
@auth_required
def file_url(content_id):
    content = dao.get_content(content_id)
    if content is None:
        raise NotFoundError(Collections.CONTENTS, content_id, operation='file_url')
    if content.get('storagePath'):
        return jsonify({'url': get_signed_url(content['storagePath'])})
    return jsonify({'url': content.get('url')})
