from datetime import datetime, timezone

from flask import Blueprint, jsonify, request

from cipm import events
from cipm import firestore_dao as dao
from cipm.constants import Collections, MODERATOR_ROLES
from cipm.decorators import auth_required, get_current_user, role_required
from cipm.errors import NotFoundError
from cipm.forms import CommentForm, CommentUpdateForm
from cipm.services import comments as rules
from cipm.utils.http import form_errors, json_body

bp = Blueprint('comentarios', __name__, url_prefix='/comentarios')


def _comment_or_404(comment_id, operation):
    comment = dao.get_comment(comment_id)
    if comment is None:
        raise NotFoundError(Collections.COURSE_COMMENTS, comment_id, operation=operation)
    return comment


def _forbidden():
    return jsonify({'error': 'No tienes permisos para realizar esta acción.'}), 403


def _toggle_value(comment, field):
    """Explicit ``{"value": bool}`` from the body, else the negated field."""
    body = json_body()
    if 'value' in body:
        return bool(body['value'])
    return not comment.get(field)


def _ids_from_body():
    ids = json_body().get('ids')
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        return None
    return ids


def _with_replies(comment_ids):
    """The given ids followed by the ids of their replies."""
    reply_ids = []
    for comment_id in comment_ids:
        reply_ids.extend(r['id'] for r in dao.get_comment_replies(comment_id))
    return list(comment_ids) + [r for r in reply_ids if r not in comment_ids]


# -- Queries ----------------------------------------------------------------

@bp.route('/curso/<course_id>')
@auth_required
def course_threads(course_id):
    return jsonify(rules.build_threads(dao.get_comments_by_course(course_id)))


@bp.route('/curso/<course_id>/todos')
@auth_required
def course_comments(course_id):
    return jsonify(dao.get_comments_by_course(course_id))


@bp.route('/curso/<course_id>/tipo/<comment_type>')
@auth_required
def comments_by_type(course_id, comment_type):
    return jsonify(dao.get_comments_by_type(course_id, comment_type))


@bp.route('/curso/<course_id>/video/<content_id>')
@auth_required
def video_comments(course_id, content_id):
    return jsonify(dao.get_video_comments(course_id, content_id))


@bp.route('/curso/<course_id>/fijados')
@auth_required
def pinned_comments(course_id):
    return jsonify(dao.get_pinned_comments(course_id))


@bp.route('/curso/<course_id>/stats')
@auth_required
def comment_stats(course_id):
    return jsonify(rules.stats(dao.get_comments_by_course(course_id)))


@bp.route('/moderados')
@role_required(*MODERATOR_ROLES)
def moderated_comments():
    return jsonify(dao.get_moderated_comments(request.args.get('courseId')))


@bp.route('/usuario/<user_id>')
@auth_required
def user_comments(user_id):
    return jsonify(dao.get_user_comments(user_id, request.args.get('courseId')))


@bp.route('/<comment_id>')
@auth_required
def get_comment(comment_id):
    return jsonify(_comment_or_404(comment_id, 'get_comment'))


@bp.route('/<comment_id>/respuestas')
@auth_required
def replies(comment_id):
    limit = request.args.get('limit', type=int)
    return jsonify(dao.get_comment_replies(comment_id, limit))


# -- Mutations --------------------------------------------------------------

@bp.route('/', methods=['POST'])
@auth_required
def create_comment():
    current_user = get_current_user()
    form = CommentForm()
    if not form.validate_on_submit():
        return form_errors(form)

    if form.parentId.data:
        parent = _comment_or_404(form.parentId.data, 'create_comment')
        if parent.get('courseId') != form.courseId.data:
            return jsonify({'errors': {'parentId': ['La respuesta debe pertenecer al mismo curso.']}}), 400

    comment = rules.build_comment(
        {
            'courseId': form.courseId.data,
            'content': form.content.data,
            'parentId': form.parentId.data,
            'commentType': form.commentType.data,
            'contentId': form.contentId.data,
            'contentTitle': form.contentTitle.data,
        },
        current_user.id, current_user.name, current_user.role, current_user.avatar,
    )
    comment['id'] = dao.create_comment(comment)
    events.notify_comment_created(comment)
    return jsonify(comment), 201


@bp.route('/<comment_id>', methods=['PUT'])
@auth_required
def update_comment(comment_id):
    comment = _comment_or_404(comment_id, 'update_comment')
    if not rules.can_edit(get_current_user(), comment):
        return _forbidden()

    form = CommentUpdateForm()
    if not form.validate_on_submit():
        return form_errors(form)

    data = rules.edit_payload(form.content.data, datetime.now(timezone.utc))
    dao.update_comment(comment_id, data)
    updated = dict(comment, **data)
    events.notify_comment_updated(updated)
    return jsonify(updated)


@bp.route('/<comment_id>', methods=['DELETE'])
@auth_required
def delete_comment(comment_id):
    comment = _comment_or_404(comment_id, 'delete_comment')
    if not rules.can_delete(get_current_user(), comment):
        return _forbidden()

    ids = _with_replies([comment_id])
    dao.batch_delete_comments(ids)
    events.notify_comment_deleted(comment['courseId'], ids)
    return jsonify({'deleted': ids})


@bp.route('/<comment_id>/like', methods=['POST'])
@auth_required
def like_comment(comment_id):
    comment = _comment_or_404(comment_id, 'like_comment')
    data = rules.toggle_like(comment, get_current_user().id)
    dao.update_comment(comment_id, data)
    updated = dict(comment, **data)
    events.notify_comment_updated(updated)
    return jsonify(updated)


@bp.route('/<comment_id>/fijar', methods=['POST'])
@role_required(*MODERATOR_ROLES)
def pin_comment(comment_id):
    comment = _comment_or_404(comment_id, 'pin_comment')
    data = {'isPinned': _toggle_value(comment, 'isPinned')}
    dao.update_comment(comment_id, data)
    updated = dict(comment, **data)
    events.notify_comment_updated(updated)
    return jsonify(updated)


@bp.route('/<comment_id>/moderar', methods=['POST'])
@role_required(*MODERATOR_ROLES)
def moderate_comment(comment_id):
    comment = _comment_or_404(comment_id, 'moderate_comment')
    data = {'isModerated': _toggle_value(comment, 'isModerated')}
    dao.update_comment(comment_id, data)
    updated = dict(comment, **data)
    events.notify_comment_updated(updated)
    return jsonify(updated)


@bp.route('/moderar', methods=['POST'])
@role_required(*MODERATOR_ROLES)
def bulk_moderate():
    ids = _ids_from_body()
    if ids is None:
        return jsonify({'errors': {'ids': ['Lista de comentarios inválida.']}}), 400
    is_moderated = bool(json_body().get('isModerated', True))
    now = datetime.now(timezone.utc)
    dao.batch_update_comments([(i, {'isModerated': is_moderated, 'updatedAt': now}) for i in ids])
    return jsonify({'updated': ids, 'isModerated': is_moderated})


@bp.route('/eliminar', methods=['POST'])
@role_required(*MODERATOR_ROLES)
def bulk_delete():
    ids = _ids_from_body()
    if ids is None:
        return jsonify({'errors': {'ids': ['Lista de comentarios inválida.']}}), 400
    courses = {c['courseId'] for c in (dao.get_comment(i) for i in ids) if c}
    all_ids = _with_replies(ids)
    dao.batch_delete_comments(all_ids)
    for course_id in courses:
        events.notify_comment_deleted(course_id, all_ids)
    return jsonify({'deleted': all_ids})
