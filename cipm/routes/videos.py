from flask import Blueprint, jsonify

from cipm import firestore_dao as dao
from cipm.constants import Collections, ROLE_ADMIN
from cipm.decorators import auth_required, role_required
from cipm.errors import NotFoundError
from cipm.firestore_models import Video
from cipm.forms import VideoForm
from cipm.utils.http import form_errors, json_body

bp = Blueprint('videos', __name__, url_prefix='/videos')


def _video_from_form(form):
    return Video(
        title=form.title.data.strip(),
        description=form.description.data.strip(),
        url=form.url.data.strip(),
        duration=form.duration.data.strip(),
        thumbnail=(form.thumbnail.data or '').strip(),
        tags=json_body().get('tags') or [],
        featured=form.featured.data,
    )


@bp.route('/')
@auth_required
def list_videos():
    return jsonify(dao.get_videos())


@bp.route('/<video_id>')
@auth_required
def get_video(video_id):
    video = dao.get_video(video_id)
    if video is None:
        raise NotFoundError(Collections.VIDEOS, video_id, operation='get_video')
    return jsonify(video)


@bp.route('/', methods=['POST'])
@role_required(ROLE_ADMIN)
def create_video():
    form = VideoForm()
    if not form.validate_on_submit():
        return form_errors(form)

    video = _video_from_form(form)
    data = video.to_dict()
    video.id = dao.create_video(data)
    return jsonify(dict(data, id=video.id)), 201


@bp.route('/<video_id>', methods=['PUT'])
@role_required(ROLE_ADMIN)
def update_video(video_id):
    form = VideoForm()
    if not form.validate_on_submit():
        return form_errors(form)

    data = _video_from_form(form).to_dict()
    # createdAt belongs to the original upload
    data.pop('createdAt')
    dao.update_video(video_id, data)
    return jsonify(dao.get_video(video_id))


@bp.route('/<video_id>', methods=['DELETE'])
@role_required(ROLE_ADMIN)
def delete_video(video_id):
    dao.delete_video(video_id)
    return jsonify({'message': 'Video eliminado.'})
