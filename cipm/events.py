"""Socket.IO rooms and change notifications.

Clients join ``course_<id>`` to follow a course's comments, ``schedule`` for
the instructor grid and ``trial_classes`` for trial-class bookings. Routes
call the ``notify_*`` helpers after a successful write.
"""
from flask_socketio import emit, join_room, leave_room

from cipm import socketio
from cipm import firestore_dao as dao
from cipm.decorators import get_current_user
from cipm.utils.logging import get_logger

log = get_logger('events')

SCHEDULE_ROOM = 'schedule'
TRIAL_CLASSES_ROOM = 'trial_classes'


def course_room(course_id):
    return f'course_{course_id}'


def _get_socket_user():
    """Get current user from the Flask session context in Socket.IO events."""
    user = get_current_user()
    if user and user.is_authenticated:
        return user
    return None


@socketio.on('connect')
def handle_connect():
    user = _get_socket_user()
    if user:
        emit('connected', {'userId': user.id, 'name': user.name, 'role': user.role})


@socketio.on('join_course')
def handle_join_course(data):
    user = _get_socket_user()
    if not user:
        emit('error', {'message': 'Debes iniciar sesión.'})
        return

    course_id = (data or {}).get('courseId')
    if not course_id or not dao.get_course(course_id):
        emit('error', {'message': 'Curso no encontrado.'})
        return

    join_room(course_room(course_id))
    emit('joined', {'room': course_room(course_id)})


@socketio.on('leave_course')
def handle_leave_course(data):
    course_id = (data or {}).get('courseId')
    if course_id:
        leave_room(course_room(course_id))


@socketio.on('join_schedule')
def handle_join_schedule(data=None):
    user = _get_socket_user()
    if not user:
        emit('error', {'message': 'Debes iniciar sesión.'})
        return
    join_room(SCHEDULE_ROOM)
    if user.is_admin() or user.is_agendador() or user.is_formacion() or user.is_instructor():
        join_room(TRIAL_CLASSES_ROOM)
    emit('joined', {'room': SCHEDULE_ROOM})


# Emitters used by the HTTP routes ------------------------------------------

def _broadcast(event, payload, room):
    socketio.emit(event, payload, to=room)
    log.debug('emitted %s to %s', event, room)


def notify_comment_created(comment):
    _broadcast('comment_created', comment, course_room(comment['courseId']))


def notify_comment_updated(comment):
    _broadcast('comment_updated', comment, course_room(comment['courseId']))


def notify_comment_deleted(course_id, comment_ids):
    _broadcast('comment_deleted', {'courseId': course_id, 'ids': list(comment_ids)}, course_room(course_id))


def notify_schedule_updated(schedule):
    _broadcast('schedule_updated', schedule, SCHEDULE_ROOM)


def notify_trial_class_changed(kind, action, record_id):
    _broadcast('trial_class_changed', {'kind': kind, 'action': action, 'id': record_id}, TRIAL_CLASSES_ROOM)
