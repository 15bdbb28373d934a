"""
Firestore Data Access Object (DAO) layer.

Route files and services call functions from this module instead of
talking to the Firestore client directly. Vendor failures are logged and
re-raised as :class:`cipm.errors.FirebaseServiceError`.
"""

import uuid
from datetime import datetime, timezone
from functools import wraps

from google.api_core import exceptions as gexc
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from cipm.constants import Collections, SCHEDULE_DOC_ID, DAY_IDS
from cipm.errors import FirebaseServiceError, NotFoundError
from cipm.firebase_init import get_db
from cipm.utils.logging import get_logger

log = get_logger('dao')


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _doc_to_dict(doc_snapshot):
    """Convert a Firestore DocumentSnapshot to a dict with 'id' field."""
    if not doc_snapshot.exists:
        return None
    d = doc_snapshot.to_dict()
    d['id'] = doc_snapshot.id
    return d


def _query_to_list(query_ref):
    """Run a query and return a list of dicts."""
    return [_doc_to_dict(doc) for doc in query_ref.stream()]


def _now():
    return datetime.now(timezone.utc)


def _created_ts(item):
    """Sort key for documents carrying a `createdAt` timestamp."""
    value = item.get('createdAt')
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, dict):
        return value.get('seconds') or 0
    return 0


def _service_call(collection, operation=None):
    """Log vendor errors and re-raise them as FirebaseServiceError."""
    def decorator(f):
        op = operation or f.__name__

        @wraps(f)
        def decorated(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except gexc.GoogleAPICallError as e:
                log.error('%s on %s failed: %s', op, collection, e)
                raise FirebaseServiceError(
                    f'Error en {op} ({collection}): {e.message}',
                    code=getattr(e, 'code', None) or 'unknown',
                    operation=op,
                    collection=collection,
                ) from e
        return decorated
    return decorator


def _get(collection, doc_id):
    return _doc_to_dict(get_db().collection(collection).document(doc_id).get())


def _get_or_404(collection, doc_id, operation):
    item = _get(collection, doc_id)
    if item is None:
        raise NotFoundError(collection, doc_id, operation=operation)
    return item


def _add(collection, data):
    _, doc_ref = get_db().collection(collection).add(data)
    log.info('created %s/%s', collection, doc_ref.id)
    return doc_ref.id


def _update(collection, doc_id, data):
    get_db().collection(collection).document(doc_id).update(data)
    log.info('updated %s/%s', collection, doc_id)


def _delete(collection, doc_id):
    get_db().collection(collection).document(doc_id).delete()
    log.info('deleted %s/%s', collection, doc_id)


def _where(collection, field_path, op, value):
    return (
        get_db().collection(collection)
        .where(filter=FieldFilter(field_path, op, value))
    )


# ========================================================================
# Users  (collection: Usuarios)
# ========================================================================

@_service_call(Collections.USERS)
def get_user(uid):
    """Get a user document by UID. Returns dict or None."""
    return _get(Collections.USERS, uid)


@_service_call(Collections.USERS)
def get_users():
    return _query_to_list(get_db().collection(Collections.USERS))


@_service_call(Collections.USERS)
def get_users_by_role(role):
    return _query_to_list(_where(Collections.USERS, 'role', '==', role))


@_service_call(Collections.USERS)
def get_user_by_email(email):
    """Get a user by email address. Returns dict or None."""
    for doc in _where(Collections.USERS, 'email', '==', email).limit(1).stream():
        return _doc_to_dict(doc)
    return None


@_service_call(Collections.USERS)
def create_user(uid, data):
    """Create a user document with the given UID as the document ID."""
    data['id'] = uid
    data.setdefault('createdAt', _now().isoformat())
    get_db().collection(Collections.USERS).document(uid).set(data)
    log.info('created %s/%s', Collections.USERS, uid)
    return uid


@_service_call(Collections.USERS)
def update_user(uid, data):
    """Update fields on an existing user document."""
    data.setdefault('updatedAt', _now().isoformat())
    _update(Collections.USERS, uid, data)


@_service_call(Collections.USERS)
def delete_user(uid):
    _delete(Collections.USERS, uid)


# ========================================================================
# Courses  (collection: Cursos)
# ========================================================================

@_service_call(Collections.COURSES)
def get_course(course_id):
    """Get a course by ID. Returns dict or None."""
    return _get(Collections.COURSES, course_id)


@_service_call(Collections.COURSES)
def get_courses():
    return _query_to_list(get_db().collection(Collections.COURSES))


@_service_call(Collections.COURSES)
def create_course(data):
    """Create a new course. Returns the generated doc ID."""
    return _add(Collections.COURSES, data)


@_service_call(Collections.COURSES)
def update_course(course_id, data):
    _get_or_404(Collections.COURSES, course_id, 'update_course')
    _update(Collections.COURSES, course_id, data)


@_service_call(Collections.COURSES)
def delete_course(course_id):
    _delete(Collections.COURSES, course_id)


# ========================================================================
# Modules  (collection: Modulos)
# ========================================================================

@_service_call(Collections.MODULES)
def get_module(module_id):
    return _get(Collections.MODULES, module_id)


@_service_call(Collections.MODULES)
def get_modules():
    return _query_to_list(get_db().collection(Collections.MODULES))


@_service_call(Collections.MODULES)
def get_modules_by_course(course_id):
    """Modules of a course sorted by `order` (in memory, no composite index)."""
    modules = _query_to_list(_where(Collections.MODULES, 'courseId', '==', course_id))
    return sorted(modules, key=lambda m: m.get('order') or 0)


@_service_call(Collections.MODULES)
def create_module(data):
    """Create a module and register its ID on the parent course."""
    module_id = _add(Collections.MODULES, data)
    course_id = data.get('courseId')
    if course_id and get_course(course_id):
        get_db().collection(Collections.COURSES).document(course_id).update({
            'modules': firestore.ArrayUnion([module_id]),
        })
    return module_id


@_service_call(Collections.MODULES)
def update_module(module_id, data):
    _get_or_404(Collections.MODULES, module_id, 'update_module')
    _update(Collections.MODULES, module_id, data)


@_service_call(Collections.MODULES)
def delete_module(module_id):
    module = get_module(module_id)
    _delete(Collections.MODULES, module_id)
    if module and module.get('courseId') and get_course(module['courseId']):
        get_db().collection(Collections.COURSES).document(module['courseId']).update({
            'modules': firestore.ArrayRemove([module_id]),
        })


# ========================================================================
# Content  (collection: Content)
# ========================================================================

@_service_call(Collections.CONTENTS)
def get_content(content_id):
    return _get(Collections.CONTENTS, content_id)


@_service_call(Collections.CONTENTS)
def get_contents():
    return _query_to_list(get_db().collection(Collections.CONTENTS))


@_service_call(Collections.CONTENTS)
def get_contents_by_module(module_id):
    contents = _query_to_list(_where(Collections.CONTENTS, 'moduleId', '==', module_id))
    return sorted(contents, key=lambda c: c.get('order') or 0)


@_service_call(Collections.CONTENTS)
def get_contents_by_course(course_id):
    contents = _query_to_list(_where(Collections.CONTENTS, 'courseId', '==', course_id))
    return sorted(contents, key=lambda c: c.get('order') or 0)


@_service_call(Collections.CONTENTS)
def create_content(data):
    return _add(Collections.CONTENTS, data)


@_service_call(Collections.CONTENTS)
def update_content(content_id, data):
    _get_or_404(Collections.CONTENTS, content_id, 'update_content')
    _update(Collections.CONTENTS, content_id, data)


@_service_call(Collections.CONTENTS)
def delete_content(content_id):
    _delete(Collections.CONTENTS, content_id)


# ========================================================================
# Enrollments  (collection: Enrollments)
# ========================================================================

@_service_call(Collections.ENROLLMENTS)
def get_enrollment(enrollment_id):
    return _get(Collections.ENROLLMENTS, enrollment_id)


@_service_call(Collections.ENROLLMENTS)
def get_enrollments():
    return _query_to_list(get_db().collection(Collections.ENROLLMENTS))


@_service_call(Collections.ENROLLMENTS)
def get_enrollments_by_course(course_id):
    return _query_to_list(_where(Collections.ENROLLMENTS, 'courseId', '==', course_id))


@_service_call(Collections.ENROLLMENTS)
def get_enrollments_by_student(student_id):
    return _query_to_list(_where(Collections.ENROLLMENTS, 'studentId', '==', student_id))


@_service_call(Collections.ENROLLMENTS)
def find_enrollment(student_id, course_id):
    """The enrollment of a student in a course, or None."""
    for e in get_enrollments_by_student(student_id):
        if e.get('courseId') == course_id:
            return e
    return None


@_service_call(Collections.ENROLLMENTS)
def create_enrollment(data):
    """Create an enrollment and bump the course `enrollments` counter."""
    enrollment_id = _add(Collections.ENROLLMENTS, data)
    course_id = data.get('courseId')
    if course_id and get_course(course_id):
        get_db().collection(Collections.COURSES).document(course_id).update({
            'enrollments': firestore.Increment(1),
        })
    return enrollment_id


@_service_call(Collections.ENROLLMENTS)
def update_enrollment(enrollment_id, data):
    _get_or_404(Collections.ENROLLMENTS, enrollment_id, 'update_enrollment')
    _update(Collections.ENROLLMENTS, enrollment_id, data)


@_service_call(Collections.ENROLLMENTS)
def delete_enrollment(enrollment_id):
    enrollment = get_enrollment(enrollment_id)
    _delete(Collections.ENROLLMENTS, enrollment_id)
    if not enrollment:
        return
    course = get_course(enrollment.get('courseId') or '')
    if course and (course.get('enrollments') or 0) > 0:
        get_db().collection(Collections.COURSES).document(course['id']).update({
            'enrollments': firestore.Increment(-1),
        })


# ========================================================================
# Course comments  (collection: CourseComments)
# ========================================================================

@_service_call(Collections.COURSE_COMMENTS)
def get_comment(comment_id):
    return _get(Collections.COURSE_COMMENTS, comment_id)


@_service_call(Collections.COURSE_COMMENTS)
def get_comments_by_course(course_id):
    """All comments of a course, oldest first (sorted in memory)."""
    comments = _query_to_list(_where(Collections.COURSE_COMMENTS, 'courseId', '==', course_id))
    return sorted(comments, key=_created_ts)


@_service_call(Collections.COURSE_COMMENTS)
def get_comments_by_type(course_id, comment_type):
    """Opinion comments newest first; video and general oldest first."""
    comments = _query_to_list(
        _where(Collections.COURSE_COMMENTS, 'courseId', '==', course_id)
        .where(filter=FieldFilter('commentType', '==', comment_type))
    )
    return sorted(comments, key=_created_ts, reverse=(comment_type == 'opinion'))


@_service_call(Collections.COURSE_COMMENTS)
def get_video_comments(course_id, content_id):
    comments = _query_to_list(
        _where(Collections.COURSE_COMMENTS, 'courseId', '==', course_id)
        .where(filter=FieldFilter('commentType', '==', 'video'))
        .where(filter=FieldFilter('contentId', '==', content_id))
    )
    return sorted(comments, key=_created_ts)


@_service_call(Collections.COURSE_COMMENTS)
def get_comment_replies(parent_id, limit=None):
    replies = sorted(
        _query_to_list(_where(Collections.COURSE_COMMENTS, 'parentId', '==', parent_id)),
        key=_created_ts,
    )
    return replies[:limit] if limit else replies


@_service_call(Collections.COURSE_COMMENTS)
def get_top_level_comments(course_id, limit=None):
    comments = [c for c in get_comments_by_course(course_id) if not c.get('parentId')]
    comments.sort(key=_created_ts, reverse=True)
    return comments[:limit] if limit else comments


@_service_call(Collections.COURSE_COMMENTS)
def get_user_comments(user_id, course_id=None):
    comments = _query_to_list(_where(Collections.COURSE_COMMENTS, 'userId', '==', user_id))
    if course_id:
        comments = [c for c in comments if c.get('courseId') == course_id]
    return sorted(comments, key=_created_ts, reverse=True)


@_service_call(Collections.COURSE_COMMENTS)
def get_pinned_comments(course_id):
    return [c for c in get_comments_by_course(course_id) if c.get('isPinned')]


@_service_call(Collections.COURSE_COMMENTS)
def get_moderated_comments(course_id=None):
    comments = _query_to_list(_where(Collections.COURSE_COMMENTS, 'isModerated', '==', True))
    if course_id:
        comments = [c for c in comments if c.get('courseId') == course_id]
    return sorted(comments, key=_created_ts, reverse=True)


@_service_call(Collections.COURSE_COMMENTS)
def create_comment(data):
    now = _now()
    data.setdefault('createdAt', now)
    data.setdefault('updatedAt', now)
    return _add(Collections.COURSE_COMMENTS, data)


@_service_call(Collections.COURSE_COMMENTS)
def update_comment(comment_id, data):
    _get_or_404(Collections.COURSE_COMMENTS, comment_id, 'update_comment')
    data.setdefault('updatedAt', _now())
    _update(Collections.COURSE_COMMENTS, comment_id, data)
    return comment_id


@_service_call(Collections.COURSE_COMMENTS)
def delete_comment(comment_id):
    _delete(Collections.COURSE_COMMENTS, comment_id)


@_service_call(Collections.COURSE_COMMENTS)
def batch_update_comments(updates):
    """Apply `[(comment_id, data), ...]` in a single write batch."""
    db = get_db()
    batch = db.batch()
    for comment_id, data in updates:
        batch.update(db.collection(Collections.COURSE_COMMENTS).document(comment_id), data)
    batch.commit()
    log.info('batch updated %d comments', len(updates))


@_service_call(Collections.COURSE_COMMENTS)
def batch_delete_comments(comment_ids):
    db = get_db()
    batch = db.batch()
    for comment_id in comment_ids:
        batch.delete(db.collection(Collections.COURSE_COMMENTS).document(comment_id))
    batch.commit()
    log.info('batch deleted %d comments', len(comment_ids))


# ========================================================================
# Trial classes  (collections: InstructorClasePrueba, AgendadorClasePrueba,
#                 FORMACIONClasePrueba, Prueba)
# ========================================================================

TRIAL_COLLECTIONS = {
    'instructor': Collections.INSTRUCTOR_CLASSES,
    'agendador': Collections.AGENDADOR_CLASSES,
    'formacion': Collections.FORMACION_CLASSES,
}


def _trial_collection(kind):
    try:
        return TRIAL_COLLECTIONS[kind]
    except KeyError:
        raise ValueError(f'Tipo de clase de prueba desconocido: {kind}') from None


@_service_call('ClasePrueba')
def get_trial_classes(kind):
    return _query_to_list(get_db().collection(_trial_collection(kind)))


@_service_call('ClasePrueba')
def get_trial_class(kind, record_id):
    return _get(_trial_collection(kind), record_id)


@_service_call('ClasePrueba')
def create_trial_class(kind, data):
    """Store a trial-class record under its own ID (uuid4 when missing)."""
    collection = _trial_collection(kind)
    record_id = data.get('id') or str(uuid.uuid4())
    data['id'] = record_id
    get_db().collection(collection).document(record_id).set(data)
    log.info('created %s/%s', collection, record_id)
    return record_id


@_service_call('ClasePrueba')
def update_trial_class(kind, record_id, data):
    collection = _trial_collection(kind)
    _get_or_404(collection, record_id, 'update_trial_class')
    _update(collection, record_id, data)


@_service_call('ClasePrueba')
def delete_trial_class(kind, record_id):
    _delete(_trial_collection(kind), record_id)


@_service_call(Collections.TRIAL_CLASSES)
def get_prueba_records():
    """Legacy trial-class records (read only)."""
    return _query_to_list(get_db().collection(Collections.TRIAL_CLASSES))


# ========================================================================
# Instructor schedule  (collection: HorarioInstructores, doc: current)
# ========================================================================

@_service_call(Collections.INSTRUCTOR_SCHEDULE)
def get_schedule():
    """Return the weekly schedule, creating the empty grid if missing."""
    ref = get_db().collection(Collections.INSTRUCTOR_SCHEDULE).document(SCHEDULE_DOC_ID)
    snapshot = ref.get()
    if snapshot.exists:
        return snapshot.to_dict()
    initial = {day: {} for day in DAY_IDS}
    ref.set(initial)
    log.info('initialised empty instructor schedule')
    return initial


@_service_call(Collections.INSTRUCTOR_SCHEDULE)
def update_schedule(schedule_data):
    """Overwrite the whole schedule document."""
    data = dict(schedule_data)
    data['lastUpdated'] = _now()
    get_db().collection(Collections.INSTRUCTOR_SCHEDULE).document(SCHEDULE_DOC_ID).set(data)
    log.info('instructor schedule saved')
    return True


# ========================================================================
# Video library  (collection: Videos)
# ========================================================================

@_service_call(Collections.VIDEOS)
def get_video(video_id):
    return _get(Collections.VIDEOS, video_id)


@_service_call(Collections.VIDEOS)
def get_videos():
    """Every library video, newest first."""
    videos = _query_to_list(get_db().collection(Collections.VIDEOS))
    return sorted(videos, key=_created_ts, reverse=True)


@_service_call(Collections.VIDEOS)
def create_video(data):
    return _add(Collections.VIDEOS, data)


@_service_call(Collections.VIDEOS)
def update_video(video_id, data):
    _get_or_404(Collections.VIDEOS, video_id, 'update_video')
    _update(Collections.VIDEOS, video_id, data)


@_service_call(Collections.VIDEOS)
def delete_video(video_id):
    _get_or_404(Collections.VIDEOS, video_id, 'delete_video')
    _delete(Collections.VIDEOS, video_id)
