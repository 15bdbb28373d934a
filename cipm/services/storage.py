import uuid
from datetime import timedelta

from cipm.firebase_init import get_bucket
from cipm.utils.logging import get_logger

log = get_logger('storage')


def upload_file(file_data, destination_path, content_type=None):
    """Upload bytes or a file-like object to Firebase Storage.

    Returns the storage path.
    """
    blob = get_bucket().blob(destination_path)
    if content_type:
        blob.content_type = content_type
    if isinstance(file_data, bytes):
        blob.upload_from_string(file_data, content_type=content_type)
    else:
        blob.upload_from_file(file_data, content_type=content_type)
    log.info('uploaded %s', destination_path)
    return destination_path


def delete_file(storage_path):
    blob = get_bucket().blob(storage_path)
    if blob.exists():
        blob.delete()
        log.info('deleted %s', storage_path)


def get_signed_url(storage_path, expiration_minutes=60):
    """Signed v4 GET url for ``storage_path``, or None if the blob is missing."""
    blob = get_bucket().blob(storage_path)
    if not blob.exists():
        return None
    return blob.generate_signed_url(
        version='v4',
        expiration=timedelta(minutes=expiration_minutes),
        method='GET',
    )


def content_path(course_id, module_id, filename):
    unique = uuid.uuid4().hex[:8]
    return f'cursos/{course_id}/modulos/{module_id}/{unique}_{filename}'


def upload_content_file(course_id, module_id, file_data, filename, content_type=None):
    """Store a lesson file (video or document) under its course and module."""
    return upload_file(file_data, content_path(course_id, module_id, filename), content_type)
