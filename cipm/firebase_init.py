"""Firebase Admin SDK bootstrap.

The SDK app, Firestore client and Storage bucket are created once per
process by :func:`init_firebase`; the getters initialise lazily so scripts
such as ``seed.py`` can use them without going through ``create_app``.
"""
import os

import firebase_admin
from firebase_admin import auth, credentials, firestore, storage

from cipm.utils.logging import get_logger

log = get_logger('firebase')

DEFAULT_CREDENTIALS_PATH = './firebase-service-account.json'

_app = None
_db = None
_bucket = None


def _setting(app_config, key, default=''):
    value = (app_config or {}).get(key) or os.environ.get(key)
    return value or default


def _credentials(path):
    if path and os.path.exists(path):
        log.info('using service account %s', path)
        return credentials.Certificate(path)
    log.info('service account file not found; using application default credentials')
    return credentials.ApplicationDefault()


def init_firebase(app_config=None):
    """Initialise the SDK from ``app_config`` (falling back to the environment)."""
    global _app, _db, _bucket
    if _app is not None:
        return _app

    cred = _credentials(_setting(app_config, 'GOOGLE_APPLICATION_CREDENTIALS', DEFAULT_CREDENTIALS_PATH))
    bucket_name = _setting(app_config, 'FIREBASE_STORAGE_BUCKET')
    project_id = _setting(app_config, 'FIREBASE_PROJECT_ID')

    options = {}
    if bucket_name:
        options['storageBucket'] = bucket_name
    if project_id:
        options['projectId'] = project_id

    _app = firebase_admin.initialize_app(cred, options=options or None)
    _db = firestore.client(app=_app)
    if bucket_name:
        _bucket = storage.bucket(app=_app)
    log.info('firebase ready (project=%s, bucket=%s)', project_id or '-', bucket_name or '-')
    return _app


def get_db():
    if _db is None:
        init_firebase()
    return _db


def get_bucket():
    if _bucket is None:
        init_firebase()
    if _bucket is None:
        raise RuntimeError('FIREBASE_STORAGE_BUCKET is not configured')
    return _bucket


def get_auth():
    """The ``firebase_admin.auth`` module (patched in tests)."""
    return auth
