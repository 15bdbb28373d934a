import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default='true'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    WTF_CSRF_ENABLED = _env_flag('WTF_CSRF_ENABLED')
    WTF_CSRF_TIME_LIMIT = None

    FIREBASE_INIT = _env_flag('FIREBASE_INIT')
    FIREBASE_WEB_API_KEY = os.environ.get('FIREBASE_WEB_API_KEY', '')
    FIREBASE_STORAGE_BUCKET = os.environ.get('FIREBASE_STORAGE_BUCKET', '')
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID', '')
    GOOGLE_APPLICATION_CREDENTIALS = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS', '')
    SESSION_DAYS = int(os.environ.get('SESSION_DAYS', 5))

    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '')
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'eventlet')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Users that see every trial class regardless of role
    ADMIN_OVERRIDE_UIDS = [
        uid.strip() for uid in os.environ.get('ADMIN_OVERRIDE_UIDS', '').split(',') if uid.strip()
    ]
