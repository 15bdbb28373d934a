from functools import wraps

from firebase_admin import auth as fb_auth
from firebase_admin.exceptions import FirebaseError
from flask import current_app, g, jsonify, session

from cipm import firestore_dao as dao
from cipm.constants import (
    MODERATOR_ROLES, ROLE_AGENDADOR, ROLE_CLIENTE, ROLE_FORMACION, ROLE_INSTRUCTOR,
    STAFF_ROLES, has_role_at_least,
)
from cipm.firebase_init import get_auth
from cipm.utils.logging import get_logger

log = get_logger('auth')

SESSION_KEY = 'firebase_session'


def _verify_session():
    """Verify the Firebase session cookie and return the user document."""
    session_cookie = session.get(SESSION_KEY)
    if not session_cookie:
        return None

    try:
        decoded = get_auth().verify_session_cookie(session_cookie, check_revoked=True)
    except (fb_auth.InvalidSessionCookieError, FirebaseError, ValueError) as e:
        log.info('rejected session cookie: %s', e)
        session.pop(SESSION_KEY, None)
        return None

    user_data = dao.get_user(decoded['uid'])
    if user_data is None:
        return None
    user_data['uid'] = decoded['uid']
    user_data['id'] = decoded['uid']
    return user_data


class CurrentUser:
    """Proxy object providing attribute access to the current user dict."""

    def __init__(self, data=None):
        self._data = data or {}

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self._data.get(name)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    def get(self, key, default=None):
        return self._data.get(key, default)

    def to_dict(self):
        return {k: v for k, v in self._data.items() if k != 'uid'}

    @property
    def is_authenticated(self):
        return bool(self._data)

    @property
    def id(self):
        return self._data.get('id', '')

    @property
    def role(self):
        return self._data.get('role', ROLE_CLIENTE)

    @property
    def name(self):
        return self._data.get('name') or self._data.get('email', '')

    def is_admin(self):
        return self.role in STAFF_ROLES

    def is_instructor(self):
        return self.role == ROLE_INSTRUCTOR

    def is_agendador(self):
        return self.role == ROLE_AGENDADOR

    def is_formacion(self):
        return self.role == ROLE_FORMACION

    def can_moderate(self):
        return self.role in MODERATOR_ROLES

    def sees_all_trial_classes(self):
        return self.is_admin() or self.id in current_app.config.get('ADMIN_OVERRIDE_UIDS', [])


def load_current_user():
    """Load current user into g before each request."""
    if hasattr(g, '_current_user'):
        return
    g._current_user = CurrentUser(_verify_session())


def get_current_user():
    if not hasattr(g, '_current_user'):
        load_current_user()
    return g._current_user


def _unauthorized():
    return jsonify({'error': 'Debes iniciar sesión.'}), 401


def _forbidden():
    return jsonify({'error': 'No tienes permisos para realizar esta acción.'}), 403


def auth_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_current_user()
        if not user.is_authenticated:
            return _unauthorized()
        g.current_user = user
        return f(*args, **kwargs)
    return decorated


def role_required(*roles):
    """Allow only the listed roles. ``develop`` passes wherever ``admin`` does."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            user = get_current_user()
            if not user.is_authenticated:
                return _unauthorized()
            if user.role not in roles and not (user.is_admin() and set(roles) & set(STAFF_ROLES)):
                log.info('user %s (%s) denied on %s', user.id, user.role, f.__name__)
                return _forbidden()
            g.current_user = user
            return f(*args, **kwargs)
        return decorated
    return decorator


def min_role_required(minimum):
    """Allow every role at or above ``minimum`` in the hierarchy."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            user = get_current_user()
            if not user.is_authenticated:
                return _unauthorized()
            if not has_role_at_least(user.role, minimum):
                log.info('user %s (%s) below %s on %s', user.id, user.role, minimum, f.__name__)
                return _forbidden()
            g.current_user = user
            return f(*args, **kwargs)
        return decorated
    return decorator
