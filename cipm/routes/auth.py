from datetime import timedelta

import requests as http_requests
from firebase_admin.exceptions import FirebaseError
from flask import Blueprint, current_app, jsonify, session
from flask_wtf.csrf import generate_csrf

from cipm import firestore_dao as dao
from cipm.constants import ROLE_CLIENTE
from cipm.decorators import SESSION_KEY, auth_required, get_current_user
from cipm.firebase_init import get_auth
from cipm.firestore_models import User
from cipm.forms import GoogleLoginForm, LoginForm, PasswordChangeForm, RegistrationForm
from cipm.utils.http import form_errors
from cipm.utils.logging import get_logger

log = get_logger('auth')

bp = Blueprint('auth', __name__, url_prefix='/auth')

FIREBASE_SIGN_IN_URL = (
    'https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword'
)


def _firebase_sign_in(email, password):
    """Verify email/password via Firebase Auth REST API.

    Returns the ID token on success, or None on failure.
    """
    api_key = current_app.config.get('FIREBASE_WEB_API_KEY')
    if not api_key:
        log.warning('FIREBASE_WEB_API_KEY is not set; password sign-in disabled')
        return None

    try:
        resp = http_requests.post(
            f'{FIREBASE_SIGN_IN_URL}?key={api_key}',
            json={
                'email': email,
                'password': password,
                'returnSecureToken': True,
            },
            timeout=10,
        )
    except http_requests.RequestException as e:
        log.error('firebase sign-in request failed: %s', e)
        return None
    if resp.status_code == 200:
        return resp.json().get('idToken')
    return None


@bp.route('/csrf')
def csrf_token():
    return jsonify({'csrfToken': generate_csrf()})


@bp.route('/login', methods=['POST'])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return form_errors(form)

    id_token = _firebase_sign_in(form.email.data, form.password.data)
    if not id_token:
        log.info('failed login for %s', form.email.data)
        return jsonify({'error': 'Correo o contraseña incorrectos.'}), 401

    expires_in = timedelta(days=current_app.config.get('SESSION_DAYS', 5))
    try:
        session[SESSION_KEY] = get_auth().create_session_cookie(id_token, expires_in=expires_in)
    except FirebaseError as e:
        log.error('could not create session cookie: %s', e)
        return jsonify({'error': 'Error al iniciar sesión.'}), 500

    user = dao.get_user_by_email(form.email.data)
    log.info('user %s logged in', user['id'] if user else form.email.data)
    return jsonify({'user': user})


@bp.route('/google', methods=['POST'])
def google_login():
    """Sign in with a Google ID token; the first sign-in creates a ``cliente``."""
    form = GoogleLoginForm()
    if not form.validate_on_submit():
        return form_errors(form)

    auth = get_auth()
    try:
        decoded = auth.verify_id_token(form.idToken.data)
    except (FirebaseError, ValueError) as e:
        log.info('rejected google token: %s', e)
        return jsonify({'error': 'Token de Google inválido.'}), 401

    expires_in = timedelta(days=current_app.config.get('SESSION_DAYS', 5))
    try:
        session[SESSION_KEY] = auth.create_session_cookie(form.idToken.data, expires_in=expires_in)
    except FirebaseError as e:
        log.error('could not create session cookie: %s', e)
        return jsonify({'error': 'Error al iniciar sesión.'}), 500

    uid = decoded['uid']
    existing = dao.get_user(uid)
    if existing is not None:
        # Stored profiles are never overwritten; older ones keep the role under `rol`
        existing['role'] = existing.get('role') or existing.get('rol') or ROLE_CLIENTE
        log.info('user %s logged in with google', uid)
        return jsonify({'user': existing})

    email = decoded.get('email', '')
    user = User(id=uid, name=decoded.get('name') or email, email=email,
                role=ROLE_CLIENTE, avatar=decoded.get('picture') or '')
    data = user.to_dict()
    dao.create_user(uid, data)
    log.info('created cliente %s from google sign-in', uid)
    return jsonify({'user': data}), 201


@bp.route('/logout', methods=['POST'])
@auth_required
def logout():
    session.pop(SESSION_KEY, None)
    return jsonify({'message': 'Sesión cerrada.'})


@bp.route('/me')
@auth_required
def me():
    return jsonify({'user': get_current_user().to_dict()})


@bp.route('/register', methods=['POST'])
def register():
    form = RegistrationForm()
    if not form.validate_on_submit():
        return form_errors(form)

    if dao.get_user_by_email(form.email.data):
        return jsonify({'errors': {'email': ['El correo ya está registrado.']}}), 400

    try:
        firebase_user = get_auth().create_user(
            email=form.email.data,
            password=form.password.data,
            display_name=form.name.data,
        )
    except (FirebaseError, ValueError) as e:
        log.error('firebase account creation failed for %s: %s', form.email.data, e)
        return jsonify({'error': f'Error al crear la cuenta: {e}'}), 400

    user = User(id=firebase_user.uid, name=form.name.data, email=form.email.data, role=ROLE_CLIENTE)
    dao.create_user(firebase_user.uid, user.to_dict())
    return jsonify({'user': user.to_dict()}), 201


@bp.route('/password', methods=['POST'])
@auth_required
def change_password():
    current_user = get_current_user()
    form = PasswordChangeForm()
    if not form.validate_on_submit():
        return form_errors(form)

    # Verify current password via Firebase REST API
    if not _firebase_sign_in(current_user.email, form.current_password.data):
        return jsonify({'errors': {'current_password': ['La contraseña actual es incorrecta.']}}), 400

    try:
        get_auth().update_user(current_user.id, password=form.new_password.data)
    except FirebaseError as e:
        log.error('password update failed for %s: %s', current_user.id, e)
        return jsonify({'error': 'Error al actualizar la contraseña.'}), 500

    log.info('user %s changed password', current_user.id)
    return jsonify({'message': 'Contraseña actualizada.'})
