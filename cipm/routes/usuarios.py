from firebase_admin import auth as fb_auth
from firebase_admin.exceptions import FirebaseError
from flask import Blueprint, jsonify

from cipm import firestore_dao as dao
from cipm.constants import Collections, ROLE_ADMIN, ROLE_AGENDADOR, ROLE_INSTRUCTOR
from cipm.decorators import auth_required, get_current_user, role_required
from cipm.errors import NotFoundError
from cipm.firebase_init import get_auth
from cipm.firestore_models import User
from cipm.forms import UserForm, UserUpdateForm
from cipm.utils.http import form_errors
from cipm.utils.logging import get_logger

log = get_logger('usuarios')

bp = Blueprint('usuarios', __name__, url_prefix='/usuarios')


@bp.route('/')
@role_required(ROLE_ADMIN)
def list_users():
    return jsonify(dao.get_users())


@bp.route('/instructores')
@auth_required
def instructors():
    return jsonify(dao.get_users_by_role(ROLE_INSTRUCTOR))


@bp.route('/agendadores')
@auth_required
def schedulers():
    return jsonify(dao.get_users_by_role(ROLE_AGENDADOR))


@bp.route('/<uid>')
@auth_required
def get_user(uid):
    current_user = get_current_user()
    if uid != current_user.id and not current_user.is_admin():
        return jsonify({'error': 'No tienes permisos para realizar esta acción.'}), 403
    user = dao.get_user(uid)
    if user is None:
        raise NotFoundError(Collections.USERS, uid, operation='get_user')
    return jsonify(user)


@bp.route('/', methods=['POST'])
@role_required(ROLE_ADMIN)
def create_user():
    form = UserForm()
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
        return jsonify({'error': f'Error al crear el usuario: {e}'}), 400

    user = User(
        id=firebase_user.uid,
        name=form.name.data,
        email=form.email.data,
        role=form.role.data,
        avatar=form.avatar.data or '',
    )
    dao.create_user(firebase_user.uid, user.to_dict())
    return jsonify(user.to_dict()), 201


@bp.route('/<uid>', methods=['PUT'])
@role_required(ROLE_ADMIN)
def update_user(uid):
    existing = dao.get_user(uid)
    if existing is None:
        raise NotFoundError(Collections.USERS, uid, operation='update_user')

    form = UserUpdateForm()
    if not form.validate_on_submit():
        return form_errors(form)

    auth_changes = {}
    if form.email.data != existing.get('email'):
        auth_changes['email'] = form.email.data
    if form.password.data:
        auth_changes['password'] = form.password.data
    if auth_changes:
        try:
            get_auth().update_user(uid, **auth_changes)
        except (FirebaseError, ValueError) as e:
            log.error('firebase account update failed for %s: %s', uid, e)
            return jsonify({'error': f'Error al actualizar el usuario: {e}'}), 400

    data = {
        'name': form.name.data,
        'email': form.email.data,
        'role': form.role.data,
        'avatar': form.avatar.data or existing.get('avatar', ''),
    }
    dao.update_user(uid, data)
    return jsonify(dict(existing, **data))


@bp.route('/<uid>', methods=['DELETE'])
@role_required(ROLE_ADMIN)
def delete_user(uid):
    try:
        get_auth().delete_user(uid)
    except fb_auth.UserNotFoundError:
        log.warning('auth account %s already missing', uid)
    except FirebaseError as e:
        log.error('firebase account deletion failed for %s: %s', uid, e)
        return jsonify({'error': f'Error al eliminar el usuario: {e}'}), 400
    dao.delete_user(uid)
    return jsonify({'message': 'Usuario eliminado.'})
