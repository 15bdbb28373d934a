from flask import Blueprint, jsonify

from cipm.constants import DAYS, HOURS, ROLES
from cipm.decorators import get_current_user

bp = Blueprint('main', __name__)


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'}), 200


@bp.route('/')
def index():
    user = get_current_user()
    return jsonify({
        'name': 'CIPM Educación',
        'authenticated': user.is_authenticated,
        'role': user.role if user.is_authenticated else None,
    })


@bp.route('/catalogos')
def catalogs():
    """Fixed option lists used by the client forms."""
    return jsonify({
        'roles': list(ROLES),
        'days': [{'id': day_id, 'name': name} for day_id, name in DAYS],
        'hours': HOURS,
    })
