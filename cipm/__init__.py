from flask import Flask, jsonify
from flask_socketio import SocketIO
from flask_wtf.csrf import CSRFError, CSRFProtect
from werkzeug.exceptions import HTTPException

from config import Config
from cipm.errors import FirebaseServiceError, ValidationError
from cipm.utils.logging import configure, get_logger

socketio = SocketIO()
csrf = CSRFProtect()

log = get_logger('app')


def _register_error_handlers(app):
    @app.errorhandler(FirebaseServiceError)
    def handle_service_error(e):
        if e.status_code >= 500:
            log.error('firebase error in %s (%s): %s', e.operation, e.collection, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({'error': str(e)}), 400

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return jsonify({'error': e.description}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure(app.config.get('LOG_LEVEL'))
    csrf.init_app(app)

    if app.config.get('FIREBASE_INIT', True):
        from cipm.firebase_init import init_firebase
        init_firebase(app.config)

    # CORS origins
    allowed_origins = [
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS', '').split(',')
        if origin.strip()
    ]

    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins or None,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'eventlet'),
    )

    from cipm.decorators import load_current_user

    @app.before_request
    def before_request():
        load_current_user()

    _register_error_handlers(app)

    from cipm.routes import (
        auth, clases_prueba, comentarios, contenidos, cursos, dashboard,
        horario, inscripciones, main, modulos, usuarios, videos,
    )
    app.register_blueprint(main.bp)
    app.register_blueprint(auth.bp)
    app.register_blueprint(usuarios.bp)
    app.register_blueprint(cursos.bp)
    app.register_blueprint(modulos.bp)
    app.register_blueprint(contenidos.bp)
    app.register_blueprint(inscripciones.bp)
    app.register_blueprint(comentarios.bp)
    app.register_blueprint(clases_prueba.bp)
    app.register_blueprint(horario.bp)
    app.register_blueprint(dashboard.bp)
    app.register_blueprint(videos.bp)

    from cipm import events  # noqa: F401

    log.info('app created (async_mode=%s)', app.config.get('SOCKETIO_ASYNC_MODE'))
    return app
