import os

from cipm import create_app, socketio
from cipm.utils.logging import get_logger

app = create_app()
log = get_logger('main')

if __name__ == '__main__':
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() in ('true', '1')
    port = int(os.environ.get('PORT', 8080))
    log.info('listening on port %d', port)
    socketio.run(app, host='0.0.0.0', port=port, debug=debug)
