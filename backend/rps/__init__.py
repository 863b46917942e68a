from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Session state lives on the app, one coordinator per app instance
    from rps.socketio_events import SessionCoordinator, register_socketio_handlers
    SessionCoordinator(flask_app)
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    # Import and register blueprints here
    from rps.main import main
    flask_app.register_blueprint(main)

    from rps.api.highscores import highscores
    flask_app.register_blueprint(highscores, url_prefix='/api/highscores')

    return flask_app
