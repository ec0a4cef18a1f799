from datetime import timedelta

from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
default_origins = [
    "http://localhost:5173",
    "http://localhost:3000",
]
socketio = SocketIO(async_mode=None)


def get_store():
    """Return the room store owned by the current app."""
    return current_app.extensions['session_store']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = list(default_origins)
    if flask_app.config.get('CLIENT_URL'):
        allowed_origins.append(flask_app.config['CLIENT_URL'])

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One room store per app; all socket handlers and status routes share it
    from battleships.services.rooms import SessionStore
    store = SessionStore(
        room_id_length=flask_app.config.get('ROOM_ID_LENGTH', 6),
        max_age=timedelta(seconds=flask_app.config.get('ROOM_MAX_AGE_SEC', 3600)),
    )
    flask_app.extensions['session_store'] = store

    # Import and register blueprints here
    from battleships.routes import main
    flask_app.register_blueprint(main)

    from battleships.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api/auth')

    from battleships.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from battleships.services.rooms.sweeper import start_sweeper
    start_sweeper(flask_app, store)

    # Flask-Login user loader
    from battleships.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the user tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    flask_app.logger.info("Room-based multiplayer system active")
    return flask_app
