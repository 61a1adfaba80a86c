# filetracker/__init__.py

from flask import Flask
from config import Config, ProductionConfig
from filetracker.extensions import db, login_manager, migrate, limiter
from filetracker.errors import Unauthenticated, register_error_handlers
from filetracker.models import DirectoryUser, Status
import os
import logging
from logging.handlers import RotatingFileHandler


def create_app(config_class=Config, test_config=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Force production config if FLASK_ENV is production
    if os.environ.get('FLASK_ENV') == 'production':
        app.config.from_object(ProductionConfig)

        # Production logging setup
        if app.config['LOG_TO_STDOUT']:
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(logging.INFO)
            app.logger.addHandler(stream_handler)
        else:
            if not os.path.exists('logs'):
                os.mkdir('logs')
            file_handler = RotatingFileHandler('logs/filetracker.log',
                                               maxBytes=10240000,
                                               backupCount=10)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s %(levelname)s: %(message)s '
                '[in %(pathname)s:%(lineno)d]'
            ))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('File Tracker startup')

    if test_config:
        app.config.update(test_config)

    # Initialize Flask extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db, render_as_batch=True)
    limiter.init_app(app)

    login_manager.session_protection = 'strong'

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(DirectoryUser, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthenticated()

    from filetracker.auth import bp as auth_bp
    from filetracker.movements import bp as movements_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(movements_bp, url_prefix='/movements')

    register_error_handlers(app, db)

    # Register CLI commands
    from filetracker.cli import init_cli
    init_cli(app)

    with app.app_context():
        if os.environ.get('FLASK_ENV') != 'production':
            # Local store only; the shared directory is not ours to migrate.
            # Schema is managed with `flask db upgrade` in production
            db.create_all(bind_key=None)
            Status.get_predefined_statuses()

    @app.teardown_appcontext
    def cleanup(resp_or_exc):
        """Ensure proper cleanup of database sessions"""
        db.session.remove()

    return app
