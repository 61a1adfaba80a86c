# filetracker/extensions.py

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy.engine.url import make_url


class CustomSQLAlchemy(SQLAlchemy):
    def _make_engine(self, bind_key, options, app):
        """Apply database-specific pool options before creating an engine.

        Both the local filetracker store and the shared directory bind
        go through here, so each gets options suited to its driver.

        Args:
            bind_key: Bind key from config, None for the default database
            options: Engine options collected by Flask-SQLAlchemy
            app: Flask application instance
        """
        url = make_url(options['url'])

        # Common options safe for all databases
        options.setdefault('pool_pre_ping', True)

        # Add additional options only for non-SQLite databases
        if not url.drivername.startswith('sqlite'):
            # These options are safe for PostgreSQL and MySQL
            options.setdefault('pool_size', app.config.get(
                'SQLALCHEMY_POOL_SIZE',
                10
            ))
            options.setdefault('pool_recycle', app.config.get(
                'SQLALCHEMY_POOL_RECYCLE',
                300
            ))
            options.setdefault('pool_timeout', app.config.get(
                'SQLALCHEMY_POOL_TIMEOUT',
                20
            ))
            options.setdefault('max_overflow', app.config.get(
                'SQLALCHEMY_MAX_OVERFLOW',
                5
            ))

            # Database-specific connect_args
            if url.drivername.startswith('postgresql'):
                options.setdefault('connect_args', {
                    'connect_timeout': app.config.get(
                        'SQLALCHEMY_CONNECT_TIMEOUT',
                        10
                    ),
                    'keepalives': 1,
                    'keepalives_idle': 30,
                    'keepalives_interval': 10,
                    'keepalives_count': 5
                })
            elif url.drivername.startswith('mysql'):
                options.setdefault('connect_args', {
                    'connect_timeout': app.config.get(
                        'SQLALCHEMY_CONNECT_TIMEOUT',
                        10
                    )
                })

        return super()._make_engine(bind_key, options, app)


# Initialize Flask extensions
db = CustomSQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
limiter = Limiter(key_func=get_remote_address)  # storage from RATELIMIT_STORAGE_URI
