import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from .env file, fallback to .env.development
env_path = os.path.join(os.path.dirname(__file__), '.env')
if not os.path.exists(env_path):
    env_path = os.path.join(os.path.dirname(__file__), '.env.development')
load_dotenv(env_path)


def _database_url(*names, default=None):
    """Return the first database URL set among ``names``.

    Render-style ``postgres://`` URLs are rewritten to ``postgresql://``.
    """
    for name in names:
        url = os.environ.get(name)
        if url:
            if url.startswith('postgres://'):
                url = url.replace('postgres://', 'postgresql://', 1)
            return url
    return default


class Config:
    """Base configuration class"""
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        if os.environ.get('FLASK_ENV') == 'production':
            raise ValueError("SECRET_KEY must be set in production")
        SECRET_KEY = 'dev-secret-key'

    # Local "filetracker" store: folders, files and movements
    SQLALCHEMY_DATABASE_URI = _database_url(
        'FILETRACKER_DATABASE_URL',
        'DATABASE_URL',
        default='sqlite:///' + os.path.join(basedir, 'filetracker.db')
    )
    # Remote "shared" directory: users, user levels and departments
    SQLALCHEMY_BINDS = {
        'shared': _database_url(
            'SHARED_DATABASE_URL',
            default='sqlite:///' + os.path.join(basedir, 'shared.db')
        )
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_POOL_SIZE = int(os.environ.get('SQLALCHEMY_POOL_SIZE') or 10)
    SQLALCHEMY_POOL_RECYCLE = 300
    SQLALCHEMY_POOL_TIMEOUT = 20
    SQLALCHEMY_MAX_OVERFLOW = 5
    SQLALCHEMY_CONNECT_TIMEOUT = 10
    DEBUG = os.environ.get('FLASK_ENV') == 'development'

    # Secure cookie settings
    SESSION_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'
    SESSION_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SECURE = os.environ.get('FLASK_ENV') == 'production'
    REMEMBER_COOKIE_HTTPONLY = True

    # Rate limiting configuration
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_DEFAULT = "200 per day"
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Timezone used for request dates and rendered timestamps
    TIMEZONE = os.environ.get('TIMEZONE', 'UTC')

    # Roles as named in the shared directory's userlevels table
    ADMIN_ROLES = ('admin', 'super_admin')
    CUSTODY_ROLES = ('HR',)
    VIEW_ALL_ROLES = ('admin', 'super_admin', 'HR')

    DEFAULT_MOVE_TYPE = 'Take Out'
    LOGS_PER_PAGE = 50


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or Config.RATELIMIT_STORAGE_URI

    # Production security settings
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SECURE = True
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_DURATION = 3600 * 24 * 7  # 7 days in production

    # Production logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT', 'true').lower() == 'true'


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_BINDS = {'shared': 'sqlite:///:memory:'}
    WTF_CSRF_ENABLED = False  # Disable CSRF protection in tests
    RATELIMIT_ENABLED = False  # Disable rate limiting in tests


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration class based on environment"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
