import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_bool(name, default='false'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes')


class Config:
    """
    Base configuration for Quillpress.
    Every value can be overridden through environment variables, or on
    app.config before Quillpress(app) is initialised.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(10 * 1024 * 1024)))
    CORS_ORIGIN = os.getenv('CORS_ORIGIN', 'http://localhost:5173')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    DATABASE_URL = os.getenv('DATABASE_URL')
    if DATABASE_URL and DATABASE_URL.startswith('postgres://'):
        DATABASE_URL = DATABASE_URL.replace('postgres://', 'postgresql://', 1)
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or 'sqlite:///' + os.path.join(DB_DIR, 'quillpress.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth
    JWT_SECRET = os.getenv('JWT_SECRET', 'dev-jwt-secret-change-me-at-least-32-chars')
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_DAYS = int(os.getenv('JWT_EXPIRES_DAYS', '7'))
    RECAPTCHA_SECRET_KEY = os.getenv('RECAPTCHA_SECRET_KEY')
    RECAPTCHA_VERIFY_URL = 'https://www.google.com/recaptcha/api/siteverify'

    # Storage settings (MinIO or any S3-compatible endpoint)
    STORAGE_TYPE = os.getenv('STORAGE_TYPE', 'cloud')
    MINIO_ENDPOINT = os.getenv('MINIO_ENDPOINT', 'localhost')
    MINIO_PORT = int(os.getenv('MINIO_PORT', '9000'))
    MINIO_EXTERNAL_ENDPOINT = os.getenv('MINIO_EXTERNAL_ENDPOINT', 'localhost')
    MINIO_EXTERNAL_PORT = int(os.getenv('MINIO_EXTERNAL_PORT', '9000'))
    MINIO_ACCESS_KEY = os.getenv('MINIO_ACCESS_KEY', 'minioadmin')
    MINIO_SECRET_KEY = os.getenv('MINIO_SECRET_KEY', 'minioadmin123')
    MINIO_USE_SSL = _env_bool('MINIO_USE_SSL')
    MINIO_BUCKET = os.getenv('MINIO_BUCKET', 'blog-images')
    UPLOAD_MAX_BYTES = 5 * 1024 * 1024

    # Slug collisions are retried this many times before giving up
    SLUG_RETRY_ATTEMPTS = int(os.getenv('SLUG_RETRY_ATTEMPTS', '3'))

    # Persist LoggingService entries into the app_logs table
    PERSIST_APP_LOGS = _env_bool('PERSIST_APP_LOGS', 'true')

    # Port for local server
    port = int(os.getenv('PORT', '5000'))

    @classmethod
    def as_dict(cls):
        """Uppercase settings, ready for app.config.setdefault()."""
        return {key: getattr(cls, key) for key in dir(cls) if key.isupper()}
