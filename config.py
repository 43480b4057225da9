import os
import secrets
import warnings

from cryptography.fernet import Fernet
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


class Config:
    # Generate secure keys if not provided (with warnings)
    _secret_key = os.environ.get("SECRET_KEY")
    _csrf_key = os.environ.get("WTF_CSRF_SECRET_KEY")

    if not _secret_key:
        _secret_key = secrets.token_urlsafe(32)
        warnings.warn(
            "SECRET_KEY not set! Using auto-generated key. "
            "Sessions will reset on app restart. "
            "Run 'python3 generate_secrets.py' to generate secure keys.",
            UserWarning,
        )

    if not _csrf_key:
        _csrf_key = secrets.token_urlsafe(32)
        warnings.warn(
            "WTF_CSRF_SECRET_KEY not set! Using auto-generated key. "
            "Run 'python3 generate_secrets.py' to generate secure keys.",
            UserWarning,
        )

    SECRET_KEY = _secret_key
    WTF_CSRF_SECRET_KEY = _csrf_key

    # Key used to encrypt picks at rest (Fernet, urlsafe base64, 32 bytes)
    PICKS_ENCRYPTION_KEY = os.environ.get("PICKS_ENCRYPTION_KEY")

    REQUIRED_KEYS = ("SECRET_KEY", "PICKS_ENCRYPTION_KEY", "SQLALCHEMY_DATABASE_URI")

    def __init__(self):
        """Initialize configuration with dynamic database URI"""
        self.SQLALCHEMY_DATABASE_URI = self._build_database_uri()

        if not self.PICKS_ENCRYPTION_KEY:
            self.PICKS_ENCRYPTION_KEY = Fernet.generate_key().decode()
            warnings.warn(
                "PICKS_ENCRYPTION_KEY not set! Using auto-generated key. "
                "Picks saved now cannot be read after a restart. "
                "Run 'python3 generate_secrets.py' to generate secure keys.",
                UserWarning,
            )

    def _build_database_uri(self):
        """Build database URI from environment variables"""
        database_url = os.environ.get("DATABASE_URL")

        if database_url:
            # Hosted Postgres providers still hand out postgres:// URLs
            if database_url.startswith("postgres://"):
                database_url = "postgresql+psycopg://" + database_url[len("postgres://"):]
            return database_url

        db_type = os.environ.get("DB_TYPE", "sqlite")

        if db_type.lower() == "postgresql":
            db_host = os.environ.get("DB_HOST") or "localhost"
            db_port = os.environ.get("DB_PORT") or "5432"
            db_name = os.environ.get("DB_NAME") or "bolao_db"
            db_user = os.environ.get("DB_USER") or "bolao_user"
            db_password = os.environ.get("DB_PASSWORD") or "bolao_password"

            return f"postgresql+psycopg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
        else:
            # Default to SQLite for development
            return "sqlite:///" + os.path.join(basedir, "bolao.db")

    def validate(self):
        """Raise RuntimeError for missing settings or a malformed picks key"""
        missing = [key for key in self.REQUIRED_KEYS if not getattr(self, key, None)]
        if missing:
            raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

        key = self.PICKS_ENCRYPTION_KEY
        try:
            Fernet(key.encode() if isinstance(key, str) else key)
        except (TypeError, ValueError) as e:
            raise RuntimeError(
                "PICKS_ENCRYPTION_KEY must be 32 url-safe base64-encoded bytes. "
                "Run 'python3 generate_secrets.py' to generate one."
            ) from e

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Small fixed pool, the app re-reads the store on every request
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Pool settings
    MAX_ROUND = int(os.environ.get("MAX_ROUND") or 38)
    MATCHES_PER_ROUND = int(os.environ.get("MATCHES_PER_ROUND") or 5)
    TIMEZONE = os.environ.get("TIMEZONE", "America/Sao_Paulo")
    SESSION_TIMEOUT = int(os.environ.get("SESSION_TIMEOUT") or 60 * 60 * 24 * 30)

    # Logging configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_CONSOLE = os.environ.get("LOG_TO_CONSOLE", "True").lower() == "true"
    LOG_TO_FILE = os.environ.get("LOG_TO_FILE", "True").lower() == "true"
    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # Environment detection
    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration with helpful defaults"""

    DEBUG = True
    SQLALCHEMY_ECHO = os.environ.get("SQLALCHEMY_ECHO", "False").lower() == "true"


class ProductionConfig(Config):
    """Production configuration with security focus"""

    DEBUG = False

    def validate(self):
        """In production, require explicit environment variables"""
        # Generated keys reset sessions and make stored picks unreadable on restart
        missing = [
            key
            for key in ("SECRET_KEY", "PICKS_ENCRYPTION_KEY")
            if not os.environ.get(key)
        ]
        if missing:
            raise RuntimeError(
                f"Missing required configuration in production: {', '.join(missing)}"
            )
        super().validate()

        if not os.environ.get("DATABASE_URL") and not os.environ.get("DB_TYPE"):
            warnings.warn(
                "PRODUCTION WARNING: no DATABASE_URL set, falling back to SQLite.",
                UserWarning,
            )


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    LOG_TO_FILE = False
    LOG_TO_CONSOLE = False
    PICKS_ENCRYPTION_KEY = "bM4fFmIWZ1r0rMWOGBqUpO9-4ow4C0Yw5Zx3mM2BvWg="

    def __init__(self):
        super().__init__()
        self.SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


# Configuration mapping
config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
