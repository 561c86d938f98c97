# config.py
import os
import tempfile


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    _BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    _DEFAULT_DB_PATH = os.path.join(_BASE_DIR, "instance", "secretaria.db")

    APP_ENV = os.environ.get("APP_ENV", "development")
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key"
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or f"sqlite:///{_DEFAULT_DB_PATH}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT
    JWT_SECRET = os.environ.get("JWT_SECRET") or "dev-jwt-secret"
    JWT_ALGORITHM = "HS256"
    JWT_ISSUER = "secretaria-online"
    JWT_AUDIENCE = "secretaria-online-users"
    JWT_ACCESS_EXPIRATION_MINUTES = int(os.environ.get("JWT_ACCESS_EXPIRATION_MINUTES", "15"))
    JWT_REFRESH_EXPIRATION_DAYS = int(os.environ.get("JWT_REFRESH_EXPIRATION_DAYS", "7"))

    # Uploads / PDFs
    UPLOAD_DIR = os.environ.get("UPLOAD_DIR") or os.path.join(_BASE_DIR, "uploads")
    MAX_UPLOAD_MB = int(os.environ.get("MAX_UPLOAD_MB", "10"))
    MAX_FILE_SIZE = MAX_UPLOAD_MB * 1024 * 1024
    MAX_FILES_PER_REQUEST = 5
    # Margem para os campos do multipart; o limite por arquivo é checado no upload.
    MAX_CONTENT_LENGTH = MAX_FILE_SIZE * MAX_FILES_PER_REQUEST + 1024 * 1024
    ALLOWED_UPLOAD_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}
    ALLOWED_UPLOAD_MIMETYPES = {"application/pdf", "image/jpeg", "image/jpg", "image/png"}

    # Rate limiting (janelas em segundos)
    RATELIMIT_ENABLED = _bool_env("RATELIMIT_ENABLED", True)
    RATELIMIT_LOGIN = (5, 15 * 60)
    RATELIMIT_PASSWORD_CHANGE = (3, 60 * 60)
    RATELIMIT_GENERAL = (100, 15 * 60)

    # Outros
    CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "http://localhost:5173")
    BASE_URL = os.environ.get("BASE_URL", "http://localhost:3000")
    INSTITUTION_NAME = os.environ.get("INSTITUTION_NAME", "Secretaria Online")
    LOG_DIR = os.environ.get("LOG_DIR") or os.path.join(_BASE_DIR, "logs")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_FILE = _bool_env("LOG_TO_FILE", True)


class DevelopmentConfig(Config):
    APP_ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    APP_ENV = "production"
    SECRET_KEY = os.environ.get("SECRET_KEY")
    JWT_SECRET = os.environ.get("JWT_SECRET")


class TestingConfig(Config):
    APP_ENV = "test"
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    UPLOAD_DIR = os.path.join(tempfile.gettempdir(), "secretaria-online-test-uploads")
    JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
    RATELIMIT_ENABLED = False
    LOG_TO_FILE = False
    LOG_LEVEL = "WARNING"


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "test": TestingConfig,
}


def get_config(env_name: str | None = None):
    env_name = (env_name or os.environ.get("APP_ENV") or "development").lower()
    return CONFIG_BY_ENV.get(env_name, DevelopmentConfig)
