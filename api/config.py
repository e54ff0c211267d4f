"""
Environment-aware configuration.
Secrets, database URL, image host credentials and token lifetimes are read
once here and handed to the services built in create_app().
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    DEBUG = False
    TESTING = False
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Token signing. No defaults: the app refuses to start without both.
    JWT_SECRET = os.getenv("JWT_SECRET")
    REFRESH_SECRET = os.getenv("REFRESH_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "900")))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", "604800")))

    # Refresh cookie
    REFRESH_COOKIE_NAME = "refreshToken"
    COOKIE_SECURE = False

    # Credential / content store
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///trekking.db")
    DB_TIMEOUT_SECONDS = int(os.getenv("DB_TIMEOUT_SECONDS", "5"))
    DB_ECHO = _env_bool("DB_ECHO")
    MAX_ADMINS = int(os.getenv("MAX_ADMINS", "2"))

    # Image host (Cloudinary)
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "trekking")
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    ALLOWED_UPLOAD_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    APP_ENV = "production"
    DEBUG = False
    COOKIE_SECURE = True


class TestingConfig(BaseConfig):
    APP_ENV = "testing"
    TESTING = True
    JWT_SECRET = "test-access-secret-that-is-long-enough"
    REFRESH_SECRET = "test-refresh-secret-that-is-long-enough"
    DATABASE_URL = "sqlite://"
    DB_ECHO = False
    CLOUDINARY_CLOUD_NAME = "test-cloud"
    CLOUDINARY_API_KEY = "test-key"
    CLOUDINARY_API_SECRET = "test-secret"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
