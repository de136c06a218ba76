"""Runtime configuration, read from the environment (and a local .env file)."""
import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Config:
    """Base settings, loaded with ``app.config.from_object``."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or os.urandom(24)

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///explainer.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upload ceiling, enforced by Flask before the request body is read
    MAX_UPLOAD_MB = _env_int("MAX_UPLOAD_MB", 10)
    MAX_CONTENT_LENGTH = MAX_UPLOAD_MB * 1024 * 1024

    DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "₹")
    DEFAULT_LOCALE = os.environ.get("DEFAULT_LOCALE", "en-IN")

    # Provenance tag for file imports. "SMS" keeps existing stored data
    # consistent; "Statement" gives imports their own tag.
    STATEMENT_SOURCE = os.environ.get("STATEMENT_SOURCE", "SMS")

    LOG_DIR = os.environ.get("LOG_DIR", "logs")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_DIR = None
    LOG_LEVEL = "DEBUG"
