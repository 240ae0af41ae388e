import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y"}


class Config:
    SECRET_KEY = os.environ.get("SESSION_SECRET", "campussecret")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URI", "sqlite:///campusconnect.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # sessions live server-side; the cookie only carries a signed token
    PERMANENT_SESSION_LIFETIME = timedelta(
        seconds=int(os.environ.get("SESSION_MAX_AGE_SECONDS", 60 * 60 * 24))
    )
    SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "campusconnect.sid")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", False)
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")

    CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "https://campus-connect-frontend-tawny.vercel.app")

    EVENTS_LIMIT = 50
    SEED_ENABLED = _env_flag("SEED_ENABLED", True)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 5000))
