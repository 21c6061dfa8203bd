# fintrack/backend/config.py
import os
from datetime import timedelta

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:4173,http://localhost:8501"


def _split_origins(raw):
    return [o.strip() for o in raw.split(",") if o.strip()]


class Config:
    """Settings read from the environment when the module is imported."""

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-key-change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.environ.get("JWT_EXPIRES_DAYS", 30)))
    JWT_TOKEN_LOCATION = ["headers"]

    DB_PATH = os.environ.get("DB_PATH", os.path.join(BASE_DIR, "..", "..", "data", "fintrack.db"))

    CORS_ORIGINS = _split_origins(os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))
    CLIENT_URL = os.environ.get("CLIENT_URL")
    CORS_ORIGIN_SUFFIX = os.environ.get("CORS_ORIGIN_SUFFIX", ".vercel.app")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    SEED_DEFAULT_CATEGORIES = True


def cors_origins(config):
    """Build the flask-cors origin list: exact origins plus one suffix wildcard."""
    origins = list(config.get("CORS_ORIGINS") or [])
    client_url = config.get("CLIENT_URL")
    if client_url and client_url not in origins:
        origins.append(client_url)
    suffix = config.get("CORS_ORIGIN_SUFFIX")
    if suffix:
        # flask-cors treats entries with regex metacharacters as patterns
        origins.append(r"^https?://[\w.-]+" + suffix.replace(".", r"\.") + "$")
    return origins
