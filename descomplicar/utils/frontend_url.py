from loguru import logger

from descomplicar.config import get_settings

DEFAULT_FRONTEND_URL = "http://localhost:5173"


def get_frontend_url() -> str:
    """Base URL of the web app, used to build links inside notifications."""
    settings = get_settings()
    base = settings.frontend_url.strip()
    if base.endswith("/"):
        base = base.rstrip("/")
    if base.endswith("/api"):
        base = base[: -len("/api")]
    base = base.rstrip("/")

    if base:
        return base

    if settings.is_production:
        logger.error("FRONTEND_URL is required in production, falling back to localhost")

    return DEFAULT_FRONTEND_URL
