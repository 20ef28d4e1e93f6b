import os

_SETTINGS_BY_ENV = {
    "dev": "config.development",
    "development": "config.development",
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module(env: str | None = None) -> str:
    """Settings module for ``env`` (defaults to APP_ENV); unknown names fall back to development."""
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return _SETTINGS_BY_ENV.get(name, "config.development")
