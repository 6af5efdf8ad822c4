import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "shift_log.config.production"

    if env in {"test", "testing"}:
        return "shift_log.config.testing"

    return "shift_log.config.development"
