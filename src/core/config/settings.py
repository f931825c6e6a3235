"""Settings singleton for the session service.

`Settings` merges the app, database, auth and session mixins. Values come from
the process environment first and then from the env file matching `APP_ENV`:

- development: `.env`
- test: `.env.test` if it exists, else `.env` or the bare environment
- staging: `.env.staging`
- production: `.env.production`

Import `settings` from this module; do not instantiate `Settings` elsewhere.
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .session import SessionSettings

# structlog is configured later by initialize_application(); settings load
# before that, so they report through the standard library logger.
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

ENV_FILES = {
    "development": ".env",
    "test": ".env.test",
    "staging": ".env.staging",
    "production": ".env.production",
}

REQUIRED_FIELDS = ("PROJECT_NAME", "DATABASE_URL", "JWT_SECRET_KEY")


class Settings(AppSettings, DatabaseSettings, AuthSettings, SessionSettings):
    """All configuration of the service in one object."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="allow"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._apply_environment(os.getenv("APP_ENV", "development"))

    def _apply_environment(self, env: str) -> None:
        """Adjust flags that depend on the deployment environment."""
        if env == "development":
            self.DEBUG = True
        elif env == "production" and self.DEBUG:
            logger.warning("DEBUG requested in production; API docs stay disabled")
            self.DEBUG = False

        logger.info(
            "Settings loaded for %s: session ttl %sh, max %s sessions per user, "
            "cleanup every %s min",
            env,
            self.SESSION_TTL_HOURS,
            self.MAX_SESSIONS_PER_USER,
            self.SESSION_CLEANUP_INTERVAL_MINUTES or "never",
        )

    def validate_required_fields(self) -> None:
        """Fail fast when a value the service cannot run without is empty.

        Raises:
            ValueError: Naming every missing field.
        """
        missing = [name for name in REQUIRED_FIELDS if not getattr(self, name, None)]
        if missing:
            message = f"Missing required environment variables: {', '.join(missing)}"
            logger.error(message)
            raise ValueError(message)


def create_settings() -> Settings:
    """Build `Settings` from the env file that matches `APP_ENV`."""
    env = os.getenv("APP_ENV", "development")
    env_file = ENV_FILES.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Reading configuration from %s", env_file)
        return Settings(_env_file=env_file)
    if not Path(".env").exists():
        logger.warning("No .env file found for %s; using the process environment", env)
    return Settings()


settings = create_settings()
settings.validate_required_fields()
