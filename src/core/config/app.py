"""
Application-wide settings: identity, HTTP binding, logging, CORS and locales.
"""
from typing import List, Union

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Settings shared by every part of the service.

    `ALLOWED_ORIGINS` accepts a comma-separated string so it can be set from a
    single environment variable. Set it to the client origins explicitly in
    production.
    """
    PROJECT_NAME: str = "provento-auth"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = Field(ge=1, le=65535, default=8000)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://0.0.0.0:3000")
    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: List[str] = ["en", "es"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def default_language_is_supported(self) -> "AppSettings":
        """Translations fall back to DEFAULT_LANGUAGE, so it must have a catalog."""
        if self.DEFAULT_LANGUAGE not in self.SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE {self.DEFAULT_LANGUAGE!r} is not in SUPPORTED_LANGUAGES"
            )
        return self
