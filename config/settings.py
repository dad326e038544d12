from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class Settings(BaseSettings):
    """
    Application settings managed by Pydantic.
    Reads from environment variables and/or .env file.
    """
    # Project Info
    APP_TITLE: str = "Hypermedia Links Service"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = []

    # Link building
    # absolute: scheme://host of the current request
    # relative: host-relative hrefs
    # custom:   HATEOAS_CUSTOM_BASE_URL in front of every path
    HATEOAS_HREF_MODE: Literal["absolute", "relative", "custom"] = "absolute"
    HATEOAS_CUSTOM_BASE_URL: str | None = None

    # HttpLink output (method + templated) instead of plain href links
    HATEOAS_EXTENDED_LINKS: bool = True

    # Config to read from .env file if available
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
        )

settings = Settings()
