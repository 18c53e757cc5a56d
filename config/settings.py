from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal

class Settings(BaseSettings):
    """
    Main configuration class for the artifact service.
    Loads values from environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # --- Database Settings ---
    # Async SQLAlchemy connection string (aiosqlite locally, asyncpg in production)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./artifacts.db",
        validation_alias="DATABASE_URL",
    )
    # Echo SQL statements to the log
    database_echo: bool = Field(default=False, validation_alias="DATABASE_ECHO")

    # --- Artifact Settings ---
    # Path prefix used to build public share links
    share_url_prefix: str = Field(default="/v1/artifacts")
    # Page size used when a list request omits `limit`
    default_page_limit: int = Field(default=20)
    # Upper bound accepted for `limit` on list requests
    max_page_limit: int = Field(default=100)

    # --- Logging Settings ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    # Emit JSON lines instead of the human-readable console renderer
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")

    # --- API Server Settings ---
    service_name: str = Field(default="artifact-service")
    # Host for the FastAPI server
    api_host: str = Field(default="0.0.0.0")
    # Port for the FastAPI server
    api_port: int = Field(default=8000)

# Singleton instance
settings = Settings()
