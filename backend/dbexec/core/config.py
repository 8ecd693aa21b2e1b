"""
Settings for pydbexec, read from the environment (and ``.env``).

Only the driver adapters and the connection pool read these; the executor
takes its collaborators by injection.
"""

from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "pydbexec"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: HttpUrl | None = None

    # External DB (driver adapters)
    EXTERNAL_DB_CONNECT_TIMEOUT: int = Field(default=10, ge=1)
    EXTERNAL_DB_STATEMENT_TIMEOUT: float | None = Field(
        default=None,
        description="Seconds; applied per statement when set and > 0.",
    )
    EXTERNAL_DB_POOL_SIZE: int = Field(default=5, ge=0)
    EXTERNAL_DB_POOL_MAX_AGE_SEC: float = Field(default=600.0, gt=0)

    # Worker threads backing execute_with_future
    QUERY_EXECUTOR_MAX_WORKERS: int = Field(default=8, ge=1)


settings = Settings()  # type: ignore
