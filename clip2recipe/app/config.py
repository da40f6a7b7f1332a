from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
    )

    # Outbound fetches (page, caption tracks)
    FETCH_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0)
    ACCEPT_LANGUAGE: str = "en"

    # Pipeline workers
    WORKER_CONCURRENCY: int = Field(default=4, ge=1)

    # Upload hand-off
    UPLOAD_BUCKET_URL: str = "https://s3.amazonaws.com/bucket"


settings = Settings()
