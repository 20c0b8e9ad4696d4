from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    admissions_api_url: str = Field("http://localhost:5000", alias="ADMISSIONS_API_URL")
    admissions_api_token: Optional[str] = Field(None, alias="ADMISSIONS_API_TOKEN")
    admissions_api_timeout_seconds: float = Field(15.0, alias="ADMISSIONS_API_TIMEOUT_SECONDS")

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("standard", alias="LOG_FORMAT")  # standard, json

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
