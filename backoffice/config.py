from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Remote B2B API (system of record)
    API_BASE_URL: str = "https://alami-b2b-api.liara.run/api"
    REQUEST_TIMEOUT: float = 30.0
    FACTOR_LOG_PAGE_SIZE: int = 1000

    # Identity service
    AUTH_BASE_URL: str = "https://id.contentapi.io/api"
    AUTH_SITE_HEADER: str = "p-id.ir"

    # UI contract
    MESSAGE_DISMISS_SECONDS: int = 5
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

settings = Settings()
