"""
Application configuration
"""

from typing import List
from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    """Application settings"""

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_RETENTION_DAYS: int = 7

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Parcel Registry Sync"
    VERSION: str = "1.0.0"

    # CORS Settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Tabular store (Airtable)
    AIRTABLE_API_URL: str = "https://api.airtable.com/v0"
    AIRTABLE_ACCESS_TOKEN: str = ""
    AIRTABLE_BASE_ID: str = ""
    AIRTABLE_BUILDING_TABLE: str = ""
    AIRTABLE_BUILDING_VIEW: str = ""
    AIRTABLE_LAND_TABLE: str = ""
    AIRTABLE_LAND_VIEW: str = ""
    ADDRESS_FIELD: str = "지번 주소"

    # Upstream services
    CODE_RESOLVER_URL: str = ""
    BUILDING_REGISTRY_URL: str = "https://apis.data.go.kr/1613000/BldRgstHubService/getBrTitleInfo"
    PUBLIC_API_KEY: str = ""
    LAND_REGISTRY_URL: str = "http://api.vworld.kr/ned/data/getLandCharacteristics"
    VWORLD_API_KEY: str = ""
    VWORLD_DOMAIN: str = "localhost"

    # API Timeouts (seconds)
    REQUEST_TIMEOUT: float = 30.0

    # Retry ledger
    MAX_RETRY_ATTEMPTS: int = 5
    RETRY_RESET_DAYS: int = 7

    # Job orchestration
    PACING_SECONDS: float = 1.0
    PERMANENT_NO_DATA_DOMAINS: List[str] = []

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_INTERVAL_SECONDS: int = 60
    SCHEDULER_SAMPLE_SIZE: int = 10

    # Failure notification (SMTP)
    SMTP_SERVER: str = ""
    SMTP_PORT: int = 587
    EMAIL_ADDRESS: str = ""
    EMAIL_PASSWORD: str = ""
    NOTIFICATION_EMAIL_TO: str = ""
    NOTIFICATION_TIMEZONE: str = "Asia/Seoul"
    SERVICE_URL: str = "http://localhost:8000/"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_cors_origins(self) -> List[str]:
        """Return the list of allowed CORS origins"""
        if self.BACKEND_CORS_ORIGINS:
            origins = [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]
            return origins if origins else self.CORS_ORIGINS
        return self.CORS_ORIGINS

    def get_notification_recipients(self) -> List[str]:
        """Recipients for failure mail, falling back to the sender address"""
        raw = self.NOTIFICATION_EMAIL_TO or self.EMAIL_ADDRESS
        return [address.strip() for address in raw.split(",") if address.strip()]


# Create global settings instance
settings = Settings()


# Helper function to get absolute path
def get_absolute_path(relative_path: str) -> Path:
    """Convert relative path to absolute path"""
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return Path.cwd() / path
