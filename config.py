"""
Configuration management for SmartAid
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "SmartAid"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./smartaid.db"
    DATABASE_ECHO: bool = False

    # Web push (VAPID)
    VAPID_PUBLIC_KEY: Optional[str] = None
    VAPID_PRIVATE_KEY: Optional[str] = None
    VAPID_CLAIMS_SUB: str = "mailto:smartaid@example.com"
    PUSH_TTL_SECONDS: int = 60 * 60 * 24  # 24 hours
    PUSH_SEND_TIMEOUT_SECONDS: float = 10.0

    # Reminder scheduling
    SCHEDULER_ENABLED: bool = True
    REMINDER_LEAD_MINUTES: int = 15
    MEDICATION_REMINDER_INTERVAL_SECONDS: int = 60
    REFILL_CHECK_INTERVAL_HOURS: int = 24

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class ReminderConfig:
    """Constants shared by the reminder engines and the push dispatcher"""

    # Notification presentation
    ICON_PATH: str = "/icon-192x192.png"
    BADGE_PATH: str = "/badge-72x72.png"
    MEDICATION_URL: str = "/scan"
    REFILL_URL: str = "/schedule"

    MEDICATION_TAG_PREFIX: str = "medication-"
    REFILL_TAG_PREFIX: str = "refill-"

    # Push service responses meaning the subscription is gone for good
    PERMANENT_FAILURE_STATUS_CODES: frozenset = frozenset({404, 410})

    # Wall-clock format of medication schedule times
    TIME_FORMAT: str = "%H:%M"


# Database table names
class TableNames:
    USERS = "users"
    MEDICATIONS = "medications"
    MEDICATION_LOGS = "medication_logs"
    NOTIFICATION_SUBSCRIPTIONS = "notification_subscriptions"
    CAREGIVERS = "caregivers"
    MEDICATION_SURVEYS = "medication_surveys"


settings = get_settings()
reminder_config = ReminderConfig()
