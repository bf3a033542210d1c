# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service configuration, read from environment variables.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "prompt-cadence")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    # Local zone used for the 07:00-21:00 active day
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Debug-only: the 1-minute cadence is rejected at the boundary unless set
    ENABLE_TESTING_CADENCE: bool = (
        os.getenv("ENABLE_TESTING_CADENCE", "false").lower() == "true"
    )
    DEFAULT_CADENCE: str = os.getenv("DEFAULT_CADENCE", "every_6_hours")

    DELIVERY_BACKEND: str = os.getenv("DELIVERY_BACKEND", "memory")
    DELIVERY_SERVICE_URL: str = os.getenv(
        "DELIVERY_SERVICE_URL", "http://notification-service:8004"
    )
    DELIVERY_TIMEOUT: float = float(os.getenv("DELIVERY_TIMEOUT", "3.0"))

    PROMPTS_CSV_PATH: str = os.getenv("PROMPTS_CSV_PATH", "")

    DEFAULT_HISTORY_LIMIT: int = int(os.getenv("DEFAULT_HISTORY_LIMIT", "100"))
    MAX_HISTORY_SIZE: int = int(os.getenv("MAX_HISTORY_SIZE", "10000"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
