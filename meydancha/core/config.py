"""Configuration settings for the reservation service."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Meydancha Reservation Service")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./meydancha.db")
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Baku")
    SLOT_DAY_START: str = os.getenv("SLOT_DAY_START", "08:00")
    SLOT_DAY_END: str = os.getenv("SLOT_DAY_END", "22:00")
    SLOT_MINUTES: int = int(os.getenv("SLOT_MINUTES", "60"))
    CANCELLATION_MIN_HOURS: float = float(os.getenv("CANCELLATION_MIN_HOURS", "4"))
    CURRENCY: str = os.getenv("CURRENCY", "AZN")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
