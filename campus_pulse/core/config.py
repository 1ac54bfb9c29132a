"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Durable storage (shared by every tab)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./campus_pulse.db")

    # Storage keys, kept identical to the browser layout so stored data stays compatible
    CLUBS_STORAGE_KEY: str = "campus-pulse-clubs"
    EVENTS_STORAGE_KEY: str = "campus-pulse-events"
    AUTH_SESSION_KEY: str = "campus-pulse-auth-club"

    # In-process change signal names
    STORAGE_CHANGE_EVENT: str = "storageChange"
    LOGIN_CHANGE_EVENT: str = "loginChange"

    # Calendar used for day ends and monthly budget buckets
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # What to do with stored collections that fail to parse: "seed" or "raise"
    CORRUPT_DATA_POLICY: str = os.getenv("CORRUPT_DATA_POLICY", "seed")

    # Tab-scoped session storage
    SESSION_STORAGE_QUOTA: int = 5 * 1024 * 1024  # 5MB, same as a browser
    SESSION_MAX_TABS: int = 1000

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    class Config:
        env_file = ".env"

settings = Settings()
