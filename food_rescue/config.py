"""Food Rescue — Configuration via pydantic-settings."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/food_rescue.db"

    # Timezone
    TIMEZONE: str = "UTC"

    # Storage keys (one JSON blob per namespace)
    LISTINGS_KEY: str = "food-rescue:listings:v2"
    USERS_KEY: str = "food-rescue:users:v1"
    SESSION_KEY: str = "food-rescue:session:v1"

    # Lifecycle rules
    DELETE_WINDOW_MINUTES: int = 10
    MIN_CREDENTIAL_LENGTH: int = 4

    # Uploads
    MAX_IMAGE_BYTES: int = 2 * 1024 * 1024

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
