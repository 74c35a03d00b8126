"""Settings for the seat reservation engine."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or .env."""

    # Application
    APP_NAME: str = "Seat Reservation Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database (MySQL unless DATABASE_URL overrides it, e.g. SQLite in tests)
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "seat_reservation"
    DATABASE_URL: str | None = None

    # Redis, used only for the reaper sweep lease
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    REDIS_DB: int = 0

    # Hold settings
    RESERVATION_TIMEOUT_SECONDS: int = 600  # 10 minutes
    MAX_HOLD_SECONDS: int = 3600
    MAX_EXTEND_SECONDS: int = 900

    # Expiry reaper
    REAPER_ENABLED: bool = True
    REAPER_INTERVAL_SECONDS: int = 10
    REAPER_BATCH_SIZE: int = 500
    SWEEP_LOCK_TIMEOUT_SECONDS: int = 30

    # Payment collaborator
    PAYMENT_COLLABORATOR_TOKEN: str = "change-me"

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def redis_url(self) -> str:
        """Get Redis URL."""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
