from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BOOKING_API_BASE_URL: str | None = None
    BOOKING_API_TIMEOUT_SECONDS: float = 10.0
    BOOKING_SESSION_COOKIE_NAME: str = "session"
    BOOKING_SESSION_COOKIE: str | None = None

    BOOKING_TIME_ZONE: str = "Australia/Sydney"
    DEFAULT_SLOT_DURATION_MINUTES: int = 60
    DATE_PICKER_DAYS: int = 14


settings = Settings()
