from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    CALENDAR_TIMEZONE: str = "UTC"

    BOOKING_API_URL: str = "http://localhost:3001"
    BOOKING_API_TIMEOUT_SECONDS: float = 10.0
    SESSION_STEP_TIMEOUT_SECONDS: float = 15.0

    BOOKING_VALID_TOKENS: list[str] = ["demo123"]

    AVAILABILITY_WINDOW_DAYS: int = 14
    WORK_START_HOUR: int = 9
    WORK_END_HOUR: int = 17
    WEEKDAY_OPEN_PROBABILITY: float = 0.7
    WEEKEND_OPEN_PROBABILITY: float = 0.3
    SLOT_OPEN_PROBABILITY: float = 0.7
    AVAILABILITY_SEED: int | None = None


settings = Settings()
