from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Review routing (caller side)
    AUTO_ADD_THRESHOLD: float = 0.8

    # Amount extraction
    DEFAULT_CURRENCY: str = "USD"
    MIN_AMOUNT: Decimal = Decimal("0")
    MAX_AMOUNT: Decimal = Decimal("10000")

    # Date extraction
    TRIAL_WINDOW_CHARS: int = 100

    # Audit snippet stored in extracted_data
    RAW_CONTENT_CHARS: int = 500

    # Trial alerts
    TRIAL_EXPIRY_WARNING_DAYS: int = 7

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
