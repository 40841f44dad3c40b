from pydantic_settings import BaseSettings
from typing import Optional
from datetime import date
from decimal import Decimal
from pathlib import Path

# Find .env file - check app/ directory first, then project root
BASE_DIR = Path(__file__).resolve().parent.parent.parent
APP_ENV = BASE_DIR / "app" / ".env"
ROOT_ENV = BASE_DIR / ".env"

# Use app/.env if it exists, otherwise try root .env
env_file = str(APP_ENV) if APP_ENV.exists() else (str(ROOT_ENV) if ROOT_ENV.exists() else ".env")


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'kudumbashree.db'}"

    # JWT (tokens are minted by the phone-auth flow, we only verify them)
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Unit rules
    MEMBERSHIP_FALLBACK_EPOCH: date = date(2025, 3, 1)  # used when a member has no joined_at
    LOAN_INTEREST_RATE: Decimal = Decimal("0.03")  # flat, applied once on approval
    DEFAULT_REPAYMENT_PERIOD: int = 12
    MAX_REPAYMENT_PERIOD: int = 36
    MAX_LOAN_AMOUNT: Decimal = Decimal("50000")

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    AUDIT_LOGS_DIR: Optional[str] = None

    class Config:
        env_file = env_file
        case_sensitive = True


settings = Settings()

# Derived paths
LOGS_DIR = Path(settings.AUDIT_LOGS_DIR) if settings.AUDIT_LOGS_DIR else BASE_DIR / "logs"
