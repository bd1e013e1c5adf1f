import os
from dataclasses import dataclass
from decimal import Decimal


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///library.db")

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Circulation policy
    LIBRARY_LOAN_PERIOD_DAYS = int(os.getenv("LIBRARY_LOAN_PERIOD_DAYS", "14"))
    LIBRARY_MAX_RENEWALS = int(os.getenv("LIBRARY_MAX_RENEWALS", "2"))
    LIBRARY_DAILY_FINE_RATE = os.getenv("LIBRARY_DAILY_FINE_RATE", "5.00")
    LIBRARY_RENEW_RETRIES = int(os.getenv("LIBRARY_RENEW_RETRIES", "3"))


@dataclass(frozen=True)
class LibrarySettings:
    loan_period_days: int = 14
    max_renewals: int = 2
    daily_fine_rate: Decimal = Decimal("5.00")
    renew_retries: int = 3

    @classmethod
    def from_config(cls, config) -> "LibrarySettings":
        return cls(
            loan_period_days=int(config.get("LIBRARY_LOAN_PERIOD_DAYS", 14)),
            max_renewals=int(config.get("LIBRARY_MAX_RENEWALS", 2)),
            daily_fine_rate=Decimal(str(config.get("LIBRARY_DAILY_FINE_RATE", "5.00"))),
            renew_retries=int(config.get("LIBRARY_RENEW_RETRIES", 3)),
        )
