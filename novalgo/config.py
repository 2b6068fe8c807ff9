import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def database_uri():
    url = os.getenv("DATABASE_URL", "postgresql://localhost/novalgo")
    cert = os.getenv("DB_SSLROOTCERT")
    if cert:
        return f"{url}?sslmode=verify-full&sslrootcert={cert}"
    return url


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = database_uri()

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    ACCESS_EXPIRES = int(os.getenv("ACCESS_EXPIRES", 86400))
    REFRESH_EXPIRES = int(os.getenv("REFRESH_EXPIRES", 604800))
    BCRYPT_LOG_ROUNDS = int(os.getenv("BCRYPT_LOG_ROUNDS", 12))

    CORS_ORIGINS = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000"
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Wallet ledger
    CURRENCY = os.getenv("CURRENCY", "KES")
    MIN_DEPOSIT_AMOUNT = Decimal(os.getenv("MIN_DEPOSIT_AMOUNT", "1000.00"))
    MIN_WITHDRAWAL_AMOUNT = Decimal(os.getenv("MIN_WITHDRAWAL_AMOUNT", "1000.00"))
    LEDGER_MAX_RETRIES = int(os.getenv("LEDGER_MAX_RETRIES", 3))
    LEDGER_RETRY_BACKOFF = float(os.getenv("LEDGER_RETRY_BACKOFF", 0.05))

    # Referrals
    REFERRAL_COMMISSION_RATE = Decimal(os.getenv("REFERRAL_COMMISSION_RATE", "0.05"))
    REFERRAL_CODE_PREFIX = os.getenv("REFERRAL_CODE_PREFIX", "NA")
    REFERRAL_CODE_LENGTH = int(os.getenv("REFERRAL_CODE_LENGTH", 8))
    REFERRAL_CODE_MAX_ATTEMPTS = int(os.getenv("REFERRAL_CODE_MAX_ATTEMPTS", 5))


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "novalgo-testing-secret-key-0123456789abcdef"
    BCRYPT_LOG_ROUNDS = 4
    LEDGER_RETRY_BACKOFF = 0.0


CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
