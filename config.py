import os
from datetime import timedelta

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)

    # SQLite database file stored next to this file as coworking.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "coworking.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "1800")),
    }

    # Bearer tokens
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.getenv("JWT_ACCESS_TOKEN_MINUTES", "60")))

    # bcrypt work factor (tests lower it)
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Pricing: bookings this long or longer pay the day rate
    DAY_RATE_MIN_HOURS = int(os.getenv("DAY_RATE_MIN_HOURS", "8"))

    # Max rows returned by GET /bookings
    BOOKING_LIST_LIMIT = int(os.getenv("BOOKING_LIST_LIMIT", "200"))

    # Basic app settings
    DEBUG = False
