"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# ── Web app ───────────────────────────────────────────────
APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT: int = int(os.getenv("APP_PORT", "5000"))
SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# ── Storage ───────────────────────────────────────────────
# 'postgres' for production, 'memory' for local development
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "postgres")

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "subtrack")
DB_USER: str = os.getenv("DB_USER", "subtrack_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# ── Email (SMTP) ──────────────────────────────────────────
SMTP_HOST: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "465"))
SMTP_USER: str = os.getenv("SMTP_USER", "")
SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_SSL: bool = _as_bool(os.getenv("SMTP_USE_SSL", "true"))
SMTP_TIMEOUT: int = int(os.getenv("SMTP_TIMEOUT", "30"))
EMAIL_FROM: str = os.getenv("EMAIL_FROM", SMTP_USER)

# ── Reminder scheduler ────────────────────────────────────
REMINDER_HOUR: int = int(os.getenv("REMINDER_HOUR", "9"))
REMINDER_MINUTE: int = int(os.getenv("REMINDER_MINUTE", "0"))
TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

# ── Rate Limiting ─────────────────────────────────────────
RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", "60"))
RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

# ── User defaults ─────────────────────────────────────────
DEFAULT_CURRENCY: str = "USD"
DEFAULT_REMINDER_DAYS: int = 3
