"""Settings shared by every environment, read from the process environment."""

import os


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "timekeeper-dev-secret"

    # Database
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "timekeeper_db")

    # Attendance rules
    BUSINESS_TIMEZONE = os.environ.get("BUSINESS_TIMEZONE", "Asia/Manila")
    LATE_GRACE_MINUTES = int(os.environ.get("LATE_GRACE_MINUTES", "5"))
    LATE_GRACE_PERIOD_COUNT = int(os.environ.get("LATE_GRACE_PERIOD_COUNT", "3"))
    OVERTIME_THRESHOLD_MINUTES = int(os.environ.get("OVERTIME_THRESHOLD_MINUTES", "20"))
    UNDERTIME_THRESHOLD_MINUTES = int(os.environ.get("UNDERTIME_THRESHOLD_MINUTES", "5"))

    # Nightly absence sweep (local time of BUSINESS_TIMEZONE)
    ABSENCE_SWEEP_HOUR = int(os.environ.get("ABSENCE_SWEEP_HOUR", "22"))
    ABSENCE_SWEEP_MINUTE = int(os.environ.get("ABSENCE_SWEEP_MINUTE", "0"))

    # Mail
    SMTP_HOST = os.environ.get("SMTP_HOST")
    SMTP_PORT = int(os.environ.get("SMTP_PORT", "465"))
    SMTP_USER = os.environ.get("SMTP_USER")
    SMTP_PASSWORD = os.environ.get("SMTP_PASSWORD")
    SMTP_SENDER = os.environ.get("SMTP_SENDER")
    SMTP_USE_SSL = _flag("SMTP_USE_SSL", "1")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}
SMTP_CONFIG = {
    "host": Config.SMTP_HOST,
    "port": Config.SMTP_PORT,
    "user": Config.SMTP_USER,
    "password": Config.SMTP_PASSWORD,
    "sender": Config.SMTP_SENDER,
    "use_ssl": Config.SMTP_USE_SSL,
}

BUSINESS_TIMEZONE = Config.BUSINESS_TIMEZONE
LATE_GRACE_MINUTES = Config.LATE_GRACE_MINUTES
LATE_GRACE_PERIOD_COUNT = Config.LATE_GRACE_PERIOD_COUNT
OVERTIME_THRESHOLD_MINUTES = Config.OVERTIME_THRESHOLD_MINUTES
UNDERTIME_THRESHOLD_MINUTES = Config.UNDERTIME_THRESHOLD_MINUTES
ABSENCE_SWEEP_HOUR = Config.ABSENCE_SWEEP_HOUR
ABSENCE_SWEEP_MINUTE = Config.ABSENCE_SWEEP_MINUTE
LOG_LEVEL = Config.LOG_LEVEL

# Bootstrap admin created on startup when AUTO_INIT_DB is on and both are set
ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
ADMIN_NAME = os.environ.get("ADMIN_NAME", "Administrator")
