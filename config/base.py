"""Settings shared by every APP_ENV; the per-env modules only override."""

import os


def env_flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def db_config(default_database: str = "payroll_db") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", default_database),
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
    }


# Company policy used when a company has not stored its own payroll policy.
PAYROLL_DEFAULTS = {
    "default_pay_type": os.getenv("PAYROLL_DEFAULT_PAY_TYPE", "MONTHLY"),
    "contracted_working_days": int(os.getenv("PAYROLL_CONTRACTED_DAYS", "26")),
    "standard_hours_per_day": os.getenv("PAYROLL_STANDARD_HOURS", "8"),
    "half_day_threshold_hours": os.getenv("PAYROLL_HALF_DAY_THRESHOLD", "4"),
    "half_day_pay_fraction": os.getenv("PAYROLL_HALF_DAY_FRACTION", "0.5"),
    "overtime_multiplier": os.getenv("PAYROLL_OVERTIME_MULTIPLIER", "1.5"),
    "late_penalty_enabled": env_flag("PAYROLL_LATE_PENALTY", "0"),
    "late_penalty_per_minute": os.getenv("PAYROLL_LATE_PENALTY_PER_MINUTE", "0"),
    "absence_penalty_enabled": env_flag("PAYROLL_ABSENCE_PENALTY", "0"),
    "absence_penalty_per_day": os.getenv("PAYROLL_ABSENCE_PENALTY_PER_DAY", "0"),
    "shift_start": os.getenv("PAYROLL_SHIFT_START", "09:00"),
    "grace_minutes": int(os.getenv("PAYROLL_GRACE_MINUTES", "30")),
    "pf_percentage": os.getenv("PAYROLL_PF_PERCENTAGE", "12"),
    "esi_percentage": os.getenv("PAYROLL_ESI_PERCENTAGE", "0.75"),
    "esi_wage_ceiling": os.getenv("PAYROLL_ESI_WAGE_CEILING", "21000"),
    "esi_ceiling_mode": os.getenv("PAYROLL_ESI_CEILING_MODE", "CAP"),
    "count_pending_attendance": env_flag("PAYROLL_COUNT_PENDING", "0"),
}

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DB_CONFIG = db_config()
DEBUG = False
TESTING = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Applies database/schema.sql on startup (CREATE TABLE IF NOT EXISTS only).
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
