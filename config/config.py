"""Settings shared by every environment module."""

import os


def env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def db_config(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "hr_backoffice"),
    }


PORT = int(os.getenv("PORT", "5001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Policy constant used when a request does not supply totalWorkingDays
TOTAL_WORKING_DAYS = int(os.getenv("TOTAL_WORKING_DAYS", "22"))

# Off: every generate call creates a new slip. On: return the latest slip of the payroll record.
SALARY_SLIP_REUSE_EXISTING = env_bool("SALARY_SLIP_REUSE_EXISTING")
