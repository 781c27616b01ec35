import os

from config.config import LOG_LEVEL, PORT, SALARY_SLIP_REUSE_EXISTING, TOTAL_WORKING_DAYS, db_config, env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config(default_password="root")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")

__all__ = [
    "AUTO_INIT_DB",
    "DB_CONFIG",
    "DEBUG",
    "LOG_LEVEL",
    "PORT",
    "SALARY_SLIP_REUSE_EXISTING",
    "SECRET_KEY",
    "TOTAL_WORKING_DAYS",
]
