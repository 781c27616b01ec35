import os

from config.config import PORT, SALARY_SLIP_REUSE_EXISTING, TOTAL_WORKING_DAYS, db_config, env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB")

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
