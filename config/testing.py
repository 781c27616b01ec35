from config.config import PORT, db_config

SECRET_KEY = "test-secret"

DB_CONFIG = db_config()

DEBUG = False
TESTING = True
LOG_LEVEL = "DEBUG"

TOTAL_WORKING_DAYS = 22
SALARY_SLIP_REUSE_EXISTING = False
AUTO_INIT_DB = False

__all__ = [
    "AUTO_INIT_DB",
    "DB_CONFIG",
    "DEBUG",
    "LOG_LEVEL",
    "PORT",
    "SALARY_SLIP_REUSE_EXISTING",
    "SECRET_KEY",
    "TESTING",
    "TOTAL_WORKING_DAYS",
]
