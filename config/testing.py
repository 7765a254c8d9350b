import os

from config.base import *  # noqa: F401,F403
from config.base import db_config

SECRET_KEY = "test-secret"
DB_CONFIG = db_config("payroll_test_db")
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
