import os

from config.base import *  # noqa: F401,F403
from config.base import env_flag

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
