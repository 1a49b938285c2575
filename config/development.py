import os

from config import db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)

# Resubmitting attendance for an existing batch-course-date overwrites it in
# place when enabled; otherwise the second submission is rejected with 409.
ALLOW_ATTENDANCE_UPDATE = env_flag("ALLOW_ATTENDANCE_UPDATE", False)
