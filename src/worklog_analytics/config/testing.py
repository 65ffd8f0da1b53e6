import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worklog_test"),
}

ORG_TIMEZONE = "Asia/Tokyo"

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True
