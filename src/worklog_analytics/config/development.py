import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worklog_db"),
}

# All period boundaries are computed in this zone, whatever the caller's locale
ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Tokyo")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True
