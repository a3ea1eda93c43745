import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "reading_room_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
PORT = 5000
CORS_ORIGINS = "*"

DEFAULT_FEE = 500

NOTIFY_PROVIDER = "console"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
