import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "reading_room"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "5000"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

DEFAULT_FEE = int(os.getenv("DEFAULT_FEE", "500"))

NOTIFY_PROVIDER = os.getenv("NOTIFY_PROVIDER", "twilio")
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_FROM = os.getenv("TWILIO_FROM", "whatsapp:+14155238886")
NOTIFY_CHANNEL_PREFIX = os.getenv("NOTIFY_CHANNEL_PREFIX", "whatsapp:")
NOTIFY_COUNTRY_CODE = os.getenv("NOTIFY_COUNTRY_CODE", "+91")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
