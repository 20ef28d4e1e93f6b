import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "pos_timeclock"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply database/schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# "start-day" keeps overnight sessions on the day they began, "split" cuts them at midnight.
DAY_BUCKETING = os.getenv("DAY_BUCKETING", "start-day")
# date.weekday() numbering; 6 = Sunday
WEEK_START = int(os.getenv("WEEK_START", "6"))
STATUS_LOOKBACK_DAYS = int(os.getenv("STATUS_LOOKBACK_DAYS", "7"))
