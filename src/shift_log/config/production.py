import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "shift_log"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_log_db"),
}
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
STORE_RETRY_ATTEMPTS = int(os.getenv("STORE_RETRY_ATTEMPTS", "3"))
STORE_RETRY_BACKOFF = float(os.getenv("STORE_RETRY_BACKOFF", "0.5"))

JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE") or None
JWT_ISSUER = os.getenv("JWT_ISSUER") or None
JWT_ROLE_CLAIM = os.getenv("JWT_ROLE_CLAIM", "role")

TIMEZONE = os.getenv("TIMEZONE", "UTC")

# No default geofence in production unless explicitly configured
FACILITY_NAME = os.getenv("FACILITY_NAME", "")
FACILITY_LATITUDE = os.getenv("FACILITY_LATITUDE")
FACILITY_LONGITUDE = os.getenv("FACILITY_LONGITUDE")
FACILITY_RADIUS = os.getenv("FACILITY_RADIUS", "2000")
REQUIRE_LOCATION = bool(int(os.getenv("REQUIRE_LOCATION", "1")))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
