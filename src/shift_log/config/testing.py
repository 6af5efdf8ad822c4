import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_log_test"),
}
DB_CONNECT_TIMEOUT = 2
STORE_RETRY_ATTEMPTS = 1
STORE_RETRY_BACKOFF = 0.0

JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = None
JWT_ISSUER = None
JWT_ROLE_CLAIM = "role"

TIMEZONE = "UTC"

FACILITY_NAME = "Main Healthcare Center"
FACILITY_LATITUDE = "13.067014"
FACILITY_LONGITUDE = "77.466541"
FACILITY_RADIUS = "2000"
REQUIRE_LOCATION = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
