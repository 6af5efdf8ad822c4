import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_log_db"),
}
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
STORE_RETRY_ATTEMPTS = int(os.getenv("STORE_RETRY_ATTEMPTS", "3"))
STORE_RETRY_BACKOFF = float(os.getenv("STORE_RETRY_BACKOFF", "0.2"))

# Bearer tokens issued by the identity provider (HMAC shared secret)
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE") or None
JWT_ISSUER = os.getenv("JWT_ISSUER") or None
JWT_ROLE_CLAIM = os.getenv("JWT_ROLE_CLAIM", "role")

TIMEZONE = os.getenv("TIMEZONE", "UTC")

# Default geofence, used until a manager stores one
FACILITY_NAME = os.getenv("FACILITY_NAME", "Main Healthcare Center")
FACILITY_LATITUDE = os.getenv("FACILITY_LATITUDE", "13.067014")
FACILITY_LONGITUDE = os.getenv("FACILITY_LONGITUDE", "77.466541")
FACILITY_RADIUS = os.getenv("FACILITY_RADIUS", "2000")
REQUIRE_LOCATION = bool(int(os.getenv("REQUIRE_LOCATION", "0")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
