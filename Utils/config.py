import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application settings, read from the environment (.env is loaded first)."""

    SECRET_KEY = os.getenv("SECRET_KEY", "supersecretkey")
    JWT_SECRET = os.getenv("JWT_SECRET", "super_jwt_secret")
    JWT_EXPIRES_IN_MINUTES = int(os.getenv("JWT_EXPIRES_IN_MINUTES", 60))
    JWT_REFRESH_EXPIRES_IN_DAYS = int(os.getenv("JWT_REFRESH_EXPIRES_IN_DAYS", 7))

    MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/tbucks_store")
    # Alternate pymongo-compatible client class (tests pass mongomock.MongoClient)
    MONGO_CLIENT_CLASS = None

    LOG_DIR = os.getenv("LOG_DIR", "logs")

    STARTING_T_BUCKS = int(os.getenv("STARTING_T_BUCKS", 0))
    STREAM_HEARTBEAT_SECONDS = float(os.getenv("STREAM_HEARTBEAT_SECONDS", 15))

    ADMIN_UNLOCK_PHRASE = os.getenv("ADMIN_UNLOCK_PHRASE", "lachlanadmin")
    ADMIN_UNLOCK_TIMEOUT = float(os.getenv("ADMIN_UNLOCK_TIMEOUT", 1.0))

    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() in ("1", "true", "yes")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    LIMIT_PURCHASE = os.getenv("LIMIT_PURCHASE", "5 per second")

    # Cookies carrying tokens; set True behind HTTPS
    COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() in ("1", "true", "yes")
