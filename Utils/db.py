import logging
from urllib.parse import urlparse

from mongoengine import connect

logger = logging.getLogger(__name__)


def init_db(app):
    mongo_uri = app.config["MONGODB_URI"]

    # Auto-detect DB name from URI
    parsed = urlparse(mongo_uri)
    db_name = (parsed.path or "").lstrip("/") or "tbucks_store"

    options = {}
    if app.config.get("MONGO_CLIENT_CLASS"):
        options["mongo_client_class"] = app.config["MONGO_CLIENT_CLASS"]

    try:
        connect(db=db_name, host=mongo_uri, alias="default", **options)
        logger.info(f"✅ MongoDB connected successfully → {db_name}")
    except Exception as e:
        logger.error(f"❌ MongoDB connection error: {e}")
        raise
