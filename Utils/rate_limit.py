import os

from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

limiter = Limiter(
    get_remote_address,
    default_limits=[
        os.getenv("LIMIT_DEFAULT_HOURLY", "200 per hour"),
        os.getenv("LIMIT_DEFAULT_SECONDLY", "10 per second")
    ],
)


def purchase_limit():
    return current_app.config["LIMIT_PURCHASE"]
