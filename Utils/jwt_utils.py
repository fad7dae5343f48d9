from datetime import datetime, timedelta

import jwt
from flask import current_app

JWT_ALGORITHM = "HS256"


def create_access_token(user_id, role, expires_in_minutes=None):
    """
    Generate a JWT access token for a user.
    """
    if expires_in_minutes is None:
        expires_in_minutes = current_app.config["JWT_EXPIRES_IN_MINUTES"]
    payload = {
        "user_id": str(user_id),
        "role": role,
        "type": "access",
        "exp": datetime.utcnow() + timedelta(minutes=expires_in_minutes),
        "iat": datetime.utcnow()
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


def create_refresh_token(user_id):
    """Generate a JWT refresh token."""
    payload = {
        "user_id": str(user_id),
        "type": "refresh",
        "exp": datetime.utcnow() + timedelta(days=current_app.config["JWT_REFRESH_EXPIRES_IN_DAYS"]),
        "iat": datetime.utcnow()
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


def decode_token(token, expected_type="access"):
    """
    Verify and decode a JWT token.
    Returns payload dict if valid, or None if invalid, expired or of the wrong type.
    """
    try:
        decoded = jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
    if decoded.get("type") != expected_type:
        return None
    return decoded
