# Utils/auth_decorator.py
from functools import wraps

from bson import ObjectId
from flask import request

from Models.userModel import User
from Utils.appError import AppError
from Utils.jwt_utils import decode_token


def get_request_token():
    """Bearer token from the Authorization header, falling back to the cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header:
        try:
            token_type, token_val = auth_header.split(" ")
            if token_type.lower() == "bearer" and token_val:
                return token_val
        except ValueError:
            pass
    return request.cookies.get("access_token")


def token_required(f):
    """Ensure that a valid JWT is present and pass the session user to the view."""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = get_request_token()
        if not token:
            raise AppError("Authorization token missing", 401)

        decoded = decode_token(token)
        if not decoded:
            raise AppError("Invalid or expired token", 401)

        user_id = decoded.get("user_id")
        user = User.objects(id=user_id).first() if ObjectId.is_valid(user_id) else None
        if not user:
            raise AppError("User not found", 404)

        return f(user, *args, **kwargs)

    return decorated


def roles_required(*allowed_roles):
    """
    Restrict access to users with specific roles.

    The role is read from the stored user, not from the token claim, so a
    demoted admin loses access immediately.

    Example:
        @roles_required("admin")
        def admin_users(user): ...
    """
    def wrapper(f):
        @wraps(f)
        @token_required
        def decorated(user, *args, **kwargs):
            if user.role_value not in allowed_roles:
                raise AppError(f"Access denied. Requires role(s): {', '.join(allowed_roles)}", 403)
            return f(user, *args, **kwargs)

        return decorated
    return wrapper
