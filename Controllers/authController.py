import logging

from flask import request, jsonify, current_app, make_response, Response, stream_with_context
from mongoengine import ValidationError, NotUniqueError

from Models.userModel import User
from Utils.appError import AppError
from Utils.auth_decorator import token_required
from Utils.feeds import Subscription, sse_events
from Utils.jwt_utils import create_access_token, create_refresh_token, decode_token
from Utils.ledger import parse_text

logger = logging.getLogger(__name__)


def _cookie_kwargs():
    return {
        "httponly": True,
        "samesite": "Lax",
        "secure": current_app.config["COOKIE_SECURE"]
    }


def _password_field(data, field):
    # Passwords are compared verbatim, so no stripping here
    value = data.get(field)
    if value is not None and not isinstance(value, str):
        raise AppError(f"{field} must be text", 400)
    return value


# =====================================================
# REGISTER
# =====================================================
def register():
    data = request.get_json(silent=True) or {}
    username = parse_text(data.get("username"), "username")
    email = parse_text(data.get("email"), "email").lower()
    password = _password_field(data, "password")
    password_confirm = _password_field(data, "password_confirm")

    if not all([username, email, password, password_confirm]):
        raise AppError("All fields are required.", 400)

    if password != password_confirm:
        raise AppError("Passwords do not match.", 400)

    if len(password) < 8:
        raise AppError("Password must be at least 8 characters.", 400)

    if User.objects(email=email).first():
        raise AppError("Email already registered.", 400)
    if User.objects(username=username).first():
        raise AppError("Username already taken.", 400)

    try:
        user = User(
            username=username,
            email=email,
            password=password,
            t_bucks=current_app.config["STARTING_T_BUCKS"],
        )
        user.save()
    except NotUniqueError:
        raise AppError("Username or email already registered.", 400)
    except ValidationError as e:
        raise AppError(str(e), 400)

    current_app.extensions["change_hub"].notify("users")
    logger.info(f"✅ New user registered: {username} / {email}")
    return jsonify({
        "success": True,
        "status": "success",
        "message": "User registered successfully.",
        "user": user.to_json()
    }), 201


# =====================================================
# LOGIN
# =====================================================
def login():
    data = request.get_json(silent=True) or {}
    identifier = parse_text(data.get("identifier") or data.get("email") or data.get("username"), "identifier")
    password = _password_field(data, "password")

    if not identifier or not password:
        raise AppError("Email/Username and password are required.", 400)

    user = User.find_by_identifier(identifier)
    if not user:
        raise AppError("User not found.", 404)
    if not user.correct_password(password):
        raise AppError("Invalid password.", 401)

    access_token = create_access_token(user.id, user.role_value)
    refresh_token = create_refresh_token(user.id)

    logger.info(f"✅ Login successful for {identifier}")

    # HttpOnly cookies as well so browser clients work without handling tokens
    resp = make_response(jsonify({
        "success": True,
        "status": "success",
        "message": "Login successful.",
        "access_token": access_token,
        "refresh_token": refresh_token,
        "user": user.to_json()
    }))
    resp.set_cookie("access_token", access_token, **_cookie_kwargs())
    resp.set_cookie("refresh_token", refresh_token, **_cookie_kwargs())
    return resp, 200


# =====================================================
# REFRESH TOKEN
# =====================================================
def refresh_token():
    data = request.get_json(silent=True) or {}
    token = data.get("refresh_token") or request.cookies.get("refresh_token")

    if not token:
        raise AppError("Refresh token required.", 400)

    decoded = decode_token(token, expected_type="refresh")
    if not decoded:
        raise AppError("Invalid or expired refresh token.", 401)

    user = User.objects(id=decoded.get("user_id")).first()
    if not user:
        raise AppError("User not found.", 404)

    new_access_token = create_access_token(user.id, user.role_value)
    logger.info(f"🔁 Token refreshed for {user.username}")

    resp = make_response(jsonify({
        "status": "success",
        "access_token": new_access_token
    }))
    resp.set_cookie("access_token", new_access_token, **_cookie_kwargs())
    return resp, 200


# =====================================================
# LOGOUT
# =====================================================
def logout():
    resp = make_response(jsonify({"status": "success", "message": "Logout successful."}))
    resp.delete_cookie("access_token")
    resp.delete_cookie("refresh_token")
    logger.info("👋 User logged out.")
    return resp, 200


# =====================================================
# CURRENT USER
# =====================================================
@token_required
def get_current_user(user):
    return jsonify({"success": True, "status": "success", "user": user.to_json()}), 200


@token_required
def stream_current_user(user):
    user_id = user.id

    def fetch():
        current = User.objects(id=user_id).first()
        return {"user": current.to_json() if current else None}

    subscription = Subscription(
        current_app.extensions["change_hub"], "users", fetch,
        heartbeat=current_app.config["STREAM_HEARTBEAT_SECONDS"]
    )
    return Response(
        stream_with_context(sse_events(subscription, f"me:{user.username}")),
        mimetype="text/event-stream"
    )
