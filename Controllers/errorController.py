from flask import Blueprint, current_app, request, jsonify
from mongoengine import ValidationError
from werkzeug.exceptions import HTTPException

from Utils.appError import AppError

error_bp = Blueprint('errors', __name__)


@error_bp.app_errorhandler(AppError)
def handle_app_error(err):
    current_app.logger.warning(f"AppError {err.status_code} at {request.path}: {err}")
    return jsonify(err.to_dict()), err.status_code


@error_bp.app_errorhandler(ValidationError)
def handle_validation_error(err):
    current_app.logger.warning(f"ValidationError at {request.path}: {err}")
    return jsonify({"status": "fail", "message": str(err)}), 400


@error_bp.app_errorhandler(404)
def not_found_error(e):
    current_app.logger.warning(
        f"404 Not Found: {request.url} | Method: {request.method} | IP: {request.remote_addr}"
    )
    return jsonify({"status": "fail", "message": "Resource not found."}), 404


@error_bp.app_errorhandler(405)
def method_not_allowed(e):
    return jsonify({"status": "fail", "message": "Method not allowed."}), 405


@error_bp.app_errorhandler(429)
def ratelimit_handler(e):
    return jsonify({"status": "fail", "message": "Rate limit exceeded. Please slow down."}), 429


@error_bp.app_errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return jsonify({"status": "fail" if e.code < 500 else "error", "message": e.description}), e.code

    # This includes traceback automatically
    current_app.logger.exception(
        f"Unexpected Application Error: {e} | URL: {request.url} | Method: {request.method} | IP: {request.remote_addr}"
    )
    return jsonify({"status": "error", "message": "Something went wrong on the server."}), 500
