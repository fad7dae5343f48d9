from flask import Blueprint
from Controllers.authController import (
    register, login, refresh_token, logout, get_current_user, stream_current_user
)

# ----------------------------
# Auth routes
# ----------------------------
auth_routes = Blueprint('auth_routes', __name__, url_prefix='/api/v1/auth')

auth_routes.add_url_rule('/register', view_func=register, methods=['POST'])
auth_routes.add_url_rule('/login', view_func=login, methods=['POST'])
auth_routes.add_url_rule('/refresh', view_func=refresh_token, methods=['POST'])
auth_routes.add_url_rule('/logout', view_func=logout, methods=['POST'])
auth_routes.add_url_rule('/me', view_func=get_current_user, methods=['GET'])
auth_routes.add_url_rule('/me/stream', view_func=stream_current_user, methods=['GET'])
