import os

from flask import Flask

from Controllers.errorController import error_bp
from Routes.adminRoutes import admin_routes
from Routes.authRoutes import auth_routes
from Routes.orderRoutes import order_routes
from Routes.storeRoutes import store_routes
from Utils.commands import register_commands
from Utils.config import Config
from Utils.db import init_db
from Utils.feeds import ChangeHub
from Utils.logger import setup_logging
from Utils.rate_limit import limiter


def create_app(test_config=None):
    # ----------------------------
    # Flask app configuration
    # ----------------------------
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # ----------------------------
    # Logging Configuration
    # ----------------------------
    setup_logging(app)

    # ----------------------------
    # Database, rate limiter, live feeds
    # ----------------------------
    init_db(app)
    limiter.init_app(app)
    app.extensions["change_hub"] = ChangeHub()

    # ----------------------------
    # Register blueprints
    # ----------------------------
    app.register_blueprint(error_bp)
    app.register_blueprint(auth_routes)
    app.register_blueprint(store_routes)
    app.register_blueprint(order_routes)
    app.register_blueprint(admin_routes)

    register_commands(app)

    @app.route("/health")
    @limiter.exempt
    def health():
        return {"status": "ok"}, 200

    return app


# ----------------------------
# Run the app
# ----------------------------
if __name__ == '__main__':
    port = int(os.getenv('PORT', 4000))
    app = create_app()
    app.logger.info(f"App running on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=False, threaded=True)
