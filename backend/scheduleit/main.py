import logging
import os
import re
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, request

# Get logger for this module
logger = logging.getLogger(__name__)

# Load environment variables conditionally
# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()


def _mask_url_password(url: str) -> str:
    """Hide the password part of a database URL before logging it."""
    return re.sub(r"(://[^:/?#]+):[^@]*@", r"\1:***@", url)


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    from scheduleit.controllers.appointment_controller import appointments_bp
    from scheduleit.controllers.customer_controller import customers_bp
    from scheduleit.controllers.health_controller import health_bp
    from scheduleit.core import config
    from scheduleit.core.api_utils import register_error_handlers
    from scheduleit.core.logging_config import setup_logging
    from scheduleit.db.session import create_tables
    from scheduleit.services.event_dispatcher import get_event_dispatcher

    is_production = config.is_production()

    app = Flask(__name__)

    # Set TESTING config from environment variable (before any other configuration)
    if config.is_testing():
        app.config["TESTING"] = True
    if config_overrides:
        app.config.update(config_overrides)

    # Configure structured logging (after app creation so we can register hooks)
    setup_logging(
        app=app,  # Pass app to register request/response hooks
        log_level=config.get_log_level(),
        enable_sql_echo=not is_production and not app.config.get("TESTING"),
        log_to_file=config.get_log_to_file() and not app.config.get("TESTING"),
        use_json_format=is_production,  # JSON logs in production, colored in dev
        log_dir=config.get_log_dir(),
    )
    config.log_app_config()
    logger.info(
        "Database configured",
        extra={"context": {"database_url": _mask_url_password(config.get_database_url())}},
    )

    allowed_origins = set(config.get_cors_allowed_origins())

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if request.path.startswith("/api/") and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Methods"] = (
                "GET, POST, PATCH, DELETE, OPTIONS"
            )
            response.headers["Access-Control-Allow-Headers"] = (
                "Content-Type, X-Request-ID"
            )
        return response

    app.extensions.setdefault("scheduleit.event_sink", get_event_dispatcher())

    app.register_blueprint(appointments_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(health_bp)
    register_error_handlers(app)

    create_tables()
    logger.info("Database tables ensured")

    return app
