"""
Health controller - health check endpoints for monitoring.
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..db.session import SessionLocal

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("", methods=["GET"])
def health_check():
    """
    Check that the database answers a trivial query.

    Status codes:
        200: database reachable
        503: database unreachable

    Note:
        - No authentication required (monitoring endpoint)
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return jsonify({"status": "healthy", "database": "ok"}), 200
    except SQLAlchemyError as e:
        logger.error(
            "Health check failed: database unreachable",
            extra={"context": {"endpoint": "/health", "error": str(e)}},
            exc_info=True,
        )
        return jsonify({"status": "unhealthy", "database": "unreachable"}), 503
    finally:
        db.close()
