import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from sqlalchemy import text

from barberbook.core.config import BookingSettings, log_booking_config
from barberbook.core.exceptions import BookingError
from barberbook.core.logging_config import setup_logging
from barberbook.db.session import SessionLocal, create_tables
from barberbook.domain.interfaces import IExternalAvailabilityPort

logger = logging.getLogger(__name__)


def check_database_connection() -> bool:
    """Test database connection"""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        return False
    finally:
        db.close()


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(BookingError)
    def handle_booking_error(error: BookingError):
        level = logging.ERROR if error.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"Booking request rejected: {error.message}",
            extra={"context": {"error": error.error, "status_code": error.status_code}},
        )
        body = {"success": False, **error.to_dict()}
        return jsonify(body), error.status_code


def create_app(
    config_overrides: Optional[Dict[str, Any]] = None,
    availability_port: Optional[IExternalAvailabilityPort] = None,
    settings: Optional[BookingSettings] = None,
) -> Flask:
    # Only load from .env when DATABASE_URL is not already defined by the environment
    if not os.getenv("DATABASE_URL"):
        load_dotenv()

    app = Flask(__name__)
    app.config.update(
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        LOG_TO_FILE=os.getenv("LOG_TO_FILE", "false").lower() in ("true", "1", "yes"),
        LOG_JSON=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        CREATE_TABLES=os.getenv("CREATE_TABLES", "true").lower() in ("true", "1", "yes"),
        SETUP_LOGGING=True,
    )
    if config_overrides:
        app.config.update(config_overrides)

    if app.config["SETUP_LOGGING"]:
        setup_logging(
            app,
            log_level=app.config["LOG_LEVEL"],
            log_to_file=app.config["LOG_TO_FILE"],
            use_json_format=app.config["LOG_JSON"],
        )
    log_booking_config()

    if availability_port is None:
        from barberbook.repositories.square_availability_repo import (
            SquareAvailabilityRepository,
        )

        availability_port = SquareAvailabilityRepository()
    app.extensions["barberbook.availability_port"] = availability_port
    app.extensions["barberbook.settings"] = settings or BookingSettings.from_env()

    if app.config["CREATE_TABLES"]:
        create_tables()

    from barberbook.controllers import booking_bp

    app.register_blueprint(booking_bp)
    register_error_handlers(app)

    @app.route("/health")
    def health():
        healthy = check_database_connection()
        return jsonify({"status": "ok" if healthy else "degraded"}), 200 if healthy else 503

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
