# src/server/app.py

"""Flask application factory for the payment proxy and admin API."""

import logging
import sqlite3

from flask import Flask, Response, jsonify
from flask_cors import CORS

from src.config.settings import Settings
from src.errors import RecordNotFoundError, ValidationError
from src.server.admin_api import admin_bp
from src.server.payments import payments_bp
from src.services.payment_gateway import PaymentGateway
from src.storage.catalog_db import CatalogDB

logger = logging.getLogger("storefront.server")


def create_app(
    db: CatalogDB | None = None,
    gateway: PaymentGateway | None = None,
) -> Flask:
    """Build the server with its collaborators attached to ``extensions``."""
    app = Flask(__name__)
    app.extensions["catalog_db"] = db or CatalogDB()
    app.extensions["payment_gateway"] = gateway or PaymentGateway()

    app.register_blueprint(payments_bp)
    app.register_blueprint(admin_bp)
    CORS(app)

    @app.errorhandler(ValidationError)
    def handle_validation(exc: ValidationError) -> tuple[Response, int]:
        logger.info("Rejected admin request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError) -> tuple[Response, int]:
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(sqlite3.Error)
    def handle_db_error(exc: sqlite3.Error) -> tuple[Response, int]:
        logger.error("Database error: %s", exc, exc_info=True)
        return jsonify({"error": "Database error"}), 500

    @app.get("/health")
    def health() -> Response:
        return jsonify({"status": "ok"})

    return app


def run_server() -> None:
    """Serve on ``Settings.HOST:Settings.PORT``."""
    app = create_app()
    logger.info("Server listening on port %d", Settings.PORT)
    app.run(host=Settings.HOST, port=Settings.PORT, debug=False)
