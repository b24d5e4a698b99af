"""Main Flask application for the ISP gateway."""

# flake8: noqa: E501


import os
from typing import Optional

import structlog
from flask import Flask, jsonify
from flask_cors import CORS
from prometheus_flask_exporter import PrometheusMetrics
from werkzeug.exceptions import HTTPException

from apps.api.config import Settings, get_config
from apps.api.logging_config import setup_logging
from apps.api.services.dictionary import (
    AliasRecordService,
    DictionaryError,
    DictionaryService,
    MockRowStore,
    PyDALRowStore,
    SchemaRegistry,
)
from shared.api_utils import make_error_response
from shared.database import ensure_database_ready, init_db, log_startup_status

logger = structlog.get_logger()


def create_app(config_name: Optional[str] = None, settings: Optional[Settings] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config_name: Configuration name (development, production, testing)
        settings: Explicit settings instead of the environment

    Returns:
        Configured Flask application (wrap with apps.api.asgi for uvicorn)
    """
    app = Flask(__name__)

    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    config = get_config(config_name, settings)
    app.config.from_object(config)
    config.init_app(app)
    app.json.sort_keys = False

    # Setup logging (must be after config but before other initializations)
    setup_logging(app)

    _init_extensions(app)
    _init_dictionary(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.route("/healthz")
    def health_check():
        """Health check endpoint."""
        return jsonify({"status": "healthy", "service": "isp-gateway"}), 200

    @app.route(f"{app.config['API_PREFIX']}/status")
    def api_status():
        """API status endpoint for monitoring."""
        return jsonify({
            "status": "operational",
            "service": "isp-gateway",
            "version": app.config.get("APP_VERSION", "0.0.0"),
            "environment": app.config.get("ENV", "production"),
            "backend": app.extensions["row_store"].backend,
            "schemaSource": app.extensions["schema_registry"].mode,
        }), 200

    logger.info(
        "isp_gateway_app_created",
        config=config_name,
        debug=app.config["DEBUG"],
        version=app.config["APP_VERSION"],
    )

    return app


def _init_extensions(app: Flask) -> None:
    """
    Initialize Flask extensions.

    Args:
        app: Flask application
    """
    CORS(
        app,
        origins=app.config["CORS_ORIGINS"],
        methods=app.config["CORS_METHODS"],
        allow_headers=app.config["CORS_ALLOW_HEADERS"],
        supports_credentials=app.config.get("CORS_SUPPORTS_CREDENTIALS", False),
    )

    if app.config.get("METRICS_ENABLED"):
        metrics = PrometheusMetrics(app)
        metrics.info(
            "isp_gateway_app_info", "ISP Gateway Application", version=app.config["APP_VERSION"]
        )

    logger.info("extensions_initialized", metrics=bool(app.config.get("METRICS_ENABLED")))


def _use_database(app: Flask) -> bool:
    backend = app.config.get("DICTIONARY_BACKEND", "auto")
    if backend == "mock":
        return False
    if backend == "database":
        if not app.config.get("DATABASE_URL"):
            raise RuntimeError("DICTIONARY_BACKEND=database requires DATABASE_URL")
        return True
    return bool(app.config.get("DATABASE_URL"))


def _init_dictionary(app: Flask) -> None:
    """
    Build the row store, schema registry and services for this app.

    Without a database the owned mock store and the default schemas serve
    every alias.

    Args:
        app: Flask application
    """
    if _use_database(app):
        db_status = ensure_database_ready(app)
        log_startup_status(db_status)
        if not db_status["connected"]:
            raise RuntimeError("Cannot start application - database not available")

        db = init_db(app)
        store = PyDALRowStore(db)
        registry = SchemaRegistry(db)
    else:
        app.db = None
        store = MockRowStore()
        registry = SchemaRegistry()

    app.extensions["row_store"] = store
    app.extensions["schema_registry"] = registry
    app.extensions["dictionary_service"] = DictionaryService(registry, store)
    app.extensions["record_service"] = AliasRecordService(store)

    logger.info("dictionary_initialized", backend=store.backend, schema_source=registry.mode)


def _register_blueprints(app: Flask) -> None:
    """
    Register Flask blueprints under the API prefix and the legacy prefix.

    Args:
        app: Flask application
    """
    from apps.api.api.v1 import dictionary, integration, lookup

    prefixes = [("", app.config["API_PREFIX"])]
    if app.config.get("LEGACY_API_PREFIX"):
        prefixes.append(("legacy_", app.config["LEGACY_API_PREFIX"]))

    for name_prefix, api_prefix in prefixes:
        app.register_blueprint(
            dictionary.bp, url_prefix=f"{api_prefix}/dictionary", name=f"{name_prefix}dictionary"
        )
        app.register_blueprint(
            lookup.bp, url_prefix=f"{api_prefix}/lookup", name=f"{name_prefix}lookup"
        )
        app.register_blueprint(
            integration.bp, url_prefix=api_prefix, name=f"{name_prefix}integration"
        )

    logger.info(
        "blueprints_registered",
        prefixes=[prefix for _, prefix in prefixes],
        blueprints=["dictionary", "lookup", "integration"],
    )


def _register_error_handlers(app: Flask) -> None:
    """
    Register error handlers.

    Every error renders as {code, message, detailedMessage}.

    Args:
        app: Flask application
    """

    @app.errorhandler(DictionaryError)
    def dictionary_error(error: DictionaryError):
        """Handle dictionary errors raised by services."""
        if error.status_code >= 500:
            logger.error("dictionary_error", code=error.code, error=error.detailed_message)
        else:
            logger.info("dictionary_request_rejected", code=error.code, error=error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request."""
        logger.warning("bad_request", error=str(error))
        body, status = make_error_response(
            "Invalid request", 400, code="BAD_REQUEST", detailed_message=getattr(error, "description", None)
        )
        return jsonify(body), status

    @app.errorhandler(401)
    def unauthorized(error):
        """Handle 401 Unauthorized."""
        body, status = make_error_response("Authentication required", 401, code="UNAUTHORIZED")
        return jsonify(body), status

    @app.errorhandler(403)
    def forbidden(error):
        """Handle 403 Forbidden."""
        body, status = make_error_response("Insufficient permissions", 403, code="FORBIDDEN")
        return jsonify(body), status

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found."""
        body, status = make_error_response("Resource not found", 404, code="NOT_FOUND")
        return jsonify(body), status

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 Method Not Allowed."""
        body, status = make_error_response("Method not allowed", 405, code="METHOD_NOT_ALLOWED")
        return jsonify(body), status

    @app.errorhandler(500)
    def internal_server_error(error):
        """Handle 500 Internal Server Error."""
        logger.error("internal_server_error", error=str(error))
        body, status = make_error_response("An error occurred", 500, code="INTERNAL_ERROR")
        return jsonify(body), status

    @app.errorhandler(Exception)
    def unhandled_exception(error: Exception):
        """Render any uncaught exception as a 500 body, never a traceback."""
        if isinstance(error, HTTPException):
            body, status = make_error_response(
                error.name, error.code or 500, code=error.name.upper().replace(" ", "_"), detailed_message=error.description
            )
            return jsonify(body), status
        logger.exception("unhandled_exception", error=str(error))
        body, status = make_error_response(
            "An error occurred", 500, code="INTERNAL_ERROR", detailed_message=str(error)
        )
        return jsonify(body), status

    logger.info("error_handlers_registered")


if __name__ == "__main__":
    import uvicorn

    from apps.api.asgi import app as asgi_app

    uvicorn.run(
        asgi_app,
        host=os.getenv("FLASK_HOST", "0.0.0.0"),
        port=int(os.getenv("FLASK_PORT", 5000)),
    )
