"""Application factory."""

import uuid

import click
from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from mail import Mailer, MailSettings
from models import db
from routes.signup import signup_bp
from routes.verify import verify_bp
from storage import connect_database

migrate = Migrate()


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    connect_database(app)
    migrate.init_app(app, db)

    mailer = Mailer(MailSettings.from_config(app.config), logger=app.logger)
    app.extensions["mailer"] = mailer

    # CORS
    CORS(app, resources={r"/api/*": {"origins": [app.config["FRONTEND_URL"]]}})

    # Blueprints
    app.register_blueprint(signup_bp, url_prefix="/api")
    app.register_blueprint(verify_bp, url_prefix="/api")

    @app.cli.command("init-db")
    def init_db_command():
        """Create any missing tables."""
        db.create_all()
        click.echo("Database tables created.")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = jsonify({"msg": error.description, "request_id": request_id})
        response.status_code = error.code or 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        request_id = g.get("request_id") or str(uuid.uuid4())
        app.logger.exception("Unhandled application error", exc_info=error)
        response = jsonify({"msg": "Server Error", "request_id": request_id})
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=application.config["SERVER_PORT"])
