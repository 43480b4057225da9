import logging
import os

from flask import Flask, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

from config import config

logger = logging.getLogger(__name__)

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
csrf = CSRFProtect()


def get_real_ip():
    """
    Get the real client IP address, accounting for reverse proxies.
    Checks X-Forwarded-For, X-Real-IP, and falls back to remote_addr.
    """
    # X-Forwarded-For: client, proxy1, proxy2, ...
    if request.headers.get("X-Forwarded-For"):
        return request.headers.get("X-Forwarded-For").split(",")[0].strip()
    if request.headers.get("X-Real-IP"):
        return request.headers.get("X-Real-IP")
    return get_remote_address()


limiter = Limiter(
    key_func=get_real_ip,
    default_limits=["10000 per day", "1000 per hour"],
)


def create_app(config_name=None):
    app = Flask(__name__)

    # Determine configuration
    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG", "default")

    app_config = config[config_name]()
    app_config.validate()
    app.config.from_object(app_config)

    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = (
        False
        if app.config.get("DEBUG")
        else app.config.get("FLASK_ENV") == "production"
    )
    app.config["REMEMBER_COOKIE_DURATION"] = app.config["SESSION_TIMEOUT"]
    app.config["PERMANENT_SESSION_LIFETIME"] = app.config["SESSION_TIMEOUT"]
    app.config["WTF_CSRF_TIME_LIMIT"] = None

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    limiter.init_app(app)

    # Import and register blueprints
    from bolao.routes.auth import bp as auth_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")

    from bolao.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    from bolao.routes.admin import bp as admin_bp

    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    # Register error handlers
    register_error_handlers(app)

    # Setup logging
    from bolao.utils.logging_config import setup_logging

    setup_logging(app)

    # Create database tables
    with app.app_context():
        db.create_all()

    return app


def register_error_handlers(app):
    """Register global error handlers"""
    from sqlalchemy.exc import SQLAlchemyError

    from bolao.errors import BolaoError

    @app.after_request
    def after_request(response):
        # Add security headers to all responses
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        if not app.config.get("DEBUG"):
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        # Picks and totals are recomputed per request, never cache them
        if response.mimetype == "application/json":
            response.headers["Cache-Control"] = "no-store, max-age=0"

        return response

    @app.errorhandler(BolaoError)
    def handle_bolao_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        logger.exception(f"Store error on {request.method} {request.path}")
        return jsonify({"error": "Erro interno", "code": "internal"}), 500

    from flask_wtf.csrf import CSRFError

    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        app.logger.warning(
            f"CSRF Error: {error.description} - Path: {request.path} - User-Agent: {request.user_agent}"
        )
        return jsonify({"error": "Token de segurança inválido", "code": "csrf"}), 400

    @app.errorhandler(401)
    def unauthorized_error(error):
        return jsonify({"error": "Não autenticado", "code": "unauthorized"}), 401

    @app.errorhandler(403)
    def forbidden_error(error):
        return jsonify({"error": "Acesso negado", "code": "forbidden"}), 403

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({"error": "Recurso não encontrado", "code": "not_found"}), 404

    @app.errorhandler(429)
    def too_many_requests_error(error):
        return jsonify({"error": "Muitas requisições", "code": "rate_limited"}), 429

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({"error": "Erro interno", "code": "internal"}), 500


from bolao import models  # noqa: F401, E402 - imported for model registration
