from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import DEV_JWT_SECRET, get_config
from .errors import register_error_handlers
from models import storage
from models.user_repository import UserRepository
from services.auth_service import AuthService

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Book Management API",
        "version": "1.0.0",
        "description": "REST API for managing books, authors and genres with JWT authentication.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Each call rebuilds the database engine from DATABASE_URL, so tests can
    create an isolated app per test.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    if app.config["APP_ENV"] in ("prod", "production") and app.config["JWT_SECRET"] == DEV_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production")

    app.logger.info(
        "Starting Book Management API (APP_ENV=%s, JWT secret configured: %s)",
        app.config["APP_ENV"],
        app.config["JWT_SECRET"] != DEV_JWT_SECRET,
    )

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)
    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    app.extensions["auth_service"] = AuthService(
        UserRepository(storage),
        secret=app.config["JWT_SECRET"],
        access_ttl_minutes=app.config["ACCESS_TOKEN_TTL_MIN"],
        refresh_ttl_hours=app.config["REFRESH_TOKEN_TTL_HOUR"],
        algorithm=app.config["JWT_ALGORITHM"],
    )

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .genres import bp as genres_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1")
    app.register_blueprint(genres_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Book Management API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
