import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage
from models.credential_store import CredentialStore
from utils.handshake import SessionHandshake
from utils.image_host import CloudinaryImageHost
from utils.security import TokenService

__version__ = "1.0.0"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Trek CMS API",
        "version": __version__,
        "description": "Trekking regions and treks: public listings, admin content management and admin sign-in.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the access token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
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


def configure_logging(app: Flask) -> None:
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    Token signing secrets are checked here, so the process refuses to start
    when JWT_SECRET or REFRESH_SECRET is missing (ConfigError).
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    configure_logging(app)

    tokens = TokenService.from_config(app.config)

    storage.configure(
        database_url=app.config["DATABASE_URL"],
        echo=app.config["DB_ECHO"],
        timeout=app.config["DB_TIMEOUT_SECONDS"],
    )
    storage.reload()

    app.extensions["token_service"] = tokens
    app.extensions["handshake"] = SessionHandshake(
        tokens, CredentialStore(storage), max_admins=app.config["MAX_ADMINS"]
    )
    app.extensions["image_host"] = CloudinaryImageHost.from_config(app.config)

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}}, supports_credentials=True)

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .regions import bp as regions_bp
    from .treks import bp as treks_bp
    from .uploads import bp as uploads_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(regions_bp, url_prefix="/api")
    app.register_blueprint(treks_bp, url_prefix="/api")
    app.register_blueprint(uploads_bp, url_prefix="/api")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Trek CMS API",
            "docs": "/apidocs/",
            "health": "/api/health",
        }, 200

    app.logger.info("Trek CMS API started (env=%s)", app.config.get("APP_ENV"))
    return app
