import os
from datetime import datetime
from logging.config import dictConfig
from flask import Flask
from flask.cli import load_dotenv
from flask_migrate import Migrate

from wifigate.models import db
from wifigate.routes import journey_bp, admin_bp
from wifigate.services.areas import area_service
from wifigate.services.context import context_service

migrate = Migrate()

# Settings read from the environment, overridable through test_config
ENV_SETTINGS = (
    "WIFIGATE_SESSION_URL",
    "WIFIGATE_HTTP_TIMEOUT",
    "WIFIGATE_AREA_SOURCE",
    "WIFIGATE_DIRECTORY_URL",
    "WIFIGATE_DIRECTORY_CLIENT_KEY",
    "WIFIGATE_DIRECTORY_CLIENT_SECRET",
    "WIFIGATE_DIRECTORY_PAGE_SIZE",
)


def configure_logging(level: str = "INFO"):
    dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'default': {
            'format': '[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
        }},
        'handlers': {'wsgi': {
            'class': 'logging.StreamHandler',
            'stream': 'ext://flask.logging.wsgi_errors_stream',
            'formatter': 'default'
        }},
        'root': {
            'level': level,
            'handlers': ['wsgi']
        }
    })


def create_app(test_config=None):
    load_dotenv()

    # Check if running in test mode (from environment or test_config)
    is_testing = (
        os.environ.get("TESTING", "").lower() in ("true", "1", "yes")
        or (test_config and test_config.get("TESTING"))
    )

    configure_logging(os.environ.get("WIFIGATE_LOG_LEVEL", "INFO").upper())

    app = Flask(__name__)

    if is_testing:
        # Use in-memory SQLite for tests
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config["TESTING"] = True
    else:
        # PostgreSQL in production, SQLite in development
        database_url = os.environ.get("WIFIGATE_DATABASE_URL", "sqlite:///wifigate.db")
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        app.config["SQLALCHEMY_DATABASE_URI"] = database_url

    for key in ENV_SETTINGS:
        if key in os.environ:
            app.config[key] = os.environ[key]

    # Apply additional test configuration if provided
    if test_config:
        app.config.update(test_config)

    app.json.sort_keys = False

    db.init_app(app)
    migrate.init_app(app, db)
    context_service.init_app(app)
    area_service.init_app(app)

    with app.app_context():
        db.create_all()

    app.register_blueprint(journey_bp)
    app.register_blueprint(admin_bp)

    @app.route('/health')
    def health():
        return {'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()}

    app.logger.info("wifigate application created")
    return app
