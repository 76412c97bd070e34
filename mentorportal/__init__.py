import os
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify, request, has_request_context
from .extensions import db, migrate, login_manager, mail, babel
from .config import Config
from .exceptions import Unauthorized
from .security import load_user_from_request
from .models.user import User
from .services.directory import UserDirectory
from .services.meeting_store import MeetingRequestStore
from .services.notifications import NotificationGateway
from .services.scheduling import SchedulingEngine
from .services.schedule_query import ScheduleQueryService

# Blueprints
from .blueprints.errors import errors_bp
from .blueprints.auth import auth_bp
from .blueprints.admin import admin_bp
from .blueprints.schedules import schedules_bp
from .blueprints.announcements import announcements_bp
from .blueprints.courses import courses_bp


# Optional: Sentry
def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.0),
            environment=os.getenv("ENV", "development"),
            release=os.getenv("GIT_COMMIT", None),
            send_default_pii=False,
        )
        app.logger.info("Sentry initialized.")
    except Exception as e:
        app.logger.warning(f"Sentry init failed: {e}")

def _init_logging(app):
    # Base level
    level_name = app.config.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)

    # Ensure log dir exists
    log_dir = Path(app.config.get("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / app.config.get("LOG_FILENAME", "mentorportal.log")

    # Formatter: text or JSON
    if app.config.get("LOG_JSON", False):
        import json_log_formatter
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s")

    # Rotating file handler (5MB x 5)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # Stream to stdout as well (useful on dev/heroku/docker)
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)

    # app.logger is the "mentorportal" logger; service modules propagate into it
    for h in list(app.logger.handlers):
        app.logger.removeHandler(h)
        h.close()
    app.logger.addHandler(file_handler)
    app.logger.addHandler(stream_handler)

    app.logger.info("Logging initialized.")

def _init_services(app):
    # Constructed once per app and handed to the blueprints via app.extensions
    notifier = NotificationGateway(app)
    store = MeetingRequestStore(db)
    app.extensions["notification_gateway"] = notifier
    app.extensions["scheduling_engine"] = SchedulingEngine(
        directory=UserDirectory(), store=store, notifier=notifier,
    )
    app.extensions["schedule_query"] = ScheduleQueryService(store=store)

def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)

    if config_object is None:
        app.config.from_object(Config)
    else:
        app.config.from_object(config_object)

    app.config.setdefault("SECRET_KEY", "change-me")
    app.config.setdefault(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///" + os.path.join(app.instance_path, "mentorportal.db"),
    )
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("BABEL_DEFAULT_LOCALE", "en")
    app.config.setdefault("LANGUAGES", ["en"])
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    mail.init_app(app)

    def _select_locale():
        if not has_request_context():
            return app.config.get("BABEL_DEFAULT_LOCALE", "en")
        return request.accept_languages.best_match(app.config.get("LANGUAGES", ["en"])) or "en"
    babel.init_app(app, locale_selector=_select_locale)

    @login_manager.user_loader
    def load_user(user_id):
        return User.query.get(int(user_id))

    login_manager.request_loader(load_user_from_request)

    @login_manager.unauthorized_handler
    def _unauthorized():
        raise Unauthorized("Not authorized, no token")

    # Logging must come before blueprints so errors during register are captured
    _init_logging(app)
    _init_sentry(app)
    _init_services(app)

    # Blueprints
    app.register_blueprint(errors_bp)  # error handlers
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(admin_bp, url_prefix="/api/v1/users")
    app.register_blueprint(schedules_bp, url_prefix="/api/v1/schedules")
    app.register_blueprint(announcements_bp, url_prefix="/api/v1/announcements")
    app.register_blueprint(courses_bp, url_prefix="/api/v1")

    @app.get("/api/v1")
    def api_status():
        return jsonify({"status": "API Running", "version": app.config.get("APP_VERSION", "1.0")})

    return app
