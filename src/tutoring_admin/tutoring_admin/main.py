from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.json_provider import ISOJSONProvider
from .container import Container, build_container
from .core.exceptions import (
    DomainError,
    NotFoundError,
    PersistenceError,
    UnauthorizedError,
    UniquenessViolation,
    ValidationError,
)
from .core.invalidation import drain_stale_views
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, apply_seed_sql, missing_tables
from .database.connection import DBConfig
from .emails.controller import register as register_emails
from .enrollments.controller import register as register_enrollments
from .lessons.controller import register as register_lessons
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (UnauthorizedError, 401),
    (NotFoundError, 404),
    (UniquenessViolation, 409),
    (PersistenceError, 500),
)


def _status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)
    app.json = ISOJSONProvider(app)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            missing = missing_tables(db_config)
            if missing:
                logger.warning("schema applied but tables are missing: %s", ", ".join(missing))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")

        container = build_container(
            db_config=db_config,
            resend_api_key=getattr(settings, "RESEND_API_KEY", None),
            resend_from_email=getattr(settings, "RESEND_FROM_EMAIL", None),
        )

    @app.before_request
    def _reset_stale_views():
        drain_stale_views()

    @app.errorhandler(DomainError)
    def _domain_error(error: DomainError):
        status = _status_for(error)
        if status >= 500:
            logger.error("request failed: %s", error)
        return jsonify({"error": str(error)}), status

    register_students(app, container)
    register_courses(app, container)
    register_lessons(app, container)
    register_enrollments(app, container)
    register_attendance(app, container)
    register_emails(app, container)

    return app
