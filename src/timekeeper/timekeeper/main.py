from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .leaves.controller import register as register_leaves
from .notifications.notifier import SmtpSettings
from .overtime.controller import register as register_overtime
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .sweep.controller import register as register_sweep
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _container_from_settings(settings) -> Container:
    smtp = getattr(settings, "SMTP_CONFIG", None) or {}
    return build_container(
        db_config=getattr(settings, "DB_CONFIG"),
        smtp=SmtpSettings(
            host=smtp.get("host"),
            port=int(smtp.get("port") or 465),
            user=smtp.get("user"),
            password=smtp.get("password"),
            sender=smtp.get("sender"),
            use_ssl=bool(smtp.get("use_ssl", True)),
        ),
        timezone_name=getattr(settings, "BUSINESS_TIMEZONE", "Asia/Manila"),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 5)),
        grace_period_count=int(getattr(settings, "LATE_GRACE_PERIOD_COUNT", 3)),
        overtime_threshold_minutes=int(getattr(settings, "OVERTIME_THRESHOLD_MINUTES", 20)),
        undertime_threshold_minutes=int(getattr(settings, "UNDERTIME_THRESHOLD_MINUTES", 5)),
        enable_absence_sweep=bool(getattr(settings, "ENABLE_ABSENCE_SWEEP", False)),
        sweep_hour=int(getattr(settings, "ABSENCE_SWEEP_HOUR", 22)),
        sweep_minute=int(getattr(settings, "ABSENCE_SWEEP_MINUTE", 0)),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    Pass a ready `container` to skip settings-driven wiring (no database
    bootstrap, no scheduler start), e.g. in tests.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
            admin_email = getattr(settings, "ADMIN_EMAIL", None)
            admin_password = getattr(settings, "ADMIN_PASSWORD", None)
            if admin_email and admin_password:
                ensure_admin_user(
                    db_config,
                    full_name=getattr(settings, "ADMIN_NAME", "Administrator"),
                    email=admin_email,
                    password=admin_password,
                )

        container = _container_from_settings(settings)
        if container.sweep_scheduler:
            container.sweep_scheduler.start()

    app.extensions["timekeeper"] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok(status="ok", timezone=container.clock.timezone_name, now=container.clock.now().isoformat())

    register_users(app, container)
    register_schedules(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_overtime(app, container)
    register_reports(app, container)
    register_sweep(app, container)

    return app
