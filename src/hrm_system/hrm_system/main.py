from __future__ import annotations

import importlib
import logging
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.logging import setup_logging
from .container import Container, build_container
from .core.constants import DEFAULT_OVERTIME_MULTIPLIER, DEFAULT_STANDARD_DAILY_HOURS, DEFAULT_WORKING_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .holidays.controller import register as register_holidays
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .payroll.model import PayrollSettings
from .policies.controller import register as register_policies
from .regularizations.controller import register as register_regularizations
from .salary.controller import register as register_salary
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def payroll_settings_from(settings) -> PayrollSettings:
    return PayrollSettings(
        working_days=tuple(int(d) for d in getattr(settings, "WORKING_DAYS", DEFAULT_WORKING_DAYS)),
        standard_daily_hours=Decimal(str(getattr(settings, "STANDARD_DAILY_HOURS", DEFAULT_STANDARD_DAILY_HOURS))),
        overtime_multiplier=Decimal(str(getattr(settings, "OVERTIME_MULTIPLIER", DEFAULT_OVERTIME_MULTIPLIER))),
    )


def register_routes(app: Flask, container: Container) -> None:
    register_shifts(app, container)
    register_policies(app, container)
    register_holidays(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_regularizations(app, container)
    register_salary(app, container)
    register_payroll(app, container)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(str(getattr(settings, "LOG_LEVEL", "INFO")))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "Starting with settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config, settings=payroll_settings_from(settings))

    register_routes(app, container)
    return app
