from __future__ import annotations

import importlib
import logging
import logging.config
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .entries.controller import register as register_entries
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .timesheets.controller import register as register_timesheets
from .work_calendar.controller import register as register_calendar

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Flask app over the engine; pass ``container`` to skip MySQL wiring."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging_config = getattr(settings, "LOGGING", None)
    if logging_config:
        logging.config.dictConfig(logging_config)

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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            lock_timeout=int(getattr(settings, "LOCK_TIMEOUT_SECONDS", DEFAULT_LOCK_TIMEOUT_SECONDS)),
        )

    app.extensions["timekeeping"] = container
    register_error_handlers(app)
    register_entries(app, container)
    register_leave(app, container)
    register_timesheets(app, container)
    register_payroll(app, container)
    register_calendar(app, container)

    return app
