from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_TOTAL_WORKING_DAYS
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .deductions.controller import register as register_deductions
from .payments.controller import register as register_payments
from .payroll.controller import register as register_payroll
from .reporting.controller import register as register_reports
from .salary_slips.controller import register as register_salary_slips
from .salary_structures.controller import register as register_salary_structures

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    When a container is passed (tests), no database work happens at startup.
    """

    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PORT"] = int(getattr(settings, "PORT", 5001))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_settings(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            total_working_days=int(getattr(settings, "TOTAL_WORKING_DAYS", DEFAULT_TOTAL_WORKING_DAYS)),
            reuse_existing_slips=bool(getattr(settings, "SALARY_SLIP_REUSE_EXISTING", False)),
        )

    app.extensions["container"] = container

    register_attendance(app, container)
    register_salary_structures(app, container)
    register_payroll(app, container)
    register_salary_slips(app, container)
    register_deductions(app, container)
    register_payments(app, container)
    register_reports(app, container)

    return app
