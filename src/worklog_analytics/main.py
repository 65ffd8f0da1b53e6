from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .analytics.controller import register as register_analytics
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_ORG_TIMEZONE
from .core.logging_config import setup_logging
from .worklogs.controller import register as register_worklogs

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Tests pass a ready ``container`` wired with in-memory repositories; otherwise
    one is built against MySQL from the settings module picked by ``APP_ENV``.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    org_timezone = getattr(settings, "ORG_TIMEZONE", DEFAULT_ORG_TIMEZONE)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s tz=%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
            org_timezone,
        )
        container = build_container(db_config=db_config, org_timezone=org_timezone)

    register_worklogs(app, container)
    register_analytics(app, container)

    return app
