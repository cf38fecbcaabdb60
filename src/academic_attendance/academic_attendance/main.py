from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .seed import seed_demo_data
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    log = logging.getLogger(__name__)

    container = container or build_container()
    if bool(getattr(settings, "SEED_DEMO_DATA", False)):
        seed_demo_data(container, department=getattr(settings, "DEPARTMENT", "Computer Science"))
        log.info("Demo data seeded")

    register_users(app, container)
    register_timetable(app, container)
    register_attendance(app, container)

    app.extensions["academic_attendance"] = container
    log.info("Application ready (settings=%s)", settings_module)
    return app
