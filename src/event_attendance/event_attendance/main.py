from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.http import register_error_handlers
from .core.constants import (
    DEFAULT_FINALIZATION_SWEEP_SECONDS,
    DEFAULT_IDLE_RATIO,
    DEFAULT_PRESENT_RATIO,
    DEFAULT_STATUS_SWEEP_SECONDS,
)
from .database.bootstrap import apply_schema, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .events.controller import register as register_events

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

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
            face_service_url=getattr(settings, "FACE_SERVICE_URL", None),
            face_service_timeout=float(getattr(settings, "FACE_SERVICE_TIMEOUT_SECONDS", 10.0)),
            present_ratio=float(getattr(settings, "PRESENT_RATIO", DEFAULT_PRESENT_RATIO)),
            idle_ratio=float(getattr(settings, "IDLE_RATIO", DEFAULT_IDLE_RATIO)),
            status_sweep_seconds=float(getattr(settings, "STATUS_SWEEP_SECONDS", DEFAULT_STATUS_SWEEP_SECONDS)),
            finalization_sweep_seconds=float(
                getattr(settings, "FINALIZATION_SWEEP_SECONDS", DEFAULT_FINALIZATION_SWEEP_SECONDS)
            ),
        )

    app.extensions["event_attendance"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_events(app, container)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    if bool(getattr(settings, "START_SCHEDULER", False)):
        container.scheduler.start()

    return app
