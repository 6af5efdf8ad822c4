"""Shift Log service package.

Organized by feature modules (shifts, workers, facility, stats, ...) with a
thin Flask controller layer over service/repository layers.
"""
from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .config import get_settings_module
from .container import Container, build_container
from .common.http import register_error_handlers
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_workers, list_tables
from .facility.controller import register as register_facility
from .shifts.controller import register as register_shifts
from .stats.controller import register as register_stats
from .workers.controller import register as register_workers

logger = logging.getLogger(__name__)


def load_settings():
    return importlib.import_module(get_settings_module())


def create_app(*, settings=None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            getattr(settings, "__name__", "custom"), db_config.get("user"), db_config.get("host"),
            db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            ensure_demo_workers(db_config)
            logger.info("demo seed ready")

        container = build_container(settings=settings)

    app.extensions["shift_log"] = container

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_error_handlers(app)
    register_workers(app, container)
    register_shifts(app, container)
    register_stats(app, container)
    register_facility(app, container)

    return app
