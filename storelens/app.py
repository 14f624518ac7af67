"""Application factory for the Storelens analytics API."""

from __future__ import annotations

import logging

from typing import Any, Mapping, Optional, Union

from flask import Flask

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("storelens")

from .config import Config
from .routes.api import bp as api_bp
from .services.datastore import DataStore
from .services.metrics import Metrics
from .services.reports import ReportsService


def create_app(
    config_object: Optional[Union[str, Mapping[str, Any], type]] = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    if config_object is None:
        app.config.from_object(Config)
    elif isinstance(config_object, Mapping):
        app.config.from_object(Config)
        app.config.from_mapping(config_object)
    else:
        app.config.from_object(config_object)

    metrics = Metrics()
    datastore = DataStore(app.config)
    reports = ReportsService(datastore, metrics, app.config)

    app.extensions["metrics"] = metrics
    app.extensions["datastore"] = datastore
    app.extensions["reports"] = reports

    app.register_blueprint(api_bp)
    logger.info("Storelens app created (duckdb=%s)", app.config.get("DUCKDB_PATH"))

    return app


__all__ = ["create_app"]
