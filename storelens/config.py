"""Application configuration objects."""

import os
from typing import Dict
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration for the Storelens analytics API."""

    # -------------------------
    # Data paths
    # -------------------------
    # DuckDB database file (":memory:" keeps everything in process)
    DUCKDB_PATH = os.getenv("STORELENS_DUCKDB_PATH", ":memory:")

    # Order line exports used to build prod.order_lines
    CSV_GLOB = os.getenv("STORELENS_CSV_GLOB", "data/*.csv")

    # Remote CSV export, fetched when no local table or CSV is available
    DATA_URL = os.getenv("STORELENS_DATA_URL")
    DATA_API_KEY = os.getenv("STORELENS_DATA_API_KEY")

    # -------------------------
    # Data schema
    # -------------------------
    DATE_COL = os.getenv("STORELENS_DATE_COL", "date_created")

    # -------------------------
    # REST defaults
    # -------------------------
    DEFAULT_PER_PAGE = int(os.getenv("STORELENS_DEFAULT_PER_PAGE", "10"))
    MAX_PER_PAGE = 100
    SEARCH_LIMIT = int(os.getenv("STORELENS_SEARCH_LIMIT", "20"))

    # Segments charted in item-comparison mode when no ids are selected
    TOP_SEGMENTS = int(os.getenv("STORELENS_TOP_SEGMENTS", "5"))

    DEFAULT_CHART_MODE = "time-comparison"

    # -------------------------
    # Interval -> pandas period alias
    # -------------------------
    PERIOD_ALIAS: Dict[str, str] = {
        "hour": "h",
        "day": "D",
        "week": "W",  # weeks start on Monday, like DuckDB date_trunc
        "month": "M",
        "quarter": "Q",
        "year": "Y",
    }


__all__ = ["Config"]
