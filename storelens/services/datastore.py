"""Data access helpers backed by DuckDB."""

from __future__ import annotations

import glob
import logging
import os
from io import BytesIO
from typing import Any, Dict, Mapping, Optional

import duckdb
import pandas as pd
import requests

logger = logging.getLogger("storelens")

TABLE = "prod.order_lines"

# One row per order line item.
SCHEMA: Dict[str, str] = {
    "order_id": "BIGINT",
    "date_created": "TIMESTAMP",
    "status": "VARCHAR",
    "customer_id": "BIGINT",
    "customer_name": "VARCHAR",
    "customer_email": "VARCHAR",
    "customer_username": "VARCHAR",
    "customer_type": "VARCHAR",
    "billing_country": "VARCHAR",
    "product_id": "BIGINT",
    "product_name": "VARCHAR",
    "variation_id": "BIGINT",
    "variation_name": "VARCHAR",
    "category_id": "BIGINT",
    "category_name": "VARCHAR",
    "coupon_id": "BIGINT",
    "coupon_code": "VARCHAR",
    "qty": "INTEGER",
    "net_total": "DOUBLE",
}


class DataStore:
    """Own order data loading, preprocessing and the DuckDB connection.

    Storage backend: DuckDB (``:memory:`` or a .duckdb file)
    - Source data: CSV files matched by Config.CSV_GLOB, or Config.DATA_URL
    - Materialized table: prod.order_lines
    """

    def __init__(self, config: Mapping[str, Any]):
        self.config = config
        self._df: Optional[pd.DataFrame] = None
        self._con: Optional[duckdb.DuckDBPyConnection] = None

    # ---------- DuckDB helpers ----------

    def _connect(self) -> duckdb.DuckDBPyConnection:
        if self._con is None:
            db_path = str(self.config.get("DUCKDB_PATH") or ":memory:")
            if db_path != ":memory:" and os.path.dirname(db_path):
                os.makedirs(os.path.dirname(db_path), exist_ok=True)
            self._con = duckdb.connect(db_path)
        return self._con

    def _table_exists(self) -> bool:
        con = self._connect()
        try:
            return bool(
                con.execute(
                    "SELECT COUNT(*) FROM information_schema.tables "
                    "WHERE table_schema='prod' AND table_name='order_lines';"
                ).fetchone()[0]
            )
        except duckdb.Error:
            return False

    def _create_empty_table(self) -> None:
        con = self._connect()
        columns = ", ".join(f"{name} {sql_type}" for name, sql_type in SCHEMA.items())
        con.execute("CREATE SCHEMA IF NOT EXISTS prod;")
        con.execute(f"CREATE TABLE IF NOT EXISTS {TABLE} ({columns});")

    def ensure_table(self) -> None:
        """Make sure prod.order_lines exists, loading sources on first use."""
        if self._table_exists():
            return
        self.load()
        if not self._table_exists():
            logger.warning("No order data available; creating empty %s", TABLE)
            self._create_empty_table()

    def rebuild_from_csv(self) -> bool:
        """Full rebuild of prod.order_lines from CSVs matched by CSV_GLOB."""
        csv_glob = self.config.get("CSV_GLOB")
        files = glob.glob(csv_glob) if csv_glob else []
        if not files:
            logger.warning("No CSV files found for glob %r", csv_glob)
            return False

        logger.info("Building %s from %d CSV file(s): %s", TABLE, len(files), csv_glob)
        con = self._connect()
        raw = con.execute(f"SELECT * FROM read_csv_auto('{csv_glob}', HEADER=TRUE);").df()
        self.set_df(raw)
        return True

    def run_query(self, sql: str, params=None) -> pd.DataFrame:
        """Execute SQL on DuckDB and return as pandas DataFrame."""
        con = self._connect()
        return con.execute(sql, params or []).df()

    # ---------- pandas side ----------

    def _preprocess(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.drop_duplicates().reset_index(drop=True)

        for column in SCHEMA:
            if column not in df.columns:
                df[column] = None

        date_col = self.config.get("DATE_COL", "date_created")
        if date_col != "date_created" and date_col in df.columns:
            df["date_created"] = df[date_col]
        df["date_created"] = pd.to_datetime(df["date_created"], errors="coerce")
        df = df.dropna(subset=["order_id", "date_created"]).reset_index(drop=True)

        for column, sql_type in SCHEMA.items():
            if column in ("qty", "net_total"):
                df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0)
            elif sql_type == "BIGINT":
                df[column] = pd.to_numeric(df[column], errors="coerce").astype("Int64")
            elif sql_type == "VARCHAR":
                df[column] = df[column].map(lambda v: None if pd.isna(v) else str(v)).astype(object)

        return df[list(SCHEMA)]

    def load(self) -> pd.DataFrame:
        if self._df is not None:
            return self._df

        con = self._connect()
        if self._table_exists():
            try:
                self._df = con.execute(f"SELECT * FROM {TABLE};").df()
                logger.info("Loaded data from DuckDB %s.", TABLE)
                return self._df
            except duckdb.Error as e:
                logger.warning("DuckDB table load failed: %s", e)

        if self.rebuild_from_csv():
            return self._df

        if self.fetch_remote():
            return self._df

        logger.error("No data source succeeded for %s.", TABLE)
        self._df = None
        return pd.DataFrame(columns=list(SCHEMA))

    def fetch_remote(self) -> bool:
        url = self.config.get("DATA_URL")
        if not url:
            return False

        headers = {"apikey": self.config.get("DATA_API_KEY") or ""}
        try:
            resp = requests.get(url, headers=headers, timeout=60)
            resp.raise_for_status()
        except (requests.HTTPError, requests.ConnectionError, requests.Timeout) as e:
            logger.error("Failed to fetch remote orders export from DATA_URL: %s", e)
            return False

        raw = pd.read_csv(BytesIO(resp.content))
        logger.info("Loaded remote orders export from DATA_URL.")
        self.set_df(raw)
        return True

    def set_df(self, df: pd.DataFrame) -> None:
        self._df = self._preprocess(df)

        casts = ",\n              ".join(
            f"CAST({name} AS {sql_type}) AS {name}" for name, sql_type in SCHEMA.items()
        )

        con = self._connect()
        con.execute("CREATE SCHEMA IF NOT EXISTS prod;")
        con.execute(f"DROP TABLE IF EXISTS {TABLE};")
        con.register("tmp_df", self._df)
        con.execute(f"""
            CREATE TABLE {TABLE} AS
            SELECT
              {casts}
            FROM tmp_df;
        """)
        con.unregister("tmp_df")
        con.execute(f"ANALYZE {TABLE};")
        logger.info("Persisted %d order line(s) into DuckDB %s.", len(self._df), TABLE)

    def get(self, copy: bool = True) -> pd.DataFrame:
        df = self.load()
        return df.copy(deep=False) if copy else df


__all__ = ["DataStore", "SCHEMA", "TABLE"]
