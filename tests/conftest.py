"""Shared fixtures: an app over an in-memory DuckDB seeded with a few orders."""

import pandas as pd
import pytest

from storelens.app import create_app

TODAY = "2019-02-15"


def _line(order_id, date, status, customer, product, qty, net, **extra):
    customers = {
        1: ("Alice", "alice@example.com", "alice", "US"),
        2: ("Bob", "bob@example.com", "bob", "CA"),
        3: ("Carol", "carol@example.com", "carol", "US"),
    }
    name, email, username, country = customers[customer[0]]
    products = {10: "Hoodie", 11: "Beanie", 12: "T-Shirt"}
    row = {
        "order_id": order_id,
        "date_created": date,
        "status": status,
        "customer_id": customer[0],
        "customer_name": name,
        "customer_email": email,
        "customer_username": username,
        "customer_type": customer[1],
        "billing_country": country,
        "product_id": product,
        "product_name": products[product],
        "variation_id": None,
        "variation_name": None,
        "category_id": 100,
        "category_name": "Clothing",
        "coupon_id": None,
        "coupon_code": None,
        "qty": qty,
        "net_total": net,
    }
    row.update(extra)
    return row


@pytest.fixture
def order_lines():
    """Five orders: three in Feb 2019, one a year earlier, one refunded in Jan."""
    return pd.DataFrame(
        [
            _line(1, "2019-02-02 10:00:00", "completed", (1, "new"), 10, 2, 40.0),
            _line(1, "2019-02-02 10:00:00", "completed", (1, "new"), 11, 1, 15.0),
            _line(
                2, "2019-02-03 12:00:00", "processing", (2, "returning"), 12, 3, 30.0,
                variation_id=121, variation_name="Large",
            ),
            _line(
                3, "2019-02-10 09:00:00", "completed", (1, "returning"), 10, 1, 20.0,
                coupon_id=500, coupon_code="SAVE10",
            ),
            _line(4, "2018-02-05 08:00:00", "completed", (3, "new"), 10, 1, 20.0),
            _line(5, "2019-01-15 11:00:00", "refunded", (2, "returning"), 11, 2, 30.0),
        ]
    )


@pytest.fixture
def app(order_lines):
    app = create_app(
        {
            "TESTING": True,
            "DUCKDB_PATH": ":memory:",
            "CSV_GLOB": "",
            "DATA_URL": None,
            "TODAY": TODAY,
        }
    )
    app.extensions["datastore"].set_df(order_lines)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def reports(app):
    return app.extensions["reports"]


@pytest.fixture
def datastore(app):
    return app.extensions["datastore"]
