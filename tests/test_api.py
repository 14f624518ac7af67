"""Tests for the REST endpoints."""


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "rows": 6, "orders": 5}


class TestOrdersEndpoint:
    def test_pagination_headers(self, client):
        resp = client.get("/reports/orders?per_page=2")
        assert resp.status_code == 200
        assert resp.headers["X-WP-Total"] == "5"
        assert resp.headers["X-WP-TotalPages"] == "3"
        assert 'rel="next"' in resp.headers["Link"]
        assert "page=2" in resp.headers["Link"]
        assert 'rel="prev"' not in resp.headers["Link"]

        rows = resp.get_json()
        assert [row["order_id"] for row in rows] == [3, 2]
        assert rows[0]["_links"]["order"]["href"].endswith("/orders/3")

    def test_last_page_links_back(self, client):
        resp = client.get("/reports/orders?per_page=2&page=3")
        assert [row["order_id"] for row in resp.get_json()] == [4]
        assert resp.headers["Link"].endswith('rel="prev"')

    def test_bad_orderby(self, client):
        resp = client.get("/reports/orders?orderby=email")
        assert resp.status_code == 400
        assert "email" in resp.get_json()["error"]


class TestStatsEndpoint:
    def test_orders_stats(self, client):
        resp = client.get("/reports/orders/stats?after=2019-02-01&before=2019-02-15&interval=day")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["totals"]["orders_count"] == 3
        assert len(body["intervals"]) == 15

    def test_bad_interval(self, client):
        resp = client.get("/reports/orders/stats?interval=fortnight")
        assert resp.status_code == 400

    def test_unknown_endpoint(self, client):
        assert client.get("/reports/refunds/stats").status_code == 404


class TestChartEndpoint:
    def test_orders_default_to_time_comparison(self, client):
        resp = client.get("/analytics/orders/chart?chart=net_revenue")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["mode"] == "time-comparison"
        assert body["error"] is False

        chart = body["chart"]
        assert chart["title"] == "Net Revenue"
        assert chart["tooltip_value_format"] == "$,.2f"
        assert len(chart["data"]) == 15

        feb_5 = chart["data"][4]
        assert feb_5["date"] == "2019-02-05T00:00:00"
        assert feb_5["Month to Date (Feb 1 - 15, 2019)"]["value"] == 0
        assert feb_5["Previous Year (Feb 1 - 15, 2018)"] == {
            "labelDate": "2018-02-05 00:00:00",
            "value": 20.0,
        }

    def test_top_products_compare_items(self, client):
        resp = client.get("/analytics/products/chart?filter=top_items")
        body = resp.get_json()
        assert body["mode"] == "item-comparison"

        chart = body["chart"]
        assert chart["items_label"] == "%s products"
        assert chart["tooltip_title"] is None
        feb_2 = chart["data"][1]
        assert set(feb_2) == {"date", "Hoodie", "T-Shirt", "Beanie"}
        assert feb_2["Hoodie"] == {"value": 2}
        assert feb_2["T-Shirt"] == {"value": 0}

    def test_single_variable_product_compares_variations(self, client):
        resp = client.get("/analytics/products/chart?filter=single_product&products=12")
        chart = resp.get_json()["chart"]
        assert chart["items_label"] == "%s variations"
        assert set(chart["data"][2]) == {"date", "Large"}
        assert chart["data"][2]["Large"] == {"value": 3}

    def test_explicit_mode_overrides_filters(self, client):
        body = client.get("/analytics/products/chart?filter=top_items&mode=time-comparison").get_json()
        assert body["mode"] == "time-comparison"
        assert body["chart"]["tooltip_title"] == "Items Sold"

    def test_hourly_comparison_label_dates(self, client):
        resp = client.get("/analytics/orders/chart?period=today&compare=previous_period&interval=hour")
        chart = resp.get_json()["chart"]
        assert chart["interval"] == "hour"
        assert len(chart["data"]) == 24

        secondary_key = "Previous Period (Feb 14, 2019)"
        label_dates = [record[secondary_key]["labelDate"] for record in chart["data"]]
        assert len(set(label_dates)) == 24
        assert label_dates[13] == "2019-02-14 13:00:00"
        assert chart["data"][13]["Today (Feb 15, 2019)"]["labelDate"] == "2019-02-15 13:00:00"

    def test_bad_mode(self, client):
        assert client.get("/analytics/orders/chart?mode=pie").status_code == 400

    def test_unknown_report(self, client):
        assert client.get("/analytics/refunds/chart").status_code == 404


class TestSearchEndpoint:
    def test_search(self, client):
        resp = client.get("/search/products?search=bean")
        assert resp.get_json() == [{"id": 11, "label": "Beanie"}]

    def test_q_alias(self, client):
        resp = client.get("/search/customers?q=car")
        assert resp.get_json() == [{"id": 3, "label": "Carol"}]

    def test_unknown_type(self, client):
        assert client.get("/search/taxes").status_code == 404
