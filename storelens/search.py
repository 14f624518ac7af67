"""Entity search used by report filters (products, customers, coupons...).

``search`` backs the ``/search/<type>`` endpoint. ``select_result``,
``remove_result`` and ``should_render_tags`` keep a filter's list of chosen
``{id, label}`` results; they are helpers for API clients and no route calls them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Sequence

import pandas as pd

from storelens.services.datastore import TABLE, DataStore


class SearchType(str, Enum):
    PRODUCTS = "products"
    VARIATIONS = "variations"
    ORDERS = "orders"
    CUSTOMERS = "customers"
    COUPONS = "coupons"
    CATEGORIES = "categories"
    COUNTRIES = "countries"
    EMAILS = "emails"
    USERNAMES = "usernames"


def _plain_label(row: Mapping[str, Any]) -> str:
    return str(row["label"])


def _order_label(row: Mapping[str, Any]) -> str:
    return f"Order #{row['id']}"


def _variation_label(row: Mapping[str, Any]) -> str:
    product = row.get("parent")
    if product is None or pd.isna(product):
        product = ""
    return f"{product} - {row['label']}" if product else str(row["label"])


@dataclass(frozen=True)
class Autocompleter:
    """How to look up and display one kind of searchable entity."""

    search_type: SearchType
    id_column: str
    label_column: str
    input_type: str = "text"
    format_label: Callable[[Mapping[str, Any]], str] = _plain_label
    parent_column: str = ""

    def fetch(self, datastore: DataStore, term: str, limit: int) -> List[Dict[str, Any]]:
        parent = f", ANY_VALUE({self.parent_column}) AS parent" if self.parent_column else ""
        sql = f"""
            SELECT {self.id_column} AS id, ANY_VALUE({self.label_column}) AS label{parent}
            FROM {TABLE}
            WHERE {self.id_column} IS NOT NULL
        """
        params: List[Any] = []
        if term:
            sql += (
                f" AND (CAST({self.label_column} AS VARCHAR) ILIKE '%' || ? || '%'"
                f" OR CAST({self.id_column} AS VARCHAR) = ?)"
            )
            params.extend([term, term])
        sql += " GROUP BY 1 ORDER BY 2, 1 LIMIT ?"
        params.append(limit)

        datastore.ensure_table()
        df = datastore.run_query(sql, params)
        results = []
        for row in df.to_dict(orient="records"):
            if row["label"] is None or pd.isna(row["label"]):
                row["label"] = row["id"]
            results.append({"id": row["id"], "label": self.format_label(row)})
        return results


AUTOCOMPLETERS: Dict[SearchType, Autocompleter] = {
    SearchType.PRODUCTS: Autocompleter(SearchType.PRODUCTS, "product_id", "product_name"),
    SearchType.VARIATIONS: Autocompleter(
        SearchType.VARIATIONS,
        "variation_id",
        "variation_name",
        format_label=_variation_label,
        parent_column="product_name",
    ),
    SearchType.ORDERS: Autocompleter(
        SearchType.ORDERS, "order_id", "order_id", input_type="number", format_label=_order_label
    ),
    SearchType.CUSTOMERS: Autocompleter(SearchType.CUSTOMERS, "customer_id", "customer_name"),
    SearchType.COUPONS: Autocompleter(SearchType.COUPONS, "coupon_id", "coupon_code"),
    SearchType.CATEGORIES: Autocompleter(SearchType.CATEGORIES, "category_id", "category_name"),
    SearchType.COUNTRIES: Autocompleter(SearchType.COUNTRIES, "billing_country", "billing_country"),
    SearchType.EMAILS: Autocompleter(
        SearchType.EMAILS, "customer_email", "customer_email", input_type="email"
    ),
    SearchType.USERNAMES: Autocompleter(
        SearchType.USERNAMES, "customer_username", "customer_username"
    ),
}


def get_autocompleter(search_type: str) -> Autocompleter:
    """Autocompleter for a search type name; ``KeyError`` when unsupported."""
    try:
        return AUTOCOMPLETERS[SearchType(search_type)]
    except ValueError:
        raise KeyError(search_type) from None


def search(datastore: DataStore, search_type: str, term: str = "", limit: int = 20) -> List[Dict[str, Any]]:
    return get_autocompleter(search_type).fetch(datastore, term.strip(), max(int(limit), 1))


# ------------------------------ Selection -------------------------------------


def select_result(selected: Sequence[Mapping[str, Any]], value: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """Append ``value`` unless an item with the same id is already selected."""
    if any(item["id"] == value["id"] for item in selected):
        return list(selected)
    return [*selected, value]


def remove_result(selected: Sequence[Mapping[str, Any]], item_id: Any) -> List[Mapping[str, Any]]:
    for index, item in enumerate(selected):
        if item["id"] == item_id:
            return [*selected[:index], *selected[index + 1:]]
    return list(selected)


def should_render_tags(selected: Sequence[Mapping[str, Any]]) -> bool:
    return any(item.get("label") for item in selected)


__all__ = [
    "AUTOCOMPLETERS",
    "Autocompleter",
    "SearchType",
    "get_autocompleter",
    "remove_result",
    "search",
    "select_result",
    "should_render_tags",
]
