"""Chart meta for the products report."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .filters import ITEM_COMPARISON, TIME_COMPARISON


def _product_ids(query: Mapping[str, Any]) -> list:
    return [p for p in str(query.get("products") or "").split(",") if p]


def is_single_product_view(query: Mapping[str, Any]) -> bool:
    return len(_product_ids(query)) == 1


def get_chart_meta(
    query: Mapping[str, Any],
    is_single_product_view: bool = False,
    is_single_product_variable: bool = False,
) -> Dict[str, Any]:
    """Chart mode and legend wording for the products report."""
    is_product_details_view = (
        query.get("filter") in ("top_items", "top_sales") or len(_product_ids(query)) > 1
    )
    mode = (
        ITEM_COMPARISON
        if is_product_details_view or is_single_product_view
        else TIME_COMPARISON
    )
    variations = is_single_product_view and is_single_product_variable

    return {
        "is_product_details_view": is_product_details_view,
        "compare_object": "variations" if variations else "products",
        "items_label": "%s variations" if variations else "%s products",
        "mode": mode,
    }


def segment_by_for(compare_object: str) -> str:
    return "product" if compare_object == "products" else "variation"


__all__ = ["get_chart_meta", "is_single_product_view", "segment_by_for"]
