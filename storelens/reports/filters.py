"""Report filter configuration and chart mode resolution."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

DEFAULT_FILTER = "all"

ITEM_COMPARISON = "item-comparison"
TIME_COMPARISON = "time-comparison"
CHART_MODES = (ITEM_COMPARISON, TIME_COMPARISON)

Query = Mapping[str, Any]


def _always(query: Query) -> bool:
    return True


@dataclass(frozen=True)
class FilterOption:
    label: str
    value: str
    settings: Dict[str, Any] = field(default_factory=dict)
    sub_filters: Sequence["FilterOption"] = ()
    chart_mode: Optional[str] = None
    query: Dict[str, str] = field(default_factory=dict)

    @property
    def param(self) -> Optional[str]:
        """Query param this option needs before it applies (e.g. ``products``)."""
        return self.settings.get("param")


@dataclass(frozen=True)
class FilterConfig:
    param: str
    filters: Sequence[FilterOption]
    label: str = "Show:"
    show_filters: Callable[[Query], bool] = _always
    static_params: Sequence[str] = ()


def flatten_filters(filters: Sequence[FilterOption]) -> List[FilterOption]:
    """Depth-first list of every option; parents precede their sub filters."""
    flat: List[FilterOption] = []
    for option in filters:
        if not option.sub_filters:
            flat.append(option)
            continue
        flat.append(replace(option, sub_filters=()))
        flat.extend(flatten_filters(option.sub_filters))
    return flat


def get_selected_filter(filters: Optional[Sequence[FilterConfig]], query: Query) -> Optional[FilterOption]:
    """
    Return the filter option currently in effect for ``query``.

    Configs are scanned from the last to the first. A config is skipped when
    its ``show_filters`` predicate rejects the query, or when the option
    selected by ``query[config.param]`` names a settings param that the query
    does not carry yet (e.g. "Single Product" before a product is chosen).
    """
    if not filters:
        return None

    for index in range(len(filters) - 1, -1, -1):
        config = filters[index]
        if not config.show_filters(query):
            continue

        value = query.get(config.param) or DEFAULT_FILTER
        selected = next(
            (option for option in flatten_filters(config.filters) if option.value == value),
            None,
        )
        if selected is None or not selected.param or selected.param in query:
            return selected

    return None


def get_chart_mode(filters: Optional[Sequence[FilterConfig]], query: Query) -> Optional[str]:
    """Chart mode of the selected filter option, or ``None`` for the default."""
    selected = get_selected_filter(filters, query)
    return selected.chart_mode if selected is not None else None


__all__ = [
    "CHART_MODES",
    "DEFAULT_FILTER",
    "FilterConfig",
    "FilterOption",
    "ITEM_COMPARISON",
    "TIME_COMPARISON",
    "flatten_filters",
    "get_chart_mode",
    "get_selected_filter",
]
