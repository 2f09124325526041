"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake data parsing
- Query window and feed parameters
- Display state transitions
- Table rows, labels and summary text

All functions here are deterministic and have no I/O.
"""

from spain_quakes.core.earthquake import Earthquake, parse_earthquakes
from spain_quakes.core.query import (
    BoundingBox,
    QueryWindow,
    SPAIN_BOUNDS,
    build_query_window,
    query_params,
)
from spain_quakes.core.state import DisplayState, reduce
from spain_quakes.core.view_model import (
    DisplayRow,
    PageView,
    build_page_view,
    build_rows,
    is_major,
)

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    # Query
    "BoundingBox",
    "QueryWindow",
    "SPAIN_BOUNDS",
    "build_query_window",
    "query_params",
    # State
    "DisplayState",
    "reduce",
    # View model
    "DisplayRow",
    "PageView",
    "build_page_view",
    "build_rows",
    "is_major",
]
