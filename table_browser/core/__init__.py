"""
Core domain layer: filter form, query builder, fetch controller
and the render pipeline
"""

from .controller import FetchController, FetchOutcome, fetch_once
from .filter_form import FilterForm
from .query_builder import PAGE_SIZE, QueryRequest, build_filters, build_request
from .render import format_cell, format_rows
from .result import QueryResult
from .state import ControllerState

__all__ = [
    "ControllerState",
    "FetchController",
    "FetchOutcome",
    "FilterForm",
    "PAGE_SIZE",
    "QueryRequest",
    "QueryResult",
    "build_filters",
    "build_request",
    "fetch_once",
    "format_cell",
    "format_rows",
]
