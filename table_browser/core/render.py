from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from .result import QueryResult

logger = logging.getLogger(__name__)

MISSING_DATE = "-"

# Fixed day-month-year output, independent of the process locale
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

CellFormatter = Callable[[Any], str]


def _parse_date(value: Any) -> Optional[pd.Timestamp]:
    if not pd.api.types.is_scalar(value):
        return None
    # A bare month or weekday name carries no day or year
    if isinstance(value, str) and not any(ch.isdigit() for ch in value):
        return None

    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            parsed = pd.to_datetime(value, unit="ms", errors="coerce")
        else:
            parsed = pd.to_datetime(value, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None

    if not isinstance(parsed, pd.Timestamp):
        return None
    return parsed


def format_date(value: Any) -> str:
    """
    Render a date/timestamp cell as 'DD Mon YYYY' (e.g. '05 Mar 2024').

    Empty values become '-', values that don't parse as a date are shown
    as they came.
    """
    if pd.api.types.is_scalar(value) and not value:
        return MISSING_DATE

    parsed = _parse_date(value)
    if parsed is None:
        return str(value)

    return f"{parsed.day:02d} {_MONTHS[parsed.month - 1]} {parsed.year:04d}"


def format_plain(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


CELL_FORMATTERS: Dict[str, CellFormatter] = {
    "date": format_date,
    "timestamp": format_date,
}


def format_cell(value: Any, column_type: Optional[str]) -> str:
    formatter = CELL_FORMATTERS.get(column_type or "", format_plain)
    return formatter(value)


def format_rows(result: QueryResult) -> List[List[str]]:
    """
    Turn a provider page into display strings: one row per record, one cell
    per column, in the provider's column order.
    """
    types = result.column_types
    rows = [
        [format_cell(record.get(col), types.get(col)) for col in result.columns]
        for record in result.records
    ]
    logger.debug(
        "Formatted result rows",
        extra={"n_rows": len(rows), "n_columns": len(result.columns)},
    )
    return rows
