from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from urllib.parse import parse_qs

import dash_bootstrap_components as dbc
from dash import html

from table_browser.core.render import format_rows
from table_browser.core.result import QueryResult
from table_browser.ui.ids import sort_header_id

if TYPE_CHECKING:
    from table_browser.ui.config import AppConfig


def parse_dataset_params(search: Optional[str], ctx: AppConfig) -> Dict[str, Optional[str]]:
    """
    Read ?name=...&title=... from the page URL.

    A missing name falls back to the app's default table (if any); a missing
    title falls back to the configured title of the table, then its name.
    """
    params = parse_qs((search or "").lstrip("?"))

    name = (params.get("name") or [None])[0] or ctx.default_table
    title = (params.get("title") or [None])[0]
    if not title and name:
        title = ctx.title_for(name)

    return {"name": name, "title": title}


def sort_by_options(result: Optional[QueryResult], current: str) -> List[dict]:
    columns = list(result.columns) if result is not None else []
    if current and current not in columns:
        columns.insert(0, current)
    return [{"label": c, "value": c} for c in columns]


def message_block(text: str, *, color: str = "secondary") -> html.P:
    return html.P(text, className=f"text-center text-{color} my-4")


def error_block(message: str) -> dbc.Alert:
    return dbc.Alert(f"Error: {message}", color="danger", className="text-center my-4")


def results_table(
        result: QueryResult,
        title: Optional[str],
        sort_column: Optional[str] = None,
        sort_order: str = "asc",
) -> dbc.Table:
    """
    Build the records table: one clickable header per column (sets the sort
    column), one row per record, cells formatted by column type.
    """
    rows = format_rows(result)

    def header_cell(col: str) -> html.Th:
        label: List[Any] = [col]
        if col == sort_column:
            label.append(html.Span(" ▲" if sort_order == "asc" else " ▼", className="tb-sort-mark"))
        return html.Th(
            label,
            id=sort_header_id(col),
            n_clicks=0,
            className="tb-sort-header",
            style={"cursor": "pointer"},
        )

    return dbc.Table(
        [
            html.Caption(f"Data related to {title or ''}"),
            html.Thead(html.Tr([header_cell(c) for c in result.columns])),
            html.Tbody([html.Tr([html.Td(cell) for cell in row]) for row in rows]),
        ],
        bordered=False,
        hover=True,
        responsive=True,
        size="sm",
        className="tb-results-table",
    )
