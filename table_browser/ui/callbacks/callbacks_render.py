from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional

import dash
from dash import Input, Output, State

from table_browser.core.controller import FetchOutcome, fetch_once
from table_browser.core.exceptions import FetchError
from table_browser.core.query_builder import build_request
from table_browser.core.result import QueryResult
from table_browser.core.state import ControllerState
from table_browser.providers.base import DataProvider
from table_browser.ui.helpers import error_block, message_block, results_table, sort_by_options
from table_browser.ui.ids import IDs

if TYPE_CHECKING:
    from table_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _previous_result(last_result_data: Any) -> Optional[QueryResult]:
    if not last_result_data:
        return None
    try:
        return QueryResult.from_payload(last_result_data)
    except FetchError:
        logger.warning("Discarding unreadable stored result")
        return None


def _fetch_page(
        provider: DataProvider,
        table: str,
        state: ControllerState,
        last_result_data: Any = None,
) -> FetchOutcome:
    """
    Run one request for 'state' and never raise.

    A failed fetch carries the previously stored page, so the caller can
    keep it around.
    """
    outcome = fetch_once(provider, build_request(table, state))
    if outcome.ok:
        return outcome
    return replace(outcome, result=_previous_result(last_result_data))


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Query state -> fetch -> table + pager
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.RESULTS_CONTAINER, "children"),
        Output(IDs.Store.LAST_RESULT, "data"),
        Output(IDs.Control.PREV_PAGE_BTN, "disabled"),
        Output(IDs.Control.PAGE_LABEL, "children"),
        Output(IDs.Control.SORT_BY, "options"),
        Input(IDs.Store.QUERY_STATE, "data"),
        State(IDs.Store.DATASET, "data"),
        State(IDs.Store.LAST_RESULT, "data"),
        prevent_initial_call=True,
    )
    def render_results(state_data, dataset, last_result_data):
        try:
            state = ControllerState.from_dict(state_data)
        except (TypeError, ValueError):
            logger.exception("Invalid query state in render callback: %r", state_data)
            state = ControllerState()

        pager = (state.page == 1, f"Page {state.page}")

        table = (dataset or {}).get("name")
        title = (dataset or {}).get("title")
        if not table:
            return (
                message_block("No dataset selected. Open this page with ?name=<table>&title=<title>."),
                dash.no_update,
                *pager,
                sort_by_options(None, state.sort_column),
            )

        outcome = _fetch_page(ctx.provider, table, state, last_result_data)
        options = sort_by_options(outcome.result, state.sort_column)

        if not outcome.ok:
            return error_block(outcome.error), dash.no_update, *pager, options

        return (
            results_table(outcome.result, title, state.sort_column, state.sort_order),
            outcome.result.to_payload(),
            *pager,
            options,
        )
