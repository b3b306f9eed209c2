from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import dash
from dash import ALL, Input, Output, State, exceptions

from table_browser.core.filter_form import FilterForm
from table_browser.core.state import ControllerState
from table_browser.ui.helpers import parse_dataset_params
from table_browser.ui.ids import IDs

if TYPE_CHECKING:
    from table_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _form_from_inputs(inputs: dict[str, Any]) -> FilterForm:
    return FilterForm.from_dict(
        {
            "gender": inputs.get("gender"),
            "dateOfBirthStart": inputs.get("date_of_birth_start"),
            "dateOfBirthEnd": inputs.get("date_of_birth_end"),
            "householdIdMin": inputs.get("household_id_min"),
            "householdIdMax": inputs.get("household_id_max"),
            "educationLevel": inputs.get("education_level"),
            "incomeMin": inputs.get("income_min"),
            "incomeMax": inputs.get("income_max"),
            "sortBy": inputs.get("sort_by"),
            "sortOrder": inputs.get("sort_order"),
        }
    )


def _next_query_state(
        triggered_id: Any,
        current: dict[str, Any] | None,
        inputs: dict[str, Any],
) -> dict[str, Any] | None:
    """
    Pure helper: apply one UI event to the stored query state.

    Returns the new store value, or None when the event changes nothing
    (Previous on page 1, clicking the active sort column, a freshly rendered
    header reporting n_clicks=0).
    """
    state = ControllerState.from_dict(current)

    if triggered_id == IDs.Control.APPLY_FILTERS_BTN:
        # Always a new store value, so an apply refetches even if nothing changed
        return state.with_filters(_form_from_inputs(inputs)).to_dict()

    if triggered_id == IDs.Control.PREV_PAGE_BTN:
        new_state = state.previous_page()
    elif triggered_id == IDs.Control.NEXT_PAGE_BTN:
        new_state = state.next_page()
    elif isinstance(triggered_id, dict) and triggered_id.get("type") == IDs.Control.SORT_HEADER:
        if not inputs.get("header_clicked"):
            return None
        new_state = state.with_sort(triggered_id["column"])
    else:
        return None

    if new_state.query_key() == state.query_key():
        return None
    return new_state.to_dict()


def register_query_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # URL -> dataset name / title; a different table starts from scratch
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.DATASET, "data"),
        Output(IDs.Store.QUERY_STATE, "data"),
        Output(IDs.Control.PAGE_TITLE, "children"),
        Input(IDs.Control.URL, "search"),
    )
    def update_dataset_from_url(search: str | None):
        params = parse_dataset_params(search, ctx)
        logger.info("dataset_selected", extra={"table": params["name"], "title": params["title"]})
        return params, ControllerState().to_dict(), params.get("title") or ""

    # ---------------------------------------------------------
    # UI events -> query state (canonical)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.QUERY_STATE, "data", allow_duplicate=True),
        Input(IDs.Control.APPLY_FILTERS_BTN, "n_clicks"),
        Input(IDs.Control.PREV_PAGE_BTN, "n_clicks"),
        Input(IDs.Control.NEXT_PAGE_BTN, "n_clicks"),
        Input({"type": IDs.Control.SORT_HEADER, "column": ALL}, "n_clicks"),
        State(IDs.Control.GENDER, "value"),
        State(IDs.Control.DATE_OF_BIRTH, "start_date"),
        State(IDs.Control.DATE_OF_BIRTH, "end_date"),
        State(IDs.Control.HOUSEHOLD_ID_MIN, "value"),
        State(IDs.Control.HOUSEHOLD_ID_MAX, "value"),
        State(IDs.Control.EDUCATION_LEVEL, "value"),
        State(IDs.Control.INCOME_MIN, "value"),
        State(IDs.Control.INCOME_MAX, "value"),
        State(IDs.Control.SORT_BY, "value"),
        State(IDs.Control.SORT_ORDER, "value"),
        State(IDs.Store.QUERY_STATE, "data"),
        prevent_initial_call=True,
    )
    def update_query_state(
            _apply, _prev, _next, _headers,
            gender, dob_start, dob_end, hh_min, hh_max, education,
            income_min, income_max, sort_by, sort_order, current,
    ):
        triggered = dash.ctx.triggered[0] if dash.ctx.triggered else {}
        inputs = {
            "gender": gender,
            "date_of_birth_start": dob_start,
            "date_of_birth_end": dob_end,
            "household_id_min": hh_min,
            "household_id_max": hh_max,
            "education_level": education,
            "income_min": income_min,
            "income_max": income_max,
            "sort_by": sort_by,
            "sort_order": sort_order,
            "header_clicked": bool(triggered.get("value")),
        }

        try:
            new_state = _next_query_state(dash.ctx.triggered_id, current, inputs)
        except ValueError:
            logger.exception("Invalid query state update", extra={"current": current})
            raise exceptions.PreventUpdate

        if new_state is None:
            raise exceptions.PreventUpdate
        return new_state
