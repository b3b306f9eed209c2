from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from table_browser.ui.ids import IDs


def build_table_panel() -> dbc.Card:
    return dbc.Card(
        dbc.CardBody(
            [
                html.Div("Available Records:", className="fs-5 mb-3"),
                dcc.Loading(
                    html.Div(
                        html.P("Loading data...", className="text-center text-muted"),
                        id=IDs.Control.RESULTS_CONTAINER,
                    ),
                    type="default",
                ),
                html.Div(
                    [
                        dbc.Button(
                            "Previous",
                            id=IDs.Control.PREV_PAGE_BTN,
                            color="secondary",
                            outline=True,
                            n_clicks=0,
                            disabled=True,
                        ),
                        html.Span("Page 1", id=IDs.Control.PAGE_LABEL, className="small fw-medium"),
                        dbc.Button(
                            "Next",
                            id=IDs.Control.NEXT_PAGE_BTN,
                            color="primary",
                            n_clicks=0,
                        ),
                    ],
                    className="d-flex justify-content-between align-items-center mt-3",
                ),
            ]
        ),
        className="tb-table-panel mt-3 w-100",
    )
