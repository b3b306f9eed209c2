from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from table_browser.core.filter_form import DEFAULT_SORT_COLUMN, DEFAULT_SORT_ORDER
from table_browser.ui.ids import IDs

GENDER_OPTIONS = [
    {"label": "Female", "value": "F"},
    {"label": "Male", "value": "M"},
]


def _range_inputs(label: str, min_id: str, max_id: str) -> html.Div:
    # Plain text inputs: non-numeric bounds are dropped by the query builder
    return html.Div(
        [
            html.Label(label, className="form-label"),
            dbc.InputGroup(
                [
                    dbc.Input(id=min_id, type="text", placeholder="Min"),
                    dbc.Input(id=max_id, type="text", placeholder="Max"),
                ],
                size="sm",
                className="mb-3",
            ),
        ]
    )


def build_filter_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    dbc.Row(
                        [
                            dbc.Col(
                                [
                                    html.Label("Gender", className="form-label"),
                                    dcc.Dropdown(
                                        id=IDs.Control.GENDER,
                                        options=GENDER_OPTIONS,
                                        placeholder="Any",
                                        className="mb-3",
                                    ),
                                    html.Label("Education level", className="form-label"),
                                    dbc.Input(
                                        id=IDs.Control.EDUCATION_LEVEL,
                                        type="text",
                                        placeholder="Any",
                                        size="sm",
                                        className="mb-3",
                                    ),
                                ],
                                md=4,
                            ),
                            dbc.Col(
                                [
                                    html.Label("Date of birth", className="form-label"),
                                    html.Div(
                                        dcc.DatePickerRange(
                                            id=IDs.Control.DATE_OF_BIRTH,
                                            display_format="DD MMM YYYY",
                                            clearable=True,
                                        ),
                                        className="mb-3",
                                    ),
                                    _range_inputs(
                                        "Household ID",
                                        IDs.Control.HOUSEHOLD_ID_MIN,
                                        IDs.Control.HOUSEHOLD_ID_MAX,
                                    ),
                                ],
                                md=4,
                            ),
                            dbc.Col(
                                [
                                    _range_inputs(
                                        "Income",
                                        IDs.Control.INCOME_MIN,
                                        IDs.Control.INCOME_MAX,
                                    ),
                                    html.Label("Sort by", className="form-label"),
                                    dcc.Dropdown(
                                        id=IDs.Control.SORT_BY,
                                        options=[{"label": DEFAULT_SORT_COLUMN, "value": DEFAULT_SORT_COLUMN}],
                                        value=DEFAULT_SORT_COLUMN,
                                        clearable=False,
                                        className="mb-2",
                                    ),
                                    dbc.RadioItems(
                                        id=IDs.Control.SORT_ORDER,
                                        options=[
                                            {"label": "Ascending", "value": "asc"},
                                            {"label": "Descending", "value": "desc"},
                                        ],
                                        value=DEFAULT_SORT_ORDER,
                                        inline=True,
                                        className="mb-3",
                                    ),
                                ],
                                md=4,
                            ),
                        ]
                    ),
                    dbc.Button(
                        "Apply filters",
                        id=IDs.Control.APPLY_FILTERS_BTN,
                        color="primary",
                        n_clicks=0,
                    ),
                ]
            ),
        ],
        className="tb-filter-panel w-100",
    )
