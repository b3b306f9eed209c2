from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from table_browser.core.state import ControllerState
from table_browser.ui.ids import IDs
from table_browser.ui.layout.build_filter_panel import build_filter_panel
from table_browser.ui.layout.build_navbar import build_navbar
from table_browser.ui.layout.build_table_panel import build_table_panel

if TYPE_CHECKING:
    from table_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig):
    return dbc.Container(
        fluid=True,
        className="tb-root",
        children=[
            dcc.Location(id=IDs.Control.URL, refresh=False),

            # Per-tab view state
            dcc.Store(id=IDs.Store.DATASET, storage_type="memory"),
            dcc.Store(id=IDs.Store.QUERY_STATE, storage_type="memory", data=ControllerState().to_dict()),
            dcc.Store(id=IDs.Store.LAST_RESULT, storage_type="memory"),

            build_navbar(ctx.global_config),

            dbc.Row(
                dbc.Col(
                    [
                        html.H1(id=IDs.Control.PAGE_TITLE, className="display-5 p-3 text-center"),
                        build_filter_panel(),
                        build_table_panel(),
                    ],
                    lg={"size": 10, "offset": 1},
                ),
                className="mt-2",
            ),
        ],
    )
