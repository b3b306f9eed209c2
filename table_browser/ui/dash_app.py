from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from table_browser.config.loader import build_provider, default_config_root, load_global_config
from table_browser.providers.base import DataProvider
from table_browser.ui.callbacks.callbacks_query import register_query_callbacks
from table_browser.ui.callbacks.callbacks_render import register_render_callbacks
from table_browser.ui.config import AppConfig
from table_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def create_dash_app(
        config_root: Path | str | None = None,
        provider: Optional[DataProvider] = None,
) -> Dash:
    config_root = Path(config_root) if config_root is not None else default_config_root()

    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Data provider (HTTP endpoint or in-memory tables)
    if provider is None:
        provider = build_provider(global_config)

    # 3) Default table when the URL has no ?name=
    table_names = [t.name for t in global_config.tables]
    default_table = table_names[0] if table_names else None

    # 4) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        provider=provider,
        default_table=default_table,
    )
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )

    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_query_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={
            "config_root": str(config_root),
            "provider": getattr(provider, "name", type(provider).__name__),
            "tables": table_names,
        },
    )
    return app
