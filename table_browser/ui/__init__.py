"""
UI adapters for the table browser.

Currently provides a Dash-based web UI via create_dash_app().
The async FetchController in table_browser.core serves other hosts.
"""

from .dash_app import create_dash_app

__all__ = ["create_dash_app"]
