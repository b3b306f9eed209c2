"""
Top-level package for the table browser.

This package exposes the query-state controller (core), data providers
and the Dash UI adapter.
Most code should import from submodules such as:
    table_browser.core
    table_browser.providers
    table_browser.ui
"""

__all__: list[str] = []
