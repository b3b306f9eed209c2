from __future__ import annotations

FETCH_ERROR_MESSAGE = "Failed to fetch data"


class TableBrowserError(Exception):
    """Base exception for all table_browser errors"""
    pass

class ConfigError(TableBrowserError):
    """Invalid or inconsistent global.json or dataset config"""
    pass

class FetchError(TableBrowserError):
    """
    Data provider unreachable or answered with an error status.
    Shown to the user only as FETCH_ERROR_MESSAGE.
    """
    pass

class ProviderResponseError(FetchError):
    """Provider answered, but the payload is not a valid query result"""
    pass

class ControllerClosedError(TableBrowserError):
    """A FetchController was used after close()"""
    pass
