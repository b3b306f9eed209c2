"""
Data providers: anything that answers a QueryRequest with a QueryResult.
"""

from .base import DataProvider
from .dataframe_provider import DataFrameProvider, TableSource, load_table_sources
from .http_provider import HttpDataProvider

__all__ = [
    "DataProvider",
    "DataFrameProvider",
    "HttpDataProvider",
    "TableSource",
    "load_table_sources",
]
