from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from table_browser.core.query_builder import QueryRequest
from table_browser.core.result import QueryResult


class DataProvider(ABC):
    """
    Abstract base class for everything that can answer a QueryRequest.

    Implementations
    - receive the complete request (table, page, limit, sort, order, filters)
    - return one page as a QueryResult
    - raise FetchError (or a subclass) for any failure; the caller maps it to
      the single user-facing message
    """

    name: Optional[str] = None

    @abstractmethod
    def fetch(self, request: QueryRequest) -> QueryResult:
        """
        Run the query
        :param request: the full query contract
        :return: the page of records, with columns and column types
        """
        raise NotImplementedError()
