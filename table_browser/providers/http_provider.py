from __future__ import annotations

import logging
from typing import Optional

import requests

from table_browser.core.exceptions import FetchError, ProviderResponseError
from table_browser.core.query_builder import QueryRequest
from table_browser.core.result import QueryResult
from .base import DataProvider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class HttpDataProvider(DataProvider):
    """POSTs the query contract as JSON to a provider endpoint."""

    name = "http"

    def __init__(
            self,
            url: str,
            timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
            session: Optional[requests.Session] = None,
    ):
        if not url:
            raise ValueError("HttpDataProvider needs an endpoint url")
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, request: QueryRequest) -> QueryResult:
        payload = request.to_payload()
        try:
            response = self._session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            logger.error(
                "Provider request failed",
                extra={"url": self.url, "table": request.table, "status_code": status, "error": str(e)},
            )
            raise FetchError(f"Request to {self.url} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderResponseError(f"Provider at {self.url} did not return JSON") from e

        return QueryResult.from_payload(body)

    def close(self) -> None:
        self._session.close()
