from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, List, Optional

from .exceptions import FETCH_ERROR_MESSAGE, ControllerClosedError, FetchError
from .filter_form import FilterForm
from .query_builder import PAGE_SIZE, QueryRequest, build_request
from .result import QueryResult
from .state import ControllerState

if TYPE_CHECKING:
    from table_browser.providers.base import DataProvider

logger = logging.getLogger(__name__)

StateListener = Callable[[ControllerState], None]


@dataclass(frozen=True)
class FetchOutcome:
    """
    Result of one provider call.

    - result: the page on success; None on failure unless the caller fills in
      the page it already had
    - error: user-facing message, None on success
    """
    result: Optional[QueryResult]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fetch_once(provider: DataProvider, request: QueryRequest) -> FetchOutcome:
    """
    Run one request against the provider and never raise.

    Every failure, expected or not, maps to FETCH_ERROR_MESSAGE.
    """
    logger.info(
        "fetch_start",
        extra={
            "table": request.table,
            "page": request.page,
            "sort": request.sort,
            "order": request.order,
        },
    )

    try:
        result = provider.fetch(request)
    except FetchError as e:
        logger.warning(
            "fetch_failed",
            extra={"table": request.table, "page": request.page, "error": str(e)},
        )
        return FetchOutcome(result=None, error=FETCH_ERROR_MESSAGE)
    except Exception:  # hard guard: a broken provider must not take the view down
        logger.exception(
            "Unexpected error from data provider",
            extra={"table": request.table, "page": request.page},
        )
        return FetchOutcome(result=None, error=FETCH_ERROR_MESSAGE)

    logger.info(
        "fetch_done",
        extra={"table": request.table, "page": request.page, "n_records": len(result.records)},
    )
    return FetchOutcome(result=result)


class FetchController:
    """
    Owns the query state of one table view and keeps it in sync with a
    data provider.

    Every change to page / sort / filters issues exactly one request. Requests
    supersede each other: each one captures the generation at which it was
    issued, and a result (or failure) arriving for an older generation is
    dropped. The in-flight task is also cancelled, but the generation check
    is what guarantees the latest change wins.

    Must be created while an asyncio event loop is running; the first fetch
    is issued from the constructor. All state changes happen on that loop.
    The provider call runs in a worker thread so the loop never blocks.
    """

    def __init__(
            self,
            provider: DataProvider,
            table: str,
            *,
            title: Optional[str] = None,
            limit: int = PAGE_SIZE,
    ):
        if not table:
            raise ValueError("FetchController needs a table name")

        self.table = table
        self.title = title if title is not None else table
        self._provider = provider
        self._limit = limit

        self._state = ControllerState()
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[StateListener] = []
        self._closed = False

        self._refetch()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    def current_state(self) -> ControllerState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def set_page(self, page: int) -> None:
        self._apply(self._state.with_page(page))

    def previous_page(self) -> None:
        self._apply(self._state.previous_page())

    def next_page(self) -> None:
        self._apply(self._state.next_page())

    def set_sort(self, column: str, order: Optional[str] = None) -> None:
        self._apply(self._state.with_sort(column, order))

    def set_filters(self, form: FilterForm) -> None:
        self._ensure_open()
        self._state = self._state.with_filters(form)
        # An explicit apply always refetches, even if nothing changed
        self._refetch()

    def close(self) -> None:
        """Teardown: nothing resolving after this point touches the state."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._listeners.clear()
        logger.debug("FetchController closed", extra={"table": self.table})

    async def wait_idle(self) -> None:
        """Wait until the fetch for the current state has settled."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    # ------------------------------------------------------------------
    # Fetch cycle
    # ------------------------------------------------------------------
    def _ensure_open(self) -> None:
        if self._closed:
            raise ControllerClosedError(f"FetchController for '{self.table}' is closed")

    def _apply(self, new_state: ControllerState) -> None:
        self._ensure_open()
        if new_state.query_key() == self._state.query_key():
            return
        self._state = new_state
        self._refetch()

    def _refetch(self) -> None:
        self._generation += 1
        generation = self._generation

        request = build_request(self.table, self._state, limit=self._limit)
        self._state = replace(self._state, loading=True, error=None)

        if self._task is not None and not self._task.done():
            self._task.cancel()

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._fetch(generation, request))
        self._notify()

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _fetch(self, generation: int, request: QueryRequest) -> None:
        outcome = await asyncio.to_thread(fetch_once, self._provider, request)

        if not self._is_current(generation):
            logger.debug(
                "fetch_superseded",
                extra={"table": request.table, "generation": generation, "current": self._generation},
            )
            return

        if outcome.ok:
            self._state = replace(self._state, last_result=outcome.result, loading=False, error=None)
        else:
            # last_result is left alone
            self._state = replace(self._state, loading=False, error=outcome.error)
        self._notify()

    def _notify(self) -> None:
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener failed", extra={"table": self.table})
