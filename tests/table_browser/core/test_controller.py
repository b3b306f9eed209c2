from __future__ import annotations

import asyncio
import threading

import pytest

from table_browser.core.controller import FetchController, fetch_once
from table_browser.core.exceptions import ControllerClosedError, FetchError
from table_browser.core.filter_form import FilterForm
from table_browser.core.query_builder import QueryRequest
from table_browser.core.render import format_rows
from table_browser.core.result import QueryResult
from table_browser.providers.base import DataProvider


def _page_result(request: QueryRequest) -> QueryResult:
    return QueryResult(
        columns=["invoice", "page"],
        column_types={},
        records=[{"invoice": f"INV-{request.page}", "page": request.page}],
    )


class RecordingProvider(DataProvider):
    """Answers every request with a one-row page tagged with the page number."""

    name = "recording"

    def __init__(self, fail_pages=(), crash_pages=()):
        self.requests: list[QueryRequest] = []
        self.fail_pages = set(fail_pages)
        self.crash_pages = set(crash_pages)
        self._lock = threading.Lock()

    def fetch(self, request: QueryRequest) -> QueryResult:
        with self._lock:
            self.requests.append(request)
        if request.page in self.fail_pages:
            raise FetchError(f"page {request.page} unavailable")
        if request.page in self.crash_pages:
            raise RuntimeError("provider bug")
        return _page_result(request)


class GatedProvider(RecordingProvider):
    """Each page blocks until the test releases it, so completion order is controlled."""

    def __init__(self, fail_pages=()):
        super().__init__(fail_pages=fail_pages)
        self._events: dict[tuple[str, int], threading.Event] = {}
        self._events_lock = threading.Lock()

    def _event(self, kind: str, page: int) -> threading.Event:
        with self._events_lock:
            return self._events.setdefault((kind, page), threading.Event())

    def release(self, page: int) -> None:
        self._event("gate", page).set()

    def wait_started(self, page: int) -> None:
        assert self._event("started", page).wait(timeout=5)

    def wait_finished(self, page: int) -> None:
        assert self._event("finished", page).wait(timeout=5)

    def fetch(self, request: QueryRequest) -> QueryResult:
        self._event("started", request.page).set()
        try:
            assert self._event("gate", request.page).wait(timeout=5)
            return super().fetch(request)
        finally:
            self._event("finished", request.page).set()


class TwoRecordProvider(RecordingProvider):
    def fetch(self, request: QueryRequest) -> QueryResult:
        self.requests.append(request)
        return QueryResult(
            columns=["invoice", "full_name", "date_of_birth"],
            column_types={"date_of_birth": "date"},
            records=[
                {"invoice": "INV-1", "full_name": "Amara Okafor", "date_of_birth": "1976-11-17"},
                {"invoice": "INV-2", "full_name": "Liam Byrne", "date_of_birth": None},
            ],
        )


def test_construction_fetches_first_page():
    provider = TwoRecordProvider()

    async def scenario():
        controller = FetchController(provider, "citizens", title="Citizens")
        assert controller.current_state().loading is True
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert provider.requests[0].to_payload() == {
        "table": "citizens",
        "page": 1,
        "limit": 25,
        "sort": "invoice",
        "order": "asc",
        "filters": {},
    }
    assert state.loading is False
    assert state.error is None
    assert state.last_result.columns == ["invoice", "full_name", "date_of_birth"]
    assert format_rows(state.last_result) == [
        ["INV-1", "Amara Okafor", "17 Nov 1976"],
        ["INV-2", "Liam Byrne", "-"],
    ]


def test_construction_needs_a_running_loop():
    with pytest.raises(RuntimeError):
        FetchController(RecordingProvider(), "citizens")


def test_rapid_page_changes_keep_only_latest():
    provider = RecordingProvider()

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.set_page(2)
        controller.set_page(3)
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.page == 3
    assert state.last_result.records == [{"invoice": "INV-3", "page": 3}]


def test_slow_superseded_response_is_discarded():
    provider = GatedProvider()
    provider.release(1)

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()

        controller.set_page(2)
        await asyncio.to_thread(provider.wait_started, 2)

        controller.set_page(3)
        provider.release(3)
        await controller.wait_idle()
        after_page_3 = controller.current_state()

        # page 2 resolves last; it must not overwrite page 3
        provider.release(2)
        await asyncio.to_thread(provider.wait_finished, 2)
        await asyncio.sleep(0.05)
        return after_page_3, controller.current_state()

    after_page_3, final = asyncio.run(scenario())

    assert after_page_3.last_result.records[0]["page"] == 3
    assert final.page == 3
    assert final.last_result.records[0]["page"] == 3
    assert final.loading is False


def test_stale_failure_does_not_set_error():
    provider = GatedProvider(fail_pages={2})
    provider.release(1)

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()

        controller.set_page(2)
        await asyncio.to_thread(provider.wait_started, 2)
        controller.set_page(3)
        provider.release(3)
        await controller.wait_idle()

        provider.release(2)
        await asyncio.to_thread(provider.wait_finished, 2)
        await asyncio.sleep(0.05)
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.error is None
    assert state.last_result.records[0]["page"] == 3


def test_loading_while_in_flight():
    provider = GatedProvider()
    provider.release(1)

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.next_page()
        in_flight = controller.current_state()
        provider.release(2)
        await controller.wait_idle()
        return in_flight, controller.current_state()

    in_flight, done = asyncio.run(scenario())

    assert in_flight.loading is True
    assert in_flight.error is None
    assert in_flight.page == 2
    assert done.loading is False


def test_failure_keeps_previous_result():
    provider = RecordingProvider(fail_pages={2})

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.next_page()
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.page == 2
    assert state.loading is False
    assert state.error == "Failed to fetch data"
    assert state.last_result.records[0]["page"] == 1


def test_unexpected_provider_error_is_contained():
    provider = RecordingProvider(crash_pages={1})

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.error == "Failed to fetch data"
    assert state.last_result is None


def test_error_cleared_on_next_success():
    provider = RecordingProvider(fail_pages={2})

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.next_page()
        await controller.wait_idle()
        controller.next_page()
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.error is None
    assert state.last_result.records[0]["page"] == 3


def test_previous_on_first_page_is_noop():
    provider = RecordingProvider()

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        before = controller.current_state()
        generation = controller.generation
        controller.previous_page()
        return before, controller.current_state(), generation, controller.generation

    before, after, gen_before, gen_after = asyncio.run(scenario())

    assert after is before
    assert gen_after == gen_before
    assert len(provider.requests) == 1


def test_set_page_rejects_zero():
    async def scenario():
        controller = FetchController(RecordingProvider(), "citizens")
        with pytest.raises(ValueError):
            controller.set_page(0)
        await controller.wait_idle()

    asyncio.run(scenario())


def test_header_sort_changes_column_only():
    provider = RecordingProvider()

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.set_sort("income", "desc")
        await controller.wait_idle()
        controller.set_sort("full_name")
        await controller.wait_idle()
        # same column again: nothing to do
        controller.set_sort("full_name")
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.sort_column == "full_name"
    assert state.sort_order == "desc"
    assert [(r.sort, r.order) for r in provider.requests] == [
        ("invoice", "asc"),
        ("income", "desc"),
        ("full_name", "desc"),
    ]


def test_apply_filters_overrides_sort_and_sends_filters():
    provider = RecordingProvider()
    form = FilterForm.from_dict(
        {"gender": "F", "incomeMin": "1000", "sortBy": "income", "sortOrder": "desc"}
    )

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.set_sort("full_name", "asc")
        await controller.wait_idle()
        controller.set_filters(form)
        await controller.wait_idle()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.sort_column == "income"
    assert state.sort_order == "desc"
    assert state.filters == form
    last = provider.requests[-1]
    assert last.sort == "income"
    assert last.order == "desc"
    assert last.filters == {"gender": "F", "income": {"gte": 1000}}


def test_reapplying_same_filters_refetches():
    provider = RecordingProvider()
    form = FilterForm(gender="M")

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.set_filters(form)
        await controller.wait_idle()
        controller.set_filters(form)
        await controller.wait_idle()

    asyncio.run(scenario())

    assert len(provider.requests) == 3


def test_close_ignores_in_flight_result():
    provider = GatedProvider()
    provider.release(1)

    async def scenario():
        controller = FetchController(provider, "citizens")
        await controller.wait_idle()
        controller.next_page()
        await asyncio.to_thread(provider.wait_started, 2)
        controller.close()

        provider.release(2)
        await asyncio.to_thread(provider.wait_finished, 2)
        await asyncio.sleep(0.05)

        with pytest.raises(ControllerClosedError):
            controller.next_page()
        return controller.current_state()

    state = asyncio.run(scenario())

    assert state.last_result.records[0]["page"] == 1


def test_subscribers_see_every_change():
    provider = RecordingProvider()
    seen = []

    def broken_listener(_state):
        raise RuntimeError("listener bug")

    async def scenario():
        controller = FetchController(provider, "citizens")
        controller.subscribe(broken_listener)
        unsubscribe = controller.subscribe(seen.append)
        await controller.wait_idle()
        controller.next_page()
        await controller.wait_idle()
        unsubscribe()
        controller.next_page()
        await controller.wait_idle()

    asyncio.run(scenario())

    assert [(s.page, s.loading) for s in seen] == [(1, False), (2, True), (2, False)]


# ---------------------------------------------------------------------------
# fetch_once: the failure mapping shared with the Dash render callback
# ---------------------------------------------------------------------------
def test_fetch_once_returns_the_page():
    outcome = fetch_once(RecordingProvider(), QueryRequest(table="citizens", page=3))
    assert outcome.ok
    assert outcome.result.records == [{"invoice": "INV-3", "page": 3}]


@pytest.mark.parametrize("provider", [RecordingProvider(fail_pages={1}), RecordingProvider(crash_pages={1})])
def test_fetch_once_maps_every_failure_to_the_generic_message(provider):
    outcome = fetch_once(provider, QueryRequest(table="citizens"))
    assert not outcome.ok
    assert outcome.error == "Failed to fetch data"
    assert outcome.result is None
