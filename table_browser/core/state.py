from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .filter_form import DEFAULT_SORT_COLUMN, DEFAULT_SORT_ORDER, FilterForm, normalise_sort_order
from .result import QueryResult


@dataclass(frozen=True)
class ControllerState:
    """
    Snapshot of everything the table view needs to render.

    Query fields (a change to any of them means a new fetch):
    - page: 1-based page number
    - sort_column / sort_order: single-column sort
    - filters: the last applied FilterForm, or None if never applied

    Fetch status:
    - loading: a request for the current query is in flight
    - error: user-facing message of the last failed fetch
    - last_result: last successful page; kept when a later fetch fails
    """

    page: int = 1
    sort_column: str = DEFAULT_SORT_COLUMN
    sort_order: str = DEFAULT_SORT_ORDER
    filters: Optional[FilterForm] = None

    loading: bool = False
    error: Optional[str] = None
    last_result: Optional[QueryResult] = None

    def query_key(self) -> Tuple[Any, ...]:
        return (self.page, self.sort_column, self.sort_order, self.filters)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def with_page(self, page: int) -> ControllerState:
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")
        return replace(self, page=page)

    def previous_page(self) -> ControllerState:
        if self.page <= 1:
            return self
        return replace(self, page=self.page - 1)

    def next_page(self) -> ControllerState:
        return replace(self, page=self.page + 1)

    def with_sort(self, column: str, order: Optional[str] = None) -> ControllerState:
        """
        Header clicks pass only the column: the current order is kept, there
        is no asc/desc toggle.
        """
        new_order = self.sort_order if order is None else normalise_sort_order(order)
        return replace(self, sort_column=column, sort_order=new_order)

    def with_filters(self, form: FilterForm) -> ControllerState:
        # The form's own sort always replaces whatever the header click set.
        return replace(
            self,
            filters=form,
            sort_column=form.sort_by,
            sort_order=form.sort_order,
        )

    # ------------------------------------------------------------------
    # Store (de)serialisation: query part only
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "sort_column": self.sort_column,
            "sort_order": self.sort_order,
            "filters": None if self.filters is None else self.filters.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> ControllerState:
        data = data or {}
        raw_filters = data.get("filters")
        return cls(
            page=max(int(data.get("page", 1)), 1),
            sort_column=data.get("sort_column") or DEFAULT_SORT_COLUMN,
            sort_order=normalise_sort_order(data.get("sort_order")),
            filters=None if raw_filters is None else FilterForm.from_dict(raw_filters),
        )
