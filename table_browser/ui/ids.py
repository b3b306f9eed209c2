from __future__ import annotations

__all__ = ["IDs", "sort_header_id"]


class IDs:
    class Store:
        DATASET = "dataset-params"
        QUERY_STATE = "query-state"
        LAST_RESULT = "last-result"

    class Control:
        URL = "url"
        PAGE_TITLE = "page-title"

        # Filter panel
        GENDER = "filter-gender"
        DATE_OF_BIRTH = "filter-date-of-birth"
        HOUSEHOLD_ID_MIN = "filter-household-id-min"
        HOUSEHOLD_ID_MAX = "filter-household-id-max"
        EDUCATION_LEVEL = "filter-education-level"
        INCOME_MIN = "filter-income-min"
        INCOME_MAX = "filter-income-max"
        SORT_BY = "filter-sort-by"
        SORT_ORDER = "filter-sort-order"
        APPLY_FILTERS_BTN = "apply-filters-btn"

        # Results
        RESULTS_CONTAINER = "results-container"
        SORT_HEADER = "sort-header"  # pattern-matching type

        # Pager
        PREV_PAGE_BTN = "prev-page-btn"
        NEXT_PAGE_BTN = "next-page-btn"
        PAGE_LABEL = "page-label"


def sort_header_id(column: str) -> dict:
    return {"type": IDs.Control.SORT_HEADER, "column": column}
