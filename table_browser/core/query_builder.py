from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .filter_form import DEFAULT_SORT_COLUMN, DEFAULT_SORT_ORDER, FilterForm

if TYPE_CHECKING:
    from .state import ControllerState

PAGE_SIZE = 25

NormalizedFilter = Dict[str, Any]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> Optional[int]:
    """
    Leading-integer parse used for numeric filter bounds.

    " 42" -> 42, "12abc" -> 12, "3.7" -> 3, "abc" -> None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def _verbatim(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class RangeField:
    key: str
    lower_attr: str
    upper_attr: str
    parse: Callable[[Any], Any] = _verbatim


SCALAR_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("gender", "gender"),
    ("education_level", "education_level"),
)

RANGE_FIELDS: Tuple[RangeField, ...] = (
    RangeField("date_of_birth", "date_of_birth_start", "date_of_birth_end"),
    RangeField("household_id", "household_id_min", "household_id_max", parse_int),
    RangeField("income", "income_min", "income_max", parse_int),
)


def build_filters(form: Union[FilterForm, Mapping[str, Any], None]) -> NormalizedFilter:
    """
    Translate the filter panel state into the provider-facing filter object.

    - categorical fields are copied as-is when set
    - each range pair collapses into one {"gte", "lte"} dict holding only the
      bounds that are set; no bounds means no key at all
    - numeric bounds that don't parse are dropped, never zero-filled

    :param form: a FilterForm, its wire dict, or None
    :return: the normalised filter (empty dict for None / empty form)
    """
    if form is None:
        return {}
    if not isinstance(form, FilterForm):
        form = FilterForm.from_dict(form)

    filters: NormalizedFilter = {}

    for key, attr in SCALAR_FIELDS:
        if form.is_set(attr):
            filters[key] = getattr(form, attr)

    for rng in RANGE_FIELDS:
        bounds: Dict[str, Any] = {}
        for op, attr in (("gte", rng.lower_attr), ("lte", rng.upper_attr)):
            if not form.is_set(attr):
                continue
            parsed = rng.parse(getattr(form, attr))
            if parsed is not None:
                bounds[op] = parsed
        if bounds:
            filters[rng.key] = bounds

    return filters


@dataclass(frozen=True)
class QueryRequest:
    """Complete input contract for a data provider. No partial updates."""

    table: str
    page: int = 1
    limit: int = PAGE_SIZE
    sort: str = DEFAULT_SORT_COLUMN
    order: str = DEFAULT_SORT_ORDER
    filters: NormalizedFilter = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "page": self.page,
            "limit": self.limit,
            "sort": self.sort,
            "order": self.order,
            "filters": self.filters,
        }


def build_request(table: str, state: ControllerState, limit: int = PAGE_SIZE) -> QueryRequest:
    return QueryRequest(
        table=table,
        page=state.page,
        limit=limit,
        sort=state.sort_column,
        order=state.sort_order,
        filters={} if state.filters is None else build_filters(state.filters),
    )
