from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

DEFAULT_SORT_COLUMN = "invoice"
DEFAULT_SORT_ORDER = "asc"
SORT_ORDERS = ("asc", "desc")

# Filter UI wire key -> FilterForm attribute
WIRE_KEYS: Dict[str, str] = {
    "gender": "gender",
    "dateOfBirthStart": "date_of_birth_start",
    "dateOfBirthEnd": "date_of_birth_end",
    "householdIdMin": "household_id_min",
    "householdIdMax": "household_id_max",
    "educationLevel": "education_level",
    "incomeMin": "income_min",
    "incomeMax": "income_max",
}

FormValue = Union[str, int, float, None]


def normalise_sort_order(order: Optional[str]) -> str:
    value = (order or DEFAULT_SORT_ORDER).strip().lower()
    if value not in SORT_ORDERS:
        raise ValueError(f"Invalid sort order {order!r}; expected one of {SORT_ORDERS}")
    return value


@dataclass(frozen=True)
class FilterForm:
    """
    Raw state of the filter panel as submitted by the user.

    Fields:

    - gender / education_level: categorical filters, sent verbatim
    - date_of_birth_start / date_of_birth_end: date strings (YYYY-MM-DD)
    - household_id_min / household_id_max, income_min / income_max: numeric
      strings as typed by the user; parsed later by the query builder

    - sort_by / sort_order: the sort chosen in the filter panel. Applying a
      form overrides any sort picked from the table header.

    Any field that is None or "" counts as not set.
    """

    gender: FormValue = None
    date_of_birth_start: FormValue = None
    date_of_birth_end: FormValue = None
    household_id_min: FormValue = None
    household_id_max: FormValue = None
    education_level: FormValue = None
    income_min: FormValue = None
    income_max: FormValue = None

    sort_by: str = DEFAULT_SORT_COLUMN
    sort_order: str = DEFAULT_SORT_ORDER

    def __post_init__(self) -> None:
        object.__setattr__(self, "sort_order", normalise_sort_order(self.sort_order))

    def is_set(self, attr: str) -> bool:
        value = getattr(self, attr)
        return value is not None and value != ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {key: getattr(self, attr) for key, attr in WIRE_KEYS.items()}
        data["sortBy"] = self.sort_by
        data["sortOrder"] = self.sort_order
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FilterForm:
        return cls(
            **{attr: data.get(key) for key, attr in WIRE_KEYS.items()},
            sort_by=data.get("sortBy") or DEFAULT_SORT_COLUMN,
            sort_order=data.get("sortOrder") or DEFAULT_SORT_ORDER,
        )
