from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .exceptions import ProviderResponseError


@dataclass(frozen=True)
class QueryResult:
    """
    One page of rows as returned by a data provider.

    - columns: display order of the table
    - column_types: column -> type tag ("date", "timestamp", ...); columns
      without a tag are rendered untouched
    - records: one mapping per row; a column missing from a row renders empty
    """

    columns: List[str] = field(default_factory=list)
    column_types: Dict[str, str] = field(default_factory=dict)
    records: List[Dict[str, Any]] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "columns": list(self.columns),
            "columnTypes": dict(self.column_types),
            "records": [dict(r) for r in self.records],
        }

    @classmethod
    def from_payload(cls, payload: Any) -> QueryResult:
        if not isinstance(payload, Mapping):
            raise ProviderResponseError(
                f"Expected a JSON object from provider, got {type(payload).__name__}"
            )

        columns = payload.get("columns")
        records = payload.get("records")
        if not isinstance(columns, list) or not isinstance(records, list):
            raise ProviderResponseError("Provider payload is missing 'columns' or 'records'")

        # Older providers send the type map as columnsWithTypes
        column_types = payload.get("columnTypes")
        if column_types is None:
            column_types = payload.get("columnsWithTypes")
        if column_types is None:
            column_types = {}
        if not isinstance(column_types, Mapping):
            raise ProviderResponseError("Provider 'columnTypes' must be an object")

        if any(not isinstance(r, Mapping) for r in records):
            raise ProviderResponseError("Every provider record must be an object")

        return cls(
            columns=[str(c) for c in columns],
            column_types={str(k): str(v) for k, v in column_types.items() if v is not None},
            records=[dict(r) for r in records],
        )
