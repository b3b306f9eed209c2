from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional

import pandas as pd

from table_browser.core.exceptions import ConfigError, FetchError
from table_browser.core.query_builder import QueryRequest
from table_browser.core.result import QueryResult
from .base import DataProvider

if TYPE_CHECKING:
    from table_browser.config.model import TableConfig

logger = logging.getLogger(__name__)

DATE_TYPES = ("date", "timestamp")


@dataclass
class TableSource:
    """
    An in-memory table the DataFrameProvider can serve.

    - column_types: explicit type tags; datetime columns without a tag are
      reported as "timestamp"
    """
    name: str
    frame: pd.DataFrame
    column_types: Dict[str, str] = field(default_factory=dict)
    title: Optional[str] = None

    def resolved_column_types(self) -> Dict[str, str]:
        types: Dict[str, str] = {}
        for col in self.frame.columns:
            if col in self.column_types:
                types[col] = self.column_types[col]
            elif pd.api.types.is_datetime64_any_dtype(self.frame[col]):
                types[col] = "timestamp"
        return types


class DataFrameProvider(DataProvider):
    """
    Answers the provider contract from pandas DataFrames.

    Semantics:
    - scalar filter: equality (compared as strings)
    - range filter: inclusive gte / lte; datetimes for date columns, numbers otherwise
    - filters on unknown columns are ignored
    - sort on an unknown column keeps the natural order
    - pages are 'limit' rows starting at (page - 1) * limit
    """

    name = "dataframe"

    def __init__(self, tables: Mapping[str, TableSource]):
        self._tables: Dict[str, TableSource] = dict(tables)

    @property
    def table_names(self) -> list[str]:
        return sorted(self._tables)

    def get_source(self, name: str) -> Optional[TableSource]:
        return self._tables.get(name)

    def fetch(self, request: QueryRequest) -> QueryResult:
        source = self._tables.get(request.table)
        if source is None:
            raise FetchError(f"Unknown table '{request.table}'")

        df = source.frame
        column_types = source.resolved_column_types()

        mask = pd.Series(True, index=df.index)
        for key, condition in request.filters.items():
            if key not in df.columns:
                logger.warning(
                    "Ignoring filter on unknown column",
                    extra={"table": request.table, "column": key},
                )
                continue
            mask &= self._filter_mask(df[key], condition, column_types.get(key))

        selected = df[mask]

        if request.sort in selected.columns:
            selected = selected.sort_values(
                request.sort,
                ascending=request.order == "asc",
                kind="mergesort",
                na_position="last",
            )
        else:
            logger.debug(
                "Sort column not in table; keeping natural order",
                extra={"table": request.table, "sort": request.sort},
            )

        start = (request.page - 1) * request.limit
        page = selected.iloc[start:start + request.limit]

        logger.info(
            "Served table page",
            extra={
                "table": request.table,
                "page": request.page,
                "n_matching": int(len(selected)),
                "n_records": int(len(page)),
            },
        )

        return QueryResult(
            columns=[str(c) for c in df.columns],
            column_types=column_types,
            records=self._to_records(page, column_types),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _filter_mask(column: pd.Series, condition: Any, column_type: Optional[str]) -> pd.Series:
        if not isinstance(condition, Mapping):
            return column.astype(str) == str(condition)

        is_date = column_type in DATE_TYPES or pd.api.types.is_datetime64_any_dtype(column)
        if is_date:
            values = pd.to_datetime(column, errors="coerce")
        else:
            values = pd.to_numeric(column, errors="coerce")

        mask = pd.Series(True, index=column.index)
        for op, bound in condition.items():
            if is_date:
                bound = pd.to_datetime(bound, errors="coerce")
            else:
                bound = pd.to_numeric(bound, errors="coerce")
            if pd.isna(bound):
                continue
            if op == "gte":
                mask &= values >= bound
            elif op == "lte":
                mask &= values <= bound
        return mask

    @staticmethod
    def _to_records(page: pd.DataFrame, column_types: Dict[str, str]) -> list[dict]:
        out = page.copy()
        for col in out.columns:
            if not pd.api.types.is_datetime64_any_dtype(out[col]):
                continue
            fmt = "%Y-%m-%d" if column_types.get(col) == "date" else "%Y-%m-%dT%H:%M:%S"
            out[col] = out[col].dt.strftime(fmt)

        out = out.astype(object).where(out.notna(), None)
        return out.to_dict("records")


def load_table_sources(tables: Iterable[TableConfig]) -> Dict[str, TableSource]:
    """
    Read the CSV file behind each configured table.

    Columns tagged "date" / "timestamp" are parsed into datetimes; values that
    don't parse become missing.

    :raises ConfigError: if a file is missing or cannot be read
    """
    sources: Dict[str, TableSource] = {}
    for cfg in tables:
        path = cfg.path
        if not path.is_file():
            raise ConfigError(f"Data file for table '{cfg.name}' not found at {path}")
        try:
            frame = pd.read_csv(path)
        except (ValueError, OSError) as e:
            raise ConfigError(f"Could not read data file for table '{cfg.name}': {e}") from e

        for col, type_tag in cfg.column_types.items():
            if type_tag in DATE_TYPES and col in frame.columns:
                frame[col] = pd.to_datetime(frame[col], errors="coerce")

        logger.info(
            "Loaded table source",
            extra={"table": cfg.name, "path": str(path), "n_rows": int(len(frame))},
        )
        sources[cfg.name] = TableSource(
            name=cfg.name,
            frame=frame,
            column_types=dict(cfg.column_types),
            title=cfg.title,
        )
    return sources
