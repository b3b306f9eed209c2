from __future__ import annotations

import pytest

from table_browser.core.exceptions import ProviderResponseError
from table_browser.core.render import CELL_FORMATTERS, format_cell, format_date, format_rows
from table_browser.core.result import QueryResult


def test_date_cell_is_day_month_year():
    assert format_cell("2024-03-05", "date") == "05 Mar 2024"


def test_unparsable_date_passes_through():
    assert format_cell("not-a-date", "date") == "not-a-date"


def test_timestamp_uses_the_same_format():
    assert format_cell("2023-12-31T23:15:00", "timestamp") == "31 Dec 2023"


def test_epoch_milliseconds_are_dates():
    # 2024-03-05T00:00:00Z
    assert format_cell(1709596800000, "timestamp") == "05 Mar 2024"


@pytest.mark.parametrize("value", [None, ""])
def test_missing_date_renders_placeholder(value):
    assert format_date(value) == "-"


@pytest.mark.parametrize("value", [["2024-03-05", "2024-03-06"], {"year": 2024}])
def test_non_scalar_date_value_passes_through(value):
    assert format_cell(value, "date") == str(value)


def test_list_in_date_column_does_not_break_the_page():
    result = QueryResult(
        columns=["d"],
        column_types={"d": "date"},
        records=[{"d": ["2024-03-05", "2024-03-06"]}, {"d": "2024-03-05"}],
    )
    assert format_rows(result) == [["['2024-03-05', '2024-03-06']"], ["05 Mar 2024"]]


@pytest.mark.parametrize("value", ["March", "Tuesday"])
def test_month_or_weekday_name_alone_is_not_a_date(value):
    assert format_cell(value, "date") == value


def test_years_before_1000_keep_four_digits():
    # pandas builds without non-nanosecond parsing can't hold year 99 and pass it through
    assert format_cell("0099-01-01", "date") in ("01 Jan 0099", "0099-01-01")


def test_non_date_cells_are_untouched():
    assert format_cell("2024-03-05", None) == "2024-03-05"
    assert format_cell("2024-03-05", "text") == "2024-03-05"
    assert format_cell(1200, "integer") == "1200"


def test_non_date_missing_value_is_empty():
    assert format_cell(None, None) == ""


def test_date_and_timestamp_share_one_formatter():
    assert CELL_FORMATTERS["date"] is CELL_FORMATTERS["timestamp"]


def test_format_rows_follows_column_order():
    result = QueryResult(
        columns=["invoice", "date_of_birth", "income"],
        column_types={"date_of_birth": "date"},
        records=[
            {"income": 100, "invoice": "INV-1", "date_of_birth": "1990-07-14"},
            {"invoice": "INV-2", "income": 250},
        ],
    )

    rows = format_rows(result)

    assert rows == [
        ["INV-1", "14 Jul 1990", "100"],
        ["INV-2", "-", ""],
    ]


def test_format_rows_with_no_records():
    assert format_rows(QueryResult(columns=["a", "b"])) == []


def test_result_from_payload_reads_column_types():
    result = QueryResult.from_payload(
        {
            "columns": ["a", "b"],
            "columnTypes": {"b": "date"},
            "records": [{"a": 1, "b": "2024-01-01"}],
        }
    )
    assert result.columns == ["a", "b"]
    assert result.column_types == {"b": "date"}
    assert result.records == [{"a": 1, "b": "2024-01-01"}]


def test_result_from_payload_accepts_legacy_type_key():
    result = QueryResult.from_payload(
        {"columns": ["b"], "columnsWithTypes": {"b": "timestamp"}, "records": []}
    )
    assert result.column_types == {"b": "timestamp"}


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"records": []},
        {"columns": ["a"]},
        {"columns": ["a"], "records": ["not-a-row"]},
        {"columns": ["a"], "records": [], "columnTypes": ["date"]},
    ],
)
def test_result_from_bad_payload_raises(payload):
    with pytest.raises(ProviderResponseError):
        QueryResult.from_payload(payload)
