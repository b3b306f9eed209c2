import json
import sys

from table_browser.core.query_builder import QueryRequest
from table_browser.core.render import format_rows
from table_browser.providers.http_provider import HttpDataProvider

# Usage: python scripts/check_provider.py <provider_url> <table>


def check_provider(url: str, table: str) -> int:
    provider = HttpDataProvider(url)
    try:
        result = provider.fetch(QueryRequest(table=table))
    finally:
        provider.close()

    print(f"{'COLUMN':<30} | {'TYPE':<12}")
    print("-" * 45)
    for col in result.columns:
        print(f"{col:<30} | {result.column_types.get(col, '-'):<12}")

    print()
    print(f"{len(result.records)} records on page 1")
    for row in format_rows(result)[:5]:
        print(json.dumps(row))
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: check_provider.py <provider_url> <table>")
        sys.exit(2)
    sys.exit(check_provider(sys.argv[1], sys.argv[2]))
