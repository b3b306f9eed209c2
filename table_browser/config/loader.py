from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from table_browser.config.model import GlobalConfig, TableConfig
from table_browser.core.exceptions import ConfigError
from table_browser.providers.base import DataProvider
from table_browser.providers.dataframe_provider import DataFrameProvider, load_table_sources
from table_browser.providers.http_provider import HttpDataProvider

logger = logging.getLogger(__name__)

CONFIG_ROOT_ENV = "TABLE_BROWSER_CONFIG_ROOT"
PROVIDER_URL_ENV = "TABLE_BROWSER_PROVIDER_URL"


def default_config_root() -> Path:
    return Path(os.getenv(CONFIG_ROOT_ENV, "config"))


def _resolve_data_root(root: Path, raw_value: Optional[str]) -> Optional[Path]:
    # Absolute paths are used as-is, relative ones resolve against the config root.
    if raw_value is None:
        return None
    data_root_path = Path(raw_value)
    if data_root_path.is_absolute():
        return data_root_path
    return (root / data_root_path).resolve()


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout.

    Expected structure:

        root/
            global.json
            datasets/
                citizens.json
                ...

    global.json keys:

    - ui_title: title for the UI, defaults to 'Table Browser'
    - provider_url: endpoint of an HTTP data provider (optional)
    - provider_timeout_seconds: request timeout for that provider, defaults to 30
    - data_root: base directory for table files (optional)

    The TABLE_BROWSER_PROVIDER_URL env var overrides provider_url.

    :param root: Directory containing 'global.json' and optionally 'datasets/'.
    :return: A GlobalConfig instance.
    :raises FileNotFoundError: if global.json does not exist.
    :raises ConfigError: if a config file is not valid JSON or misses required keys.
    """
    root = Path(root)
    logger.info(
        "Loading global config",
        extra={"config_root": str(root)},
    )

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    raw_global = _read_json(global_path)
    if not isinstance(raw_global, dict):
        raise ConfigError(f"{global_path}: expected a JSON object")

    data_root = _resolve_data_root(root, raw_global.get("data_root"))

    tables: List[TableConfig] = []
    datasets_dir = root / "datasets"
    if datasets_dir.is_dir():
        for idx, config_file in enumerate(sorted(datasets_dir.glob("*.json"))):
            tables.append(
                TableConfig.from_raw(
                    _read_json(config_file),
                    source_path=config_file,
                    index=idx,
                    data_root=data_root,
                )
            )

    names = [t.name for t in tables]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate table names in {datasets_dir}: {duplicates}")

    provider_url = os.getenv(PROVIDER_URL_ENV) or raw_global.get("provider_url")
    timeout = raw_global.get("provider_timeout_seconds", 30.0)

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Table Browser"),
        provider_url=provider_url or None,
        provider_timeout_seconds=None if timeout is None else float(timeout),
        tables=tables,
        data_root=data_root,
    )


def build_provider(global_config: GlobalConfig) -> DataProvider:
    """
    Pick the data provider for the app.

    1) an HTTP provider if a provider url is configured
    2) otherwise an in-memory provider over the configured tables

    :raises ConfigError: if neither is available
    """
    if global_config.provider_url:
        logger.info(
            "Using HTTP data provider",
            extra={"provider_url": global_config.provider_url},
        )
        return HttpDataProvider(
            global_config.provider_url,
            timeout=global_config.provider_timeout_seconds,
        )

    if not global_config.tables:
        raise ConfigError(
            "No provider_url configured and no tables found under datasets/; nothing to browse"
        )

    sources = load_table_sources(global_config.tables)
    logger.info(
        "Using in-memory data provider",
        extra={"tables": sorted(sources)},
    )
    return DataFrameProvider(sources)


def _read_json(path: Path):
    try:
        with path.open() as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON ({e})") from e
