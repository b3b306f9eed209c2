from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from table_browser.config.model import GlobalConfig
from table_browser.providers.base import DataProvider


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    provider: Optional[DataProvider] = None
    default_table: Optional[str] = None

    def title_for(self, table: str) -> str:
        cfg = self.global_config.table_by_name().get(table)
        return cfg.title if cfg is not None else table

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.provider is None:
            raise RuntimeError("AppConfig.provider must be initialized.")
