from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from table_browser.core.exceptions import ConfigError


@dataclass
class TableConfig:
    """
    Parsed config entry for a single browsable table (datasets/<name>.json).
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int
    data_root: Optional[Path] = None

    @property
    def name(self) -> str:
        return self.raw.get("name", f"table_{self.index}")

    @property
    def title(self) -> str:
        return self.raw.get("title") or self.name

    @property
    def path(self) -> Path:
        file_path = Path(self.raw["file"])
        if file_path.is_absolute():
            return file_path
        base = self.data_root if self.data_root is not None else self.source_path.parent.parent
        return (base / file_path).resolve()

    @property
    def column_types(self) -> Dict[str, str]:
        return dict(self.raw.get("column_types", {}))

    @classmethod
    def from_raw(
            cls,
            raw: Dict[str, Any],
            source_path: Path,
            index: int,
            data_root: Optional[Path] = None,
    ) -> TableConfig:
        if not isinstance(raw, dict):
            raise ConfigError(f"{source_path}: table config must be a JSON object")
        if "file" not in raw:
            raise ConfigError(f"{source_path}: table config is missing 'file'")
        if not isinstance(raw.get("column_types", {}), dict):
            raise ConfigError(f"{source_path}: 'column_types' must be an object")
        return cls(raw=raw, source_path=source_path, index=index, data_root=data_root)


@dataclass
class GlobalConfig:
    ui_title: str = "Table Browser"
    provider_url: Optional[str] = None
    provider_timeout_seconds: Optional[float] = 30.0
    tables: List[TableConfig] = field(default_factory=list)
    data_root: Optional[Path] = None

    def table_by_name(self) -> Dict[str, TableConfig]:
        return {t.name: t for t in self.tables}
