from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class CollectionConfig:
    """
    Parsed config entry for a single collection (one path in the record store).
    """
    raw: Dict[str, Any]
    source_path: Optional[Path]
    index: int

    @property
    def id(self) -> str:
        return self.raw.get("id") or (self.source_path.stem if self.source_path else f"collection_{self.index}")

    @property
    def name(self) -> str:
        return self.raw.get("name", self.id)

    @property
    def path(self) -> str:
        return self.raw["path"]

    @property
    def identifier_field(self) -> Optional[str]:
        return self.raw.get("identifier_field")

    @property
    def date_field(self) -> Optional[str]:
        return self.raw.get("date_field")

    @property
    def priority_columns(self) -> List[str]:
        return list(self.raw.get("priority_columns", []))

    @property
    def filter_fields(self) -> List[str]:
        """Fields offered as multi-select filters (all fields when not configured)."""
        return list(self.raw.get("filter_fields", []))

    @property
    def editable_fields(self) -> List[str]:
        return list(self.raw.get("editable_fields", []))

    @property
    def map_exclude(self) -> Dict[str, List[str]]:
        """field -> values; records carrying any of them are placeholder rows and never mapped."""
        return {k: [str(v) for v in vs] for k, vs in self.raw.get("map", {}).get("exclude", {}).items()}

    @property
    def map_label_fields(self) -> List[str]:
        return list(self.raw.get("map", {}).get("label_fields", []))

    @property
    def has_map(self) -> bool:
        return "map" in self.raw

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Optional[Path], index: int) -> CollectionConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str
    subtitle: str = ""
    database_url: Optional[str] = None
    api_key: Optional[str] = None
    # Service-account JSON: a file path or the inline JSON document.
    credentials: Optional[str] = None
    snapshot_file: Optional[Path] = None
    default_collection: Optional[str] = None
    # Collection holding the unit status event log (units tab, region views).
    events_collection: Optional[str] = None
    collections: List[CollectionConfig] = field(default_factory=list)

    @property
    def uses_firebase(self) -> bool:
        return bool(self.database_url and self.credentials)

    def collection(self, collection_id: str) -> CollectionConfig:
        for cfg in self.collections:
            if cfg.id == collection_id:
                return cfg
        raise KeyError(f"Collection '{collection_id}' not configured")
