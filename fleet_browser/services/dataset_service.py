from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from fleet_browser.config.model import CollectionConfig
from fleet_browser.core.dataset import Dataset
from fleet_browser.core.exceptions import LoadError, NetworkError, PermissionDeniedError
from fleet_browser.core.records import Record
from fleet_browser.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def normalise_snapshot(snapshot: Any) -> Tuple[List[Record], List[str]]:
    """
    Flatten a store snapshot into (records, keys).

    - array-shaped: None holes skipped, array indices kept as keys
    - object-shaped: object keys kept; values that are not mappings skipped
    - anything else (missing, scalar): no records
    """
    records: List[Record] = []
    keys: List[str] = []

    if isinstance(snapshot, list):
        items = ((str(i), v) for i, v in enumerate(snapshot))
    elif isinstance(snapshot, Mapping):
        items = ((str(k), v) for k, v in snapshot.items())
    else:
        return records, keys

    for key, value in items:
        if not isinstance(value, Mapping):
            continue
        records.append({str(f): v for f, v in value.items()})
        keys.append(key)
    return records, keys


class DatasetLoader:
    """
    Materialises store paths into Datasets.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def load(
        self,
        path: str,
        name: Optional[str] = None,
        identifier_field: Optional[str] = None,
        date_field: Optional[str] = None,
    ) -> Dataset:
        """
        One-shot fetch of the collection at path.

        :raises LoadError: when access is denied or the fetch fails.
        """
        name = name or path
        try:
            snapshot = self.store.get(path)
        except (PermissionDeniedError, NetworkError) as e:
            logger.error("Failed to load collection", extra={"dataset": name, "path": path, "error": str(e)})
            raise LoadError(f"Failed to load '{name}' from {path}: {e}") from e

        if snapshot is not None and not isinstance(snapshot, (list, Mapping)):
            logger.warning("Collection path holds a scalar, treating as empty", extra={"path": path})

        records, keys = normalise_snapshot(snapshot)
        logger.info("Collection loaded", extra={"dataset": name, "path": path, "n_records": len(records)})
        return Dataset(
            name=name,
            path=path,
            records=records,
            keys=keys,
            identifier_field=identifier_field,
            date_field=date_field,
        )

    def from_config(self, cfg: CollectionConfig) -> Dataset:
        return self.load(
            cfg.path,
            name=cfg.name,
            identifier_field=cfg.identifier_field,
            date_field=cfg.date_field,
        )


class DatasetManager(Mapping[str, Dataset]):
    """
    Central service for managing collections.
    Implements the Mapping interface (dict-like) so the UI layer can index
    by collection id while each collection is fetched on first use only.
    """

    def __init__(self, loader: DatasetLoader, cfg_by_id: Dict[str, CollectionConfig]):
        self._loader = loader
        self._cfg_by_id = cfg_by_id
        self._loaded: Dict[str, Dataset] = {}

    def __getitem__(self, collection_id: str) -> Dataset:
        if collection_id in self._loaded:
            return self._loaded[collection_id]

        cfg = self._cfg_by_id.get(collection_id)
        if cfg is None:
            raise KeyError(f"Unknown collection '{collection_id}'")

        logger.info("Lazy-loading collection", extra={"collection": collection_id, "path": cfg.path})
        ds = self._loader.from_config(cfg)
        self._loaded[collection_id] = ds
        return ds

    def __iter__(self) -> Iterator[str]:
        return iter(self._cfg_by_id)

    def __len__(self) -> int:
        return len(self._cfg_by_id)

    def __contains__(self, collection_id: object) -> bool:
        # Membership is by config; it must not trigger a fetch.
        return collection_id in self._cfg_by_id

    def config(self, collection_id: str) -> CollectionConfig:
        try:
            return self._cfg_by_id[collection_id]
        except KeyError:
            raise KeyError(f"Unknown collection '{collection_id}'")

    def is_loaded(self, collection_id: str) -> bool:
        return collection_id in self._loaded

    def reload(self, collection_id: str) -> Dataset:
        """Drop the cached copy and fetch again."""
        self._loaded.pop(collection_id, None)
        return self[collection_id]

    def replace(self, collection_id: str, dataset: Dataset) -> None:
        """Install an updated Dataset (optimistic update after a write)."""
        if collection_id not in self._cfg_by_id:
            raise KeyError(f"Unknown collection '{collection_id}'")
        self._loaded[collection_id] = dataset
