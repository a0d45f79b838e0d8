from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from fleet_browser.config.model import CollectionConfig, GlobalConfig
from fleet_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_DATABASE_URL = "FLEET_BROWSER_DATABASE_URL"
ENV_API_KEY = "FLEET_BROWSER_API_KEY"
ENV_CREDENTIALS = "FLEET_BROWSER_CREDENTIALS"


def _read_json(path: Path) -> dict:
    try:
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a JSON object in {path}")
    return raw


def _resolve(root: Path, raw: Optional[str]) -> Optional[Path]:
    if not raw:
        return None
    path = Path(raw)
    if path.is_absolute():
        return path
    return (root / path).resolve()


def load_global_config(root: Path, environ: Optional[Mapping[str, str]] = None) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout.

    Expected structure:

        root/
            global.json
            datasets/
                vehicles.json
                owners.json
                ...

    Each file in 'datasets/' is parsed into a CollectionConfig. Backend
    settings in global.json can be overridden from the environment:

    - FLEET_BROWSER_DATABASE_URL
    - FLEET_BROWSER_API_KEY
    - FLEET_BROWSER_CREDENTIALS (service-account file path or inline JSON)

    'snapshot_file' is resolved relative to 'root' when relative.

    :param root: Directory containing 'global.json' and 'datasets/'.
    :param environ: environment mapping (defaults to os.environ)
    :return: A GlobalConfig instance.
    :raises ConfigError: if global.json is missing or malformed, or collections clash.
    """
    environ = os.environ if environ is None else environ
    root = Path(root)

    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise ConfigError(f"File not found at {global_path}")
    raw_global = _read_json(global_path)

    collections: List[CollectionConfig] = []
    datasets_dir = root / "datasets"
    if datasets_dir.is_dir():
        for idx, config_file in enumerate(sorted(datasets_dir.glob("*.json"))):
            raw = _read_json(config_file)
            if not raw.get("path"):
                raise ConfigError(f"Collection config {config_file.name} has no 'path'")
            collections.append(CollectionConfig.from_raw(raw, source_path=config_file, index=idx))
    else:
        logger.warning("Datasets directory not found", extra={"datasets_dir": str(datasets_dir)})

    by_id: Dict[str, CollectionConfig] = {}
    for cfg in collections:
        if cfg.id in by_id:
            raise ConfigError(f"Duplicate collection id '{cfg.id}' in config")
        by_id[cfg.id] = cfg

    default_collection = raw_global.get("default_collection")
    if default_collection and default_collection not in by_id:
        raise ConfigError(f"default_collection '{default_collection}' is not a configured collection")
    if not default_collection and collections:
        default_collection = collections[0].id

    events_collection = raw_global.get("events_collection")
    if events_collection and events_collection not in by_id:
        raise ConfigError(f"events_collection '{events_collection}' is not a configured collection")

    config = GlobalConfig(
        ui_title=raw_global.get("ui_title", "Fleet Browser"),
        subtitle=raw_global.get("subtitle", ""),
        database_url=environ.get(ENV_DATABASE_URL) or raw_global.get("database_url"),
        api_key=environ.get(ENV_API_KEY) or raw_global.get("api_key"),
        credentials=environ.get(ENV_CREDENTIALS) or raw_global.get("credentials"),
        snapshot_file=_resolve(root, raw_global.get("snapshot_file")),
        default_collection=default_collection,
        events_collection=events_collection,
        collections=collections,
    )

    logger.info(
        "Global config loaded",
        extra={
            "config_root": str(root),
            "n_collections": len(collections),
            "collection_ids": sorted(by_id),
            "uses_firebase": config.uses_firebase,
        },
    )
    return config
