"""
Path-addressed access to the realtime record store.

Two implementations share the RecordStore interface:

- FirebaseRecordStore: Firebase Realtime Database through firebase_admin.db
- InMemoryRecordStore: a nested dict tree (tests, local demo snapshots)

Paths are slash-separated ("/data/data/12/סטטוס"); leading/trailing slashes
are ignored. Backend failures surface as PermissionDeniedError (access
denied) or NetworkError (anything else).
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import firebase_admin
from firebase_admin import credentials, db
from firebase_admin import exceptions as firebase_exceptions

from fleet_browser.config.model import GlobalConfig
from fleet_browser.core.exceptions import ConfigError, NetworkError, PermissionDeniedError

logger = logging.getLogger(__name__)


def split_path(path: str) -> List[str]:
    return [part for part in str(path).split("/") if part]


def join_path(*parts: Any) -> str:
    segments: List[str] = []
    for part in parts:
        segments.extend(split_path(str(part)))
    return "/" + "/".join(segments)


class RecordStore(ABC):
    """
    Abstract interface for the hosted document store.
    """

    @abstractmethod
    def get(self, path: str) -> Any:
        """Snapshot of the subtree at path; None when nothing is stored there."""
        pass

    @abstractmethod
    def set(self, path: str, value: Any) -> None:
        """Overwrite the whole subtree at path."""
        pass

    @abstractmethod
    def update(self, path: str, patch: Mapping[str, Any]) -> None:
        """
        Multi-path patch: each key of patch is a path relative to `path`,
        all of them applied as one batch. None values delete.
        """
        pass


# -----------------------------------------------------------------------------
# Firebase
# -----------------------------------------------------------------------------
def _load_credentials(raw: str) -> credentials.Certificate:
    """Service-account credentials from inline JSON or a file path."""
    text = raw.strip()
    try:
        if text.startswith("{"):
            return credentials.Certificate(json.loads(text))
        return credentials.Certificate(text)
    except (ValueError, OSError) as e:
        raise ConfigError(f"Invalid Firebase service-account credentials: {e}") from e


class FirebaseRecordStore(RecordStore):

    def __init__(self, app: firebase_admin.App):
        self._app = app

    @property
    def app(self) -> firebase_admin.App:
        return self._app

    @classmethod
    def from_config(cls, config: GlobalConfig) -> FirebaseRecordStore:
        if not config.database_url or not config.credentials:
            raise ConfigError("Firebase store needs both database_url and credentials")

        if not firebase_admin._apps:
            cred = _load_credentials(config.credentials)
            app = firebase_admin.initialize_app(cred, {"databaseURL": config.database_url})
            logger.info("Firebase app initialised", extra={"database_url": config.database_url})
        else:
            app = firebase_admin.get_app()
        return cls(app)

    def _ref(self, path: str) -> db.Reference:
        return db.reference(join_path(path), app=self._app)

    @staticmethod
    def _translate(error: firebase_exceptions.FirebaseError, op: str, path: str) -> Exception:
        if isinstance(error, (firebase_exceptions.PermissionDeniedError, firebase_exceptions.UnauthenticatedError)):
            logger.warning("Record store denied access", extra={"op": op, "path": path})
            return PermissionDeniedError(f"Access denied for {op} at '{path}'")
        logger.error("Record store request failed", extra={"op": op, "path": path, "error": str(error)})
        return NetworkError(f"Record store {op} failed at '{path}': {error}")

    def get(self, path: str) -> Any:
        try:
            return self._ref(path).get()
        except firebase_exceptions.FirebaseError as e:
            raise self._translate(e, "get", path) from e

    def set(self, path: str, value: Any) -> None:
        try:
            self._ref(path).set(value)
        except firebase_exceptions.FirebaseError as e:
            raise self._translate(e, "set", path) from e

    def update(self, path: str, patch: Mapping[str, Any]) -> None:
        if not patch:
            return
        try:
            self._ref(path).update(dict(patch))
        except firebase_exceptions.FirebaseError as e:
            raise self._translate(e, "update", path) from e


# -----------------------------------------------------------------------------
# In-memory
# -----------------------------------------------------------------------------
def _child(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        return node.get(segment)
    if isinstance(node, list) and segment.isdigit():
        index = int(segment)
        return node[index] if index < len(node) else None
    return None


def _as_mapping(node: Any) -> Dict[str, Any]:
    """Lists become index-keyed dicts when written into, like the hosted store does."""
    if isinstance(node, dict):
        return node
    if isinstance(node, list):
        return {str(i): v for i, v in enumerate(node) if v is not None}
    return {}


class InMemoryRecordStore(RecordStore):
    """
    RecordStore over a nested dict tree.

    Mirrors the hosted store's semantics where they matter to callers:
    writing None deletes, emptied parents disappear, and update() applies
    every relative path of the patch in one step.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._root: Dict[str, Any] = copy.deepcopy(data) if data else {}

    @classmethod
    def from_snapshot(cls, snapshot_file: Path) -> InMemoryRecordStore:
        """Seed from a JSON export of the database."""
        path = Path(snapshot_file)
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read snapshot file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Snapshot file {path} must hold a JSON object")
        logger.info("In-memory store seeded from snapshot", extra={"snapshot_file": str(path)})
        return cls(data)

    def get(self, path: str) -> Any:
        node: Any = self._root
        for segment in split_path(path):
            node = _child(node, segment)
            if node is None:
                return None
        return copy.deepcopy(node)

    def set(self, path: str, value: Any) -> None:
        segments = split_path(path)
        if not segments:
            self._root = _as_mapping(copy.deepcopy(value)) if value is not None else {}
            return
        self._root = self._write(self._root, segments, copy.deepcopy(value))

    def _write(self, node: Any, segments: List[str], value: Any) -> Dict[str, Any]:
        mapping = dict(_as_mapping(node))
        head, rest = segments[0], segments[1:]
        if rest:
            mapping[head] = self._write(mapping.get(head), rest, value)
            if not mapping[head]:
                del mapping[head]
        elif value is None:
            mapping.pop(head, None)
        else:
            mapping[head] = value
        return mapping

    def update(self, path: str, patch: Mapping[str, Any]) -> None:
        if not patch:
            return
        for relative, value in patch.items():
            self.set(join_path(path, relative), value)


def create_record_store(config: GlobalConfig) -> RecordStore:
    """
    Firebase when the config carries a database URL and credentials,
    otherwise an in-memory store (seeded from snapshot_file when set).
    """
    if config.uses_firebase:
        return FirebaseRecordStore.from_config(config)

    if config.snapshot_file is not None:
        return InMemoryRecordStore.from_snapshot(config.snapshot_file)

    logger.warning("No Firebase credentials or snapshot configured; starting with an empty in-memory store")
    return InMemoryRecordStore()
