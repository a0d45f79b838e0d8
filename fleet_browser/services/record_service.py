from __future__ import annotations

import logging
from typing import Any, Mapping

from fleet_browser.core.exceptions import LoadError, NetworkError, PermissionDeniedError
from fleet_browser.core.records import as_text
from fleet_browser.services.dataset_service import normalise_snapshot
from fleet_browser.services.identity import Capability
from fleet_browser.services.record_store import RecordStore, join_path

logger = logging.getLogger(__name__)

STATUS_FIELD = "סטטוס"
STATUS_RETAINED = "מרותק"
STATUS_INACTIVE = "לא פעיל"


class RecordService:
    """
    Writes against the record store, gated by the caller's Capability.

    Every write is a field-level patch; records are never overwritten whole,
    so concurrent edits to other fields of the same record survive.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    @staticmethod
    def _require_edit(capability: Capability, action: str) -> None:
        if not capability.can_edit:
            logger.warning("Write refused without edit capability", extra={"action": action})
            raise PermissionDeniedError(f"Signing in is required to {action}")

    def update(
        self,
        path: str,
        record_id: str,
        patch: Mapping[str, Any],
        capability: Capability,
    ) -> None:
        """
        PATCH the given fields of {path}/{record_id}. An empty patch is a no-op.

        :raises PermissionDeniedError: no edit capability or the backend denied the write
        :raises NetworkError: any other backend failure
        """
        self._require_edit(capability, "edit records")
        if not patch:
            return

        self.store.update(join_path(path, record_id), dict(patch))
        logger.info(
            "Record updated",
            extra={"path": path, "record_id": str(record_id), "fields": sorted(patch)},
        )

    def check_database(self, path: str) -> int:
        """
        Number of records stored at path (0 when empty or missing).

        :raises LoadError: the store could not be read
        """
        try:
            snapshot = self.store.get(path)
        except (PermissionDeniedError, NetworkError) as e:
            raise LoadError(f"Database check failed for {path}: {e}") from e

        records, _ = normalise_snapshot(snapshot)
        logger.info("Database check", extra={"path": path, "n_records": len(records)})
        return len(records)

    def release_retained(
        self,
        path: str,
        capability: Capability,
        status_field: str = STATUS_FIELD,
        from_status: str = STATUS_RETAINED,
        to_status: str = STATUS_INACTIVE,
    ) -> int:
        """
        Set every record whose status is `from_status` to `to_status`, as a
        single multi-path patch. Returns the number of records changed.
        """
        self._require_edit(capability, "release retained vehicles")

        records, keys = normalise_snapshot(self.store.get(path))
        patch = {
            f"{key}/{status_field}": to_status
            for key, record in zip(keys, records)
            if as_text(record.get(status_field)) == from_status
        }
        if patch:
            self.store.update(path, patch)

        logger.info("Released retained records", extra={"path": path, "n_released": len(patch)})
        return len(patch)
