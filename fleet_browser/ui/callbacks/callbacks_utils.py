from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from fleet_browser.core.dataset import Dataset
from fleet_browser.core.exceptions import LoadError
from fleet_browser.core.query import Query

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "טעינת הנתונים נכשלה. בדקו את החיבור ונסו לרענן."


def get_dataset(ctx: AppConfig, collection_id: Optional[str]) -> Tuple[Optional[Dataset], Optional[str]]:
    """(dataset, None) on success, (None, user-facing message) when it cannot be loaded."""
    if not collection_id:
        return None, None
    try:
        return ctx.datasets[collection_id], None
    except KeyError:
        return None, f"מאגר לא מוכר: {collection_id}"
    except LoadError:
        logger.exception("Collection load failed", extra={"collection": collection_id})
        return None, LOAD_ERROR_MESSAGE


def query_from_store(data: Optional[Dict[str, Any]], collection_id: Optional[str]) -> Query:
    """
    The stored filter Query when it belongs to collection_id; an empty Query
    otherwise (the store lags one callback behind a collection switch).
    """
    if not isinstance(data, dict) or data.get("collection") != collection_id:
        return Query()
    try:
        return Query.from_dict(data.get("query"))
    except (TypeError, ValueError, AttributeError):
        logger.exception("Invalid query state: %r", data)
        return Query()
