from __future__ import annotations

import csv
import logging
from datetime import datetime
from typing import Mapping, Optional, Sequence

import pandas as pd

from fleet_browser.core import search_engine
from fleet_browser.core.dataset import Dataset
from fleet_browser.core.query import Query
from fleet_browser.core.records import Record, as_text

logger = logging.getLogger(__name__)

# Excel only detects UTF-8 (and so shows Hebrew) when the file starts with a BOM.
CSV_ENCODING = "utf-8-sig"


def records_to_csv(records: Sequence[Record], fields: Sequence[str]) -> str:
    """
    CSV text: a header row of `fields`, then one row per record.

    Values use the display string representation and are quoted per RFC 4180
    (embedded commas, quotes and newlines survive a round trip).
    """
    rows = [[as_text(r.get(f)) for f in fields] for r in records]
    df = pd.DataFrame(rows, columns=list(fields), dtype=object)
    return df.to_csv(index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")


class ExportService:
    """
    Exports the records currently matching a Query.
    Stateless: re-applies the query to the resident dataset on each call.
    """

    def __init__(self, *, datasets: Mapping[str, Dataset]) -> None:
        self._datasets = datasets

    def export_csv(self, collection_id: str, query: Optional[Query] = None) -> bytes:
        ds = self._datasets[collection_id]
        records = search_engine.apply(ds, query or Query())
        text = records_to_csv(records, ds.fields)

        logger.info(
            "CSV export generated",
            extra={"collection": collection_id, "n_records": len(records), "n_fields": len(ds.fields)},
        )
        return text.encode(CSV_ENCODING)

    @staticmethod
    def filename(collection_id: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now()
        return f"{collection_id}_{now:%Y-%m-%d}.csv"
