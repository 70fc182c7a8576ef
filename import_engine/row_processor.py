"""
import_engine.row_processor - Turn one parsed row into a TrafficRecord.

Single-responsibility: given the field list of a row, the resolved column
map and the batch number, either return a TrafficRecord ready to be added,
or raise RowError.
"""

from __future__ import annotations

from typing import Optional, Sequence

from db.models import TrafficRecord
from import_engine.errors import RowError
from import_engine.field_map import REQUIRED_FIELDS
from import_engine.normalizer import (
    parse_publish_time, to_count, to_optional_count, to_rate,
)
from import_engine.reconciler import AccountReconciler

_FIELD_LABELS = {
    "account_name": "account name",
    "platform": "platform",
}


class RowProcessor:

    def __init__(
        self,
        columns: dict[str, int],
        reconciler: AccountReconciler,
        batch_no: str,
        account_id: Optional[int] = None,
    ):
        self._columns = columns
        self._reconciler = reconciler
        self._batch_no = batch_no
        # A fixed account makes the account/platform columns irrelevant.
        self._account_id = account_id
        if account_id is None:
            self._missing = [f for f in REQUIRED_FIELDS if f not in columns]
        else:
            self._missing = []

    def process(self, fields: Sequence[str]) -> TrafficRecord:
        """Validate one row, reconcile its account, build the record."""
        if self._missing:
            labels = ", ".join(_FIELD_LABELS[f] for f in self._missing)
            raise RowError(f"no column for {labels}")

        if self._account_id is not None:
            account_id = self._account_id
        else:
            account_id = self._reconciler.resolve(
                self._get(fields, "platform"),
                self._get(fields, "account_name"),
                remark=self._get(fields, "remark"),
            )
        publish_date, published_at = parse_publish_time(self._get(fields, "publish_time"))

        return TrafficRecord(
            account_id=account_id,
            content_title=self._get(fields, "content_title") or None,
            content_type=self._get(fields, "content_type") or None,
            content_url=self._get(fields, "content_url") or None,
            publish_date=publish_date,
            published_at=published_at,
            views=to_count(self._get(fields, "views")),
            likes=to_count(self._get(fields, "likes")),
            comments=to_count(self._get(fields, "comments")),
            shares=to_count(self._get(fields, "shares")),
            saves=to_count(self._get(fields, "saves")),
            recommends=to_optional_count(self._get(fields, "recommends")),
            completion_rate=to_rate(self._get(fields, "completion_rate")),
            import_batch=self._batch_no,
        )

    def _get(self, fields: Sequence[str], name: str) -> Optional[str]:
        """Cell text for a canonical field; short rows read as blank."""
        idx = self._columns.get(name)
        if idx is None or idx >= len(fields):
            return ""
        return fields[idx]
