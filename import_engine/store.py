"""
import_engine.store - Persistence port used by the import pipeline.

The pipeline receives an ImportStore instead of opening sessions itself,
so callers decide which database (or test double) it writes to.  All
writes are flushed immediately; commit happens once, after the batch
summary is added.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import Account, ImportBatch, TrafficRecord


class ImportStore:

    def __init__(self, session: Session):
        self.session = session

    # ── Accounts ───────────────────────────────────────────────────────

    def find_account(self, platform: str, account_name: str) -> Optional[Account]:
        stmt = (
            select(Account)
            .where(Account.platform == platform, Account.account_name == account_name)
            .order_by(Account.id)
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    def create_account(
        self,
        platform: str,
        account_name: str,
        *,
        remark: Optional[str] = None,
        project_id: Optional[int] = None,
    ) -> Account:
        account = Account(
            platform=platform,
            account_name=account_name,
            remark=remark,
            project_id=project_id,
        )
        self.session.add(account)
        self.session.flush()
        return account

    # ── Traffic / batches ──────────────────────────────────────────────

    def add_traffic(self, record: TrafficRecord) -> TrafficRecord:
        self.session.add(record)
        self.session.flush()
        return record

    def add_batch(self, batch: ImportBatch) -> ImportBatch:
        self.session.add(batch)
        self.session.flush()
        return batch

    # ── Transactions ───────────────────────────────────────────────────

    @contextmanager
    def row_scope(self) -> Iterator[None]:
        """Savepoint around one row; an exception undoes only that row."""
        with self.session.begin_nested():
            yield

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
