"""
import_engine.reconciler - Map (platform, account name) pairs to account ids.

One AccountReconciler lives for exactly one import call.  Its cache makes
sure two rows naming the same account create at most one Account, and it
is never shared between calls so a failed import cannot leak state into
another.
"""

from __future__ import annotations

import logging
from typing import Optional

from import_engine.errors import RowError
from import_engine.field_map import platform_from_label
from import_engine.store import ImportStore

logger = logging.getLogger(__name__)


class AccountReconciler:

    def __init__(self, store: ImportStore, project_id: Optional[int] = None):
        self._store = store
        self._project_id = project_id
        self._cache: dict[tuple[str, str], int] = {}
        self._row_created: list[tuple[str, str]] = []
        self.created = 0

    def resolve(
        self,
        platform_label: str,
        account_name: str,
        remark: Optional[str] = None,
    ) -> int:
        """
        Return the id of the account, creating it on first sight.
        Raises RowError for a blank name or an unknown platform label.
        """
        name = (account_name or "").strip()
        if not name:
            raise RowError("missing account name")
        label = (platform_label or "").strip()
        if not label:
            raise RowError("missing platform")
        platform = platform_from_label(label)
        if platform is None:
            raise RowError(f"unrecognized platform: {label}")

        key = (platform.value, name)
        if key in self._cache:
            return self._cache[key]

        account = self._store.find_account(platform.value, name)
        if account is None:
            account = self._store.create_account(
                platform.value, name,
                remark=remark or None,
                project_id=self._project_id,
            )
            self._row_created.append(key)
            self.created += 1
            logger.info("created account %s/%s (id=%s)", platform.value, name, account.id)

        self._cache[key] = account.id
        return account.id

    # ── Row bookkeeping ────────────────────────────────────────────────

    def begin_row(self) -> None:
        self._row_created = []

    def abort_row(self) -> None:
        """Forget accounts created by a row whose savepoint was rolled back."""
        for key in self._row_created:
            self._cache.pop(key, None)
        self.created -= len(self._row_created)
        self._row_created = []
