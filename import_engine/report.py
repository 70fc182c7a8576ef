"""
import_engine.report - Structured result of a traffic import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import config


@dataclass
class ImportResult:
    batch_no: str
    total_rows: int = 0
    success_rows: int = 0
    failed_rows: int = 0
    accounts_created: int = 0
    errors: list[str] = field(default_factory=list)   # "row <n>: <reason>"

    def add_success(self):
        self.total_rows += 1
        self.success_rows += 1

    def add_error(self, row: int, reason: str):
        self.total_rows += 1
        self.failed_rows += 1
        self.errors.append(f"row {row}: {reason}")

    def error_log(self) -> str | None:
        """Errors kept on the batch record."""
        kept = self.errors[:config.IMPORT_ERROR_LOG_LIMIT]
        return "\n".join(kept) if kept else None

    def to_dict(self) -> dict:
        return {
            "batchNo": self.batch_no,
            "totalRows": self.total_rows,
            "successRows": self.success_rows,
            "failedRows": self.failed_rows,
            "errors": self.errors[:config.IMPORT_ERROR_RESULT_LIMIT],
        }
