"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → field_map → row_processor → store and produces
a structured ImportResult.  Every row is processed on its own: a failing
row is rolled back to its savepoint, counted and described, and the loop
moves on.  One ImportBatch summary is written at the end and the whole
run is committed once.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from db.models import ImportBatch
from import_engine.csv_parser import read_table
from import_engine.errors import RowError
from import_engine.field_map import resolve_headers
from import_engine.reconciler import AccountReconciler
from import_engine.report import ImportResult
from import_engine.row_processor import RowProcessor
from import_engine.store import ImportStore

logger = logging.getLogger(__name__)


def new_batch_no() -> str:
    """Time-based batch number, e.g. IMP1718000000000."""
    return f"IMP{int(time.time() * 1000)}"


def run_import(
    store: ImportStore,
    file_content: str | bytes,
    *,
    file_name: str = "",
    project_id: Optional[int] = None,
    account_id: Optional[int] = None,
    user_id: Optional[int] = None,
) -> ImportResult:
    """
    Import a CSV / .xlsx traffic export.

    Parameters
    ----------
    store : persistence port the rows are written through
    file_content : raw upload (bytes or already-decoded str)
    file_name : original upload name, kept on the batch record
    project_id : owning project for accounts created by this import
    account_id : when given, every row belongs to this existing account and
                 the account / platform columns are not read
    user_id : caller, kept on the batch record

    Raises ImportFileError before touching the database when the file is
    empty or has no header row.
    """
    headers, rows = read_table(file_content, file_name)
    columns = resolve_headers(headers)

    result = ImportResult(batch_no=new_batch_no())
    reconciler = AccountReconciler(store, project_id=project_id)
    processor = RowProcessor(columns, reconciler, result.batch_no, account_id=account_id)

    logger.info(
        "import %s started: file=%r rows=%d columns=%s account=%s",
        result.batch_no, file_name, len(rows), sorted(columns), account_id,
    )

    try:
        for line_no, fields in rows:
            reconciler.begin_row()
            try:
                with store.row_scope():
                    store.add_traffic(processor.process(fields))
            except RowError as exc:
                reconciler.abort_row()
                result.add_error(line_no, str(exc))
                logger.warning("import %s row %d skipped: %s", result.batch_no, line_no, exc)
            except Exception as exc:
                reconciler.abort_row()
                result.add_error(line_no, f"unexpected: {exc}")
                logger.warning("import %s row %d failed: %r", result.batch_no, line_no, exc)
            else:
                result.add_success()

        result.accounts_created = reconciler.created
        store.add_batch(ImportBatch(
            type="traffic",
            batch_no=result.batch_no,
            file_name=file_name or None,
            total_rows=result.total_rows,
            success_rows=result.success_rows,
            failed_rows=result.failed_rows,
            status="completed",
            error_log=result.error_log(),
            created_by=user_id,
        ))
        store.commit()
    except Exception:
        store.rollback()
        logger.exception("import %s aborted", result.batch_no)
        raise

    logger.info(
        "import %s completed: %d ok, %d failed / %d rows, %d new accounts",
        result.batch_no, result.success_rows, result.failed_rows,
        result.total_rows, result.accounts_created,
    )
    return result
