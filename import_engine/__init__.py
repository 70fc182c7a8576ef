"""
import_engine - Traffic-data import pipeline (CSV / .xlsx).

Public API:
    run_import(store, file_content, file_name=, project_id=, user_id=) → ImportResult
    ImportStore(session)   → persistence port handed to run_import
"""

from import_engine.errors import ImportFileError, RowError     # noqa: F401
from import_engine.importer import run_import                  # noqa: F401
from import_engine.report import ImportResult                  # noqa: F401
from import_engine.store import ImportStore                    # noqa: F401
