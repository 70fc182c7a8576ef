"""
import_engine.errors - Exceptions raised by the import pipeline.
"""


class ImportFileError(Exception):
    """The upload as a whole cannot be imported (empty, no header, bad format)."""


class RowError(Exception):
    """Raised when a single row cannot be imported."""
