"""
db - Database layer.

Public API:
    init_db() / dispose_db()  → engine lifecycle
    get_session()             → new Session
    Project, Account, TrafficRecord, ImportBatch → ORM models
"""

from db.engine import init_db, dispose_db, get_session     # noqa: F401
from db.models import (                                      # noqa: F401
    Base, Platform, Project, Account, TrafficRecord, ImportBatch,
)
