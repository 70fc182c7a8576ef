"""
api.params - Query-string parsing helpers.

Malformed values abort with 400 instead of being silently ignored.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from flask import abort, request

from services.pagination import PageRequest


def arg_int(name: str, source=None) -> Optional[int]:
    raw = (source if source is not None else request.args).get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        abort(400, description=f"{name} must be an integer")


def arg_date(name: str) -> Optional[date]:
    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        abort(400, description=f"{name} must be a date (YYYY-MM-DD)")


def page_request() -> PageRequest:
    return PageRequest.clamp(arg_int("page"), arg_int("pageSize"))
