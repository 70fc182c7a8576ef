"""
api.routes_import - Traffic upload endpoints.

  POST /api/v1/traffic/import-csv   rows name their own account and platform
  POST /api/v1/traffic/import       every row belongs to one given account
"""

from __future__ import annotations

import logging
from pathlib import PurePath

from flask import request, jsonify

import config
from api import api_bp
from api.params import arg_int
from db import get_session
from import_engine import ImportStore, run_import
from services.account_service import AccountService

logger = logging.getLogger(__name__)


def _upload():
    """Return ``(file_name, content)`` or an error response tuple."""
    f = request.files.get("file")
    if not f or not f.filename:
        return None, (jsonify({"error": "no file in upload"}), 400)

    if PurePath(f.filename).suffix.lower() not in config.IMPORT_EXTENSIONS:
        return None, (jsonify({"error": "only .csv and .xlsx files can be imported"}), 400)
    return (f.filename, f.read()), None


@api_bp.route("/traffic/import-csv", methods=["POST"])
def api_import_traffic():
    """
    POST /api/v1/traffic/import-csv

    Multipart: field name 'file' (.csv or .xlsx), optional 'projectId'
    (owner of accounts created by the import) and 'userId' (caller).
    """
    upload, error = _upload()
    if error:
        return error
    file_name, content = upload

    project_id = arg_int("projectId", request.form)
    user_id = arg_int("userId", request.form)

    session = get_session()
    try:
        if project_id is not None and not AccountService.project_exists(session, project_id):
            return jsonify({"error": f"project {project_id} not found"}), 404

        result = run_import(
            ImportStore(session), content,
            file_name=file_name, project_id=project_id, user_id=user_id,
        )
        return jsonify(result.to_dict())
    finally:
        session.close()


@api_bp.route("/traffic/import", methods=["POST"])
def api_import_account_traffic():
    """
    POST /api/v1/traffic/import

    Multipart: 'file' (.csv or .xlsx), required 'accountId', optional
    'userId'.  Account and platform columns in the file are ignored.
    """
    upload, error = _upload()
    if error:
        return error
    file_name, content = upload

    account_id = arg_int("accountId", request.form)
    if account_id is None:
        return jsonify({"error": "accountId is required"}), 400
    user_id = arg_int("userId", request.form)

    session = get_session()
    try:
        if AccountService.get(session, account_id) is None:
            return jsonify({"error": f"account {account_id} not found"}), 404

        result = run_import(
            ImportStore(session), content,
            file_name=file_name, account_id=account_id, user_id=user_id,
        )
        return jsonify(result.to_dict())
    finally:
        session.close()
