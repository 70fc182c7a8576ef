"""
api.routes_accounts - /api/v1/accounts listing, detail, create, update, delete.
"""

from flask import request, jsonify

from api import api_bp
from api.params import arg_int, page_request
from db import get_session
from services.account_service import AccountFilter, AccountService


@api_bp.route("/accounts")
def list_accounts():
    """GET /api/v1/accounts?projectId=&platform=&keyword=&status=&page=&pageSize="""
    filt = AccountFilter(
        project_id=arg_int("projectId"),
        platform=request.args.get("platform", "").strip() or None,
        keyword=request.args.get("keyword", "").strip(),
        status=arg_int("status"),
    )
    page = page_request()
    session = get_session()
    try:
        return jsonify(AccountService.search(session, filt, page))
    finally:
        session.close()


@api_bp.route("/accounts/<int:account_id>")
def get_account(account_id: int):
    """GET /api/v1/accounts/{id}"""
    session = get_session()
    try:
        account = AccountService.get(session, account_id)
        if not account:
            return jsonify({"error": "not found"}), 404
        return jsonify(account.to_dict())
    finally:
        session.close()


@api_bp.route("/accounts", methods=["POST"])
def create_account():
    """
    POST /api/v1/accounts

    JSON body: {platform, accountName, accountId?, projectId?, followers?,
    remark?, status?}.
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        account = AccountService.create(session, data)
        session.commit()
        session.refresh(account)
        return jsonify(account.to_dict()), 201
    except ValueError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/accounts/<int:account_id>", methods=["PUT"])
def update_account(account_id: int):
    """PUT /api/v1/accounts/{id}  (JSON body with fields to update)"""
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        account = AccountService.get(session, account_id)
        if not account:
            return jsonify({"error": "not found"}), 404
        AccountService.update(session, account, data)
        session.commit()
        session.refresh(account)
        return jsonify(account.to_dict())
    except ValueError as exc:
        session.rollback()
        return jsonify({"error": str(exc)}), 400
    finally:
        session.close()


@api_bp.route("/accounts/<int:account_id>", methods=["DELETE"])
def delete_account(account_id: int):
    """DELETE /api/v1/accounts/{id}"""
    session = get_session()
    try:
        account = AccountService.get(session, account_id)
        if not account:
            return jsonify({"error": "not found"}), 404
        AccountService.delete(session, account)
        session.commit()
        return jsonify({"deleted": account_id})
    finally:
        session.close()
