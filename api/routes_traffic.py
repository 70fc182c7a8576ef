"""
api.routes_traffic - /api/v1/traffic read endpoints.
"""

from flask import request, jsonify

from api import api_bp
from api.params import arg_date, arg_int, page_request
from db import get_session
from services.traffic_service import TREND_GROUPS, TrafficFilter, TrafficService


def _traffic_filter() -> TrafficFilter:
    return TrafficFilter(
        account_id=arg_int("accountId"),
        project_id=arg_int("projectId"),
        platform=request.args.get("platform", "").strip() or None,
        start_date=arg_date("startDate"),
        end_date=arg_date("endDate"),
    )


@api_bp.route("/traffic")
def list_traffic():
    """
    GET /api/v1/traffic?accountId=&projectId=&platform=&startDate=&endDate=&page=&pageSize=
    """
    filt = _traffic_filter()
    page = page_request()
    session = get_session()
    try:
        return jsonify(TrafficService.search(session, filt, page))
    finally:
        session.close()


@api_bp.route("/traffic/dashboard")
def traffic_dashboard():
    """GET /api/v1/traffic/dashboard  (same filters as the listing)"""
    filt = _traffic_filter()
    session = get_session()
    try:
        return jsonify(TrafficService.dashboard(session, filt))
    finally:
        session.close()


@api_bp.route("/traffic/trend")
def traffic_trend():
    """GET /api/v1/traffic/trend?groupBy=day|week|month"""
    group_by = request.args.get("groupBy", "day").strip() or "day"
    if group_by not in TREND_GROUPS:
        return jsonify({"error": f"groupBy must be one of {', '.join(TREND_GROUPS)}"}), 400

    filt = _traffic_filter()
    session = get_session()
    try:
        return jsonify(TrafficService.trend(session, filt, group_by))
    finally:
        session.close()


@api_bp.route("/traffic/import-records")
def traffic_import_records():
    """GET /api/v1/traffic/import-records?page=&pageSize="""
    page = page_request()
    session = get_session()
    try:
        return jsonify(TrafficService.import_records(session, page))
    finally:
        session.close()
