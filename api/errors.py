"""
api.errors - JSON error handlers for the API blueprint.
"""

import logging

from flask import jsonify

from api import api_bp
from import_engine import ImportFileError

logger = logging.getLogger(__name__)


def _message(e, default: str) -> str:
    desc = getattr(e, "description", None)
    if desc and desc != getattr(type(e), "description", None):
        return desc
    return default


@api_bp.errorhandler(ImportFileError)
def api_import_rejected(e):
    return jsonify({"error": str(e)}), 400


@api_bp.errorhandler(404)
def api_not_found(e):
    return jsonify({"error": _message(e, "not found")}), 404


@api_bp.errorhandler(400)
def api_bad_request(e):
    return jsonify({"error": _message(e, "bad request")}), 400


@api_bp.errorhandler(413)
def api_too_large(_e):
    return jsonify({"error": "upload too large"}), 413


@api_bp.errorhandler(500)
def api_server_error(e):
    logger.error("unhandled API error: %s", getattr(e, "original_exception", e))
    return jsonify({"error": "internal server error"}), 500
