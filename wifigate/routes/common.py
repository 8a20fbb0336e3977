import logging
from flask import jsonify, request

from wifigate.models import db

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """Return the request JSON object, or an empty dict for anything else."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(message: str, status_code: int):
    return jsonify({'error': message}), status_code


def store_error(e: Exception):
    """Roll back the session and report a persistence failure."""
    db.session.rollback()
    logger.error(f"Store error on {request.method} {request.path}: {e}")
    return error_response(str(e), 500)
