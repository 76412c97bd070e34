import logging
from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from ...exceptions import PortalError
from ...extensions import db
from . import errors_bp

log = logging.getLogger(__name__)


# Domain errors raised by services and route gates
@errors_bp.app_errorhandler(PortalError)
def err_portal(e: PortalError):
    if e.status_code >= 500:
        try:
            db.session.rollback()
        except Exception:
            log.exception("rollback after %s failed", e.code)
        log.error("%s on %s %s", e.code, request.method, request.path)
        # Don't leak internals
        return jsonify({"error": e.code, "message": "Server error."}), e.status_code
    return jsonify(e.to_dict()), e.status_code


# Fallback for uncaught HTTPException (404 routing, 405, 413, ...)
@errors_bp.app_errorhandler(HTTPException)
def err_http(e: HTTPException):
    return jsonify({"error": e.name.replace(" ", ""), "message": e.description}), e.code


# Last-resort: any other Exception
@errors_bp.app_errorhandler(Exception)
def err_unexpected(e):
    try:
        db.session.rollback()
    except Exception:
        log.exception("rollback after unexpected error failed")
    log.exception("Unhandled error on %s %s: %s", request.method, request.path, e)
    # Don't leak internals—just a generic 500
    return jsonify({"error": "ServerError", "message": "Internal Server Error"}), 500
