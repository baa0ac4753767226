"""Error taxonomy shared by the admission pipeline and its HTTP surface.

Every error carries a stable ``kind`` and a human readable message; the
blueprint-level handler in :func:`register_error_handlers` renders both.
"""
import logging

from flask import jsonify

from blindhire.extensions import db

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    kind = "PipelineError"
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.kind, "message": self.message}


class NotFound(PipelineError):
    kind = "NotFound"
    status_code = 404


class Expired(PipelineError):
    """Job past its deadline; rendered as 410 so clients can show "closed"."""
    kind = "Expired"
    status_code = 410


class GateNotSatisfied(PipelineError):
    kind = "GateNotSatisfied"
    status_code = 403


class AlreadySubmitted(PipelineError):
    kind = "AlreadySubmitted"
    status_code = 400


class NoReattempt(PipelineError):
    kind = "NoReattempt"
    status_code = 403


class Duplicate(PipelineError):
    kind = "Duplicate"
    status_code = 400


class Unauthorized(PipelineError):
    kind = "Unauthorized"
    status_code = 403


class ValidationError(PipelineError):
    kind = "ValidationError"
    status_code = 400


def register_error_handlers(app):
    @app.errorhandler(PipelineError)
    def handle_pipeline_error(error):
        db.session.rollback()
        logger.info(f"{error.kind}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "NotFound", "message": "Resource not found"}), 404

    @app.errorhandler(413)
    def handle_too_large(error):
        logger.warning("payload too large")
        return jsonify({
            "error": "ValidationError",
            "message": "Payload too large. Reduce request size and try again.",
        }), 413

    @app.errorhandler(500)
    def handle_internal_error(error):
        db.session.rollback()
        logger.exception(f"Unhandled error: {error}")
        return jsonify({"error": "InternalError", "message": "Internal server error"}), 500
