"""Flask application factory: settings, error handlers, request logging."""
from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from caselens.analysis import CaseAnalysisError, InvalidInputError, ProcessingSettings
from caselens.api.routes import bp
from caselens.api.settings import ServerSettings
from caselens.llm import LLMError, LLMSettings
from caselens.llm.ports import LLMClientPort

logger = logging.getLogger(__name__)

# Worst case JSON escaping: a non-BMP character as two \uXXXX escapes.
MAX_BYTES_PER_CHAR = 12
BODY_OVERHEAD_BYTES = 64 * 1024


def body_limit_for(processing_settings: ProcessingSettings) -> int:
    """Request body ceiling that admits any case text within max_text_chars."""
    return processing_settings.max_text_chars * MAX_BYTES_PER_CHAR + BODY_OVERHEAD_BYTES


def create_app(
    *,
    llm_settings: LLMSettings | None = None,
    processing_settings: ProcessingSettings | None = None,
    server_settings: ServerSettings | None = None,
    llm_client: LLMClientPort | None = None,
) -> Flask:
    """Build the app. llm_client overrides the LiteLLM client (tests inject a fake)."""
    server_settings = server_settings or ServerSettings()
    processing_settings = processing_settings or ProcessingSettings()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = server_settings.max_content_length or body_limit_for(processing_settings)
    app.extensions["caselens"] = {
        "llm_settings": llm_settings or LLMSettings(),
        "processing_settings": processing_settings,
        "llm_client": llm_client,
    }

    @app.before_request
    def log_request() -> None:
        logger.info("REQUEST %s %s", request.method, request.path)

    @app.errorhandler(InvalidInputError)
    def invalid_input(error: InvalidInputError):
        logger.info("Rejected input on %s: %s", request.path, error)
        return jsonify({"error": str(error)}), 400

    @app.errorhandler(CaseAnalysisError)
    def pipeline_error(error: CaseAnalysisError):
        logger.error("Case analysis error (%s) on %s: %s", error.code, request.path, error)
        return jsonify({"error": "Error processing case analysis", "details": str(error)}), 500

    @app.errorhandler(LLMError)
    def upstream_error(error: LLMError):
        logger.error("Upstream failure (%s) on %s: %s", error.code, request.path, error)
        return jsonify({"error": "Error processing case analysis", "details": str(error)}), 500

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        if error.code == 404:
            return jsonify({"error": "Not found", "status": 404}), 404
        return jsonify({"error": error.name, "status": error.code}), error.code

    @app.errorhandler(Exception)
    def unhandled_error(error: Exception):
        logger.exception("Unhandled error on %s", request.path)
        return jsonify({"error": "Internal server error"}), 500

    app.register_blueprint(bp)
    return app
