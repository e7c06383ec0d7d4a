"""Case analysis API: analyze, next steps, answer, health, status placeholder."""
from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from caselens.analysis import AnswerContext, CaseProcessor, InvalidInputError
from caselens.llm import LLMService

bp = Blueprint("cases", __name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _build_processor() -> CaseProcessor:
    """Fresh service and processor per request; credentials come from app config."""
    ext = current_app.extensions["caselens"]
    llm = LLMService(ext["llm_settings"], client=ext["llm_client"])
    return CaseProcessor(llm, settings=ext["processing_settings"])


@bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "healthy", "timestamp": _timestamp()})


@bp.route("/api/analyze-case", methods=["POST"])
async def analyze_case():
    """POST /api/analyze-case. Body: caseText."""
    data = _json_body()
    case_text = data.get("caseText")
    analysis = await _build_processor().process_case(case_text)
    return jsonify(
        {
            "message": "Case analysis completed successfully",
            "analysis": analysis.model_dump(by_alias=True),
            "metadata": {
                "timestamp": _timestamp(),
                "textLength": len(case_text),
                "confidenceScore": analysis.confidence,
                "chunkCount": analysis.chunk_count,
            },
        }
    )


@bp.route("/api/next-steps", methods=["POST"])
async def next_steps():
    """POST /api/next-steps. Body: caseText."""
    data = _json_body()
    case_text = data.get("caseText")
    analysis = await _build_processor().process_next_steps(case_text)
    return jsonify(
        {
            "message": "Next steps analysis successful",
            "analysis": analysis.model_dump(by_alias=True),
            "metadata": {
                "timestamp": _timestamp(),
                "textLength": len(case_text),
                "confidenceScore": analysis.confidence,
            },
        }
    )


@bp.route("/api/answer", methods=["POST"])
async def answer():
    """POST /api/answer. Body: context {summary, nextSteps, question?}."""
    data = _json_body()
    raw_context = data.get("context")
    if not isinstance(raw_context, dict):
        raise InvalidInputError("context is required")
    try:
        context = AnswerContext.model_validate(raw_context)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid context: {e.error_count()} error(s)") from e
    result = await _build_processor().answer_questions(context)
    return jsonify(
        {
            "message": "Answer given",
            "analysis": result.model_dump(by_alias=True),
            "metadata": {
                "timestamp": _timestamp(),
                "textLength": len(context.summary) + sum(len(s) for s in context.next_steps),
                "confidenceScore": result.confidence,
            },
        }
    )


@bp.route("/api/analysis-status/<analysis_id>", methods=["GET"])
def analysis_status(analysis_id: str):
    return (
        jsonify(
            {
                "error": "Not implemented",
                "message": "Status checking will be implemented in future versions",
            }
        ),
        501,
    )
