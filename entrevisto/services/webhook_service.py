"""
Dispatch of Vapi server messages.

The provider always gets a 2xx. Processing errors are logged and acknowledged; function calls
answer with an inline error result instead.
"""
import json
import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from entrevisto.repos import interview_session_repo
from entrevisto.services.resume_ingest_service import load_parsed_resume

logger = logging.getLogger(__name__)

RECEIVED = {"received": True}
RESUME_DATA_FUNCTION = "get_candidate_resume_data"
RESUME_NOT_FOUND = {"error": "Resume data not found for this session."}
RETRIEVAL_FAILED = {"error": "Internal server error during data retrieval."}


def function_result(name: str, result: dict) -> dict:
    return {"functionCall": {"name": name, "result": json.dumps(result, separators=(",", ":"))}}


def get_candidate_resume_data(db: Session, parameters: dict) -> dict:
    """Resume and job context for the session named in the function-call parameters."""
    session_id = parameters.get("interviewSessionId")
    if not session_id:
        logger.info("Function call %s without interviewSessionId", RESUME_DATA_FUNCTION)
        return RESUME_NOT_FOUND
    session = interview_session_repo.get_with_context(db, str(session_id))
    application = session.application if session else None
    resume = application.resume if application else None
    if resume is None or not (resume.parsed_data or resume.raw_text):
        logger.info("No resume data for interview session=%s", session_id)
        return RESUME_NOT_FOUND

    parsed = load_parsed_resume(resume.parsed_data)
    job = application.job
    return {
        "parsedResume": parsed.model_dump() if parsed else None,
        "resumeText": resume.raw_text,
        "jobTitle": (job.title if job else None) or "unknown job",
        "message": "Resume data retrieved successfully. Use this to ask questions.",
    }


FUNCTION_HANDLERS: dict[str, Callable[[Session, dict], dict]] = {
    RESUME_DATA_FUNCTION: get_candidate_resume_data,
}


def handle_function_call(db: Session, message: dict) -> dict:
    function_call = message.get("functionCall") or {}
    name = function_call.get("name")
    handler = FUNCTION_HANDLERS.get(name)
    if handler is None:
        logger.info("Ignoring unknown function call: %s", name)
        return RECEIVED
    parameters = function_call.get("parameters")
    if not isinstance(parameters, dict):
        parameters = {}
    try:
        return function_result(name, handler(db, parameters))
    except Exception as e:
        logger.exception("Function call %s failed: %s", name, e)
        return function_result(name, RETRIEVAL_FAILED)


def _call_id(message: dict) -> str | None:
    call = message.get("call")
    if isinstance(call, dict) and call.get("id"):
        return str(call["id"])
    return None


def record_call_ended(db: Session, call_id: str | None, transcript: str | None, ended_reason: str | None = None) -> int:
    if not call_id:
        logger.warning("Call-ended event without call id; dropped")
        return 0
    updated = interview_session_repo.mark_call_ended(db, call_id, transcript, ended_reason)
    if updated:
        logger.info("Interview call=%s ended; session moved to ANALYSIS_PENDING", call_id)
    else:
        # The call id may not be recorded yet, or the session was abandoned or already analysed.
        logger.warning("Call-ended event for unknown or finished call=%s; dropped", call_id)
    return updated


def handle_status_update(db: Session, message: dict) -> None:
    if message.get("status") != "call-ended":
        logger.debug("Ignoring status-update %s", message.get("status"))
        return
    call = message.get("call") or {}
    record_call_ended(db, _call_id(message), call.get("transcript"))


def handle_end_of_call_report(db: Session, message: dict) -> None:
    artifact = message.get("artifact") or {}
    transcript = message.get("transcript") or artifact.get("transcript")
    record_call_ended(db, _call_id(message), transcript, message.get("endedReason"))


def handle_event(db: Session, event) -> dict:
    """Process one provider event and return the response body (always sent with HTTP 200)."""
    message = event.get("message") if isinstance(event, dict) else None
    if not isinstance(message, dict) or not message.get("type"):
        return RECEIVED

    message_type = message["type"]
    if message_type == "function-call":
        return handle_function_call(db, message)
    try:
        if message_type == "status-update":
            handle_status_update(db, message)
        elif message_type == "end-of-call-report":
            handle_end_of_call_report(db, message)
        else:
            logger.debug("Ignoring webhook message type %s", message_type)
    except Exception as e:
        logger.exception("Webhook %s processing failed: %s", message_type, e)
    return RECEIVED
