import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from entrevisto.database import get_db
from entrevisto.dependencies import get_current_candidate, get_vapi_client
from entrevisto.models.user import User
from entrevisto.repos.interview_session_repo import list_for_candidate
from entrevisto.schemas.interview import (
    AssistantRequest,
    AssistantResponse,
    InterviewJobSummary,
    InterviewListItem,
    InterviewSessionResponse,
    StartInterviewRequest,
    StartInterviewResponse,
)
from entrevisto.services.interview_service import (
    InterviewError,
    abandon_interview,
    create_interview_assistant,
    start_interview,
)
from entrevisto.services.vapi_client import VapiClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/interviews", tags=["interviews"])


def _to_http(e: InterviewError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e) or "Interview request failed")


def _session_to_item(session) -> InterviewListItem:
    application = session.application
    job = application.job if application else None
    return InterviewListItem(
        id=session.id,
        application_id=session.application_id,
        type=session.type,
        status=session.status,
        vapi_call_id=session.vapi_call_id,
        transcript=session.transcript,
        created_at=session.created_at,
        job=InterviewJobSummary.model_validate(job) if job else None,
    )


@router.post("/start", response_model=StartInterviewResponse)
def start(
    data: StartInterviewRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
    vapi: VapiClient = Depends(get_vapi_client),
):
    """
    Start (or resume) the AI interview for a job. Repeated requests for the same job return the
    same session and never place a second call while one is in progress.
    """
    try:
        result = start_interview(
            db,
            vapi,
            candidate_id=user.id,
            job_id=data.job_id,
            candidate_number=data.candidate_number,
        )
    except InterviewError as e:
        logger.info("Interview start rejected for candidate=%s job=%s: %s", user.id, data.job_id, e)
        raise _to_http(e) from e
    message = "Interview initiated successfully." if result.started else "Interview already initiated."
    return StartInterviewResponse(message=message, call_id=result.call_id, session_id=result.session_id)


@router.post("/assistant", response_model=AssistantResponse)
def create_assistant(
    data: AssistantRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
    vapi: VapiClient = Depends(get_vapi_client),
):
    """Create a provider assistant primed with the job and the candidate's resume."""
    try:
        assistant_id = create_interview_assistant(
            db,
            vapi,
            candidate_id=user.id,
            job_id=data.job_id,
            resume_id=data.resume_id,
        )
    except InterviewError as e:
        raise _to_http(e) from e
    return AssistantResponse(assistant_id=assistant_id)


@router.post("/{session_id}/abandon", response_model=InterviewSessionResponse)
def abandon(
    session_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    try:
        return abandon_interview(db, candidate_id=user.id, session_id=session_id)
    except InterviewError as e:
        raise _to_http(e) from e


@router.get("", response_model=list[InterviewListItem])
def list_interviews(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    return [_session_to_item(s) for s in list_for_candidate(db, user.id)]
