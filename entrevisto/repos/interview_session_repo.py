"""
Persistence for interview sessions.

Every state change is a single conditional UPDATE so that concurrent requests and
out-of-order provider webhooks cannot move a session backwards.
"""
import logging

from sqlalchemy import text
from sqlalchemy.orm import Session, joinedload

from entrevisto.core.security import generate_id
from entrevisto.models.application import Application
from entrevisto.models.interview_session import (
    ABANDONABLE_STATUSES,
    CALL_ENDABLE_STATUSES,
    InterviewSession,
    InterviewStatus,
)
from entrevisto.models.job import Job

logger = logging.getLogger(__name__)


def get_by_id(db: Session, session_id: str) -> InterviewSession | None:
    return db.query(InterviewSession).filter(InterviewSession.id == session_id).first()


def get_by_application(db: Session, application_id: str) -> InterviewSession | None:
    return db.query(InterviewSession).filter(InterviewSession.application_id == application_id).first()


def get_with_context(db: Session, session_id: str) -> InterviewSession | None:
    """Session with application -> resume and application -> job loaded."""
    return (
        db.query(InterviewSession)
        .options(
            joinedload(InterviewSession.application).joinedload(Application.resume),
            joinedload(InterviewSession.application).joinedload(Application.job),
        )
        .filter(InterviewSession.id == session_id)
        .first()
    )


def get_owned(db: Session, session_id: str, candidate_id: str) -> InterviewSession | None:
    return (
        db.query(InterviewSession)
        .join(Application, InterviewSession.application_id == Application.id)
        .filter(InterviewSession.id == session_id, Application.candidate_id == candidate_id)
        .first()
    )


def list_for_candidate(db: Session, candidate_id: str) -> list[InterviewSession]:
    return (
        db.query(InterviewSession)
        .join(Application, InterviewSession.application_id == Application.id)
        .options(joinedload(InterviewSession.application).joinedload(Application.job).joinedload(Job.company))
        .filter(Application.candidate_id == candidate_id)
        .order_by(InterviewSession.created_at.desc())
        .all()
    )


def insert_or_get(db: Session, application_id: str, session_type: str = "JOB_APPLICATION") -> InterviewSession:
    """Create the PENDING session for an application unless one exists; return the stored row."""
    result = db.execute(
        text("""
            INSERT INTO interview_sessions (id, application_id, type, status, created_at)
            VALUES (:id, :application_id, :type, :status, now())
            ON CONFLICT (application_id) DO NOTHING
        """),
        {
            "id": generate_id(),
            "application_id": application_id,
            "type": session_type,
            "status": InterviewStatus.PENDING.value,
        },
    )
    db.commit()
    if result.rowcount:
        logger.info("Interview session created for application=%s", application_id)
    return get_by_application(db, application_id)


def claim_call(db: Session, session_id: str, claim_id: str) -> bool:
    """Take the right to create the provider call. Only one caller wins per PENDING session."""
    updated = (
        db.query(InterviewSession)
        .filter(
            InterviewSession.id == session_id,
            InterviewSession.status == InterviewStatus.PENDING.value,
            InterviewSession.call_claim_id.is_(None),
        )
        .update({InterviewSession.call_claim_id: claim_id}, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def release_claim(db: Session, session_id: str, claim_id: str) -> bool:
    updated = (
        db.query(InterviewSession)
        .filter(InterviewSession.id == session_id, InterviewSession.call_claim_id == claim_id)
        .update({InterviewSession.call_claim_id: None}, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def mark_call_started(db: Session, session_id: str, claim_id: str, call_id: str) -> bool:
    """PENDING -> IN_PROGRESS for the claim holder; stores the provider call id."""
    updated = (
        db.query(InterviewSession)
        .filter(
            InterviewSession.id == session_id,
            InterviewSession.call_claim_id == claim_id,
            InterviewSession.status == InterviewStatus.PENDING.value,
        )
        .update(
            {
                InterviewSession.vapi_call_id: call_id,
                InterviewSession.status: InterviewStatus.IN_PROGRESS.value,
                InterviewSession.call_claim_id: None,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return updated == 1


def mark_call_ended(
    db: Session,
    call_id: str,
    transcript: str | None,
    ended_reason: str | None = None,
) -> int:
    """
    Move the session bound to a provider call id into ANALYSIS_PENDING, storing the transcript when given.
    Returns the number of sessions updated (0 when no session carries that call id yet).
    """
    values = {InterviewSession.status: InterviewStatus.ANALYSIS_PENDING.value}
    # a later event without a transcript must not erase one stored by an earlier event
    if transcript is not None:
        values[InterviewSession.transcript] = transcript
    if ended_reason is not None:
        values[InterviewSession.ended_reason] = ended_reason
    updated = (
        db.query(InterviewSession)
        .filter(
            InterviewSession.vapi_call_id == call_id,
            InterviewSession.status.in_(CALL_ENDABLE_STATUSES),
        )
        .update(values, synchronize_session=False)
    )
    db.commit()
    return updated


def abandon(db: Session, session_id: str) -> bool:
    """Reset an unfinished session to PENDING so a new provider call can be issued."""
    updated = (
        db.query(InterviewSession)
        .filter(
            InterviewSession.id == session_id,
            InterviewSession.status.in_(ABANDONABLE_STATUSES),
        )
        .update(
            {
                InterviewSession.status: InterviewStatus.PENDING.value,
                InterviewSession.vapi_call_id: None,
                InterviewSession.call_claim_id: None,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return updated == 1
