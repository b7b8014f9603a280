import logging

from sqlalchemy import text
from sqlalchemy.orm import Session, joinedload

from entrevisto.core.security import generate_id
from entrevisto.models.application import Application, ApplicationStatus

logger = logging.getLogger(__name__)


def get_for_candidate_and_job(db: Session, candidate_id: str, job_id: str) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.candidate_id == candidate_id, Application.job_id == job_id)
        .first()
    )


def upsert_interview_invite(db: Session, candidate_id: str, job_id: str, resume_id: str) -> Application:
    """
    Insert or update the (candidate, job) application as INTERVIEW_INVITED with the given resume.
    Uses ON CONFLICT on the unique pair so concurrent callers converge on one row.
    """
    db.execute(
        text("""
            INSERT INTO applications (id, candidate_id, job_id, resume_id, status, created_at)
            VALUES (:id, :candidate_id, :job_id, :resume_id, :status, now())
            ON CONFLICT (candidate_id, job_id)
            DO UPDATE SET status = EXCLUDED.status, resume_id = EXCLUDED.resume_id, updated_at = now()
        """),
        {
            "id": generate_id(),
            "candidate_id": candidate_id,
            "job_id": job_id,
            "resume_id": resume_id,
            "status": ApplicationStatus.INTERVIEW_INVITED.value,
        },
    )
    db.commit()
    return get_for_candidate_and_job(db, candidate_id, job_id)


def apply(db: Session, candidate_id: str, job_id: str, resume_id: str | None) -> Application:
    """Create an APPLIED application; an existing row (possibly already invited) is left as is."""
    result = db.execute(
        text("""
            INSERT INTO applications (id, candidate_id, job_id, resume_id, status, created_at)
            VALUES (:id, :candidate_id, :job_id, :resume_id, :status, now())
            ON CONFLICT (candidate_id, job_id) DO NOTHING
        """),
        {
            "id": generate_id(),
            "candidate_id": candidate_id,
            "job_id": job_id,
            "resume_id": resume_id,
            "status": ApplicationStatus.APPLIED.value,
        },
    )
    db.commit()
    if not result.rowcount:
        logger.debug("Application already exists candidate=%s job=%s", candidate_id, job_id)
    return get_for_candidate_and_job(db, candidate_id, job_id)


def list_for_job(db: Session, job_id: str) -> list[Application]:
    """Applicants of a job with their candidate, resume and interview session loaded."""
    return (
        db.query(Application)
        .options(
            joinedload(Application.candidate),
            joinedload(Application.resume),
            joinedload(Application.interview_session),
        )
        .filter(Application.job_id == job_id)
        .order_by(Application.created_at.desc())
        .all()
    )
