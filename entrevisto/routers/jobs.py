import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from entrevisto.database import get_db
from entrevisto.dependencies import get_current_recruiter
from entrevisto.models.job import JOB_STATUSES
from entrevisto.models.user import User
from entrevisto.repos import job_repo
from entrevisto.repos.application_repo import list_for_job
from entrevisto.schemas.application import ApplicantResponse
from entrevisto.schemas.job import JobCreate, JobResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


def _applicant_to_response(application) -> ApplicantResponse:
    session = application.interview_session
    return ApplicantResponse(
        application_id=application.id,
        candidate_id=application.candidate_id,
        candidate_email=application.candidate.email if application.candidate else None,
        status=application.status,
        resume_url=application.resume.file_url if application.resume else None,
        interview_session_id=session.id if session else None,
        interview_status=session.status if session else None,
        transcript=session.transcript if session else None,
        applied_at=application.created_at,
    )


@router.get("", response_model=list[JobResponse])
def list_jobs(
    db: Session = Depends(get_db),
    status_filter: str | None = Query(default=None, alias="status"),
):
    if status_filter and status_filter not in JOB_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"status must be one of: {', '.join(JOB_STATUSES)}",
        )
    return job_repo.list_jobs(db, status=status_filter)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return job


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    data: JobCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_recruiter),
):
    if not user.company_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Recruiter is not linked to a company",
        )
    job = job_repo.create(db, user.company_id, **data.model_dump())
    logger.info("Job posted: job=%s company=%s by user=%s", job.id, user.company_id, user.id)
    return job


@router.get("/{job_id}/applications", response_model=list[ApplicantResponse])
def list_applicants(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_recruiter),
):
    """Applicants of a job owned by the recruiter's company, with interview status and transcript."""
    job = job_repo.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if not user.company_id or job.company_id != user.company_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Job belongs to another company")
    return [_applicant_to_response(a) for a in list_for_job(db, job_id)]
