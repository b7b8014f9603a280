import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from entrevisto.database import get_db
from entrevisto.dependencies import get_current_candidate
from entrevisto.models.user import User
from entrevisto.repos.application_repo import apply
from entrevisto.repos.job_repo import get_by_id as get_job_by_id
from entrevisto.repos.resume_repo import get_latest_by_user
from entrevisto.schemas.application import ApplicationCreate, ApplicationResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationResponse)
def apply_to_job(
    data: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    """Apply with the latest resume. Re-applying returns the existing application unchanged."""
    job = get_job_by_id(db, data.job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.status != "active":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job is not accepting applications")
    resume = get_latest_by_user(db, user.id)
    application = apply(db, user.id, job.id, resume.id if resume else None)
    logger.info("Application stored: candidate=%s job=%s status=%s", user.id, job.id, application.status)
    return application
