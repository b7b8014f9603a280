import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from entrevisto.config import settings
from entrevisto.database import get_db
from entrevisto.dependencies import get_current_candidate
from entrevisto.models.user import User
from entrevisto.repos.resume_repo import delete as delete_resume, get_latest_by_user
from entrevisto.schemas.resume import ResumeFetchResponse, ResumeUploadResponse
from entrevisto.services.blob_storage import BlobStorageError
from entrevisto.services.resume_ingest_service import ResumeRejectedError, ingest_resume

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/resumes", tags=["resumes"])


@router.post("/upload", response_model=ResumeUploadResponse)
def upload_resume(
    resume: UploadFile = File(..., description="Resume PDF file"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    """Upload a resume PDF: store it, extract its text and derive structured fields."""
    if not resume.filename or not resume.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be a PDF (.pdf)")

    content = resume.file.read()
    max_bytes = settings.max_resume_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Max allowed is {settings.max_resume_upload_mb}MB.",
        )
    # Magic bytes check to reject disguised uploads.
    if not content.startswith(b"%PDF"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid PDF file content.")

    logger.info("Resume upload: user=%s file=%s bytes=%d", user.id, resume.filename, len(content))
    try:
        saved, parsed = ingest_resume(db, user.id, resume.filename, content)
    except ResumeRejectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except BlobStorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to store resume file") from e
    except Exception as e:
        logger.exception("Resume upload failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save resume") from e

    return ResumeUploadResponse(
        resume_id=saved.id,
        resume_url=saved.file_url,
        raw_text=saved.raw_text,
        parsed_data=parsed,
    )


@router.get("/latest", response_model=ResumeFetchResponse)
def get_latest_resume(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    resume = get_latest_by_user(db, user.id)
    if not resume:
        return ResumeFetchResponse(resume_url=None, message="No resume uploaded yet")
    return ResumeFetchResponse(
        resume_url=resume.file_url,
        resume_id=resume.id,
        uploaded_at=resume.created_at,
    )


@router.delete("/{resume_id}")
def remove_resume(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    if not delete_resume(db, resume_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resume not found")
    logger.info("Resume deleted: user=%s resume=%s", user.id, resume_id)
    return {"message": "Resume deleted"}
