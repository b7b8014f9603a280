import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from resume_reader import PdfTextError, build_resume_object, extract_text_from_pdf_bytes

from entrevisto.config import settings
from entrevisto.models.resume import Resume
from entrevisto.repos.resume_repo import create as create_resume
from entrevisto.schemas.resume import ParsedResume
from entrevisto.services.blob_storage import upload_resume_pdf

logger = logging.getLogger(__name__)


class ResumeRejectedError(ValueError):
    """Upload is readable as bytes but unusable as a resume."""


def parse_resume_text(text: str) -> ParsedResume | None:
    """Structured fields for the text, or None when nothing useful was found."""
    try:
        parsed = ParsedResume.model_validate(build_resume_object(text))
    except Exception as e:
        logger.warning("Resume structuring failed; storing raw text only: %s", e)
        return None
    return None if parsed.is_empty() else parsed


def load_parsed_resume(raw) -> ParsedResume | None:
    """Validate stored parsed_data. Absent or malformed data reads as None."""
    if not raw or not isinstance(raw, dict):
        return None
    try:
        return ParsedResume.model_validate(raw)
    except ValidationError as e:
        logger.warning("Stored parsed resume data is invalid: %s", e)
        return None


def ingest_resume(db: Session, user_id: str, filename: str, content: bytes) -> tuple[Resume, ParsedResume | None]:
    """
    Extract text, store the file, derive structured fields and persist the resume row.
    Text is extracted before storing so unreadable uploads never reach the bucket.
    """
    try:
        text = extract_text_from_pdf_bytes(content)
    except PdfTextError as e:
        raise ResumeRejectedError("Could not read text from the PDF") from e
    logger.info("Extracted resume text: user=%s chars=%d", user_id, len(text))
    if len(text) < settings.min_resume_text_chars:
        raise ResumeRejectedError("Resume content too short or could not be read")

    file_url = upload_resume_pdf(user_id, filename, content)
    parsed = parse_resume_text(text)
    resume = create_resume(
        db,
        user_id,
        file_url=file_url,
        raw_text=text,
        parsed_data=parsed.model_dump() if parsed else None,
    )
    logger.info("Resume saved: user=%s resume=%s parsed=%s", user_id, resume.id, parsed is not None)
    return resume, parsed
