from datetime import datetime

from entrevisto.schemas.base import CamelModel


class ApplicationCreate(CamelModel):
    job_id: str


class ApplicationResponse(CamelModel):
    id: str
    candidate_id: str
    job_id: str
    resume_id: str | None = None
    status: str
    created_at: datetime | None = None


class ApplicantResponse(CamelModel):
    """Recruiter view of one applicant."""

    application_id: str
    candidate_id: str
    candidate_email: str | None = None
    status: str
    resume_url: str | None = None
    interview_session_id: str | None = None
    interview_status: str | None = None
    transcript: str | None = None
    applied_at: datetime | None = None
