from datetime import datetime

from pydantic import Field

from entrevisto.schemas.base import CamelModel
from entrevisto.schemas.job import CompanyResponse


class StartInterviewRequest(CamelModel):
    job_id: str = Field(min_length=1)
    # E.164 phone number, or "browser" for a web call.
    candidate_number: str = Field(min_length=1)


class StartInterviewResponse(CamelModel):
    message: str
    call_id: str | None = None
    session_id: str


class AssistantRequest(CamelModel):
    job_id: str = Field(min_length=1)
    resume_id: str | None = None  # defaults to the candidate's latest resume


class AssistantResponse(CamelModel):
    assistant_id: str


class InterviewJobSummary(CamelModel):
    id: str
    title: str
    company: CompanyResponse | None = None


class InterviewSessionResponse(CamelModel):
    id: str
    application_id: str
    type: str
    status: str
    vapi_call_id: str | None = None
    transcript: str | None = None
    created_at: datetime | None = None


class InterviewListItem(InterviewSessionResponse):
    job: InterviewJobSummary | None = None
