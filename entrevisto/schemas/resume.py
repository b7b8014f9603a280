from datetime import datetime

from pydantic import BaseModel, Field

from entrevisto.schemas.base import CamelModel


class ContactInfo(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin: str | None = None
    github: str | None = None


class ExperienceEntry(BaseModel):
    title: str | None = None
    company: str | None = None
    duration: str | None = None
    bullets: list[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    degree: str | None = None
    institution: str | None = None
    duration: str | None = None


class ParsedResume(BaseModel):
    """Structured fields derived from resume text. Every field may be empty."""

    contact: ContactInfo = Field(default_factory=ContactInfo)
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.summary or self.skills or self.experience or self.education)


class ResumeFetchResponse(CamelModel):
    resume_url: str | None = None
    resume_id: str | None = None
    uploaded_at: datetime | None = None
    message: str | None = None


class ResumeUploadResponse(CamelModel):
    resume_id: str
    resume_url: str
    raw_text: str
    parsed_data: ParsedResume | None = None
