import enum

from sqlalchemy import Column, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from entrevisto.database import Base


class ApplicationStatus(str, enum.Enum):
    APPLIED = "APPLIED"
    INTERVIEW_INVITED = "INTERVIEW_INVITED"


class Application(Base):
    """Candidate <-> job link. One row per (candidate, job)."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("candidate_id", "job_id", name="uq_applications_candidate_job"),)

    id = Column(String, primary_key=True, index=True)
    candidate_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(String, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    resume_id = Column(String, ForeignKey("resumes.id", ondelete="SET NULL"), nullable=True)
    status = Column(String, nullable=False, default=ApplicationStatus.APPLIED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    candidate = relationship("User", back_populates="applications")
    job = relationship("Job", back_populates="applications")
    resume = relationship("Resume")
    interview_session = relationship(
        "InterviewSession",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
