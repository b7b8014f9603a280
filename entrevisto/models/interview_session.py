import enum

from sqlalchemy import Column, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from entrevisto.database import Base


class InterviewStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    ANALYSIS_PENDING = "ANALYSIS_PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# Statuses a provider end-of-call notification may move into ANALYSIS_PENDING.
CALL_ENDABLE_STATUSES = (
    InterviewStatus.PENDING.value,
    InterviewStatus.IN_PROGRESS.value,
    InterviewStatus.ANALYSIS_PENDING.value,
)
ABANDONABLE_STATUSES = (InterviewStatus.PENDING.value, InterviewStatus.IN_PROGRESS.value)


class InterviewSession(Base):
    """Lifecycle of one AI screening call for an application."""

    __tablename__ = "interview_sessions"

    id = Column(String, primary_key=True, index=True)
    application_id = Column(
        String, ForeignKey("applications.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    type = Column(String, nullable=False, default="JOB_APPLICATION")
    status = Column(String, nullable=False, default=InterviewStatus.PENDING.value)
    vapi_call_id = Column(String, unique=True, nullable=True)
    # Set by the request currently creating the provider call; NULL otherwise.
    call_claim_id = Column(String, nullable=True)
    transcript = Column(Text, nullable=True)
    ended_reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    application = relationship("Application", back_populates="interview_session")
