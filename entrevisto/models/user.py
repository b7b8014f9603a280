import enum

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from entrevisto.database import Base


class Role(str, enum.Enum):
    CANDIDATE = "CANDIDATE"
    RECRUITER = "RECRUITER"


class User(Base):
    """Profile row for an identity-provider subject. Created once, on role selection."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)  # identity provider `sub`
    email = Column(String, index=True, nullable=False)
    role = Column(String, nullable=False)
    company_id = Column(String, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", back_populates="members")
    resumes = relationship("Resume", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    applications = relationship("Application", back_populates="candidate", passive_deletes=True)
