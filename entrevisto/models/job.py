from sqlalchemy import Column, String, Text, ForeignKey, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from entrevisto.database import Base

JOB_STATUSES = ("active", "closed")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String, primary_key=True, index=True)
    company_id = Column(String, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    department = Column(String)
    location = Column(String)
    salary = Column(String)
    description = Column(Text)
    requirements = Column(Text)
    required_skills = Column(JSONB, nullable=False, default=list)  # ordered list of strings
    posted_date = Column(DateTime(timezone=True), server_default=func.now())
    status = Column(String, nullable=False, default="active")  # active | closed
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", back_populates="jobs")
    applications = relationship("Application", back_populates="job", passive_deletes=True)
