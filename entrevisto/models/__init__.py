from entrevisto.models.company import Company
from entrevisto.models.user import User, Role
from entrevisto.models.job import Job
from entrevisto.models.resume import Resume
from entrevisto.models.application import Application, ApplicationStatus
from entrevisto.models.interview_session import InterviewSession, InterviewStatus

__all__ = [
    "Company",
    "User",
    "Role",
    "Job",
    "Resume",
    "Application",
    "ApplicationStatus",
    "InterviewSession",
    "InterviewStatus",
]
