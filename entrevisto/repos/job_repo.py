from sqlalchemy.orm import Session, joinedload

from entrevisto.core.security import generate_id
from entrevisto.models.job import Job


def create(
    db: Session,
    company_id: str,
    *,
    title: str,
    department: str | None = None,
    location: str | None = None,
    salary: str | None = None,
    description: str | None = None,
    requirements: str | None = None,
    required_skills: list[str] | None = None,
) -> Job:
    job = Job(
        id=generate_id(),
        company_id=company_id,
        title=title,
        department=department,
        location=location,
        salary=salary,
        description=description,
        requirements=requirements,
        required_skills=list(required_skills or []),
        status="active",
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def list_jobs(db: Session, status: str | None = None, limit: int = 200) -> list[Job]:
    """Newest postings first, optionally filtered by status."""
    q = db.query(Job).options(joinedload(Job.company))
    if status:
        q = q.filter(Job.status == status)
    return q.order_by(Job.posted_date.desc()).limit(limit).all()


def get_by_id(db: Session, job_id: str) -> Job | None:
    return db.query(Job).options(joinedload(Job.company)).filter(Job.id == job_id).first()
