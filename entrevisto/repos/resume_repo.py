from sqlalchemy.orm import Session

from entrevisto.core.security import generate_id
from entrevisto.models.resume import Resume


def create(
    db: Session,
    user_id: str,
    file_url: str,
    raw_text: str,
    parsed_data: dict | None = None,
) -> Resume:
    resume = Resume(
        id=generate_id(),
        user_id=user_id,
        file_url=file_url,
        raw_text=raw_text,
        parsed_data=parsed_data,
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


def get_latest_by_user(db: Session, user_id: str) -> Resume | None:
    return (
        db.query(Resume)
        .filter(Resume.user_id == user_id)
        .order_by(Resume.created_at.desc())
        .first()
    )


def get_by_id(db: Session, resume_id: str, user_id: str) -> Resume | None:
    """Owner-scoped lookup: another user's resume id reads as missing."""
    return (
        db.query(Resume)
        .filter(Resume.id == resume_id, Resume.user_id == user_id)
        .first()
    )


def delete(db: Session, resume_id: str, user_id: str) -> bool:
    resume = get_by_id(db, resume_id, user_id)
    if not resume:
        return False
    db.delete(resume)
    db.commit()
    return True
