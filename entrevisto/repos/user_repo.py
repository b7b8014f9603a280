from sqlalchemy.orm import Session

from entrevisto.models.user import User


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create(db: Session, user_id: str, email: str, role: str, company_id: str | None = None) -> User:
    user = User(
        id=user_id,
        email=email,
        role=role,
        company_id=company_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_company(db: Session, user_id: str, company_id: str) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    user.company_id = company_id
    db.commit()
    db.refresh(user)
    return user
