import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from entrevisto.core.security import generate_id
from entrevisto.models.company import Company

logger = logging.getLogger(__name__)


def get_by_name(db: Session, name: str) -> Company | None:
    return db.query(Company).filter(Company.name == name).first()


def get_or_create(db: Session, name: str) -> Company:
    """Insert the company unless the name is taken, then return the stored row."""
    clean = name.strip()
    result = db.execute(
        text("INSERT INTO companies (id, name) VALUES (:id, :name) ON CONFLICT (name) DO NOTHING"),
        {"id": generate_id(), "name": clean},
    )
    db.commit()
    if result.rowcount:
        logger.info("Company created: %s", clean)
    return get_by_name(db, clean)
