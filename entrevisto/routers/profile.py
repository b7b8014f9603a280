import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from entrevisto.core.security import Identity
from entrevisto.database import get_db
from entrevisto.dependencies import get_identity
from entrevisto.models.user import Role
from entrevisto.repos import company_repo
from entrevisto.repos.user_repo import create as create_user, get_by_id
from entrevisto.schemas.profile import ProfileCreate, ProfileResponse, RoleResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profile", tags=["profile"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(
    data: ProfileCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """Pick a role for the signed-in identity. A profile is created once and never edited."""
    if get_by_id(db, identity.user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Profile already exists")
    if not identity.email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Identity token has no email")

    company_id = None
    company_name = (data.company_name or "").strip()
    if data.role == Role.RECRUITER.value and company_name:
        company_id = company_repo.get_or_create(db, company_name).id
    try:
        user = create_user(db, identity.user_id, identity.email, data.role, company_id=company_id)
    except IntegrityError as e:
        # concurrent create for the same identity won the insert
        db.rollback()
        logger.info("Profile already exists for user=%s: %s", identity.user_id, e.orig)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Profile already exists") from e
    except Exception as e:
        logger.exception("Profile creation failed for user=%s: %s", identity.user_id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create profile") from e
    logger.info("Profile created: user=%s role=%s company=%s", user.id, user.role, company_id)
    return user


@router.get("/role", response_model=RoleResponse)
def get_role(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    user = get_by_id(db, identity.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return RoleResponse(role=user.role)
