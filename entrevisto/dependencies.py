import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from entrevisto.core.security import Identity, decode_identity_token
from entrevisto.database import get_db
from entrevisto.models.user import Role, User
from entrevisto.repos.user_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    identity = decode_identity_token(credentials.credentials)
    if not identity:
        logger.info("Auth failed: invalid or expired identity token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return identity


def get_current_user(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
) -> User:
    user = get_by_id(db, identity.user_id)
    if not user:
        logger.info("Profile lookup failed for user=%s", identity.user_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Profile not found. Select a role first.",
        )
    return user


def get_current_candidate(user=Depends(get_current_user)):
    """Require a profile with the CANDIDATE role."""
    if user.role != Role.CANDIDATE.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Candidate access required",
        )
    return user


def get_current_recruiter(user=Depends(get_current_user)):
    """Require a profile with the RECRUITER role."""
    if user.role != Role.RECRUITER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Recruiter access required",
        )
    return user


def get_vapi_client(request: Request):
    """Provider client built once at startup (see main.on_startup)."""
    return request.app.state.vapi_client
