import logging
from dataclasses import dataclass
from uuid import uuid4

from jose import JWTError, jwt

from entrevisto.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated subject as asserted by the identity provider."""

    user_id: str
    email: str | None = None


def decode_identity_token(token: str) -> Identity | None:
    """Verify an identity-provider JWT and return its subject, or None if invalid."""
    options = {"verify_aud": bool(settings.identity_audience)}
    kwargs = {}
    if settings.identity_audience:
        kwargs["audience"] = settings.identity_audience
    if settings.identity_issuer:
        kwargs["issuer"] = settings.identity_issuer
    try:
        payload = jwt.decode(
            token,
            settings.identity_jwt_key,
            algorithms=settings.identity_algorithm_list,
            options=options,
            **kwargs,
        )
    except JWTError as e:
        logger.debug("Identity token rejected: %s", e)
        return None
    subject = payload.get("sub")
    if not subject:
        return None
    return Identity(user_id=str(subject), email=payload.get(settings.identity_email_claim))


def generate_id() -> str:
    return str(uuid4())
