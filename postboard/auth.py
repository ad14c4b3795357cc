"""Bearer-token authentication.

Clients send ``Authorization: Bearer <token>``. Only the SHA-256 hash of a
token is stored, so a token is shown once when its user is created and can
not be recovered afterwards.
"""

import hashlib
import logging
import secrets

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from postboard.errors import Unauthenticated
from postboard.services.database import User, get_session

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def create_user(session: Session, name: str, email: str) -> tuple[User, str]:
    """Create a user and return it with its plaintext API token."""
    token = generate_token()
    user = User(name=name, email=email, token_hash=hash_token(token))
    session.add(user)
    session.commit()
    logger.info("Created user %d <%s>", user.id, email)
    return user, token


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    session: Session = Depends(get_session),
) -> User | None:
    """Resolve the requesting user, or None for anonymous callers."""
    if credentials is None or not credentials.credentials:
        return None
    user = session.scalar(
        select(User).where(User.token_hash == hash_token(credentials.credentials))
    )
    if user is None:
        logger.warning("Rejected unknown bearer token")
    return user


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """Resolve the requesting user; anonymous callers are rejected."""
    if user is None:
        raise Unauthenticated()
    return user
