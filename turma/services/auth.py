"""Authentication service: user accounts and JWT tokens."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from turma.config import get_settings
from turma.models.user import User

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"


class EmailAlreadyRegisteredError(ValueError):
    """Raised when registering an email that already has an account."""

    pass


def create_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a new user with hashed password."""
    user = User(name=name, email=email.lower())
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def register_user(db: Session, name: str, email: str, password: str) -> User:
    """Create an account; raise EmailAlreadyRegisteredError if the email is taken."""
    if get_user_by_email(db, email) is not None:
        raise EmailAlreadyRegisteredError("User already exists")
    user = create_user(db, name, email, password)
    logger.info("user registered: id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Validate credentials and return user, or None if invalid."""
    user = get_user_by_email(db, email)
    if user is None:
        return None
    if not user.verify_password(password):
        return None
    return user


def authenticate_with_oauth(
    db: Session,
    provider: str,
    oauth_id: str,
    email: str,
    name: str,
    image: Optional[str] = None,
) -> User:
    """Find or create the user behind an OAuth identity.

    Matches on (provider, oauth_id) first, then on email. An existing
    email/password account is linked to the provider on first OAuth login.
    """
    user = (
        db.query(User)
        .filter(User.oauth_provider == provider, User.oauth_id == oauth_id)
        .first()
    )
    if user is None:
        user = get_user_by_email(db, email)

    if user is None:
        user = User(
            name=name,
            email=email.lower(),
            oauth_provider=provider,
            oauth_id=oauth_id,
            image=image,
        )
        db.add(user)
        logger.info("user created via oauth: provider=%s", provider)
    elif not user.oauth_provider or not user.oauth_id:
        user.oauth_provider = provider
        user.oauth_id = oauth_id
        user.image = image or user.image

    db.commit()
    db.refresh(user)
    return user


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.access_token_expire_hours)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def create_access_token_for_user(user: User) -> str:
    return create_access_token(data={"sub": str(user.id)})


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_user_from_token(db: Session, token: str) -> Optional[User]:
    """Extract user from a JWT token. Returns None if token invalid or user not found."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    subject: Optional[str] = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return db.query(User).filter(User.id == int(subject)).first()
